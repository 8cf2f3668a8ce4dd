from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from expandvars import UnboundVariable, expandvars
from pydantic import BaseModel, ConfigDict, field_validator

from specrun.location import Location
from specrun.matcher import MatchAll, Matcher, PatternMatcher


class FormatterType(str, Enum):
    DOTS = "dots"
    VERBOSE = "verbose"


class RunConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    spec_files: list[str] = []
    fail_fast: bool = False
    pattern: str | None = None
    lines: list[int] = []
    locations: list[str] = []
    formatter: FormatterType = FormatterType.DOTS
    output_dir: str = "runs"
    verbose: bool = False

    @field_validator("pattern")
    @classmethod
    def pattern_must_compile(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern '{v}': {e}") from e
        return v

    @field_validator("lines")
    @classmethod
    def lines_must_be_positive(cls, v: list[int]) -> list[int]:
        for line in v:
            if line < 1:
                raise ValueError(f"Line numbers must be positive, got {line}")
        return v

    @field_validator("locations")
    @classmethod
    def locations_must_parse(cls, v: list[str]) -> list[str]:
        for loc in v:
            Location.parse(loc)
        return v

    def build_matcher(self) -> Matcher:
        """Matcher for the configured filters; everything when none are set."""
        if self.pattern is None and not self.lines and not self.locations:
            return MatchAll()
        return PatternMatcher(
            pattern=self.pattern, lines=self.lines, locations=self.locations
        )


ENV_EXPANDED_FIELDS = ("spec_files", "output_dir")


def _expand_env(value: Any, key: str, missing: list[str]) -> Any:
    """Expand ``${VAR}`` references in a string or a list of strings."""
    if isinstance(value, list):
        return [_expand_env(v, f"{key}[{i}]", missing) for i, v in enumerate(value)]
    if not isinstance(value, str):
        return value
    try:
        return expandvars(value, nounset=True)
    except UnboundVariable:
        # Variable is missing and has no default
        missing.append(f"  {key}={value}")
        return value


def load_config(path: Path) -> RunConfig:
    """Load and validate a run config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    missing: list[str] = []
    for key in ENV_EXPANDED_FIELDS:
        if key in raw:
            raw[key] = _expand_env(raw[key], key, missing)
    if missing:
        details = "\n".join(missing)
        raise ValueError(f"Config file {path} has missing environment variables:\n{details}")

    config = RunConfig(**raw)

    # Resolve relative spec paths relative to config file location
    config.spec_files = [
        str(p) if p.is_absolute() else str((config_dir / p).resolve())
        for p in map(Path, config.spec_files)
    ]

    return config
