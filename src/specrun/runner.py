from __future__ import annotations

import importlib.metadata
import runpy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

import yaml

from specrun.config import RunConfig
from specrun.dsl import Spec, use_spec
from specrun.errors import SpecLoadError
from specrun.metrics import RunSummary, summarize
from specrun.outcome import Outcome
from specrun.reporting.base import CompositeReporter
from specrun.reporting.console import get_formatter
from specrun.reporting.junit import JUnitReporter
from specrun.reporting.summary import SummaryReporter
from specrun.verbose import setup_logger


@dataclass
class RunResult:
    run_dir: Path
    outcomes: list[Outcome]
    aborted: bool
    load_errors: list[SpecLoadError] = field(default_factory=list)

    @property
    def summary(self) -> RunSummary:
        return summarize(self.outcomes)

    @property
    def passed(self) -> bool:
        return self.summary.passed and not self.load_errors


class Runner:
    """Loads spec files into a fresh session and records the run."""

    def __init__(
        self,
        config: RunConfig,
        output_dir: Path | None = None,
        stream: IO[str] | None = None,
    ):
        self.config = config
        self.output_dir = output_dir or Path(config.output_dir)
        self.stream = stream

    def execute(self) -> RunResult:
        """Run every configured spec file. Returns the run result."""
        spec_paths = [Path(p) for p in self.config.spec_files]
        if not spec_paths:
            raise ValueError("No spec files given")
        missing = [str(p) for p in spec_paths if not p.is_file()]
        if missing:
            raise ValueError(f"Spec file(s) not found: {', '.join(missing)}")

        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S_%f")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(
            run_dir / "debug.log",
            verbose=self.config.verbose,
            logger_name=f"specrun.run.{run_id}",
        )
        logger.debug(f"Starting run {run_id} with {len(spec_paths)} spec file(s)")

        summary = SummaryReporter(stream=self.stream)
        junit = JUnitReporter()
        reporter = CompositeReporter(
            [
                get_formatter(self.config.formatter.value, stream=self.stream),
                summary,
                junit,
            ]
        )
        spec = Spec(
            reporter=reporter,
            matcher=self.config.build_matcher(),
            fail_fast=self.config.fail_fast,
            logger=logger,
        )

        load_errors: list[SpecLoadError] = []
        with use_spec(spec):
            for path in spec_paths:
                if spec.aborted:
                    logger.debug(f"Run aborted, not loading {path}")
                    continue
                logger.debug(f"Loading spec file {path}")
                try:
                    runpy.run_path(str(path), run_name="__specrun__")
                except Exception as e:
                    error = SpecLoadError(str(path), e)
                    logger.error(f"Failed to load spec file: {error}")
                    load_errors.append(error)

        spec.finish()
        junit.write(run_dir / "junit.xml")

        result = RunResult(
            run_dir=run_dir,
            outcomes=list(summary.outcomes),
            aborted=spec.aborted,
            load_errors=load_errors,
        )
        self._write_meta(run_dir, result, spec_paths)
        logger.debug(
            f"Run {run_id} finished: {result.summary.examples} examples, "
            f"{result.summary.failures} failures, {result.summary.errors} errors"
        )
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        return result

    def _write_meta(self, run_dir: Path, result: RunResult, spec_paths: list[Path]) -> None:
        """Write meta.yaml to the run directory."""
        try:
            specrun_version = importlib.metadata.version("specrun")
        except importlib.metadata.PackageNotFoundError:
            specrun_version = "unknown"

        meta: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "spec_files": [str(p) for p in spec_paths],
            "fail_fast": self.config.fail_fast,
            "aborted": result.aborted,
            "summary": result.summary.to_dict(),
            "specrun_version": specrun_version,
        }
        if result.load_errors:
            meta["load_errors"] = [str(e) for e in result.load_errors]

        (run_dir / "meta.yaml").write_text(yaml.dump(meta, default_flow_style=False))
