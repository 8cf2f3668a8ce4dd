from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="specrun", help="Run behavior-driven spec files")


@app.command()
def run(
    spec_files: list[str] | None = typer.Argument(
        None, help="Spec files to run (overrides spec_files from --config)"
    ),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to a run YAML config"
    ),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Stop running cases after the first failure"
    ),
    example: str | None = typer.Option(
        None, "--example", "-e", help="Only run cases whose description matches this regex"
    ),
    line: list[int] | None = typer.Option(
        None, "--line", "-l", help="Only run cases declared on this line (repeatable)"
    ),
    location: list[str] | None = typer.Option(
        None, "--location", help="Only run the case at FILE:LINE (repeatable)"
    ),
    format: str | None = typer.Option(
        None, "--format", "-f", help="Progress output: dots or verbose"
    ),
    output_dir: str | None = typer.Option(
        None, help="Output directory for run results"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    report: bool = typer.Option(
        True, "--report/--no-report", help="Render report.html after the run"
    ),
):
    """Run spec files and report every case's outcome."""
    from pydantic import ValidationError

    from specrun.config import RunConfig, load_config
    from specrun.reporting.junit import generate_report
    from specrun.runner import Runner

    try:
        if config is not None:
            config_path = Path(config)
            if not config_path.exists():
                typer.echo(f"Error: config file not found: {config}", err=True)
                raise typer.Exit(1)
            base = load_config(config_path)
        else:
            base = RunConfig()

        overrides: dict = {}
        if spec_files:
            overrides["spec_files"] = [str(Path(p).resolve()) for p in spec_files]
        if fail_fast:
            overrides["fail_fast"] = True
        if example is not None:
            overrides["pattern"] = example
        if line:
            overrides["lines"] = line
        if location:
            overrides["locations"] = location
        if format is not None:
            overrides["formatter"] = format
        if output_dir is not None:
            overrides["output_dir"] = output_dir
        if verbose:
            overrides["verbose"] = True
        run_config = RunConfig(**{**base.model_dump(), **overrides})
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    runner = Runner(config=run_config)
    try:
        result = runner.execute()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for error in result.load_errors:
        typer.echo(f"Error loading {error}", err=True)

    typer.echo(f"Run complete: {result.run_dir}")
    if report:
        report_path = generate_report(result.run_dir)
        typer.echo(f"Report: {report_path}")
    if not run_config.verbose:
        typer.echo(f"Debug log: {result.run_dir / 'debug.log'}")

    if not result.passed:
        raise typer.Exit(1)


@app.command()
def report(
    run_dir: str = typer.Argument(help="Path to run output directory"),
    open_report: bool = typer.Option(
        False, "--open", help="Open report.html in browser after generating"
    ),
):
    """Regenerate HTML report from a previous run."""
    from specrun.reporting.junit import generate_report

    run_path = Path(run_dir)
    if not run_path.exists() or not (run_path / "junit.xml").exists():
        typer.echo(f"Error: not a valid run directory: {run_dir}", err=True)
        raise typer.Exit(1)

    report_path = generate_report(run_path)
    typer.echo(f"Report generated: {report_path}")

    if open_report:
        import webbrowser

        webbrowser.open(report_path.resolve().as_uri())


EXAMPLE_SPEC = '''\
from specrun import context, describe, fail, it, pending

with describe("list"):
    with context("when empty"):

        @it("has length zero")
        def _():
            if len([]) != 0:
                fail("expected an empty list")

    with context("with three elements"):

        @it("has length three")
        def _():
            if len([1, 2, 3]) != 3:
                fail("expected three elements")

        @pending("supports lazy slicing")
        def _():
            pass
'''


@app.command()
def init(
    dir: str = typer.Option(
        "specrun", "--dir", help="Directory to initialize the spec project in"
    ),
):
    """Initialize a new spec project with an example config and spec file."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    config_file = project_dir / "specrun.yaml"
    if config_file.exists():
        typer.echo(f"specrun.yaml already exists in {dir}, skipping.")
        return

    config_file.write_text("""\
spec_files:
  - spec/list_spec.py
fail_fast: false
formatter: verbose
output_dir: ${SPECRUN_OUTPUT_DIR:-runs}
""")

    spec_dir = project_dir / "spec"
    spec_dir.mkdir(parents=True, exist_ok=True)
    (spec_dir / "list_spec.py").write_text(EXAMPLE_SPEC)

    typer.echo(f"Initialized spec project in {dir}:")
    typer.echo("  specrun.yaml       - example run config")
    typer.echo("  spec/list_spec.py  - example spec file")
