"""Command-line interface for flowmetrics."""

from pathlib import Path
from typing import Optional

import structlog
import typer

from . import __version__
from .config import get_settings
from .ingestion import AnalysisPipeline, NoSourceFilesError
from .logging_config import setup_logging
from .report import render_json, render_text, write_report

app = typer.Typer(
    name="flowmetrics",
    help="Information flow metrics (fan-in/fan-out) for JavaScript projects",
    add_completion=False,
)

logger = structlog.get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"flowmetrics {__version__}")
        raise typer.Exit(0)


@app.command()
def main(
    root: Path = typer.Argument(
        Path("."),
        help="Project root directory to analyse",
        file_okay=False,
        dir_okay=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Report file path (default: <root>/information-flow-metrics-report.txt)",
        dir_okay=False,
    ),
    json_output: Optional[Path] = typer.Option(
        None,
        "--json",
        help="Also write the results as JSON to this path",
        dir_okay=False,
    ),
    no_save: bool = typer.Option(
        False,
        "--no-save",
        help="Print the report without writing it to disk",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Skip files containing any syntax error",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging and progress output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Analyse fan-in, fan-out, coupling, cohesion and information flow
    complexity of the JavaScript files under ROOT.

    Examples:

      flowmetrics

      flowmetrics path/to/project --json metrics.json

      flowmetrics . --no-save --quiet
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    settings = get_settings()
    setup_logging(verbose=verbose, quiet=quiet, level=settings.log_level)

    if strict:
        settings = settings.model_copy(update={"strict_syntax": True})

    if not quiet:
        typer.echo(f"Analyzing information flow metrics in: {root}", err=True)

    pipeline = AnalysisPipeline(settings=settings)
    try:
        result = pipeline.run(root)
    except NoSourceFilesError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not quiet:
        typer.echo(f"Found {len(result.files)} files to analyze:", err=True)
        for file_info in result.files:
            typer.echo(f"   - {file_info.relative_path}", err=True)

    report = render_text(result, pipeline.calculator.config)
    typer.echo(report)

    try:
        if not no_save:
            report_path = output or root / settings.report_filename
            write_report(report, report_path)
            typer.echo(f"Report saved to: {report_path}")
        if json_output is not None:
            write_report(render_json(result), json_output)
            typer.echo(f"JSON saved to: {json_output}")
    except OSError as e:
        logger.error("Failed to write report", error=str(e))
        typer.echo(f"Error: cannot write report: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
