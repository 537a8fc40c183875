"""Text and JSON rendering of analysis results."""

from pathlib import Path

import structlog

from .analysis.models import AnalysisConfig, CouplingReport, MetricsReport
from .ingestion.models import AnalysisResult, IngestionError

logger = structlog.get_logger(__name__)

WIDTH = 78
NAME_WIDTH = 28
MODULE_WIDTH = 12

def _interpretation_rows(config: AnalysisConfig) -> list[str]:
    tight = config.tight_coupling_threshold
    return [
        "Fan-In:    Number of distinct callers of a function",
        "           Higher = more reused",
        "Fan-Out:   Number of distinct user functions it calls directly",
        "           Higher = more dependencies; keep below 7",
        "IFC:       (Fan-In x Fan-Out)^2, 0 unless both are non-zero",
        "           >5 Medium, >25 High, >100 Very High",
        "Coupling:  Calls between two modules or groups",
        f"           >{tight} tight, 1-{tight} loose",
        "Cohesion:  Share of function pairs that call each other, share a",
        "           parameter, share a call target or a domain keyword",
        f"           >{config.high_cohesion_threshold:g} High, "
        f">{config.medium_cohesion_threshold:g} Medium, otherwise Low",
        "",
        "Best practice: high fan-in, low fan-out",
    ]


def truncate(text: str, width: int) -> str:
    """Shorten text to ``width`` characters, marking the cut with '...'."""
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def _rule(left: str, right: str) -> str:
    return left + "═" * WIDTH + right


def _row(text: str = "") -> str:
    return f"║  {text.ljust(WIDTH - 2)}║"


def _box(title: str, rows: list[str]) -> list[str]:
    lines = [_rule("╔", "╗"), _row(title.center(WIDTH - 4)), _rule("╠", "╣")]
    lines.extend(_row(row) for row in rows)
    lines.append(_rule("╚", "╝"))
    lines.append("")
    return lines


def _summary_rows(metrics: MetricsReport) -> list[str]:
    summary = metrics.summary
    return [
        f"{'Total Modules Analyzed:':<36}{summary.total_modules:>10}",
        f"{'Total Functions:':<36}{summary.total_functions:>10}",
        "",
        f"{'Total Fan-In:':<36}{summary.total_fan_in:>10}",
        f"{'Total Fan-Out:':<36}{summary.total_fan_out:>10}",
        "",
        f"{'Average Fan-In:':<36}{summary.avg_fan_in:>10.2f}",
        f"{'Average Fan-Out:':<36}{summary.avg_fan_out:>10.2f}",
    ]


def _function_rows(metrics: MetricsReport) -> list[str]:
    rows = [
        f"{'Function':<{NAME_WIDTH}} │ {'Module':<{MODULE_WIDTH}} │ "
        f"{'Fan-In':>6} │ {'Fan-Out':>7}"
    ]
    for flow in metrics.functions:
        rows.append(
            f"{truncate(flow.name, NAME_WIDTH):<{NAME_WIDTH}} │ "
            f"{truncate(flow.module, MODULE_WIDTH):<{MODULE_WIDTH}} │ "
            f"{flow.fan_in:>6} │ {flow.fan_out:>7}"
        )
    return rows


def _module_rows(metrics: MetricsReport) -> list[str]:
    rows = [f"{'Module':<{NAME_WIDTH}} │ {'Functions':>9} │ {'Fan-In':>6} │ {'Fan-Out':>7}"]
    for flow in metrics.modules:
        rows.append(
            f"{truncate(flow.name, NAME_WIDTH):<{NAME_WIDTH}} │ "
            f"{flow.function_count:>9} │ {flow.fan_in:>6} │ {flow.fan_out:>7}"
        )
    return rows


def _ifc_rows(metrics: MetricsReport) -> list[str]:
    rows = [f"{'Function':<{NAME_WIDTH}} │ {'In':>4} │ {'Out':>4} │ {'IFC':>8} │ Rating"]
    entries = sorted(metrics.information_flow, key=lambda entry: -entry.complexity)
    for entry in entries:
        rows.append(
            f"{truncate(entry.function, NAME_WIDTH):<{NAME_WIDTH}} │ "
            f"{entry.fan_in:>4} │ {entry.fan_out:>4} │ {entry.complexity:>8} │ "
            f"{entry.rating.value}"
        )
    return rows


def _coupling_rows(coupling: CouplingReport, config: AnalysisConfig) -> list[str]:
    label = "Functional groups" if coupling.by_group else "Modules"
    tight = config.tight_coupling_threshold
    rows = [
        f"{f'Tight Coupling (>{tight} calls):':<36}{coupling.tight:>10}",
        f"{f'Loose Coupling (1-{tight} calls):':<36}{coupling.loose:>10}",
        "",
    ]
    if not coupling.pairs:
        rows.append("No coupling detected")
        return rows

    rows.append(f"{label}")
    for pair in coupling.pairs:
        rows.append(
            f"{truncate(pair.first, 24):<24} <-> {truncate(pair.second, 24):<24} "
            f"{pair.calls:>5}  {pair.kind.value}"
        )
    return rows


def _cohesion_rows(metrics: MetricsReport) -> list[str]:
    rows = [f"{'Module':<{NAME_WIDTH}} │ {'Cohesion':>8} │ {'Pairs':>9} │ Rating"]
    for score in metrics.cohesion:
        pairs = f"{score.related_pairs}/{score.total_pairs}"
        rows.append(
            f"{truncate(score.module, NAME_WIDTH):<{NAME_WIDTH}} │ "
            f"{score.cohesion:>8.2f} │ {pairs:>9} │ {score.rating.value}"
        )
        if score.reason:
            rows.append(f"{'':<{NAME_WIDTH}}   ({score.reason})")
    return rows


def _error_rows(errors: list[IngestionError]) -> list[str]:
    rows = []
    for error in errors:
        location = f"{error.file_path}:{error.line}" if error.line else error.file_path
        rows.append(f"{location}  [{error.error_type}] {error.message}")
    return rows


def render_text(result: AnalysisResult, config: AnalysisConfig | None = None) -> str:
    """Render the boxed text report for an analysis result.

    ``config`` supplies the thresholds quoted in the report; defaults are
    used when it is omitted.
    """
    config = config or AnalysisConfig()
    metrics = result.metrics
    generated = result.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")

    lines = _box(
        "INFORMATION FLOW METRICS - FAN-IN/FAN-OUT",
        [f"Generated: {generated}", f"Root:      {result.root}"],
    )
    lines += _box("PROJECT SUMMARY", _summary_rows(metrics))
    if metrics.functions:
        lines += _box("FUNCTION-LEVEL METRICS", _function_rows(metrics))
    if metrics.modules:
        lines += _box("MODULE-LEVEL METRICS", _module_rows(metrics))
    if metrics.information_flow:
        lines += _box("INFORMATION FLOW COMPLEXITY", _ifc_rows(metrics))
    lines += _box("COUPLING", _coupling_rows(metrics.coupling, config))
    if metrics.cohesion:
        lines += _box("COHESION", _cohesion_rows(metrics))
    if result.errors:
        lines += _box("SKIPPED FILES", _error_rows(result.errors))
    lines += _box("INTERPRETATION", _interpretation_rows(config))

    return "\n".join(lines)


def render_json(result: AnalysisResult) -> str:
    """Render the analysis result as JSON (metrics and skipped files)."""
    return result.model_dump_json(indent=2, exclude={"graph"})


def write_report(text: str, path: str | Path) -> Path:
    """Write a rendered report to disk.

    Raises:
        OSError: If the file cannot be written.
    """
    output = Path(path) if isinstance(path, str) else path
    output.write_text(text, encoding="utf-8")
    logger.debug("Report written", path=str(output), size=len(text))
    return output
