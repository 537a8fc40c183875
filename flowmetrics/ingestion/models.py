"""Pydantic models for the ingestion module.

This module defines the data models used while walking a project: the
discovery configuration, discovered file information, per-file errors, and
the result of a complete analysis run.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from ..analysis.models import CallGraph, MetricsReport
from ..config import DEFAULT_EXCLUDE_DIRS, Settings


class DiscoveryConfig(BaseModel):
    """Configuration for source file discovery.

    Attributes:
        extensions: File extensions to include (with leading dot).
        exclude_dirs: Entry names never descended into or included.
        skip_hidden: Skip entries whose name starts with a dot.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    extensions: list[str] = Field(
        default_factory=lambda: [".js", ".jsx"],
        description="File extensions to include",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Entry names to skip",
    )
    skip_hidden: bool = Field(True, description="Skip dot-prefixed entries")

    @classmethod
    def from_settings(cls, settings: Settings) -> "DiscoveryConfig":
        """Build the discovery configuration from application settings."""
        return cls(
            extensions=settings.extensions,
            exclude_dirs=settings.exclude_dirs,
            skip_hidden=settings.skip_hidden,
        )

    def is_excluded(self, name: str) -> bool:
        """Check whether a directory entry name is skipped."""
        if name in self.exclude_dirs:
            return True
        return self.skip_hidden and name.startswith(".")


class FileInfo(BaseModel):
    """Information about a discovered source file.

    Attributes:
        path: Path to the file (root joined with the relative path).
        relative_path: Path relative to the analysis root, '/' separated.
        language: Detected programming language.
        size: File size in bytes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(..., description="Path to the file")
    relative_path: str = Field(..., description="Path relative to the root")
    language: str | None = Field(None, description="Detected programming language")
    size: int = Field(0, ge=0, description="File size in bytes")


class IngestionError(BaseModel):
    """Details about a file that was skipped during analysis.

    Attributes:
        file_path: Path to the file that caused the error.
        error_type: Type/class of the error.
        message: Human-readable error message.
        line: Line number if applicable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_path: str = Field(..., description="Path to the problematic file")
    error_type: str = Field(..., description="Error type/class name")
    message: str = Field(..., description="Error message")
    line: int | None = Field(None, description="Line number if applicable")


class AnalysisResult(BaseModel):
    """Result of analysing a project.

    Attributes:
        root: The analysed root directory.
        timestamp: When the analysis was performed.
        files: Files discovered, in discovery order.
        graph: The project call graph.
        metrics: Structural metrics derived from the graph.
        errors: Files skipped because they could not be read or parsed.
        duration_ms: Total analysis time in milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    root: str = Field(..., description="Analysed root directory")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Analysis timestamp",
    )
    files: list[FileInfo] = Field(default_factory=list, description="Discovered files")
    graph: CallGraph = Field(default_factory=CallGraph, description="Project call graph")
    metrics: MetricsReport = Field(default_factory=MetricsReport, description="Metrics")
    errors: list[IngestionError] = Field(default_factory=list, description="Skipped files")
    duration_ms: int = Field(0, ge=0, description="Analysis duration in ms")

    @property
    def files_processed(self) -> int:
        """Number of files that contributed to the graph."""
        return len(self.graph.units)

    @property
    def success_rate(self) -> float:
        """Percentage of discovered files analysed without errors (0.0 to 100.0)."""
        total = self.files_processed + len(self.errors)
        if total == 0:
            return 100.0
        return (self.files_processed / total) * 100.0
