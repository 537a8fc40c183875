"""Settings management for flowmetrics.

This module provides centralized configuration using pydantic-settings.
Values are loaded from environment variables prefixed with
``FLOWMETRICS_`` (and an optional ``.env`` file) with defaults matching the
tool's documented behaviour. List and mapping fields are read from the
environment as JSON, e.g.::

    FLOWMETRICS_DOMAIN_KEYWORDS='["order", "cart"]'
    FLOWMETRICS_FUNCTIONAL_GROUPS='{"checkout": ["pay", "cart"], "auth": ["login"]}'
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .parser.calls import DEFAULT_BUILTIN_CALLS

DEFAULT_FUNCTIONAL_GROUPS: dict[str, list[str]] = {
    "room-management": ["generateRoomId", "create", "join"],
    "socket-handlers": [
        "connection",
        "create-room",
        "join-room",
        "draw",
        "canvas-state",
        "disconnect",
    ],
    "canvas-management": ["canvas-state", "canvasState"],
}

DEFAULT_DOMAIN_KEYWORDS: list[str] = ["room", "canvas", "user"]

DEFAULT_EXCLUDE_DIRS: list[str] = ["node_modules", "build", ".next"]

REPORT_FILENAME = "information-flow-metrics-report.txt"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        extensions: File extensions analysed.
        exclude_dirs: Directory names never descended into.
        skip_hidden: Skip files and directories whose name starts with a dot.
        builtin_calls: Direct-call names that are never recorded.
        strict_syntax: Skip files with any syntax error.

        functional_groups: Keyword table partitioning a single module's
            functions for coupling analysis.
        domain_keywords: Name keywords counted as cohesion evidence.
        tight_coupling_threshold: Call counts above this are tight coupling.
        high_cohesion_threshold: Cohesion above this rates High.
        medium_cohesion_threshold: Cohesion above this rates Medium.

        report_filename: Report file name written into the analysed root.
        log_level: Logging level.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWMETRICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discovery settings
    extensions: list[str] = Field(
        default_factory=lambda: [".js", ".jsx"],
        description="File extensions to analyse",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names to skip",
    )
    skip_hidden: bool = Field(default=True, description="Skip dot-prefixed entries")

    # Parsing settings
    builtin_calls: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_BUILTIN_CALLS),
        description="Direct-call names never recorded",
    )
    strict_syntax: bool = Field(default=False, description="Skip files with syntax errors")

    # Metric settings
    functional_groups: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_FUNCTIONAL_GROUPS.items()},
        description="Keyword groups for single-module coupling",
    )
    domain_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DOMAIN_KEYWORDS),
        description="Keywords counted as cohesion evidence",
    )
    tight_coupling_threshold: int = Field(
        default=5, ge=0, description="Calls above this count are tight coupling"
    )
    high_cohesion_threshold: float = Field(
        default=0.7, ge=0.0, le=1.0, description="Cohesion above this rates High"
    )
    medium_cohesion_threshold: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Cohesion above this rates Medium"
    )

    # Output settings
    report_filename: str = Field(default=REPORT_FILENAME, description="Report file name")
    log_level: str = Field(default="WARNING", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings.

    Returns:
        The settings instance, loaded once and reused.
    """
    return Settings()
