"""Data models for structural analysis.

This module defines the Pydantic models used throughout the analysis module:
the project call graph with its per-function and per-module flow figures,
and the derived coupling, cohesion and information flow records.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..config import (
    DEFAULT_DOMAIN_KEYWORDS,
    DEFAULT_FUNCTIONAL_GROUPS,
    Settings,
)
from ..parser.models import FunctionKey, FunctionKind, SourceUnit


class CouplingKind(str, Enum):
    """Classification of a coupling pair by call count."""

    TIGHT = "tight"
    LOOSE = "loose"


class CohesionRating(str, Enum):
    """Qualitative cohesion rating."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class IFCRating(str, Enum):
    """Qualitative information flow complexity rating."""

    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class AnalysisConfig(BaseModel):
    """Configuration for structural metrics.

    Attributes:
        functional_groups: Ordered keyword groups used for coupling when the
            project has a single module.
        domain_keywords: Name keywords counted as cohesion evidence.
        tight_coupling_threshold: Call counts above this are tight coupling.
        high_cohesion_threshold: Cohesion above this rates High.
        medium_cohesion_threshold: Cohesion above this rates Medium.
    """

    model_config = ConfigDict(frozen=True)

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

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisConfig":
        """Build the analysis configuration from application settings."""
        return cls(
            functional_groups=settings.functional_groups,
            domain_keywords=settings.domain_keywords,
            tight_coupling_threshold=settings.tight_coupling_threshold,
            high_cohesion_threshold=settings.high_cohesion_threshold,
            medium_cohesion_threshold=settings.medium_cohesion_threshold,
        )


class CallerRef(BaseModel):
    """A distinct caller counted toward a function's fan-in.

    Same-module callers carry the caller's name and line; callers seen
    through file-level call records from another file are identified by
    their file alone.
    """

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(..., description="File of the caller")
    name: str | None = Field(None, description="Caller function name (same module only)")
    line: int | None = Field(None, description="Caller declaration line (same module only)")

    @property
    def is_cross_module(self) -> bool:
        """True when the caller was identified by file only."""
        return self.name is None


class FunctionFlow(BaseModel):
    """Information flow figures for one function.

    Attributes:
        name: Resolved function name.
        module: Module name.
        file_path: File containing the function.
        line: Declaration line.
        kind: Syntactic form of the definition.
        fan_in: Number of distinct callers.
        fan_out: Number of distinct direct calls.
        callers: The distinct callers counted in fan_in.
        callees: The distinct direct call names counted in fan_out.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Function name")
    module: str = Field(..., description="Module name")
    file_path: str = Field(..., description="File path")
    line: int = Field(..., ge=1, description="Declaration line")
    kind: FunctionKind = Field(..., description="Syntactic form")
    fan_in: int = Field(default=0, ge=0, description="Distinct callers")
    fan_out: int = Field(default=0, ge=0, description="Distinct direct calls")
    callers: list[CallerRef] = Field(default_factory=list, description="Distinct callers")
    callees: list[str] = Field(default_factory=list, description="Distinct direct calls")

    @property
    def key(self) -> FunctionKey:
        """Identity of the function within an analysis run."""
        return (self.file_path, self.name, self.line)


class ModuleFlow(BaseModel):
    """Module-level information flow figures.

    Attributes:
        name: Module name.
        path: File path of the module.
        function_count: Number of functions defined in the module.
        fan_in: Calls into the module from other files plus distinct
            internal caller->callee name pairs.
        fan_out: Distinct base objects of calls leaving the module.
        external_targets: The distinct base objects counted in fan_out.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Module name")
    path: str = Field(..., description="Module file path")
    function_count: int = Field(default=0, ge=0, description="Functions in module")
    fan_in: int = Field(default=0, ge=0, description="Module fan-in")
    fan_out: int = Field(default=0, ge=0, description="Module fan-out")
    external_targets: list[str] = Field(
        default_factory=list, description="Distinct external call bases"
    )


class CallGraph(BaseModel):
    """Project-wide call graph with its flow figures.

    Produced once per analysis by :class:`CallGraphBuilder` from the
    complete set of source units and never modified afterwards.

    Attributes:
        units: Source units in discovery order.
        functions: Per-function flow figures in discovery order.
        modules: Per-module flow figures in discovery order.
    """

    model_config = ConfigDict(frozen=True)

    units: list[SourceUnit] = Field(default_factory=list, description="Source units")
    functions: list[FunctionFlow] = Field(default_factory=list, description="Function flows")
    modules: list[ModuleFlow] = Field(default_factory=list, description="Module flows")

    def get_function(self, key: FunctionKey) -> FunctionFlow | None:
        """Look up a function's flow figures by identity key."""
        for flow in self.functions:
            if flow.key == key:
                return flow
        return None

    def find_functions(self, name: str, module: str | None = None) -> list[FunctionFlow]:
        """All functions with the given name, optionally within one module."""
        return [
            flow
            for flow in self.functions
            if flow.name == name and (module is None or flow.module == module)
        ]

    def get_module(self, path: str) -> ModuleFlow | None:
        """Look up a module's flow figures by file path."""
        for flow in self.modules:
            if flow.path == path:
                return flow
        return None


class CouplingPair(BaseModel):
    """Coupling between two modules or functional groups."""

    model_config = ConfigDict(frozen=True)

    first: str = Field(..., description="First module or group")
    second: str = Field(..., description="Second module or group")
    calls: int = Field(..., ge=1, description="Calls between the two")
    kind: CouplingKind = Field(..., description="Tight or loose")


class CouplingReport(BaseModel):
    """Coupling pairs with tight/loose totals.

    Attributes:
        by_group: True when pairs are functional groups of a single module.
        tight: Number of tight pairs.
        loose: Number of loose pairs.
        pairs: Pairs with at least one call.
    """

    model_config = ConfigDict(frozen=True)

    by_group: bool = Field(default=False, description="Pairs are functional groups")
    tight: int = Field(default=0, ge=0, description="Tight pairs")
    loose: int = Field(default=0, ge=0, description="Loose pairs")
    pairs: list[CouplingPair] = Field(default_factory=list, description="Coupling pairs")


class CohesionScore(BaseModel):
    """Cohesion of one module.

    Attributes:
        module: Module name.
        path: Module file path.
        cohesion: Fraction of related function pairs (0-1).
        related_pairs: Function pairs with at least one piece of evidence.
        total_pairs: All unordered function pairs.
        rating: Qualitative rating.
        reason: Explanation for modules with fewer than two functions.
    """

    model_config = ConfigDict(frozen=True)

    module: str = Field(..., description="Module name")
    path: str = Field(..., description="Module file path")
    cohesion: float = Field(..., ge=0.0, le=1.0, description="Cohesion score")
    related_pairs: int = Field(default=0, ge=0, description="Related pairs")
    total_pairs: int = Field(default=0, ge=0, description="Total pairs")
    rating: CohesionRating = Field(..., description="Cohesion rating")
    reason: str | None = Field(None, description="Reason for trivial scores")


class IFCEntry(BaseModel):
    """Information flow complexity of one function."""

    model_config = ConfigDict(frozen=True)

    function: str = Field(..., description="Function name")
    module: str = Field(..., description="Module name")
    file_path: str = Field(..., description="File path")
    line: int = Field(..., ge=1, description="Declaration line")
    fan_in: int = Field(..., ge=0, description="Fan-in")
    fan_out: int = Field(..., ge=0, description="Fan-out")
    complexity: int = Field(..., ge=0, description="(fan-in * fan-out) squared")
    rating: IFCRating = Field(..., description="Complexity rating")


class ProjectSummary(BaseModel):
    """Project totals and averages over all functions.

    Attributes:
        total_modules: Number of modules analysed.
        total_functions: Number of functions found.
        total_fan_in: Sum of function fan-in.
        total_fan_out: Sum of function fan-out.
        avg_fan_in: Mean function fan-in (0 with no functions).
        avg_fan_out: Mean function fan-out (0 with no functions).
    """

    model_config = ConfigDict(frozen=True)

    total_modules: int = Field(default=0, ge=0, description="Modules analysed")
    total_functions: int = Field(default=0, ge=0, description="Functions found")
    total_fan_in: int = Field(default=0, ge=0, description="Total fan-in")
    total_fan_out: int = Field(default=0, ge=0, description="Total fan-out")
    avg_fan_in: float = Field(default=0.0, ge=0.0, description="Average fan-in")
    avg_fan_out: float = Field(default=0.0, ge=0.0, description="Average fan-out")


class MetricsReport(BaseModel):
    """All structural metrics computed from one call graph."""

    model_config = ConfigDict(frozen=True)

    summary: ProjectSummary = Field(default_factory=ProjectSummary, description="Totals")
    functions: list[FunctionFlow] = Field(
        default_factory=list, description="Functions by fan-in then fan-out, descending"
    )
    modules: list[ModuleFlow] = Field(default_factory=list, description="Module flows")
    coupling: CouplingReport = Field(default_factory=CouplingReport, description="Coupling")
    cohesion: list[CohesionScore] = Field(default_factory=list, description="Cohesion")
    information_flow: list[IFCEntry] = Field(
        default_factory=list, description="Information flow complexity"
    )
