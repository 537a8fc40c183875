"""Structural analysis for flowmetrics.

This module provides the project call graph and the metrics derived from
it:
- Function and module fan-in/fan-out
- Coupling between modules or functional groups
- Module cohesion
- Information flow complexity
"""

from .callgraph import AggregationError, CallGraphBuilder
from .metrics import StructuralMetricsCalculator, ifc_rating, information_flow_complexity
from .models import (
    AnalysisConfig,
    CallerRef,
    CallGraph,
    CohesionRating,
    CohesionScore,
    CouplingKind,
    CouplingPair,
    CouplingReport,
    FunctionFlow,
    IFCEntry,
    IFCRating,
    MetricsReport,
    ModuleFlow,
    ProjectSummary,
)

__all__ = [
    # Models
    "AnalysisConfig",
    "CallGraph",
    "CallerRef",
    "FunctionFlow",
    "ModuleFlow",
    "MetricsReport",
    "ProjectSummary",
    # Call graph
    "CallGraphBuilder",
    "AggregationError",
    # Metrics
    "StructuralMetricsCalculator",
    "information_flow_complexity",
    "ifc_rating",
    "CouplingKind",
    "CouplingPair",
    "CouplingReport",
    "CohesionRating",
    "CohesionScore",
    "IFCEntry",
    "IFCRating",
]
