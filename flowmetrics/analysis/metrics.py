"""Structural metrics calculation.

This module derives coupling, cohesion and information flow complexity
from a built :class:`CallGraph`, along with project totals and averages.
"""

from itertools import combinations

import structlog

from ..parser.models import FunctionRecord, SourceUnit
from .callgraph import call_base, mentions
from .models import (
    AnalysisConfig,
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
    ProjectSummary,
)

logger = structlog.get_logger(__name__)


def information_flow_complexity(fan_in: int, fan_out: int) -> int:
    """Henry-Kafura style complexity: ``(fan_in * fan_out) ** 2``.

    Zero unless both fan-in and fan-out are positive.
    """
    if fan_in > 0 and fan_out > 0:
        return (fan_in * fan_out) ** 2
    return 0


def ifc_rating(fan_in: int, fan_out: int, complexity: int) -> IFCRating:
    """Rate an information flow complexity value."""
    if complexity > 100:
        return IFCRating.VERY_HIGH
    if complexity > 25:
        return IFCRating.HIGH
    if complexity > 5:
        return IFCRating.MEDIUM
    if fan_in == 0 and fan_out == 0:
        return IFCRating.NONE
    return IFCRating.LOW


class StructuralMetricsCalculator:
    """Calculates coupling, cohesion and information flow metrics.

    Attributes:
        config: Analysis configuration (thresholds and keyword tables).
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        """Initialize the calculator.

        Args:
            config: Analysis configuration. Uses defaults if not provided.
        """
        self.config = config or AnalysisConfig()
        self._log = logger.bind(component="metrics")

    def calculate(self, graph: CallGraph) -> MetricsReport:
        """Compute every metric for a call graph."""
        report = MetricsReport(
            summary=self.calculate_summary(graph),
            functions=self.rank_functions(graph),
            modules=list(graph.modules),
            coupling=self.calculate_coupling(graph),
            cohesion=self.calculate_cohesion(graph),
            information_flow=self.calculate_information_flow(graph),
        )
        self._log.info(
            "Metrics calculated",
            functions=report.summary.total_functions,
            coupling_pairs=len(report.coupling.pairs),
        )
        return report

    def calculate_summary(self, graph: CallGraph) -> ProjectSummary:
        """Project totals and averages over all functions."""
        count = len(graph.functions)
        total_in = sum(flow.fan_in for flow in graph.functions)
        total_out = sum(flow.fan_out for flow in graph.functions)

        return ProjectSummary(
            total_modules=len(graph.modules),
            total_functions=count,
            total_fan_in=total_in,
            total_fan_out=total_out,
            avg_fan_in=total_in / count if count else 0.0,
            avg_fan_out=total_out / count if count else 0.0,
        )

    def rank_functions(self, graph: CallGraph) -> list[FunctionFlow]:
        """Functions sorted by fan-in, then fan-out, both descending.

        The sort is stable, so ties keep discovery order.
        """
        return sorted(graph.functions, key=lambda flow: (-flow.fan_in, -flow.fan_out))

    def classify_coupling(self, calls: int) -> CouplingKind:
        """Tight above the configured threshold, loose otherwise."""
        if calls > self.config.tight_coupling_threshold:
            return CouplingKind.TIGHT
        return CouplingKind.LOOSE

    def calculate_coupling(self, graph: CallGraph) -> CouplingReport:
        """Coupling between modules, or between functional groups.

        A project with exactly one module is split into the configured
        functional groups; otherwise every pair of modules is compared.
        """
        if len(graph.units) == 1:
            counts = self._group_coupling(graph.units[0])
            by_group = True
        else:
            counts = self._module_coupling(graph.units)
            by_group = False

        pairs = [
            CouplingPair(
                first=first,
                second=second,
                calls=calls,
                kind=self.classify_coupling(calls),
            )
            for first, second, calls in counts
            if calls > 0
        ]
        tight = sum(1 for pair in pairs if pair.kind == CouplingKind.TIGHT)

        return CouplingReport(
            by_group=by_group,
            tight=tight,
            loose=len(pairs) - tight,
            pairs=pairs,
        )

    def _group_coupling(self, unit: SourceUnit) -> list[tuple[str, str, int]]:
        groups = list(self.config.functional_groups.items())
        counts: list[tuple[str, str, int]] = []

        for (first, first_keywords), (second, second_keywords) in combinations(groups, 2):
            members = [
                func
                for func in unit.functions
                if any(keyword in func.name for keyword in first_keywords)
            ]
            calls = sum(
                1
                for func in members
                for target in func.calls
                if any(keyword in target for keyword in second_keywords)
            )
            counts.append((first, second, calls))

        return counts

    def _module_coupling(self, units: list[SourceUnit]) -> list[tuple[str, str, int]]:
        counts: list[tuple[str, str, int]] = []

        for first in units:
            for second in units:
                if not first.path < second.path:
                    continue
                calls = sum(1 for call in first.calls if second.module in call.target)
                calls += sum(1 for call in second.calls if first.module in call.target)
                counts.append((first.module, second.module, calls))

        return counts

    def rate_cohesion(self, score: float) -> CohesionRating:
        """Rate a cohesion score against the configured thresholds."""
        if score > self.config.high_cohesion_threshold:
            return CohesionRating.HIGH
        if score > self.config.medium_cohesion_threshold:
            return CohesionRating.MEDIUM
        return CohesionRating.LOW

    def calculate_cohesion(self, graph: CallGraph) -> list[CohesionScore]:
        """Cohesion of every module, in discovery order."""
        return [self.module_cohesion(unit) for unit in graph.units]

    def module_cohesion(self, unit: SourceUnit) -> CohesionScore:
        """Fraction of function pairs in a module that are related.

        A pair is related when one calls the other, they share a declared
        parameter name, they share a call base object, or both names contain
        the same domain keyword.
        """
        functions = unit.functions

        if len(functions) < 2:
            return CohesionScore(
                module=unit.module,
                path=unit.path,
                cohesion=1.0,
                rating=self.rate_cohesion(1.0),
                reason="no functions" if not functions else "single function module",
            )

        total = 0
        related = 0
        for first, second in combinations(functions, 2):
            total += 1
            if self._related(first, second):
                related += 1

        score = related / total
        return CohesionScore(
            module=unit.module,
            path=unit.path,
            cohesion=score,
            related_pairs=related,
            total_pairs=total,
            rating=self.rate_cohesion(score),
        )

    def _related(self, first: FunctionRecord, second: FunctionRecord) -> bool:
        if any(mentions(target, second.name) for target in first.calls):
            return True
        if any(mentions(target, first.name) for target in second.calls):
            return True

        if set(first.parameters) & set(second.parameters):
            return True

        first_bases = {call_base(target) for target in first.calls}
        second_bases = {call_base(target) for target in second.calls}
        if first_bases & second_bases:
            return True

        return any(
            keyword in first.name and keyword in second.name
            for keyword in self.config.domain_keywords
        )

    def calculate_information_flow(self, graph: CallGraph) -> list[IFCEntry]:
        """Information flow complexity of every function, in discovery order."""
        entries: list[IFCEntry] = []
        for flow in graph.functions:
            complexity = information_flow_complexity(flow.fan_in, flow.fan_out)
            entries.append(
                IFCEntry(
                    function=flow.name,
                    module=flow.module,
                    file_path=flow.file_path,
                    line=flow.line,
                    fan_in=flow.fan_in,
                    fan_out=flow.fan_out,
                    complexity=complexity,
                    rating=ifc_rating(flow.fan_in, flow.fan_out, complexity),
                )
            )
        return entries
