"""Call graph aggregation.

The aggregator collects every file's :class:`SourceUnit` and, once all of
them are in, computes function and module fan-in/fan-out in a single pass.
Flow figures are never computed incrementally: a function's fan-in depends
on calls from files that may be scanned after it.
"""

from collections.abc import Iterable

import structlog

from ..parser.models import FunctionKey, FunctionRecord, SourceUnit
from .models import CallerRef, CallGraph, FunctionFlow, ModuleFlow

logger = structlog.get_logger(__name__)


class AggregationError(Exception):
    """Raised when the aggregator is used out of order."""


def call_base(target: str) -> str:
    """Base object of a call target (text before the first dot)."""
    return target.split(".", 1)[0]


def mentions(target: str, name: str) -> bool:
    """True when a call target equals or contains a function name."""
    return target == name or name in target


class CallGraphBuilder:
    """Accumulates source units and builds the project call graph.

    Units are added during ingestion; :meth:`build` is the barrier after
    which the builder is sealed. Building twice, or adding a unit after
    building, raises :class:`AggregationError`.

    Example:
        >>> builder = CallGraphBuilder()
        >>> for unit in units:
        ...     builder.add_unit(unit)
        >>> graph = builder.build()
    """

    def __init__(self) -> None:
        self._units: list[SourceUnit] = []
        self._paths: set[str] = set()
        self._sealed = False
        self._log = logger.bind(component="callgraph")

    @classmethod
    def from_units(cls, units: Iterable[SourceUnit]) -> CallGraph:
        """Build a call graph from a complete collection of units."""
        builder = cls()
        for unit in units:
            builder.add_unit(unit)
        return builder.build()

    @property
    def sealed(self) -> bool:
        """True once the graph has been built."""
        return self._sealed

    def add_unit(self, unit: SourceUnit) -> None:
        """Register one file's source unit.

        A unit whose path was already added is ignored.

        Raises:
            AggregationError: If the graph has already been built.
        """
        if self._sealed:
            raise AggregationError("Cannot add source units after the call graph is built")
        if unit.path in self._paths:
            self._log.debug("Ignoring duplicate source unit", file=unit.path)
            return
        self._paths.add(unit.path)
        self._units.append(unit)

    def build(self) -> CallGraph:
        """Compute all flow figures and seal the builder.

        Returns:
            The frozen project call graph.

        Raises:
            AggregationError: If the graph has already been built.
        """
        if self._sealed:
            raise AggregationError("Call graph has already been built")
        self._sealed = True

        functions = self._collect_functions()
        callers = self._collect_callers(functions)

        function_flows = [
            FunctionFlow(
                name=func.name,
                module=func.module,
                file_path=func.file_path,
                line=func.line,
                kind=func.kind,
                fan_in=len(callers[func.key]),
                fan_out=len(func.direct_calls),
                callers=list(callers[func.key].values()),
                callees=list(func.direct_calls),
            )
            for func in functions
        ]
        module_flows = [self._module_flow(unit) for unit in self._units]

        self._log.info(
            "Call graph built",
            modules=len(module_flows),
            functions=len(function_flows),
        )

        return CallGraph(units=list(self._units), functions=function_flows, modules=module_flows)

    def _collect_functions(self) -> list[FunctionRecord]:
        """Every function in discovery order, unique by identity key."""
        seen: set[FunctionKey] = set()
        functions: list[FunctionRecord] = []
        for unit in self._units:
            for func in unit.functions:
                if func.key in seen:
                    continue
                seen.add(func.key)
                functions.append(func)
        return functions

    def _collect_callers(
        self,
        functions: list[FunctionRecord],
    ) -> dict[FunctionKey, dict[tuple, CallerRef]]:
        """Distinct callers per function.

        Same-module callers are functions whose outgoing calls contain the
        callee's name exactly, keyed by (file, name, line). Cross-module
        callers are file-level calls from another file whose target is the
        callee's name, keyed by the calling file.
        """
        callers: dict[FunctionKey, dict[tuple, CallerRef]] = {func.key: {} for func in functions}

        for unit in self._units:
            for callee in unit.functions:
                for caller in unit.functions:
                    if caller.key == callee.key or callee.name not in caller.calls:
                        continue
                    callers[callee.key].setdefault(
                        ("function", *caller.key),
                        CallerRef(file_path=caller.file_path, name=caller.name, line=caller.line),
                    )

        by_name: dict[str, list[FunctionRecord]] = {}
        for func in functions:
            by_name.setdefault(func.name, []).append(func)

        for unit in self._units:
            for call in unit.calls:
                for callee in by_name.get(call.target, []):
                    if call.source_file == callee.file_path:
                        continue
                    callers[callee.key].setdefault(
                        ("file", call.source_file),
                        CallerRef(file_path=call.source_file),
                    )

        return callers

    def _module_flow(self, unit: SourceUnit) -> ModuleFlow:
        """Module fan-in and fan-out for one unit."""
        names = unit.function_names

        external: dict[str, None] = {}
        for call in unit.calls:
            if call.target in names or any(part in names for part in call.target.split(".")):
                continue
            external.setdefault(call_base(call.target), None)

        incoming = 0
        for other in self._units:
            if other.path == unit.path:
                continue
            for call in other.calls:
                incoming += sum(1 for func in unit.functions if mentions(call.target, func.name))

        internal_pairs: set[tuple[str, str]] = set()
        for caller in unit.functions:
            for callee in unit.functions:
                if caller.key == callee.key:
                    continue
                if any(mentions(target, callee.name) for target in caller.calls):
                    internal_pairs.add((caller.name, callee.name))

        return ModuleFlow(
            name=unit.module,
            path=unit.path,
            function_count=len(unit.functions),
            fan_in=incoming + len(internal_pairs),
            fan_out=len(external),
            external_targets=list(external),
        )
