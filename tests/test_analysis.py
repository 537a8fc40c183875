"""Tests for the analysis module.

This module contains tests for:
- Call graph aggregation (function and module fan-in/fan-out)
- Coupling between modules and functional groups
- Module cohesion
- Information flow complexity
- Project summary
"""

import pytest
from pydantic import ValidationError

from flowmetrics.analysis.callgraph import AggregationError, CallGraphBuilder, call_base, mentions
from flowmetrics.analysis.metrics import (
    StructuralMetricsCalculator,
    ifc_rating,
    information_flow_complexity,
)
from flowmetrics.analysis.models import (
    AnalysisConfig,
    CallGraph,
    CohesionRating,
    CouplingKind,
    IFCRating,
)
from flowmetrics.config import Settings

# =============================================================================
# Model Tests
# =============================================================================


class TestAnalysisConfig:
    """Tests for AnalysisConfig model."""

    def test_default_config(self):
        """Test default configuration values."""
        config = AnalysisConfig()
        assert list(config.functional_groups) == [
            "room-management",
            "socket-handlers",
            "canvas-management",
        ]
        assert config.domain_keywords == ["room", "canvas", "user"]
        assert config.tight_coupling_threshold == 5
        assert config.high_cohesion_threshold == 0.7
        assert config.medium_cohesion_threshold == 0.3

    def test_from_settings(self):
        """Configuration is derived from application settings."""
        settings = Settings(domain_keywords=["order"], tight_coupling_threshold=2)
        config = AnalysisConfig.from_settings(settings)
        assert config.domain_keywords == ["order"]
        assert config.tight_coupling_threshold == 2

    def test_threshold_bounds(self):
        """Cohesion thresholds are fractions."""
        with pytest.raises(ValidationError):
            AnalysisConfig(high_cohesion_threshold=1.5)


class TestHelpers:
    """Tests for call target helpers."""

    def test_call_base(self):
        assert call_base("socket.emit") == "socket"
        assert call_base("helper") == "helper"

    def test_mentions(self):
        assert mentions("helper", "helper")
        assert mentions("utils.helper", "helper")
        assert not mentions("help", "helper")


# =============================================================================
# Call Graph Tests
# =============================================================================


class TestCallGraphBuilder:
    """Tests for CallGraphBuilder."""

    def test_room_helper_scenario(self, make_function, make_unit):
        """A function calling a same-file helper."""
        unit = make_unit(
            "/p/server.js",
            [
                make_function("generateRoomId", calls=["helper", "Math.random"], line=1),
                make_function("helper", calls=["Math.random"], line=5),
            ],
        )
        graph = CallGraphBuilder.from_units([unit])

        generate = graph.find_functions("generateRoomId")[0]
        helper = graph.find_functions("helper")[0]
        assert (generate.fan_in, generate.fan_out) == (0, 1)
        assert (helper.fan_in, helper.fan_out) == (1, 0)
        assert helper.callers[0].name == "generateRoomId"
        assert helper.callers[0].is_cross_module is False

    def test_fan_in_counts_each_caller_once(self, make_function, make_unit):
        """Repeated calls from one caller add one to fan-in."""
        unit = make_unit(
            "/p/a.js",
            [
                make_function("caller", calls=["target"], line=1),
                make_function("target", line=5),
            ],
            calls=[("target", "caller"), ("target", "caller")],
        )
        graph = CallGraphBuilder.from_units([unit])
        assert graph.find_functions("target")[0].fan_in == 1

    def test_intra_module_requires_exact_name(self, make_function, make_unit):
        """Same-module callers must call the exact name."""
        unit = make_unit(
            "/p/a.js",
            [
                make_function("caller", calls=["utils.target", "targets"], line=1),
                make_function("target", line=5),
            ],
        )
        graph = CallGraphBuilder.from_units([unit])
        assert graph.find_functions("target")[0].fan_in == 0

    def test_recursion_is_not_fan_in(self, make_function, make_unit):
        """A function calling itself is not its own caller."""
        unit = make_unit("/p/a.js", [make_function("loop", calls=["loop"])])
        graph = CallGraphBuilder.from_units([unit])
        flow = graph.find_functions("loop")[0]
        assert flow.fan_in == 0
        assert flow.fan_out == 1

    def test_cross_module_callers_keyed_by_file(self, make_function, make_unit):
        """Calls from another file count once per calling file."""
        library = make_unit("/p/lib.js", [make_function("helper", file_path="/p/lib.js")])
        app = make_unit(
            "/p/app.js",
            [
                make_function("one", file_path="/p/app.js", calls=["helper"], line=1),
                make_function("two", file_path="/p/app.js", calls=["helper"], line=5),
            ],
        )
        other = make_unit("/p/other.js", [], calls=[("helper", None)])

        graph = CallGraphBuilder.from_units([library, app, other])
        helper = graph.get_function(("/p/lib.js", "helper", 1))

        assert helper is not None
        assert helper.fan_in == 2
        assert [ref.file_path for ref in helper.callers] == ["/p/app.js", "/p/other.js"]
        assert all(ref.is_cross_module for ref in helper.callers)

    def test_intra_and_cross_callers_combine(self, make_function, make_unit):
        """Same-module and cross-module callers are both counted."""
        library = make_unit(
            "/p/lib.js",
            [
                make_function("helper", file_path="/p/lib.js", line=1),
                make_function("wrapper", file_path="/p/lib.js", calls=["helper"], line=5),
            ],
        )
        app = make_unit("/p/app.js", [], calls=[("helper", None)])

        graph = CallGraphBuilder.from_units([library, app])
        assert graph.find_functions("helper")[0].fan_in == 2

    def test_member_calls_do_not_add_fan_out(self, make_function, make_unit):
        """Fan-out is the number of distinct direct calls."""
        unit = make_unit(
            "/p/a.js",
            [make_function("f", calls=["a", "b", "socket.emit"], direct_calls=["a", "b"])],
        )
        graph = CallGraphBuilder.from_units([unit])
        flow = graph.functions[0]
        assert flow.fan_out == 2
        assert flow.callees == ["a", "b"]

    def test_module_fan_out(self, make_function, make_unit):
        """Module fan-out counts distinct bases of external calls."""
        unit = make_unit(
            "/p/server.js",
            [make_function("send")],
            calls=[
                ("socket.emit", None),
                ("socket.join", None),
                ("io.to", None),
                ("rooms.get", None),
                ("send", None),
                ("x.send", None),
            ],
        )
        graph = CallGraphBuilder.from_units([unit])
        module = graph.get_module("/p/server.js")

        assert module is not None
        assert module.fan_out == 3
        assert module.external_targets == ["socket", "io", "rooms"]

    def test_module_fan_in(self, make_function, make_unit):
        """Module fan-in counts matching external calls and internal pairs."""
        library = make_unit(
            "/p/lib.js",
            [
                make_function("helper", file_path="/p/lib.js", line=1),
                make_function("help", file_path="/p/lib.js", calls=["helper"], line=5),
            ],
        )
        app = make_unit("/p/app.js", [], calls=[("helper", None), ("unrelated", None)])

        graph = CallGraphBuilder.from_units([library, app])
        module = graph.get_module("/p/lib.js")

        # "helper" matches both helper and help; one internal pair help->helper
        assert module.fan_in == 3
        assert module.function_count == 2

    def test_duplicate_unit_ignored(self, make_function, make_unit):
        """A unit added twice contributes once."""
        unit = make_unit("/p/a.js", [make_function("f")])
        builder = CallGraphBuilder()
        builder.add_unit(unit)
        builder.add_unit(unit)
        graph = builder.build()
        assert len(graph.units) == 1
        assert len(graph.functions) == 1

    def test_build_is_single_use(self, make_function, make_unit):
        """The builder is sealed after building."""
        builder = CallGraphBuilder()
        builder.add_unit(make_unit("/p/a.js", [make_function("f")]))
        builder.build()

        assert builder.sealed is True
        with pytest.raises(AggregationError):
            builder.build()
        with pytest.raises(AggregationError):
            builder.add_unit(make_unit("/p/b.js"))

    def test_graph_is_frozen(self, make_function, make_unit):
        """Flow figures cannot be changed once built."""
        graph = CallGraphBuilder.from_units([make_unit("/p/a.js", [make_function("f")])])
        with pytest.raises(ValidationError):
            graph.functions[0].fan_in = 10

    def test_empty_graph(self):
        """No units gives an empty graph."""
        graph = CallGraphBuilder.from_units([])
        assert graph == CallGraph()


# =============================================================================
# Metrics Tests
# =============================================================================


class TestInformationFlow:
    """Tests for information flow complexity."""

    @pytest.mark.parametrize(
        ("fan_in", "fan_out", "expected"),
        [(0, 0, 0), (0, 5, 0), (4, 0, 0), (1, 2, 4), (2, 3, 36), (3, 4, 144)],
    )
    def test_complexity(self, fan_in, fan_out, expected):
        assert information_flow_complexity(fan_in, fan_out) == expected

    @pytest.mark.parametrize(
        ("fan_in", "fan_out", "expected"),
        [
            (0, 0, IFCRating.NONE),
            (0, 7, IFCRating.LOW),
            (3, 0, IFCRating.LOW),
            (1, 2, IFCRating.LOW),
            (1, 3, IFCRating.MEDIUM),
            (5, 1, IFCRating.MEDIUM),
            (2, 3, IFCRating.HIGH),
            (3, 4, IFCRating.VERY_HIGH),
        ],
    )
    def test_rating(self, fan_in, fan_out, expected):
        complexity = information_flow_complexity(fan_in, fan_out)
        assert ifc_rating(fan_in, fan_out, complexity) == expected

    def test_entries_follow_graph(self, make_function, make_unit):
        """One entry per function, in discovery order."""
        unit = make_unit(
            "/p/a.js",
            [
                make_function("caller", calls=["target"], line=1),
                make_function("target", calls=["other"], line=5),
            ],
        )
        graph = CallGraphBuilder.from_units([unit])
        entries = StructuralMetricsCalculator().calculate_information_flow(graph)

        assert [entry.function for entry in entries] == ["caller", "target"]
        assert entries[1].complexity == 1
        assert entries[1].rating == IFCRating.LOW


class TestCohesion:
    """Tests for module cohesion."""

    @pytest.fixture
    def calculator(self) -> StructuralMetricsCalculator:
        return StructuralMetricsCalculator()

    def test_no_functions(self, calculator, make_unit):
        score = calculator.module_cohesion(make_unit("/p/a.js"))
        assert score.cohesion == 1.0
        assert score.reason == "no functions"
        assert score.rating == CohesionRating.HIGH

    def test_single_function(self, calculator, make_function, make_unit):
        score = calculator.module_cohesion(make_unit("/p/a.js", [make_function("only")]))
        assert score.cohesion == 1.0
        assert score.reason == "single function module"

    def test_unrelated_functions(self, calculator, make_function, make_unit):
        """Three unrelated functions have zero cohesion."""
        unit = make_unit(
            "/p/a.js",
            [
                make_function("alpha", calls=["first"], parameters=["a"], line=1),
                make_function("beta", calls=["second"], parameters=["b"], line=5),
                make_function("gamma", calls=["third"], parameters=["c"], line=9),
            ],
        )
        score = calculator.module_cohesion(unit)
        assert score.cohesion == 0.0
        assert (score.related_pairs, score.total_pairs) == (0, 3)
        assert score.rating == CohesionRating.LOW
        assert score.reason is None

    def test_call_relation(self, calculator, make_function, make_unit):
        """A call in either direction relates a pair."""
        unit = make_unit(
            "/p/a.js",
            [
                make_function("generateRoomId", calls=["helper"], line=1),
                make_function("helper", line=5),
            ],
        )
        assert calculator.module_cohesion(unit).cohesion == 1.0

    def test_shared_parameter(self, calculator, make_function, make_unit):
        unit = make_unit(
            "/p/a.js",
            [
                make_function("alpha", parameters=["socket"], line=1),
                make_function("beta", parameters=["socket", "data"], line=5),
            ],
        )
        assert calculator.module_cohesion(unit).cohesion == 1.0

    def test_matching_parameter_tokens_are_shared(self, calculator, make_function, make_unit):
        """A plain ``array`` parameter and a destructured one compare by token."""
        unit = make_unit(
            "/p/a.js",
            [
                make_function("alpha", parameters=["array"], line=1),
                make_function("beta", parameters=["array", "unnamed"], line=5),
            ],
        )
        assert calculator.module_cohesion(unit).cohesion == 1.0

    def test_different_parameters_are_not_shared(self, calculator, make_function, make_unit):
        unit = make_unit(
            "/p/a.js",
            [
                make_function("alpha", parameters=["object"], line=1),
                make_function("beta", parameters=["unnamed"], line=5),
            ],
        )
        assert calculator.module_cohesion(unit).cohesion == 0.0

    def test_shared_call_base(self, calculator, make_function, make_unit):
        unit = make_unit(
            "/p/a.js",
            [
                make_function("alpha", calls=["socket.emit"], line=1),
                make_function("beta", calls=["socket.join"], line=5),
            ],
        )
        assert calculator.module_cohesion(unit).cohesion == 1.0

    def test_domain_keyword(self, calculator, make_function, make_unit):
        unit = make_unit(
            "/p/a.js",
            [
                make_function("openroom", line=1),
                make_function("closeroom", line=5),
                make_function("other", line=9),
            ],
        )
        score = calculator.module_cohesion(unit)
        assert (score.related_pairs, score.total_pairs) == (1, 3)
        assert score.cohesion == pytest.approx(1 / 3)
        assert score.rating == CohesionRating.MEDIUM

    def test_custom_keywords(self, make_function, make_unit):
        calculator = StructuralMetricsCalculator(AnalysisConfig(domain_keywords=["cart"]))
        unit = make_unit(
            "/p/a.js",
            [make_function("addToCart", line=1), make_function("cartTotal", line=5)],
        )
        # keyword matching is case-sensitive
        assert calculator.module_cohesion(unit).cohesion == 0.0

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (1.0, CohesionRating.HIGH),
            (0.71, CohesionRating.HIGH),
            (0.7, CohesionRating.MEDIUM),
            (0.31, CohesionRating.MEDIUM),
            (0.3, CohesionRating.LOW),
            (0.0, CohesionRating.LOW),
        ],
    )
    def test_rating_thresholds(self, calculator, score, expected):
        assert calculator.rate_cohesion(score) == expected


class TestCoupling:
    """Tests for coupling between modules and functional groups."""

    def test_module_pairs(self, make_function, make_unit):
        """Calls mentioning another module's name couple the two."""
        room = make_unit("/p/room.js", [make_function("create", file_path="/p/room.js")])
        server = make_unit(
            "/p/server.js",
            [],
            calls=[("room.create", None), ("room.join", None), ("roomHelper", None)],
        )
        report = StructuralMetricsCalculator().calculate_coupling(
            CallGraphBuilder.from_units([server, room])
        )

        assert report.by_group is False
        assert len(report.pairs) == 1
        pair = report.pairs[0]
        assert (pair.first, pair.second, pair.calls) == ("room", "server", 3)
        assert pair.kind == CouplingKind.LOOSE
        assert (report.tight, report.loose) == (0, 1)

    def test_tight_coupling(self, make_unit):
        """More than five calls is tight coupling."""
        a = make_unit("/p/a_mod.js", [], calls=[("b_mod.call", None)] * 4)
        b = make_unit("/p/b_mod.js", [], calls=[("a_mod.call", None)] * 2)
        report = StructuralMetricsCalculator().calculate_coupling(
            CallGraphBuilder.from_units([a, b])
        )
        assert report.pairs[0].calls == 6
        assert report.pairs[0].kind == CouplingKind.TIGHT
        assert (report.tight, report.loose) == (1, 0)

    def test_uncoupled_modules(self, make_unit):
        """Pairs without calls are not reported."""
        a = make_unit("/p/a_mod.js", [], calls=[("fetch", None)])
        b = make_unit("/p/b_mod.js", [], calls=[("render", None)])
        report = StructuralMetricsCalculator().calculate_coupling(
            CallGraphBuilder.from_units([a, b])
        )
        assert report.pairs == []

    def test_single_module_groups(self, make_function, make_unit):
        """A single module is split into functional groups."""
        config = AnalysisConfig(
            functional_groups={"a": ["alpha"], "b": ["beta"], "c": ["gamma"]},
        )
        unit = make_unit(
            "/p/server.js",
            [
                make_function("alphaOne", calls=["betaX", "betaY", "gammaZ"], line=1),
                make_function("betaTwo", calls=["alphaOne", "gammaZ"], line=5),
            ],
        )
        report = StructuralMetricsCalculator(config).calculate_coupling(
            CallGraphBuilder.from_units([unit])
        )

        assert report.by_group is True
        counts = {(pair.first, pair.second): pair.calls for pair in report.pairs}
        # only calls from the earlier group toward the later group count
        assert counts == {("a", "b"): 2, ("a", "c"): 1, ("b", "c"): 1}

    def test_default_groups(self, make_function, make_unit):
        """Default groups split room management from socket handlers."""
        unit = make_unit(
            "/p/server.js",
            [make_function("createRoom", calls=["drawLine", "redraw", "socket.emit"])],
        )
        report = StructuralMetricsCalculator().calculate_coupling(
            CallGraphBuilder.from_units([unit])
        )
        assert [(p.first, p.second, p.calls) for p in report.pairs] == [
            ("room-management", "socket-handlers", 2)
        ]


class TestStructuralMetricsCalculator:
    """Tests for the full metrics calculation."""

    def test_summary(self, make_function, make_unit):
        unit = make_unit(
            "/p/server.js",
            [
                make_function("generateRoomId", calls=["helper"], line=1),
                make_function("helper", line=5),
            ],
        )
        summary = StructuralMetricsCalculator().calculate_summary(
            CallGraphBuilder.from_units([unit])
        )
        assert summary.total_modules == 1
        assert summary.total_functions == 2
        assert (summary.total_fan_in, summary.total_fan_out) == (1, 1)
        assert summary.avg_fan_in == 0.5
        assert summary.avg_fan_out == 0.5

    def test_summary_without_functions(self, make_unit):
        summary = StructuralMetricsCalculator().calculate_summary(
            CallGraphBuilder.from_units([make_unit("/p/a.js")])
        )
        assert summary.total_functions == 0
        assert summary.avg_fan_in == 0.0
        assert summary.avg_fan_out == 0.0

    def test_functions_ranked(self, make_function, make_unit):
        """Functions are ordered by fan-in, then fan-out, descending."""
        unit = make_unit(
            "/p/a.js",
            [
                make_function("leaf", line=1),
                make_function("hub", calls=["leaf", "mid"], line=5),
                make_function("mid", calls=["leaf"], line=9),
            ],
        )
        report = StructuralMetricsCalculator().calculate(CallGraphBuilder.from_units([unit]))
        assert [flow.name for flow in report.functions] == ["leaf", "mid", "hub"]

    def test_deterministic(self, make_function, make_unit):
        """Identical input gives identical metrics."""
        units = [
            make_unit("/p/a.js", [make_function("f", file_path="/p/a.js", calls=["g"])]),
            make_unit("/p/b.js", [make_function("g", file_path="/p/b.js", calls=["a.f"])]),
        ]
        calculator = StructuralMetricsCalculator()
        first = calculator.calculate(CallGraphBuilder.from_units(units))
        second = calculator.calculate(CallGraphBuilder.from_units(units))
        assert first == second
