"""Tests for journey validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from navgraph.graph import (
    Journey,
    JourneyStatus,
    MissingLink,
    MissingLinkReason,
    validate_journey,
    validate_journeys,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from navgraph.graph import Graph

    MakeGraph = Callable[[list[str], list[tuple[str, str]]], Graph]


@pytest.fixture
def checkout_graph(make_graph: MakeGraph) -> Graph:
    return make_graph(
        ["/", "/cart", "/checkout", "/confirm"],
        [("/", "/cart"), ("/cart", "/checkout"), ("/checkout", "/cart")],
    )


class TestValidateJourney:
    def test_complete_journey(self, checkout_graph: Graph) -> None:
        journey = Journey(name="to_checkout", steps=("/", "/cart", "/checkout"))

        result = validate_journey(checkout_graph, journey)

        assert result.status is JourneyStatus.COMPLETE
        assert result.is_complete
        assert result.coverage == 1.0
        assert result.missing_links == ()
        assert result.total_pairs == 2
        assert result.satisfied_pairs == 2

    def test_partial_journey_reports_missing_link(self, checkout_graph: Graph) -> None:
        journey = Journey(name="purchase", steps=("/", "/cart", "/checkout", "/confirm"))

        result = validate_journey(checkout_graph, journey)

        assert result.status is JourneyStatus.PARTIAL
        assert result.coverage == pytest.approx(2 / 3)
        assert result.missing_links == (MissingLink("/checkout", "/confirm"),)
        assert result.missing_links[0].reason is MissingLinkReason.MISSING_EDGE

    def test_reverse_link_does_not_count(self, make_graph: MakeGraph) -> None:
        graph = make_graph(["/a", "/b"], [("/b", "/a")])

        result = validate_journey(graph, Journey(name="forward", steps=("/a", "/b")))

        assert result.coverage == 0.0
        assert result.missing_links == (MissingLink("/a", "/b"),)

    def test_missing_links_keep_step_order(self, make_graph: MakeGraph) -> None:
        graph = make_graph(["/a", "/b", "/c", "/d"], [("/b", "/c")])

        result = validate_journey(graph, Journey(name="j", steps=("/a", "/b", "/c", "/d")))

        assert [(m.from_path, m.to_path) for m in result.missing_links] == [
            ("/a", "/b"),
            ("/c", "/d"),
        ]
        assert result.coverage == pytest.approx(1 / 3)

    def test_repeated_pair_checked_each_time(self, make_graph: MakeGraph) -> None:
        graph = make_graph(["/a", "/b"], [("/a", "/b")])

        result = validate_journey(graph, Journey(name="loop", steps=("/a", "/b", "/a", "/b")))

        assert result.total_pairs == 3
        assert result.satisfied_pairs == 2
        assert result.missing_links == (MissingLink("/b", "/a"),)

    @pytest.mark.parametrize(
        ("steps", "expected"),
        [
            (("/gone", "/a"), MissingLinkReason.UNKNOWN_FROM),
            (("/a", "/gone"), MissingLinkReason.UNKNOWN_TO),
            (("/gone", "/also-gone"), MissingLinkReason.UNKNOWN_BOTH),
        ],
    )
    def test_unknown_steps_are_marked(
        self,
        make_graph: MakeGraph,
        steps: tuple[str, str],
        expected: MissingLinkReason,
    ) -> None:
        graph = make_graph(["/a"], [])

        result = validate_journey(graph, Journey(name="stale", steps=steps))

        assert result.status is JourneyStatus.PARTIAL
        assert result.missing_links[0].reason is expected

    def test_single_step_journey_has_zero_coverage(self, make_graph: MakeGraph) -> None:
        graph = make_graph(["/a"], [])

        result = validate_journey(graph, Journey(name="one", steps=("/a",)))

        assert result.total_pairs == 0
        assert result.coverage == 0.0
        assert result.status is JourneyStatus.PARTIAL

    def test_to_dict(self, checkout_graph: Graph) -> None:
        result = validate_journey(
            checkout_graph, Journey(name="purchase", steps=("/cart", "/confirm"))
        )

        assert result.to_dict() == {
            "name": "purchase",
            "status": "partial",
            "coverage": 0.0,
            "total_pairs": 1,
            "satisfied_pairs": 0,
            "missing_links": [{"from": "/cart", "to": "/confirm", "reason": "missing_edge"}],
        }


class TestValidateJourneys:
    def test_empty_list(self, checkout_graph: Graph) -> None:
        assert validate_journeys(checkout_graph, []) == []

    def test_results_in_input_order(self, checkout_graph: Graph) -> None:
        journeys = [
            Journey(name="b", steps=("/", "/cart")),
            Journey(name="a", steps=("/cart", "/confirm")),
            Journey(name="c", steps=("/checkout", "/cart")),
        ]

        results = validate_journeys(checkout_graph, journeys)

        assert [r.name for r in results] == ["b", "a", "c"]
        assert [r.is_complete for r in results] == [True, False, True]

    def test_parallel_matches_sequential(self, make_graph: MakeGraph) -> None:
        paths = [f"/p{i}" for i in range(30)]
        graph = make_graph(paths, [(paths[i], paths[i + 1]) for i in range(0, 29, 2)])
        journeys = [
            Journey(name=f"j{i}", steps=(paths[i], paths[i + 1], paths[(i + 2) % 30]))
            for i in range(29)
        ]

        sequential = validate_journeys(graph, journeys)
        parallel = validate_journeys(graph, journeys, max_workers=4)

        assert parallel == sequential
