"""
Tests for the adjacency graph, pagination helpers and seat state encoding.
"""

import pytest

from seating.domain.adjacency import AdjacencyGraph
from seating.domain.errors import InvalidArgumentError
from seating.domain.models import Seat, SeatState, SeatStatus
from seating.domain.pagination import paginate


def _seat(seat_id: str, *next_to: str, config: str = "c1") -> Seat:
    return Seat(id=seat_id, name=seat_id.upper(), seat_class="GA", venue_config_id=config, next_to=frozenset(next_to))


def test_graph_is_symmetric_and_local():
    graph = AdjacencyGraph.from_seats([_seat("a", "b", "zz"), _seat("b"), _seat("c", "c")])

    assert graph.neighbors("a") == {"b"}
    assert graph.neighbors("b") == {"a"}
    # Self loops and unknown seats are ignored
    assert graph.neighbors("c") == set()


def test_find_group_prefers_connected_seats():
    # a - b   c - d - e
    graph = AdjacencyGraph.from_seats(
        [_seat("a", "b"), _seat("b"), _seat("c", "d"), _seat("d", "e"), _seat("e")]
    )

    assert sorted(graph.find_group({"a", "b", "c", "d", "e"}, 3, search_limit=10)) == ["c", "d", "e"]
    assert graph.find_group({"a", "b", "c", "e"}, 3, search_limit=10) is None


def test_find_group_search_limit():
    graph = AdjacencyGraph.from_seats([_seat("a"), _seat("b"), _seat("c", "d"), _seat("d")])

    assert graph.find_group({"a", "b", "c", "d"}, 2, search_limit=2) is None
    assert sorted(graph.find_group({"a", "b", "c", "d"}, 2, search_limit=3)) == ["c", "d"]


def test_touches():
    graph = AdjacencyGraph.from_seats([_seat("a", "b"), _seat("b"), _seat("c")])

    assert graph.touches("a", ["b", "c"])
    assert not graph.touches("c", ["a", "b"])


def test_paginate():
    items = list(range(7))

    assert paginate(items, 1, 3, 100) == [0, 1, 2]
    assert paginate(items, 3, 3, 100) == [6]
    assert paginate(items, 4, 3, 100) == []
    with pytest.raises(InvalidArgumentError):
        paginate(items, 1, 4, 3)


def test_seat_state_encoding():
    held = SeatState.held("order-1")

    assert held.encode() == "held:order-1"
    assert SeatState.decode("held:order-1") == held
    assert SeatState.decode("reserved:order-1") == SeatState(SeatStatus.RESERVED, "order-1")
    assert SeatState.decode(None).is_free
    assert SeatState.free().encode() == "free"
