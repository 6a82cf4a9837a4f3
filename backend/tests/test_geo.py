from __future__ import annotations

import math

import pytest

from campus_router.campus_graph import CampusEdge, CampusGraph, CampusNode
from campus_router.campus_network import default_campus_graph
from campus_router.geo import (
    CAMPUS_BOUNDS,
    BoundingBox,
    distance_m,
    is_in_core_campus,
    is_on_campus,
    nearest_node,
    nearest_node_with_distance,
)


def test_distance_is_symmetric_for_all_campus_node_pairs() -> None:
    nodes = default_campus_graph().nodes
    for a in nodes:
        for b in nodes:
            assert distance_m(a.coordinates, b.coordinates) == pytest.approx(
                distance_m(b.coordinates, a.coordinates), abs=1e-9
            )


def test_distance_zero_only_for_identical_points() -> None:
    p = (-80.4192, 37.2296)
    assert distance_m(p, p) == 0.0
    assert distance_m(p, (-80.4192, 37.22961)) > 0.0


def test_distance_matches_arc_length_along_meridian() -> None:
    one_km_deg = math.degrees(1000.0 / 6_371_000.0)
    assert distance_m((-80.42, 37.0), (-80.42, 37.0 + one_km_deg)) == pytest.approx(1000.0, abs=1e-6)


def test_campus_bounds_membership() -> None:
    assert is_on_campus((-80.4205, 37.2281))
    assert is_on_campus((-80.44, 37.21))  # corners are inclusive
    assert not is_on_campus((-80.45, 37.2281))
    assert not is_on_campus((-80.4205, 37.25))
    # Longitude first: swapping the pair must not be treated as on campus.
    assert not is_on_campus((37.2281, -80.4205))


def test_core_campus_is_tighter_than_campus() -> None:
    drillfield = (-80.4205, 37.2281)
    lane_stadium = (-80.4182, 37.2199)
    assert is_in_core_campus(drillfield)
    assert is_on_campus(lane_stadium)
    assert not is_in_core_campus(lane_stadium)


def test_bounds_override() -> None:
    tiny = BoundingBox(min_lng=0.0, max_lng=1.0, min_lat=0.0, max_lat=1.0)
    assert is_on_campus((0.5, 0.5), bounds=tiny)
    assert not is_on_campus((-80.4205, 37.2281), bounds=tiny)
    assert CAMPUS_BOUNDS.contains((-80.4205, 37.2281))


def test_snap_is_idempotent_on_node_coordinates() -> None:
    graph = default_campus_graph()
    for node in graph.nodes:
        assert nearest_node(graph, node.coordinates, 0.0) == node
        assert nearest_node(graph, node.coordinates, 200.0) == node


def test_snap_respects_radius() -> None:
    graph = default_campus_graph()
    torgersen = graph.get_node_by_id("torgersen")
    assert torgersen is not None
    node, dist = nearest_node_with_distance(graph, (-80.4192, 37.2297))
    assert node == torgersen
    assert 0.0 < dist < 20.0
    assert nearest_node(graph, (-80.4192, 37.2297), dist) == torgersen
    assert nearest_node(graph, (-80.4192, 37.2297), dist - 0.01) is None
    # Roanoke is well outside any campus snap radius.
    assert nearest_node(graph, (-79.9414, 37.2710), 200.0) is None


def test_snap_tie_goes_to_first_node_in_stored_order() -> None:
    graph = CampusGraph(
        [
            CampusNode("west", "West Gate", (-1.0, 0.0), "entrance"),
            CampusNode("east", "East Gate", (1.0, 0.0), "entrance"),
        ],
        [CampusEdge("west", "east", 222_400.0, "path")],
    )
    node = nearest_node(graph, (0.0, 0.0), 200_000.0)
    assert node is not None and node.id == "west"
