from __future__ import annotations

import math
from dataclasses import dataclass

from .campus_graph import CampusGraph, CampusNode, Coordinate

EARTH_RADIUS_M = 6_371_000.0


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance in meters between two (lng, lat) points."""
    lng1, lat1 = a
    lng2, lat2 = b
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = phi2 - phi1
    dlambda = math.radians(lng2 - lng1)
    h = (
        math.sin(dphi / 2.0) ** 2
        + (math.cos(phi1) * math.cos(phi2) * (math.sin(dlambda / 2.0) ** 2))
    )
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(max(0.0, h))))


@dataclass(frozen=True)
class BoundingBox:
    min_lng: float
    max_lng: float
    min_lat: float
    max_lat: float

    def contains(self, point: Coordinate) -> bool:
        lng, lat = point
        return self.min_lng <= lng <= self.max_lng and self.min_lat <= lat <= self.max_lat


# Extended campus area, including the downtown connection points.
CAMPUS_BOUNDS = BoundingBox(min_lng=-80.44, max_lng=-80.40, min_lat=37.21, max_lat=37.24)
# Academic core around the Drillfield.
CORE_CAMPUS_BOUNDS = BoundingBox(min_lng=-80.428, max_lng=-80.412, min_lat=37.222, max_lat=37.235)


def is_on_campus(point: Coordinate, *, bounds: BoundingBox = CAMPUS_BOUNDS) -> bool:
    return bounds.contains(point)


def is_in_core_campus(point: Coordinate, *, bounds: BoundingBox = CORE_CAMPUS_BOUNDS) -> bool:
    return bounds.contains(point)


def nearest_node_with_distance(graph: CampusGraph, point: Coordinate) -> tuple[CampusNode | None, float]:
    # Linear scan in stored order: strict "<" keeps the first node on ties.
    best: CampusNode | None = None
    best_dist = math.inf
    for node in graph.nodes:
        dist = distance_m(point, node.coordinates)
        if dist < best_dist:
            best = node
            best_dist = dist
    return best, best_dist


def nearest_node(graph: CampusGraph, point: Coordinate, max_snap_m: float) -> CampusNode | None:
    """Snap `point` to the closest node, or None if it lies beyond `max_snap_m`."""
    node, dist = nearest_node_with_distance(graph, point)
    if node is None or dist > max_snap_m:
        return None
    return node
