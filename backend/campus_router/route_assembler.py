from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final

from .campus_graph import CampusGraph, CampusNode, Coordinate
from .geo import distance_m
from .models import DESTINATION_ID, ORIGIN_ID, RouteNode, RouteResult, RouteStep, TravelMode
from .settings import settings

# Walking ~5 km/h, cycling ~15 km/h.
MODE_SPEEDS_MPS: Final[dict[str, float]] = {"walk": 1.4, "bike": 4.2}

_COMPASS_POINTS: Final[tuple[str, ...]] = (
    "north",
    "northeast",
    "east",
    "southeast",
    "south",
    "southwest",
    "west",
    "northwest",
)


def speed_for_mode(mode: str) -> float:
    try:
        return MODE_SPEEDS_MPS[mode]
    except KeyError:
        raise ValueError(f"unsupported travel mode {mode!r}") from None


def compass_direction(a: Coordinate, b: Coordinate) -> str:
    """8-point compass bearing from a to b, each sector 45 degrees wide."""
    dlng = b[0] - a[0]
    dlat = b[1] - a[1]
    angle = math.degrees(math.atan2(dlng, dlat))
    return _COMPASS_POINTS[int(((angle + 22.5) % 360.0) // 45.0)]


def node_instruction(from_node: CampusNode, to_node: CampusNode, *, is_first: bool, is_last: bool) -> str:
    if is_first:
        return f"Start at {from_node.name} and head toward {to_node.name}"
    if is_last:
        return f"Arrive at {to_node.name}"
    direction = compass_direction(from_node.coordinates, to_node.coordinates)
    if to_node.kind == "building":
        return f"Continue {direction} toward {to_node.name}"
    if to_node.kind == "intersection":
        return f"Continue {direction} at {to_node.name}"
    return f"Continue {direction} past {to_node.name}"


def to_route_node(node: CampusNode) -> RouteNode:
    return RouteNode(id=node.id, name=node.name, coordinates=node.coordinates, kind=node.kind)


def _finish(
    *,
    path: list[RouteNode],
    coordinates: list[Coordinate],
    steps: list[RouteStep],
    speed: float,
) -> RouteResult:
    total_distance = sum(step.distance for step in steps)
    return RouteResult(
        path=path,
        coordinates=coordinates,
        distance=total_distance,
        duration=total_distance / speed,
        steps=steps,
        source="campus",
    )


def assemble_route(
    graph: CampusGraph,
    node_ids: Sequence[str],
    *,
    origin: Coordinate,
    destination: Coordinate,
    mode: TravelMode = "walk",
    stitch_threshold_m: float | None = None,
) -> RouteResult:
    """Turn a node path into a drawable route with turn-by-turn steps.

    Leg lengths are re-derived from node geometry rather than read from the
    stored edge weights. When the raw origin or destination sits at least
    `stitch_threshold_m` away from the path's end nodes, a straight segment
    connects it to the polyline.
    """
    if not node_ids:
        raise ValueError("node path is empty")
    nodes: list[CampusNode] = []
    for node_id in node_ids:
        node = graph.get_node_by_id(node_id)
        if node is None:
            raise ValueError(f"unknown node id {node_id!r} in path")
        nodes.append(node)
    speed = speed_for_mode(mode)
    threshold = settings.campus_stitch_threshold_m if stitch_threshold_m is None else stitch_threshold_m

    coordinates: list[Coordinate] = [node.coordinates for node in nodes]
    steps: list[RouteStep] = []
    if len(nodes) == 1:
        steps.append(
            RouteStep(
                instruction=f"Arrive at {nodes[0].name}",
                distance=0.0,
                duration=0.0,
                from_id=nodes[0].id,
                to_id=nodes[0].id,
            )
        )
    for idx in range(len(nodes) - 1):
        src = nodes[idx]
        dst = nodes[idx + 1]
        leg_m = distance_m(src.coordinates, dst.coordinates)
        steps.append(
            RouteStep(
                instruction=node_instruction(src, dst, is_first=idx == 0, is_last=idx == len(nodes) - 2),
                distance=leg_m,
                duration=leg_m / speed,
                from_id=src.id,
                to_id=dst.id,
            )
        )

    first, last = nodes[0], nodes[-1]
    origin_gap_m = distance_m(origin, first.coordinates)
    if origin_gap_m >= threshold:
        coordinates.insert(0, origin)
        steps.insert(
            0,
            RouteStep(
                instruction=f"Head to {first.name}",
                distance=origin_gap_m,
                duration=origin_gap_m / speed,
                from_id=ORIGIN_ID,
                to_id=first.id,
            ),
        )

    destination_gap_m = distance_m(destination, last.coordinates)
    if destination_gap_m >= threshold:
        coordinates.append(destination)
        final = steps[-1]
        tail_m = final.distance + destination_gap_m
        steps[-1] = final.model_copy(
            update={
                "instruction": "Continue to your destination",
                "distance": tail_m,
                "duration": tail_m / speed,
                "to_id": DESTINATION_ID,
            }
        )

    return _finish(
        path=[to_route_node(node) for node in nodes],
        coordinates=coordinates,
        steps=steps,
        speed=speed,
    )


def prepend_leg(
    result: RouteResult,
    *,
    origin: Coordinate,
    entry_node: CampusNode,
    mode: TravelMode,
    instruction: str,
    stitch_threshold_m: float | None = None,
) -> RouteResult:
    """Prefix a straight leg from `origin` to `entry_node` onto an assembled route."""
    speed = speed_for_mode(mode)
    threshold = settings.campus_stitch_threshold_m if stitch_threshold_m is None else stitch_threshold_m
    gap_m = distance_m(origin, entry_node.coordinates)
    if gap_m < threshold:
        return result
    lead = RouteStep(
        instruction=instruction,
        distance=gap_m,
        duration=gap_m / speed,
        from_id=ORIGIN_ID,
        to_id=entry_node.id,
    )
    return _finish(
        path=list(result.path),
        coordinates=[origin, *result.coordinates],
        steps=[lead, *result.steps],
        speed=speed,
    )
