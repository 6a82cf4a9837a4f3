from __future__ import annotations

import heapq
from collections.abc import Callable
from dataclasses import dataclass
from itertools import count
from math import inf

from .campus_graph import Adjacency, CampusGraph
from .geo import distance_m


@dataclass(frozen=True)
class PathResult:
    nodes: tuple[str, ...]
    cost: float


class PathNotFoundError(ValueError):
    pass


HeuristicFn = Callable[[str], float]


def _astar_search(
    *,
    adjacency: Adjacency,
    start: str,
    goal: str,
    heuristic: HeuristicFn,
    explored_counter: list[int] | None = None,
) -> PathResult:
    if start not in adjacency or goal not in adjacency:
        raise PathNotFoundError("start/goal unknown")
    g_score: dict[str, float] = {start: 0.0}
    came_from: dict[str, str] = {}
    finalized: set[str] = set()
    # The sequence number breaks f-score ties in insertion order.
    seq = count()
    heap: list[tuple[float, int, str]] = [(heuristic(start), next(seq), start)]
    while heap:
        _f, _seq, current = heapq.heappop(heap)
        if current == goal:
            nodes = [current]
            while current in came_from:
                current = came_from[current]
                nodes.append(current)
            nodes.reverse()
            return PathResult(nodes=tuple(nodes), cost=g_score[goal])
        if current in finalized:
            continue
        finalized.add(current)
        if explored_counter is not None:
            explored_counter[0] += 1
        current_g = g_score[current]
        for adj in adjacency.get(current, ()):
            tentative = current_g + adj.distance_m
            if tentative < g_score.get(adj.neighbor_id, inf):
                came_from[adj.neighbor_id] = current
                g_score[adj.neighbor_id] = tentative
                if adj.neighbor_id not in finalized:
                    heapq.heappush(heap, (tentative + heuristic(adj.neighbor_id), next(seq), adj.neighbor_id))
    raise PathNotFoundError("no path")


def normalize_no_path_reason(message: str) -> str:
    lowered = str(message or "").strip().lower()
    if "start/goal unknown" in lowered:
        return "start_or_goal_unknown"
    return "no_path"


def find_path_with_stats(
    *,
    adjacency: Adjacency,
    start: str,
    goal: str,
    heuristic: HeuristicFn | None = None,
) -> tuple[PathResult | None, dict[str, int | str]]:
    """A* over `adjacency`. An unreachable goal is a normal outcome, not an error."""
    explored_counter = [0]
    try:
        result = _astar_search(
            adjacency=adjacency,
            start=start,
            goal=goal,
            heuristic=heuristic or (lambda _node_id: 0.0),
            explored_counter=explored_counter,
        )
    except PathNotFoundError as exc:
        return None, {
            "explored_states": explored_counter[0],
            "no_path_reason": normalize_no_path_reason(str(exc)),
        }
    return result, {
        "explored_states": explored_counter[0],
        "no_path_reason": "",
    }


def find_path(
    *,
    adjacency: Adjacency,
    start: str,
    goal: str,
    heuristic: HeuristicFn | None = None,
) -> PathResult | None:
    result, _stats = find_path_with_stats(
        adjacency=adjacency,
        start=start,
        goal=goal,
        heuristic=heuristic,
    )
    return result


def straight_line_heuristic(graph: CampusGraph, goal: str) -> HeuristicFn:
    goal_node = graph.get_node_by_id(goal)

    def _h(node_id: str) -> float:
        node = graph.get_node_by_id(node_id)
        if node is None or goal_node is None:
            return inf
        return distance_m(node.coordinates, goal_node.coordinates)

    return _h


def find_campus_path_with_stats(
    graph: CampusGraph,
    start_id: str,
    goal_id: str,
) -> tuple[PathResult | None, dict[str, int | str]]:
    return find_path_with_stats(
        adjacency=graph.adjacency,
        start=start_id,
        goal=goal_id,
        heuristic=straight_line_heuristic(graph, goal_id),
    )


def find_campus_path(graph: CampusGraph, start_id: str, goal_id: str) -> PathResult | None:
    result, _stats = find_campus_path_with_stats(graph, start_id, goal_id)
    return result
