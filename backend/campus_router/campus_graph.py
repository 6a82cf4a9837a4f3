from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import cached_property
from typing import Literal

from .routing_errors import GraphIntegrityError

NodeKind = Literal["building", "intersection", "landmark", "entrance"]
SurfaceKind = Literal["sidewalk", "path", "crosswalk", "stairs", "bridge"]

# (lng, lat) in degrees, the order map SDKs and GeoJSON use.
Coordinate = tuple[float, float]


@dataclass(frozen=True)
class CampusNode:
    id: str
    name: str
    coordinates: Coordinate
    kind: NodeKind


@dataclass(frozen=True)
class CampusEdge:
    from_id: str
    to_id: str
    distance_m: float
    surface: SurfaceKind
    # Recorded for completeness; the cost function does not read it.
    accessible: bool = True


@dataclass(frozen=True)
class AdjacentEdge:
    neighbor_id: str
    distance_m: float
    edge: CampusEdge


@dataclass(frozen=True)
class ComponentSummary:
    component_count: int
    largest_component_nodes: int
    isolated_node_ids: tuple[str, ...]
    component_by_node: dict[str, int] = field(repr=False)


Adjacency = dict[str, tuple[AdjacentEdge, ...]]


class CampusGraph:
    """Static walkable network. Validated once on construction, never mutated."""

    def __init__(self, nodes: Iterable[CampusNode], edges: Iterable[CampusEdge]) -> None:
        self._nodes: tuple[CampusNode, ...] = tuple(nodes)
        self._edges: tuple[CampusEdge, ...] = tuple(edges)
        self._by_id: dict[str, CampusNode] = {}
        self._validate()

    def _validate(self) -> None:
        if not self._nodes:
            raise GraphIntegrityError("graph_empty", "campus graph has no nodes")
        for node in self._nodes:
            if node.id in self._by_id:
                raise GraphIntegrityError(
                    "graph_duplicate_node",
                    f"duplicate node id {node.id!r}",
                    {"node_id": node.id},
                )
            self._by_id[node.id] = node
        for idx, edge in enumerate(self._edges):
            missing = [nid for nid in (edge.from_id, edge.to_id) if nid not in self._by_id]
            if missing:
                raise GraphIntegrityError(
                    "graph_unknown_edge_endpoint",
                    f"edge #{idx} {edge.from_id!r}->{edge.to_id!r} references unknown node(s) {missing}",
                    {"edge_index": idx, "missing": missing},
                )
            if edge.from_id == edge.to_id:
                raise GraphIntegrityError(
                    "graph_self_loop",
                    f"edge #{idx} loops on {edge.from_id!r}",
                    {"edge_index": idx},
                )
            dist = float(edge.distance_m)
            if not math.isfinite(dist) or dist <= 0.0:
                raise GraphIntegrityError(
                    "graph_invalid_edge_distance",
                    f"edge #{idx} {edge.from_id!r}->{edge.to_id!r} has invalid distance {edge.distance_m!r}",
                    {"edge_index": idx, "distance_m": edge.distance_m},
                )

    @property
    def nodes(self) -> tuple[CampusNode, ...]:
        return self._nodes

    @property
    def edges(self) -> tuple[CampusEdge, ...]:
        return self._edges

    def get_node_by_id(self, node_id: str) -> CampusNode | None:
        return self._by_id.get(node_id)

    def build_adjacency_list(self) -> Adjacency:
        """Neighbours of every node, both directions per stored edge, in edge order."""
        adjacency_mut: dict[str, list[AdjacentEdge]] = {node.id: [] for node in self._nodes}
        for edge in self._edges:
            adjacency_mut[edge.from_id].append(
                AdjacentEdge(neighbor_id=edge.to_id, distance_m=float(edge.distance_m), edge=edge)
            )
            adjacency_mut[edge.to_id].append(
                AdjacentEdge(neighbor_id=edge.from_id, distance_m=float(edge.distance_m), edge=edge)
            )
        return {k: tuple(v) for k, v in adjacency_mut.items()}

    @cached_property
    def adjacency(self) -> Adjacency:
        return self.build_adjacency_list()

    def component_index(self) -> ComponentSummary:
        component_by_node: dict[str, int] = {}
        component_sizes: dict[int, int] = {}
        component_idx = 0
        for node in self._nodes:
            if node.id in component_by_node:
                continue
            component_idx += 1
            q: deque[str] = deque([node.id])
            size = 0
            while q:
                current = q.popleft()
                if current in component_by_node:
                    continue
                component_by_node[current] = component_idx
                size += 1
                for adj in self.adjacency.get(current, ()):
                    if adj.neighbor_id not in component_by_node:
                        q.append(adj.neighbor_id)
            component_sizes[component_idx] = size
        isolated = tuple(node_id for node_id, adj in self.adjacency.items() if not adj)
        return ComponentSummary(
            component_count=component_idx,
            largest_component_nodes=max(component_sizes.values(), default=0),
            isolated_node_ids=isolated,
            component_by_node=component_by_node,
        )
