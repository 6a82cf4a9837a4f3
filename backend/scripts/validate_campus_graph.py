from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campus_router.campus_graph import CampusGraph  # noqa: E402
from campus_router.campus_network import default_campus_graph  # noqa: E402
from campus_router.geo import CAMPUS_BOUNDS, distance_m  # noqa: E402


def _edge_ratio_table(graph: CampusGraph) -> tuple[np.ndarray, np.ndarray]:
    stored = np.asarray([edge.distance_m for edge in graph.edges], dtype=np.float64)
    straight = np.asarray(
        [
            distance_m(
                graph.get_node_by_id(edge.from_id).coordinates,  # type: ignore[union-attr]
                graph.get_node_by_id(edge.to_id).coordinates,  # type: ignore[union-attr]
            )
            for edge in graph.edges
        ],
        dtype=np.float64,
    )
    return stored, straight


def validate(
    graph: CampusGraph,
    *,
    min_ratio: float,
    require_connected: bool,
) -> dict[str, Any]:
    components = graph.component_index()
    if require_connected and components.component_count > 1:
        raise RuntimeError(
            f"Campus graph is fragmented: {components.component_count} components, "
            f"isolated nodes {list(components.isolated_node_ids)}"
        )

    outside = [node.id for node in graph.nodes if not CAMPUS_BOUNDS.contains(node.coordinates)]

    stored, straight = _edge_ratio_table(graph)
    ratios = np.divide(stored, straight, out=np.full_like(stored, np.inf), where=straight > 0)
    # Stored lengths shorter than the straight line make the A* heuristic overestimate.
    short_idx = np.flatnonzero(ratios < min_ratio)
    short_edges = [
        {
            "from": graph.edges[i].from_id,
            "to": graph.edges[i].to_id,
            "stored_m": round(float(stored[i]), 1),
            "straight_line_m": round(float(straight[i]), 1),
        }
        for i in short_idx
    ]
    finite = ratios[np.isfinite(ratios)]
    return {
        "nodes": len(graph.nodes),
        "edges": len(graph.edges),
        "component_count": components.component_count,
        "largest_component_nodes": components.largest_component_nodes,
        "isolated_node_ids": list(components.isolated_node_ids),
        "nodes_outside_campus_bounds": outside,
        "edge_length_ratio_min": round(float(finite.min()), 3) if finite.size else None,
        "edge_length_ratio_median": round(float(np.median(finite)), 3) if finite.size else None,
        "edges_shorter_than_straight_line": short_edges,
        "heuristic_admissible": not short_edges,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate the compiled-in campus walking graph.")
    parser.add_argument(
        "--min-ratio",
        type=float,
        default=1.0,
        help="Flag edges whose stored length / straight-line length falls below this ratio.",
    )
    parser.add_argument(
        "--require-connected",
        action="store_true",
        help="Fail when the graph has more than one connected component.",
    )
    args = parser.parse_args(argv)
    report = validate(
        default_campus_graph(),
        min_ratio=max(0.0, float(args.min_ratio)),
        require_connected=bool(args.require_connected),
    )
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
