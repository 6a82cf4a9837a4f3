from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "graph_duplicate_node",
        "graph_unknown_edge_endpoint",
        "graph_invalid_edge_distance",
        "graph_self_loop",
        "graph_empty",
        "external_router_unavailable",
        "external_router_timeout",
        "external_router_invalid_response",
    }
)


@dataclass
class GraphIntegrityError(ValueError):
    """Corrupted static campus data; raised while the graph is constructed."""

    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class RoutingUnavailableError(RuntimeError):
    """The external street router failed, as opposed to "no route exists"."""

    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


def normalize_reason_code(reason_code: str, *, default: str = "external_router_unavailable") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
