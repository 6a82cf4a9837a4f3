from __future__ import annotations

import asyncio
import time

import httpx

from .campus_graph import CampusGraph, Coordinate
from .campus_network import default_campus_graph
from .geo import CAMPUS_BOUNDS, BoundingBox, distance_m, is_on_campus, nearest_node
from .logging_utils import log_event
from .models import RouteResult, RouteStep, TravelMode
from .pathfinder import find_campus_path_with_stats
from .route_assembler import assemble_route, prepend_leg, speed_for_mode
from .routing_errors import RoutingUnavailableError, normalize_reason_code
from .routing_osrm import ExternalRoute, ExternalRouter, OSRMError, OSRMResponseError
from .settings import settings


def _external_to_result(route: ExternalRoute) -> RouteResult:
    return RouteResult(
        path=[],
        coordinates=list(route.coordinates),
        distance=route.distance_m,
        duration=route.duration_s,
        steps=[
            RouteStep(
                instruction=step.instruction,
                distance=step.distance_m,
                duration=step.duration_s,
                maneuver=step.maneuver or None,
            )
            for step in route.steps
        ],
        source="external",
    )


class CampusRoutingEngine:
    """Chooses between campus-graph routing and the external street router.

    Branches are tried in order: pure campus (both ends on campus), hybrid
    (destination on campus, origin off campus but within snap radius) and
    delegate.
    Failing to snap or to find a campus path only moves on to the next branch.
    """

    def __init__(
        self,
        *,
        graph: CampusGraph | None = None,
        external: ExternalRouter | None = None,
        snap_radius_m: float | None = None,
        campus_bounds: BoundingBox = CAMPUS_BOUNDS,
    ) -> None:
        self.graph = graph or default_campus_graph()
        self.external = external
        self.snap_radius_m = settings.campus_snap_radius_m if snap_radius_m is None else float(snap_radius_m)
        self.campus_bounds = campus_bounds

    def _campus_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
    ) -> RouteResult | None:
        start = nearest_node(self.graph, origin, self.snap_radius_m)
        goal = nearest_node(self.graph, destination, self.snap_radius_m)
        if start is None or goal is None:
            log_event(
                "campus_snap_failed",
                origin_snapped=start is not None,
                destination_snapped=goal is not None,
                snap_radius_m=self.snap_radius_m,
            )
            return None
        path, stats = find_campus_path_with_stats(self.graph, start.id, goal.id)
        if path is None:
            log_event("campus_no_path", start=start.id, goal=goal.id, **stats)
            return None
        return assemble_route(self.graph, path.nodes, origin=origin, destination=destination, mode=mode)

    def _hybrid_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
    ) -> RouteResult | None:
        # The origin may be off campus; it only has to be within the snap radius.
        entry = nearest_node(self.graph, origin, self.snap_radius_m)
        goal = nearest_node(self.graph, destination, self.snap_radius_m)
        if entry is None or goal is None:
            return None
        path, stats = find_campus_path_with_stats(self.graph, entry.id, goal.id)
        if path is None:
            log_event("campus_no_path", start=entry.id, goal=goal.id, **stats)
            return None
        inner = assemble_route(
            self.graph,
            path.nodes,
            origin=entry.coordinates,
            destination=destination,
            mode=mode,
        )
        return prepend_leg(
            inner,
            origin=origin,
            entry_node=entry,
            mode=mode,
            instruction=f"Head to {entry.name} to enter campus",
        )

    async def _delegate(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
    ) -> RouteResult | None:
        if self.external is None:
            return None
        try:
            route = await asyncio.wait_for(
                self.external.fetch_route(origin=origin, destination=destination, profile=mode),
                timeout=settings.external_route_timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise RoutingUnavailableError(
                normalize_reason_code("external_router_timeout"),
                f"external router timed out after {settings.external_route_timeout_s}s",
            ) from e
        except OSRMResponseError as e:
            raise RoutingUnavailableError(
                normalize_reason_code("external_router_invalid_response"),
                f"external router returned an unusable route: {e}",
            ) from e
        except (OSRMError, httpx.HTTPError) as e:
            raise RoutingUnavailableError(
                normalize_reason_code("external_router_unavailable"),
                f"external router failed: {e}",
                {"error_type": type(e).__name__},
            ) from e
        if route is None:
            return None
        return _external_to_result(route)

    async def compute_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode = "walk",
    ) -> RouteResult | None:
        """Route between two (lng, lat) points; None when nobody can route it.

        Raises RoutingUnavailableError when the external router fails.
        """
        # Reject unknown modes before any branch runs.
        speed_for_mode(mode)
        t0 = time.perf_counter()
        origin_on_campus = is_on_campus(origin, bounds=self.campus_bounds)
        destination_on_campus = is_on_campus(destination, bounds=self.campus_bounds)

        branch = "delegate"
        result: RouteResult | None = None
        if origin_on_campus and destination_on_campus:
            result = self._campus_route(origin, destination, mode)
            branch = "campus"
        # Both ends on campus already tried the same snaps and A* query.
        if result is None and destination_on_campus and not origin_on_campus:
            result = self._hybrid_route(origin, destination, mode)
            branch = "hybrid"
        if result is None:
            branch = "delegate"
            result = await self._delegate(origin, destination, mode)

        log_event(
            "route_computed",
            branch=branch,
            mode=mode,
            source=result.source if result is not None else None,
            distance_m=round(result.distance, 1) if result is not None else None,
            straight_line_m=round(distance_m(origin, destination), 1),
            elapsed_ms=round((time.perf_counter() - t0) * 1000.0, 2),
        )
        return result

    def compute_route_sync(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode = "walk",
    ) -> RouteResult | None:
        return asyncio.run(self.compute_route(origin, destination, mode))
