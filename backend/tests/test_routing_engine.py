from __future__ import annotations

import asyncio
import math
from typing import Any

import httpx
import pytest

import campus_router.routing_engine as routing_engine_module
from campus_router.campus_graph import CampusEdge, CampusGraph, CampusNode
from campus_router.geo import EARTH_RADIUS_M, BoundingBox
from campus_router.routing_engine import CampusRoutingEngine
from campus_router.routing_errors import RoutingUnavailableError
from campus_router.routing_osrm import ExternalRoute, ExternalStep, OSRMClient, OSRMError
from campus_router.settings import settings

BASE_LNG = -80.4200
BASE_LAT = 37.2250
OFF_CAMPUS = (-80.3000, 37.3000)


def _north(meters: float) -> tuple[float, float]:
    return (BASE_LNG, BASE_LAT + math.degrees(meters / EARTH_RADIUS_M))


def _line_graph(*, with_island: bool = False) -> CampusGraph:
    nodes = [
        CampusNode("alpha", "Alpha Hall", _north(0.0), "building"),
        CampusNode("beta", "Beta Fountain", _north(100.0), "landmark"),
        CampusNode("gamma", "Gamma Crossing", _north(200.0), "intersection"),
        CampusNode("delta", "Delta Hall", _north(300.0), "building"),
    ]
    if with_island:
        nodes.append(CampusNode("island", "Island Hall", _north(900.0), "building"))
    edges = [
        CampusEdge("alpha", "beta", 100.0, "path"),
        CampusEdge("beta", "gamma", 100.0, "path"),
        CampusEdge("gamma", "delta", 100.0, "sidewalk"),
    ]
    return CampusGraph(nodes, edges)


class FakeStreetRouter:
    def __init__(self, route: ExternalRoute | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.route = route or ExternalRoute(
            coordinates=[(-80.4200, 37.2250), OFF_CAMPUS],
            distance_m=12_000.0,
            duration_s=8_600.0,
            steps=[
                ExternalStep("Start walking on Main St", 11_900.0, 8_500.0, "depart"),
                ExternalStep("You have arrived at your destination", 100.0, 100.0, "arrive"),
            ],
        )

    async def fetch_route(self, **kwargs: Any) -> ExternalRoute | None:
        self.calls.append(kwargs)
        return self.route


class NoRouteStreetRouter(FakeStreetRouter):
    async def fetch_route(self, **kwargs: Any) -> ExternalRoute | None:
        self.calls.append(kwargs)
        return None


class FailingStreetRouter(FakeStreetRouter):
    async def fetch_route(self, **kwargs: Any) -> ExternalRoute | None:
        self.calls.append(kwargs)
        raise OSRMError("simulated outage")


class SlowStreetRouter(FakeStreetRouter):
    async def fetch_route(self, **kwargs: Any) -> ExternalRoute | None:
        self.calls.append(kwargs)
        await asyncio.sleep(5.0)
        return self.route


def test_same_point_route_is_trivial() -> None:
    engine = CampusRoutingEngine(graph=_line_graph(), external=FakeStreetRouter())
    result = asyncio.run(engine.compute_route(_north(100.0), _north(100.0), "walk"))
    assert result is not None
    assert result.source == "campus"
    assert len(result.path) == 1
    assert result.distance == 0.0
    assert result.duration == 0.0
    assert [s.instruction for s in result.steps] == ["Arrive at Beta Fountain"]


def test_campus_route_between_snapped_nodes() -> None:
    external = FakeStreetRouter()
    engine = CampusRoutingEngine(graph=_line_graph(), external=external)
    result = asyncio.run(engine.compute_route(_north(-5.0), _north(305.0), "walk"))
    assert result is not None
    assert result.source == "campus"
    assert [n.id for n in result.path] == ["alpha", "beta", "gamma", "delta"]
    assert result.distance == pytest.approx(300.0, abs=1e-6)
    assert result.duration == pytest.approx(300.0 / 1.4, abs=1e-6)
    assert len(result.steps) == 3
    assert external.calls == []


def test_campus_route_with_stitching_legs() -> None:
    engine = CampusRoutingEngine(graph=_line_graph(), external=FakeStreetRouter())
    result = asyncio.run(engine.compute_route(_north(-50.0), _north(350.0), "bike"))
    assert result is not None
    assert result.source == "campus"
    assert result.distance == pytest.approx(400.0, abs=1e-6)
    assert result.duration == pytest.approx(400.0 / 4.2, abs=1e-6)
    assert len(result.steps) == 4
    assert result.steps[0].instruction == "Head to Alpha Hall"
    assert result.steps[-1].instruction == "Continue to your destination"
    assert result.coordinates[0] == _north(-50.0)
    assert result.coordinates[-1] == _north(350.0)


def test_off_campus_destination_is_delegated_once_with_raw_coordinates() -> None:
    external = FakeStreetRouter()
    engine = CampusRoutingEngine(graph=_line_graph(), external=external)
    origin = _north(-5.0)
    result = asyncio.run(engine.compute_route(origin, OFF_CAMPUS, "bike"))
    assert result is not None
    assert result.source == "external"
    assert result.path == []
    assert result.distance == 12_000.0
    assert result.duration == 8_600.0
    assert [s.maneuver for s in result.steps] == ["depart", "arrive"]
    assert external.calls == [{"origin": origin, "destination": OFF_CAMPUS, "profile": "bike"}]


def test_hybrid_route_enters_campus_through_nearest_node() -> None:
    external = FakeStreetRouter()
    # Campus starts 50 m north of Alpha Hall, so the origin below it is off campus.
    bounds = BoundingBox(min_lng=-80.44, max_lng=-80.40, min_lat=_north(50.0)[1], max_lat=37.24)
    engine = CampusRoutingEngine(graph=_line_graph(), external=external, campus_bounds=bounds)
    origin = _north(-120.0)
    result = asyncio.run(engine.compute_route(origin, _north(300.0), "walk"))
    assert result is not None
    assert result.source == "campus"
    assert result.steps[0].instruction == "Head to Alpha Hall to enter campus"
    assert result.steps[0].from_id == "origin"
    assert result.steps[1].instruction == "Start at Alpha Hall and head toward Beta Fountain"
    assert len(result.steps) == 4
    assert result.coordinates[0] == origin
    assert result.distance == pytest.approx(420.0, abs=1e-6)
    assert result.duration == pytest.approx(420.0 / 1.4, abs=1e-6)
    assert external.calls == []


def test_hybrid_out_of_snap_radius_falls_back_to_external() -> None:
    external = FakeStreetRouter()
    bounds = BoundingBox(min_lng=-80.44, max_lng=-80.40, min_lat=_north(50.0)[1], max_lat=37.24)
    engine = CampusRoutingEngine(graph=_line_graph(), external=external, campus_bounds=bounds)
    origin = _north(-1_000.0)
    result = asyncio.run(engine.compute_route(origin, _north(300.0), "walk"))
    assert result is not None
    assert result.source == "external"
    assert len(external.calls) == 1
    assert external.calls[0]["origin"] == origin


def test_disconnected_campus_nodes_fall_through_to_external() -> None:
    external = FakeStreetRouter()
    engine = CampusRoutingEngine(graph=_line_graph(with_island=True), external=external)
    result = asyncio.run(engine.compute_route(_north(0.0), _north(900.0), "walk"))
    assert result is not None
    assert result.source == "external"
    assert len(external.calls) == 1


def test_no_external_router_means_no_result() -> None:
    engine = CampusRoutingEngine(graph=_line_graph(with_island=True), external=None)
    assert asyncio.run(engine.compute_route(_north(0.0), _north(900.0), "walk")) is None
    assert asyncio.run(engine.compute_route(_north(0.0), OFF_CAMPUS, "walk")) is None


def test_external_no_route_returns_none() -> None:
    external = NoRouteStreetRouter()
    engine = CampusRoutingEngine(graph=_line_graph(), external=external)
    assert asyncio.run(engine.compute_route(_north(0.0), OFF_CAMPUS, "walk")) is None
    assert len(external.calls) == 1


def test_external_failure_is_surfaced() -> None:
    engine = CampusRoutingEngine(graph=_line_graph(), external=FailingStreetRouter())
    with pytest.raises(RoutingUnavailableError) as exc_info:
        asyncio.run(engine.compute_route(_north(0.0), OFF_CAMPUS, "walk"))
    assert exc_info.value.reason_code == "external_router_unavailable"
    assert isinstance(exc_info.value.__cause__, OSRMError)


def test_external_timeout_is_surfaced(monkeypatch) -> None:
    monkeypatch.setattr(settings, "external_route_timeout_s", 0.05)
    engine = CampusRoutingEngine(graph=_line_graph(), external=SlowStreetRouter())
    with pytest.raises(RoutingUnavailableError) as exc_info:
        asyncio.run(engine.compute_route(_north(0.0), OFF_CAMPUS, "walk"))
    assert exc_info.value.reason_code == "external_router_timeout"


def test_snap_radius_override(monkeypatch) -> None:
    monkeypatch.setattr(settings, "campus_snap_radius_m", 1.0)
    external = FakeStreetRouter()
    engine = CampusRoutingEngine(graph=_line_graph(), external=external)
    assert engine.snap_radius_m == 1.0
    result = asyncio.run(engine.compute_route(_north(-5.0), _north(300.0), "walk"))
    assert result is not None
    assert result.source == "external"


def test_unknown_mode_rejected() -> None:
    engine = CampusRoutingEngine(graph=_line_graph(), external=FakeStreetRouter())
    with pytest.raises(ValueError):
        asyncio.run(engine.compute_route(_north(0.0), _north(300.0), "drive"))  # type: ignore[arg-type]


def test_default_campus_graph_routes_between_buildings() -> None:
    engine = CampusRoutingEngine(external=FakeStreetRouter())
    torgersen = (-80.4192, 37.2296)
    newman = (-80.4188, 37.2285)
    result = engine.compute_route_sync(torgersen, newman, "walk")
    assert result is not None
    assert result.source == "campus"
    assert result.path[0].id == "torgersen"
    assert result.path[-1].id == "newman"
    assert result.steps[0].instruction.startswith("Start at Torgersen Hall")
    assert result.steps[-1].instruction == "Arrive at Newman Library"


def _osrm_returning(body: Any) -> OSRMClient:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    return OSRMClient(
        base_urls={"walk": "http://osrm-foot.test", "bike": "http://osrm-bike.test"},
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        max_retries=1,
    )


_NULL_STEP_DISTANCE = {
    "code": "Ok",
    "routes": [
        {
            "distance": 100.0,
            "duration": 70.0,
            "geometry": {"type": "LineString", "coordinates": [[-80.42, 37.225], [-80.30, 37.30]]},
            "legs": [{"steps": [{"distance": None, "duration": 70.0, "maneuver": {"type": "depart"}}]}],
        }
    ],
}


@pytest.mark.parametrize("body", [_NULL_STEP_DISTANCE, ["Ok"]], ids=["null_step_distance", "list_body"])
def test_malformed_street_route_is_routing_unavailable(body: Any) -> None:
    engine = CampusRoutingEngine(graph=_line_graph(), external=_osrm_returning(body))
    with pytest.raises(RoutingUnavailableError) as exc_info:
        asyncio.run(engine.compute_route(_north(0.0), OFF_CAMPUS, "walk"))
    assert exc_info.value.reason_code == "external_router_invalid_response"


def test_campus_fallthrough_does_not_repeat_search(monkeypatch) -> None:
    searches: list[tuple[str, str]] = []
    real_search = routing_engine_module.find_campus_path_with_stats

    def counting_search(graph: CampusGraph, start_id: str, goal_id: str):
        searches.append((start_id, goal_id))
        return real_search(graph, start_id, goal_id)

    monkeypatch.setattr(routing_engine_module, "find_campus_path_with_stats", counting_search)
    external = FakeStreetRouter()
    engine = CampusRoutingEngine(graph=_line_graph(with_island=True), external=external)
    result = asyncio.run(engine.compute_route(_north(0.0), _north(900.0), "walk"))
    assert result is not None
    assert result.source == "external"
    assert searches == [("alpha", "island")]
    assert len(external.calls) == 1
