from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .campus_network import default_campus_graph
from .formatting import format_distance, format_duration
from .logging_utils import log_warning
from .models import (
    CampusGraphStatusResponse,
    CampusNodeListResponse,
    RouteRequest,
    RouteResponse,
)
from .route_assembler import to_route_node
from .routing_engine import CampusRoutingEngine
from .routing_errors import RoutingUnavailableError
from .routing_osrm import OSRMClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.osrm = OSRMClient()
    app.state.engine = CampusRoutingEngine(graph=default_campus_graph(), external=app.state.osrm)
    yield
    await app.state.osrm.aclose()


app = FastAPI(title="Campus Pedestrian Router", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def routing_engine(request: Request) -> CampusRoutingEngine:
    engine: CampusRoutingEngine | None = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="routing engine not initialised")
    return engine


EngineDep = Annotated[CampusRoutingEngine, Depends(routing_engine)]


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/campus/nodes", response_model=CampusNodeListResponse)
async def list_campus_nodes() -> CampusNodeListResponse:
    return CampusNodeListResponse(nodes=[to_route_node(node) for node in default_campus_graph().nodes])


@app.get("/campus/status", response_model=CampusGraphStatusResponse)
async def campus_status() -> CampusGraphStatusResponse:
    graph = default_campus_graph()
    components = graph.component_index()
    return CampusGraphStatusResponse(
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
        component_count=components.component_count,
        largest_component_nodes=components.largest_component_nodes,
        isolated_node_ids=list(components.isolated_node_ids),
    )


@app.post("/route", response_model=RouteResponse)
async def compute_route(req: RouteRequest, engine: EngineDep) -> RouteResponse:
    try:
        route = await engine.compute_route(req.origin, req.destination, req.mode)
    except RoutingUnavailableError as e:
        log_warning("route_failed", reason_code=e.reason_code, detail=e.message)
        raise HTTPException(status_code=502, detail=str(e)) from e
    if route is None:
        raise HTTPException(status_code=404, detail="no route found")
    return RouteResponse(
        route=route,
        distance_text=format_distance(route.distance),
        duration_text=format_duration(route.duration),
    )
