from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

TravelMode = Literal["walk", "bike"]
RouteSource = Literal["campus", "external"]
NodeKind = Literal["building", "intersection", "landmark", "entrance"]

# Sentinel endpoint ids for segments that do not start or end on a graph node.
ORIGIN_ID = "origin"
DESTINATION_ID = "destination"


def _check_lng_lat(value: tuple[float, float]) -> tuple[float, float]:
    lng, lat = value
    if not (-180.0 <= lng <= 180.0):
        raise ValueError("longitude must be within [-180, 180]")
    if not (-90.0 <= lat <= 90.0):
        raise ValueError("latitude must be within [-90, 90]")
    return (float(lng), float(lat))


class RouteNode(BaseModel):
    id: str
    name: str
    coordinates: tuple[float, float]
    kind: NodeKind


class RouteStep(BaseModel):
    instruction: str
    distance: float = Field(..., ge=0.0)
    duration: float = Field(..., ge=0.0)
    from_id: str | None = None
    to_id: str | None = None
    # OSRM maneuver type; campus steps leave it empty.
    maneuver: str | None = None


class RouteResult(BaseModel):
    """A computed route, in (lng, lat) order throughout."""

    path: list[RouteNode] = Field(default_factory=list)
    coordinates: list[tuple[float, float]]
    distance: float = Field(..., ge=0.0)
    duration: float = Field(..., ge=0.0)
    steps: list[RouteStep] = Field(default_factory=list)
    source: RouteSource


class RouteRequest(BaseModel):
    origin: tuple[float, float]
    destination: tuple[float, float]
    mode: TravelMode = "walk"

    @field_validator("origin", "destination")
    @classmethod
    def valid_coordinate(cls, v: tuple[float, float]) -> tuple[float, float]:
        return _check_lng_lat(v)


class RouteResponse(BaseModel):
    route: RouteResult
    distance_text: str
    duration_text: str


class CampusNodeListResponse(BaseModel):
    nodes: list[RouteNode]


class CampusGraphStatusResponse(BaseModel):
    node_count: int
    edge_count: int
    component_count: int
    largest_component_nodes: int
    isolated_node_ids: list[str]
