from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Final, Protocol

import httpx

from .campus_graph import Coordinate
from .settings import settings


class OSRMError(RuntimeError):
    pass


class OSRMRetryableError(OSRMError):
    """An OSRM error that is likely transient and safe to retry."""

    pass


class OSRMResponseError(OSRMError):
    """OSRM answered, but the payload does not have the expected shape."""

    pass


_RETRYABLE_STATUS: Final[set[int]] = {408, 425, 429, 500, 502, 503, 504}
# OSRM codes meaning "valid request, nothing routable".
_NO_ROUTE_CODES: Final[set[str]] = {"NoRoute", "NoSegment"}
# Travel mode -> OSRM profile segment of the URL.
_OSRM_PROFILES: Final[dict[str, str]] = {"walk": "walking", "bike": "cycling"}


@dataclass(frozen=True)
class ExternalStep:
    instruction: str
    distance_m: float
    duration_s: float
    maneuver: str


@dataclass(frozen=True)
class ExternalRoute:
    coordinates: list[Coordinate]
    distance_m: float
    duration_s: float
    steps: list[ExternalStep] = field(default_factory=list)


class ExternalRouter(Protocol):
    async def fetch_route(
        self,
        *,
        origin: Coordinate,
        destination: Coordinate,
        profile: str,
    ) -> ExternalRoute | None: ...


def _format_osrm_error(resp: httpx.Response) -> str:
    """Best-effort decode of OSRM JSON error payloads."""
    try:
        data = resp.json()
        if isinstance(data, dict):
            code = data.get("code")
            message = data.get("message")
            if code and message:
                return f"OSRM {resp.status_code} {code}: {message}"
            if code:
                return f"OSRM {resp.status_code} {code}"
            if message:
                return f"OSRM {resp.status_code}: {message}"
    except ValueError:
        # fall through to text
        pass

    body = (resp.text or "").strip().replace("\n", " ")
    if len(body) > 240:
        body = body[:240] + "..."
    if body:
        return f"OSRM {resp.status_code}: {body}"
    return f"OSRM HTTP {resp.status_code}"


def format_pedestrian_maneuver(step: dict[str, Any]) -> str:
    """Readable instruction for an OSRM step that ships without one."""
    maneuver = step.get("maneuver") or {}
    kind = str(maneuver.get("type") or "")
    modifier = str(maneuver.get("modifier") or "")
    name = str(step.get("name") or "")
    on_name = f" on {name}" if name else ""

    if kind == "depart":
        return f"Start walking on {name}" if name else "Start walking"
    if kind == "arrive":
        return "You have arrived at your destination"
    if kind == "turn":
        return f"Turn {modifier}{on_name}".strip()
    if kind == "continue":
        return f"Continue straight{on_name}"
    if kind == "new name":
        return f"Continue onto {name}" if name else "Continue straight"
    if kind == "merge":
        return f"Merge {modifier}".strip()
    if kind == "fork":
        return f"Take the {modifier or 'ahead'} path"
    if kind == "roundabout":
        return "Go around the roundabout"
    if kind == "exit roundabout":
        return "Exit the roundabout"
    if kind == "end of road":
        return f"At the end, turn {modifier or 'ahead'}"
    return f"{kind} {modifier}".strip() or "Continue"


def _validate_osrm_geometry(route: dict[str, Any]) -> list[Coordinate]:
    geom = route.get("geometry")
    if not isinstance(geom, dict):
        raise OSRMResponseError("OSRM route missing geometry")

    coords = geom.get("coordinates")
    if not isinstance(coords, list) or len(coords) < 2:
        raise OSRMResponseError("OSRM geometry missing coordinates")

    out: list[Coordinate] = []
    for pt in coords:
        if (
            isinstance(pt, (list, tuple))
            and len(pt) == 2
            and isinstance(pt[0], (int, float))
            and isinstance(pt[1], (int, float))
        ):
            out.append((float(pt[0]), float(pt[1])))
    if len(out) < 2:
        raise OSRMResponseError("OSRM geometry invalid")
    return out


def _parse_osrm_step(step: dict[str, Any]) -> ExternalStep:
    maneuver = step.get("maneuver") or {}
    instruction = str(maneuver.get("instruction") or "").strip() or format_pedestrian_maneuver(step)
    return ExternalStep(
        instruction=instruction,
        distance_m=float(step.get("distance", 0.0)),
        duration_s=float(step.get("duration", 0.0)),
        maneuver=str(maneuver.get("type") or ""),
    )


def parse_osrm_route(route: dict[str, Any]) -> ExternalRoute:
    if not isinstance(route, dict):
        raise OSRMResponseError(f"OSRM route is {type(route).__name__}, expected object")
    coordinates = _validate_osrm_geometry(route)
    try:
        steps = [
            _parse_osrm_step(step)
            for leg in route.get("legs") or []
            for step in (leg or {}).get("steps") or []
        ]
    except (AttributeError, TypeError, ValueError) as e:
        raise OSRMResponseError(f"OSRM route has malformed steps: {e}") from e
    try:
        distance_m = float(route["distance"])
        duration_s = float(route["duration"])
    except (KeyError, TypeError, ValueError) as e:
        raise OSRMResponseError("OSRM route missing distance/duration") from e
    return ExternalRoute(
        coordinates=coordinates,
        distance_m=distance_m,
        duration_s=duration_s,
        steps=steps,
    )


class OSRMClient:
    """Street-level router backed by OSRM HTTP instances, one per travel mode."""

    def __init__(
        self,
        *,
        base_urls: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        max_retries: int | None = None,
    ) -> None:
        self.base_urls = {
            profile: url.rstrip("/")
            for profile, url in (
                base_urls
                or {
                    "walk": settings.osrm_base_url_for("walk"),
                    "bike": settings.osrm_base_url_for("bike"),
                }
            ).items()
        }
        self.max_retries = max(1, int(max_retries if max_retries is not None else settings.osrm_max_retries))
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.osrm_timeout_s, connect=settings.osrm_connect_timeout_s),
            headers={"accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def route_url(self, *, origin: Coordinate, destination: Coordinate, profile: str) -> str:
        try:
            base_url = self.base_urls[profile]
            osrm_profile = _OSRM_PROFILES[profile]
        except KeyError:
            raise OSRMError(f"unsupported OSRM profile {profile!r}") from None
        coords = f"{origin[0]},{origin[1]};{destination[0]},{destination[1]}"
        return f"{base_url}/route/v1/{osrm_profile}/{coords}"

    async def fetch_route(
        self,
        *,
        origin: Coordinate,
        destination: Coordinate,
        profile: str,
    ) -> ExternalRoute | None:
        """Fetch the best OSRM route, or None when OSRM finds nothing routable."""
        url = self.route_url(origin=origin, destination=destination, profile=profile)
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "true",
        }
        last_err: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                resp = await self._client.get(url, params=params)

                if resp.status_code in _RETRYABLE_STATUS:
                    raise OSRMRetryableError(_format_osrm_error(resp))

                if 400 <= resp.status_code < 500:
                    # OSRM answers NoRoute with a 400 on some builds.
                    try:
                        code = resp.json().get("code")
                    except (ValueError, AttributeError):
                        code = None
                    if code in _NO_ROUTE_CODES:
                        return None
                    raise OSRMError(_format_osrm_error(resp))

                resp.raise_for_status()
                try:
                    data = resp.json()
                except ValueError as e:
                    raise OSRMResponseError("OSRM returned a non-JSON body") from e
                if not isinstance(data, dict):
                    raise OSRMResponseError(f"OSRM returned {type(data).__name__}, expected object")

                code = data.get("code")
                if code in _NO_ROUTE_CODES:
                    return None
                if code != "Ok":
                    raise OSRMError(f"OSRM error code={code} message={data.get('message')}")

                routes = data.get("routes", [])
                if not isinstance(routes, list) or not routes:
                    return None
                return parse_osrm_route(routes[0])

            except OSRMRetryableError as e:
                last_err = e
            except (httpx.TimeoutException, httpx.NetworkError, httpx.TransportError) as e:
                last_err = e
            except httpx.HTTPStatusError as e:
                raise OSRMError(str(e)) from e

            if attempt < self.max_retries - 1:
                await asyncio.sleep(min(0.25 * (2**attempt), 2.0))

        # httpx exceptions can stringify to "" (e.g. some timeouts), so include the type.
        if last_err is None:
            detail = "unknown error"
        else:
            msg = str(last_err).strip()
            detail = f"{type(last_err).__name__}: {msg}" if msg else f"{type(last_err).__name__}: {last_err!r}"
        raise OSRMError(f"OSRM request failed after {self.max_retries} attempts ({url}): {detail}")
