from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_out_dir() -> str:
    # Keep runtime artifacts (logs) in backend/out by default.
    return str(Path(__file__).resolve().parents[1] / "out")


class Settings(BaseSettings):
    """Validated settings (env-driven), keeping config out of code for easy extension."""

    model_config = SettingsConfigDict(
        # Support both "repo root/.env" and "backend/.env" (local dev)
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Public OSRM instances run one profile per host prefix.
    osrm_walk_base_url: str = Field(
        default="https://routing.openstreetmap.de/routed-foot",
        alias="OSRM_WALK_BASE_URL",
    )
    osrm_bike_base_url: str = Field(
        default="https://routing.openstreetmap.de/routed-bike",
        alias="OSRM_BIKE_BASE_URL",
    )
    osrm_timeout_s: float = Field(default=15.0, ge=1.0, le=120.0, alias="OSRM_TIMEOUT_S")
    osrm_connect_timeout_s: float = Field(default=5.0, ge=0.5, le=60.0, alias="OSRM_CONNECT_TIMEOUT_S")
    osrm_max_retries: int = Field(default=3, ge=1, le=10, alias="OSRM_MAX_RETRIES")

    # Upper bound for a single delegated street route, retries included.
    external_route_timeout_s: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        alias="EXTERNAL_ROUTE_TIMEOUT_S",
    )

    campus_snap_radius_m: float = Field(default=200.0, ge=0.0, alias="CAMPUS_SNAP_RADIUS_M")
    campus_stitch_threshold_m: float = Field(default=10.0, ge=0.0, alias="CAMPUS_STITCH_THRESHOLD_M")

    out_dir: str = Field(default_factory=_default_out_dir, alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    @model_validator(mode="after")
    def _normalize(self) -> "Settings":
        self.osrm_walk_base_url = self.osrm_walk_base_url.rstrip("/")
        self.osrm_bike_base_url = self.osrm_bike_base_url.rstrip("/")
        self.log_level = (self.log_level or "INFO").strip().upper()
        return self

    def osrm_base_url_for(self, profile: str) -> str:
        if profile == "bike":
            return self.osrm_bike_base_url
        return self.osrm_walk_base_url


settings = Settings()
