"""Pydantic models for session endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from firefront.types import SimulationState


class IgnitionParams(BaseModel):
    """Ignition point picked on the map."""

    lat: float = Field(..., ge=-90, le=90, description="Ignition latitude")
    lng: float = Field(..., ge=-180, le=180, description="Ignition longitude")


class EnvironmentParams(BaseModel):
    """Manually supplied environmental conditions."""

    temperature: float = Field(default=20.0, ge=-60, le=60, description="Temperature in Celsius")
    wind_speed: float = Field(default=0.0, ge=0, le=100, description="Wind speed in m/s")
    wind_direction: float = Field(
        default=0.0, ge=0, lt=360, description="Wind direction (degrees, 0 = East, clockwise)"
    )
    humidity: float = Field(default=0.0, ge=0, le=100, description="Relative humidity (%)")
    precipitation: float = Field(default=0.0, ge=0, description="Precipitation (mm)")
    slope: float = Field(default=0.0, ge=0, description="Terrain slope (%)")
    land_cover: str = Field(default="other", description="OpenStreetMap landuse tag")


class SessionCreate(BaseModel):
    """Request body for creating a session."""

    ignition: IgnitionParams | None = None
    zoom: float | None = Field(
        default=None, ge=0, le=22, description="Map zoom; omit to draw in meters"
    )
    total_sim_minutes: float | None = Field(default=None, gt=0, le=1440)
    step_minutes: float | None = Field(default=None, gt=0, le=60)
    min_spacing: float | None = Field(default=None, ge=0)


class StartRequest(BaseModel):
    """Request body for starting an animation."""

    run_seconds: float | None = Field(
        default=None, ge=0, le=600, description="Wall-clock length of the animation"
    )


class ParametersSchema(BaseModel):
    rate: float
    wind_direction: float
    directional_factor: float


class FrontSchema(BaseModel):
    """One scenario boundary."""

    scenario: str
    color: str
    fill: str
    radius_m: float
    radius_screen: float
    area: float
    points: list[list[float]]  # [[x, y], ...] offsets from the ignition point


class FrameSchema(BaseModel):
    """All scenario fronts at one time index."""

    time_index: int
    simulated_minutes: float
    parameters: ParametersSchema
    fronts: list[FrontSchema]
    geojson: dict | None = None


class SessionResponse(BaseModel):
    """Session status."""

    session_id: str
    state: SimulationState
    ignition: IgnitionParams | None = None
    parameters: ParametersSchema
    reasoning: str | None = None
    time_index: int
    step_count: int
    latest_frame: FrameSchema | None = None
    subscribers: int = 0
