"""Shared dataclasses and type definitions for firefront."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FuelDensity(str, Enum):
    """Fuel load class at the ignition point."""

    DENSE = "dense"
    SPARSE = "sparse"


class LandCover(str, Enum):
    """Land-cover class derived from the OpenStreetMap ``landuse`` tag."""

    FOREST = "forest"
    WOOD = "wood"
    URBAN = "urban"
    RESIDENTIAL = "residential"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str | None) -> LandCover:
        """Map a raw ``landuse`` tag to a land-cover class (unknown -> OTHER)."""
        if not tag:
            return cls.OTHER
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.OTHER


class Scenario(str, Enum):
    """Risk scenario applied uniformly to the effective spread rate."""

    BEST = "best"
    NEUTRAL = "neutral"
    WORST = "worst"

    @property
    def multiplier(self) -> float:
        return _SCENARIO_MULTIPLIERS[self]

    @property
    def color(self) -> str:
        return _SCENARIO_STYLES[self][0]

    @property
    def fill(self) -> str:
        return _SCENARIO_STYLES[self][1]


_SCENARIO_MULTIPLIERS = {
    Scenario.BEST: 0.8,
    Scenario.NEUTRAL: 1.0,
    Scenario.WORST: 1.2,
}

_SCENARIO_STYLES = {
    Scenario.BEST: ("green", "rgba(0,255,0,0.3)"),
    Scenario.NEUTRAL: ("yellow", "rgba(255,255,0,0.3)"),
    Scenario.WORST: ("orange", "rgba(255,165,0,0.3)"),
}


class SimulationState(str, Enum):
    """Animator lifecycle state."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"


@dataclass(frozen=True)
class GeoPoint:
    """Geographic coordinate in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class ScreenPoint:
    """Point on the drawing surface (pixels, y grows downwards)."""

    x: float
    y: float


@dataclass(frozen=True)
class EnvironmentalSample:
    """Conditions captured at the ignition point by one environmental fetch."""

    temperature: float  # Celsius
    wind_speed: float  # m/s
    wind_direction: float  # degrees, 0 = East, clockwise on screen
    humidity: float  # percent (0-100)
    precipitation: float  # mm
    slope: float  # percent
    fuel_density: FuelDensity = FuelDensity.SPARSE
    land_cover: LandCover = LandCover.OTHER

    def describe(self) -> str:
        """Human-readable summary of the sample used to explain the rate."""
        return (
            f"Temp {self.temperature}°C, Wind {self.wind_speed:.2f} m/s "
            f"(Dir: {self.wind_direction}°), Humidity {self.humidity}%, "
            f"Precip {self.precipitation} mm, Slope {self.slope:.2f}%, "
            f"Fuel: {self.fuel_density.value}, Land Cover: {self.land_cover.value}."
        )


@dataclass(frozen=True)
class SpreadParameters:
    """Scalars shared between the environment refresher and the animator.

    Replaced as a whole whenever a fetch completes.
    """

    rate: float = 1.0  # distance units (m) per simulated step
    wind_direction: float = 0.0  # degrees
    directional_factor: float = 1.0  # >= 1, elongation toward the wind


@dataclass(frozen=True)
class ScenarioFront:
    """Boundary polygon of one scenario at one time index."""

    scenario: Scenario
    radius_m: float
    radius_screen: float
    points: list[tuple[float, float]]  # offsets from the ignition point
    area: float  # screen units squared


@dataclass(frozen=True)
class SpreadFrame:
    """All three scenario fronts at a single time index."""

    time_index: int
    simulated_minutes: float
    parameters: SpreadParameters
    fronts: list[ScenarioFront] = field(default_factory=list)

    def front(self, scenario: Scenario) -> ScenarioFront:
        for f in self.fronts:
            if f.scenario == scenario:
                return f
        raise KeyError(scenario)


@dataclass(frozen=True)
class AnimationConfig:
    """Tunable constants of the spread model and its scheduler."""

    total_sim_minutes: float = 30.0
    step_minutes: float = 1.0
    min_spacing: float = 3.0
    angular_step: float = 0.01  # radians
    elongation_weight: float = 1.5
    multipliers: tuple[float, float, float] = (0.8, 1.0, 1.2)
    display_scale: float = 1.0
    poll_interval_s: float = 1.0
    default_run_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.total_sim_minutes <= 0 or self.step_minutes <= 0:
            raise ValueError("Simulated durations must be positive")
        if self.total_sim_minutes < self.step_minutes:
            raise ValueError("Total simulated time is shorter than one step")
        if self.angular_step <= 0:
            raise ValueError("angular_step must be positive")
        if self.min_spacing < 0:
            raise ValueError("min_spacing must be non-negative")
        best, neutral, worst = self.multipliers
        if not 0 < best <= neutral <= worst:
            raise ValueError("Scenario multipliers must be positive and ordered")

    @property
    def step_count(self) -> int:
        return int(round(self.total_sim_minutes / self.step_minutes))

    def multiplier(self, scenario: Scenario) -> float:
        return self.multipliers[list(Scenario).index(scenario)]
