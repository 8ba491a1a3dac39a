"""Scenario radius model.

Each scenario scales the same effective spread rate:

    radius(s, t) = t * rate * multiplier(s)

so for a fixed rate best <= neutral <= worst at every time index.
"""

from __future__ import annotations

from firefront.geodesy import Projector, distance_to_screen_units
from firefront.spread.boundary import generate_boundary, polygon_area
from firefront.types import (
    AnimationConfig,
    GeoPoint,
    Scenario,
    ScenarioFront,
    SpreadParameters,
)


def scenario_radius(
    scenario: Scenario,
    time_index: int,
    rate: float,
    config: AnimationConfig | None = None,
) -> float:
    """Radius (m) of a scenario front after ``time_index`` steps."""
    multiplier = config.multiplier(scenario) if config else scenario.multiplier
    return time_index * rate * multiplier


def scenario_radii(
    time_index: int, rate: float, config: AnimationConfig | None = None
) -> dict[Scenario, float]:
    """Radii of all scenarios, ordered best -> worst."""
    return {s: scenario_radius(s, time_index, rate, config) for s in Scenario}


def build_fronts(
    time_index: int,
    parameters: SpreadParameters,
    config: AnimationConfig,
    ignition: GeoPoint | None = None,
    projector: Projector | None = None,
) -> list[ScenarioFront]:
    """Generate the three scenario boundaries for one time index.

    Radii are converted from meters to screen units at the ignition point
    before the boundary is sampled, so ``min_spacing`` is in screen units.
    """
    fronts = []
    for scenario, radius_m in scenario_radii(time_index, parameters.rate, config).items():
        radius_screen = (
            distance_to_screen_units(radius_m, ignition, projector) * config.display_scale
        )
        points = generate_boundary(
            radius_screen,
            parameters.wind_direction,
            parameters.directional_factor,
            min_spacing=config.min_spacing,
            angular_step=config.angular_step,
            elongation_weight=config.elongation_weight,
        )
        fronts.append(
            ScenarioFront(
                scenario=scenario,
                radius_m=radius_m,
                radius_screen=radius_screen,
                points=points,
                area=polygon_area(points),
            )
        )
    return fronts
