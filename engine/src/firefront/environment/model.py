"""Environmental-to-rate model.

Maps a single environmental sample onto an effective spread rate
(meters per simulated step) with a fixed chain of multiplicative
modifiers, and derives the wind-driven elongation of the fire front.

    rate = base * wind * temperature * slope * fuel
                * humidity * precipitation * land_cover

The model is deliberately simple; it is a visual aid, not a fire
behaviour predictor. The final rate carries no floor or ceiling. The
temperature modifier is the only factor that can reach zero, so it is
floored to keep the rate positive.
"""

from __future__ import annotations

import math

from firefront.geodesy import meters_per_degree_lng
from firefront.types import (
    EnvironmentalSample,
    FuelDensity,
    LandCover,
    SpreadParameters,
)

BASE_SPREAD_RATE = 1.0  # m per step
MIN_TEMPERATURE_MODIFIER = 0.05
SLOPE_DELTA_LNG = 0.001  # degrees between the two elevation samples


def wind_modifier(wind_speed: float) -> float:
    """exp(0.05 * ws), wind speed in m/s."""
    return math.exp(0.05 * wind_speed)


def temperature_modifier(temperature: float) -> float:
    """1 + 5% per degree above 20°C, floored at MIN_TEMPERATURE_MODIFIER."""
    return max(MIN_TEMPERATURE_MODIFIER, 1.0 + (temperature - 20.0) * 0.05)


def humidity_modifier(humidity: float) -> float:
    """Linear reduction down to 0.5 at saturation."""
    h = max(0.0, min(100.0, humidity))
    return 1.0 - (h / 100.0) * 0.5


def precipitation_modifier(precipitation: float) -> float:
    """20% reduction per mm of rain, capped at a 50% reduction."""
    return 1.0 - min(0.5, max(0.0, precipitation) * 0.2)


def slope_modifier(slope: float) -> float:
    """exp(slope / 100), slope in percent."""
    return math.exp(1.0 * (slope / 100.0))


def fuel_modifier(fuel_density: FuelDensity) -> float:
    return 1.2 if fuel_density == FuelDensity.DENSE else 1.0


def land_cover_modifier(land_cover: LandCover) -> float:
    if land_cover == LandCover.FOREST:
        return 1.2
    if land_cover in (LandCover.URBAN, LandCover.RESIDENTIAL):
        return 0.8
    return 1.0


def fuel_density_for(land_cover: LandCover) -> FuelDensity:
    """Forested land is treated as dense fuel, everything else as sparse."""
    if land_cover in (LandCover.FOREST, LandCover.WOOD):
        return FuelDensity.DENSE
    return FuelDensity.SPARSE


def calculate_spread_rate(
    sample: EnvironmentalSample, base_rate: float = BASE_SPREAD_RATE
) -> float:
    """Calculate the effective spread rate for a sample.

    Args:
        sample: Environmental conditions at the ignition point
        base_rate: Rate under neutral conditions (m per step)

    Returns:
        Effective spread rate (m per step), always > 0 for finite input.
    """
    return (
        base_rate
        * wind_modifier(sample.wind_speed)
        * temperature_modifier(sample.temperature)
        * slope_modifier(sample.slope)
        * fuel_modifier(sample.fuel_density)
        * humidity_modifier(sample.humidity)
        * precipitation_modifier(sample.precipitation)
        * land_cover_modifier(sample.land_cover)
    )


def calculate_directional_factor(wind_speed: float) -> float:
    """Elongation of the fire front toward the wind: exp(0.1 * ws).

    Equal to 1.0 (circular front) in calm air.
    """
    return math.exp(0.1 * max(0.0, wind_speed))


def calculate_spread_parameters(
    sample: EnvironmentalSample, base_rate: float = BASE_SPREAD_RATE
) -> SpreadParameters:
    """Derive the full parameter set the animator samples each tick."""
    return SpreadParameters(
        rate=calculate_spread_rate(sample, base_rate),
        wind_direction=sample.wind_direction,
        directional_factor=calculate_directional_factor(sample.wind_speed),
    )


def calculate_slope_percent(
    elevation_a: float,
    elevation_b: float,
    lat: float,
    delta_lng: float = SLOPE_DELTA_LNG,
) -> float:
    """Absolute slope (%) between two elevations ``delta_lng`` degrees apart.

    Args:
        elevation_a: Elevation at the ignition point (m)
        elevation_b: Elevation ``delta_lng`` degrees east of it (m)
        lat: Latitude of the ignition point
        delta_lng: Longitude separation of the samples (degrees)

    Returns:
        Slope magnitude in percent
    """
    horizontal_m = delta_lng * meters_per_degree_lng(lat)
    if horizontal_m == 0.0:
        return 0.0
    return abs((elevation_b - elevation_a) / horizontal_m) * 100.0


def kph_to_ms(speed_kph: float) -> float:
    return speed_kph / 3.6
