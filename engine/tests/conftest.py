"""Shared test fixtures for firefront engine tests."""

import pytest

from firefront.spread.session import FireSession
from firefront.types import (
    AnimationConfig,
    EnvironmentalSample,
    FuelDensity,
    GeoPoint,
    LandCover,
)


@pytest.fixture
def neutral_sample():
    """Conditions under which every modifier evaluates to 1.0."""
    return EnvironmentalSample(
        temperature=20.0,
        wind_speed=0.0,
        wind_direction=0.0,
        humidity=0.0,
        precipitation=0.0,
        slope=0.0,
        fuel_density=FuelDensity.SPARSE,
        land_cover=LandCover.OTHER,
    )


@pytest.fixture
def windy_sample():
    """Hot, dry, windy afternoon over forested terrain."""
    return EnvironmentalSample(
        temperature=32.0,
        wind_speed=8.0,
        wind_direction=45.0,
        humidity=25.0,
        precipitation=0.0,
        slope=12.0,
        fuel_density=FuelDensity.DENSE,
        land_cover=LandCover.FOREST,
    )


@pytest.fixture
def ignition():
    return GeoPoint(lat=34.05, lng=-118.25)


@pytest.fixture
def short_config():
    """Five one-minute steps."""
    return AnimationConfig(total_sim_minutes=5.0, step_minutes=1.0, poll_interval_s=0.01)


@pytest.fixture
def session(short_config, ignition):
    s = FireSession(short_config)
    s.set_ignition(ignition)
    return s
