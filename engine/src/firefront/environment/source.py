"""Environmental data sources.

The HTTP source combines three public services:

    - WeatherAPI.com current conditions (temperature, wind, humidity, rain)
    - Open-Elevation point lookups (two samples -> slope)
    - Overpass ``landuse`` query around the point (land cover)

Any failed or empty lookup raises EnvironmentFetchError; callers keep
their previous values in that case.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from firefront.environment.model import (
    SLOPE_DELTA_LNG,
    calculate_slope_percent,
    fuel_density_for,
    kph_to_ms,
)
from firefront.errors import EnvironmentFetchError
from firefront.types import EnvironmentalSample, GeoPoint, LandCover

logger = logging.getLogger(__name__)


class EnvironmentSource(Protocol):
    """Anything that can sample conditions at a point."""

    async def fetch(self, point: GeoPoint) -> EnvironmentalSample: ...


@dataclass(frozen=True)
class SourceConfig:
    """Endpoints and credentials for the HTTP environment source.

    ``cors_proxy`` is prepended to the elevation URL when set; some
    deployments route Open-Elevation through a proxy.
    """

    weather_api_key: str = ""
    weather_url: str = "http://api.weatherapi.com/v1/current.json"
    elevation_url: str = "https://api.open-elevation.com/api/v1/lookup"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    cors_proxy: str = ""
    timeout_s: float = 10.0
    land_cover_radius_m: int = 100


class StaticEnvironmentSource:
    """Returns a fixed sample; used offline and for manual overrides."""

    def __init__(self, sample: EnvironmentalSample):
        self.sample = sample

    async def fetch(self, point: GeoPoint) -> EnvironmentalSample:
        return self.sample


class OpenDataEnvironmentSource:
    """Samples weather, slope and land cover over HTTP."""

    def __init__(self, config: SourceConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_s)
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, point: GeoPoint) -> EnvironmentalSample:
        try:
            weather = await self.fetch_weather(point)
            slope, land_cover = await asyncio.gather(
                self.fetch_slope(point), self.fetch_land_cover(point)
            )
        except httpx.HTTPError as e:
            raise EnvironmentFetchError(f"Environmental lookup failed: {e}") from e

        logger.debug(
            "Environment at (%.4f, %.4f): %s, slope %.2f%%, land cover %s",
            point.lat,
            point.lng,
            weather,
            slope,
            land_cover.value,
        )
        return EnvironmentalSample(
            temperature=weather["temperature"],
            wind_speed=weather["wind_speed"],
            wind_direction=weather["wind_direction"],
            humidity=weather["humidity"],
            precipitation=weather["precipitation"],
            slope=slope,
            fuel_density=fuel_density_for(land_cover),
            land_cover=land_cover,
        )

    async def fetch_weather(self, point: GeoPoint) -> dict[str, float]:
        resp = await self.client.get(
            self.config.weather_url,
            params={
                "key": self.config.weather_api_key,
                "q": f"{point.lat},{point.lng}",
                "aqi": "no",
            },
        )
        resp.raise_for_status()
        current = _json(resp).get("current")
        if not current:
            raise EnvironmentFetchError("No weather data available")
        try:
            return {
                "temperature": float(current["temp_c"]),
                "wind_speed": kph_to_ms(float(current["wind_kph"])),
                "wind_direction": float(current["wind_degree"]),
                "humidity": float(current["humidity"]),
                "precipitation": float(current.get("precip_mm") or 0.0),
            }
        except (KeyError, TypeError, ValueError) as e:
            raise EnvironmentFetchError(f"Malformed weather data: {e}") from e

    async def fetch_elevation(self, lat: float, lng: float) -> float:
        url = self.config.cors_proxy + self.config.elevation_url
        resp = await self.client.get(url, params={"locations": f"{lat},{lng}"})
        resp.raise_for_status()
        results = _json(resp).get("results") or []
        if not results:
            raise EnvironmentFetchError("No elevation data found")
        try:
            return float(results[0]["elevation"])
        except (KeyError, TypeError, ValueError) as e:
            raise EnvironmentFetchError(f"Malformed elevation data: {e}") from e

    async def fetch_slope(self, point: GeoPoint) -> float:
        elev_a, elev_b = await asyncio.gather(
            self.fetch_elevation(point.lat, point.lng),
            self.fetch_elevation(point.lat, point.lng + SLOPE_DELTA_LNG),
        )
        return calculate_slope_percent(elev_a, elev_b, point.lat, SLOPE_DELTA_LNG)

    async def fetch_land_cover(self, point: GeoPoint) -> LandCover:
        radius = self.config.land_cover_radius_m
        around = f"around:{radius},{point.lat},{point.lng}"
        query = (
            f"[out:json];(node({around})[landuse];"
            f"way({around})[landuse];"
            f"relation({around})[landuse];);out center;"
        )
        resp = await self.client.post(self.config.overpass_url, content=query)
        resp.raise_for_status()
        elements = _json(resp).get("elements") or []
        if elements:
            tags = elements[0].get("tags") or {}
            return LandCover.from_tag(tags.get("landuse"))
        return LandCover.OTHER


def _json(resp: httpx.Response) -> dict[str, Any]:
    try:
        data = resp.json()
    except ValueError as e:
        raise EnvironmentFetchError(f"Invalid JSON from {resp.url}") from e
    if not isinstance(data, dict):
        raise EnvironmentFetchError(f"Unexpected payload from {resp.url}")
    return data
