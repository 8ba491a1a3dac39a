"""Geodesy helpers: meter/pixel conversion and great-circle distance.

Distances on the drawing surface are derived with a local flat-earth
approximation around the ignition point. That is accurate enough at the
city scale the fire fronts cover and keeps the projector the only
collaborator that knows about map zoom.
"""

from __future__ import annotations

import math
from typing import Protocol, Sequence

from numba import jit

from firefront.types import GeoPoint, ScreenPoint

EARTH_RADIUS_M = 6371000.0
EARTH_CIRCUMFERENCE_M = 40075000.0
TILE_SIZE = 256


class Projector(Protocol):
    """Maps geographic coordinates onto the drawing surface."""

    def project(self, point: GeoPoint) -> ScreenPoint: ...


def meters_per_degree_lng(lat: float) -> float:
    """Meters spanned by one degree of longitude at ``lat``."""
    return EARTH_CIRCUMFERENCE_M * math.cos(math.radians(lat)) / 360.0


def meters_per_degree_lat() -> float:
    return EARTH_CIRCUMFERENCE_M / 360.0


def distance_to_screen_units(
    distance_m: float,
    reference: GeoPoint | None,
    projector: Projector | None,
) -> float:
    """Convert a ground distance into screen units at ``reference``.

    The reference is shifted east by ``distance_m``; both points are
    projected and the horizontal delta is returned.

    Args:
        distance_m: Ground distance (meters)
        reference: Point the conversion is anchored on (the ignition point)
        projector: Map projection in use

    Returns:
        Distance in screen units. Without a reference or projector the
        input is returned unchanged (meters are treated as pixels).
    """
    if reference is None or projector is None:
        return distance_m
    offset_lng = reference.lng + distance_m / meters_per_degree_lng(reference.lat)
    p1 = projector.project(reference)
    p2 = projector.project(GeoPoint(lat=reference.lat, lng=offset_lng))
    return abs(p2.x - p1.x)


@jit(nopython=True, cache=True)
def _haversine(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlng / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def great_circle_distance(p1: GeoPoint, p2: GeoPoint) -> float:
    """Haversine distance between two points (meters)."""
    return _haversine(p1.lat, p1.lng, p2.lat, p2.lng)


class WebMercatorProjector:
    """Slippy-map (EPSG:3857) projection at a fixed zoom level.

    Produces the same pixel coordinates as tiled web maps. ``origin`` is
    the world-pixel position of the container's top-left corner; leave it
    at (0, 0) to get world pixels.
    """

    def __init__(
        self,
        zoom: float,
        origin: ScreenPoint | None = None,
        tile_size: int = TILE_SIZE,
    ):
        self.zoom = zoom
        self.origin = origin or ScreenPoint(0.0, 0.0)
        self.tile_size = tile_size

    @property
    def world_size(self) -> float:
        return self.tile_size * 2.0**self.zoom

    def project(self, point: GeoPoint) -> ScreenPoint:
        lat = max(-85.05112878, min(85.05112878, point.lat))
        sin_lat = math.sin(math.radians(lat))
        x = (point.lng + 180.0) / 360.0
        y = 0.5 - math.log((1.0 + sin_lat) / (1.0 - sin_lat)) / (4.0 * math.pi)
        size = self.world_size
        return ScreenPoint(x * size - self.origin.x, y * size - self.origin.y)

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        size = self.world_size
        x = (point.x + self.origin.x) / size
        y = (point.y + self.origin.y) / size
        lng = x * 360.0 - 180.0
        lat = math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * y))))
        return GeoPoint(lat=lat, lng=lng)


def offsets_to_geo(
    points: Sequence[tuple[float, float]],
    ignition: GeoPoint,
    projector: WebMercatorProjector | None = None,
) -> list[GeoPoint]:
    """Convert boundary offsets (relative to the ignition) to coordinates.

    With a projector the offsets are screen units around the projected
    ignition point. Without one they are meters (x east, y south), which
    matches the meters-as-pixels fallback of ``distance_to_screen_units``.
    """
    if projector is not None:
        center = projector.project(ignition)
        return [
            projector.unproject(ScreenPoint(center.x + x, center.y + y))
            for x, y in points
        ]

    m_lat = meters_per_degree_lat()
    m_lng = meters_per_degree_lng(ignition.lat)
    return [
        GeoPoint(lat=ignition.lat - y / m_lat, lng=ignition.lng + x / m_lng)
        for x, y in points
    ]
