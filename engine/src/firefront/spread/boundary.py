"""Fire-front boundary geometry.

The fire front is a polar curve around the ignition point whose radius
is stretched toward the wind:

    k    = (directional_factor - 1) * elongation_weight
    r(θ) = base_radius * (1 + k * cos(θ - wind))

With no wind (factor 1) the front is a circle; as the factor grows it
becomes a cardioid-like lobe pointing downwind. The curve is sampled at
a fixed angular step and thinned greedily so that consecutive accepted
points are never closer than ``min_spacing``.
"""

from __future__ import annotations

import math

from numba import jit

DEFAULT_MIN_SPACING = 3.0
DEFAULT_ANGULAR_STEP = 0.01
DEFAULT_ELONGATION_WEIGHT = 1.5


@jit(nopython=True, cache=True)
def directional_radius(
    theta: float, base_radius: float, k: float, wind_rad: float
) -> float:
    """Radius of the fire front at polar angle ``theta`` (radians)."""
    return base_radius * (1.0 + k * math.cos(theta - wind_rad))


def generate_boundary(
    base_radius: float,
    wind_direction: float,
    directional_factor: float,
    min_spacing: float = DEFAULT_MIN_SPACING,
    angular_step: float = DEFAULT_ANGULAR_STEP,
    elongation_weight: float = DEFAULT_ELONGATION_WEIGHT,
) -> list[tuple[float, float]]:
    """Generate the closed fire-front polygon around the ignition point.

    Args:
        base_radius: Unstretched front radius (screen units)
        wind_direction: Direction the front is pushed toward (degrees,
            0 = +x axis, increasing toward +y)
        directional_factor: Elongation factor (1.0 = circular)
        min_spacing: Minimum distance between consecutive accepted points
        angular_step: Sampling step over θ (radians)
        elongation_weight: Scale applied to (directional_factor - 1)

    Returns:
        Ordered (x, y) offsets from the ignition point. The ring is
        implicitly closed (last point connects back to the first) and
        always holds at least one point.
    """
    if angular_step <= 0.0:
        raise ValueError("angular_step must be positive")

    wind_rad = math.radians(wind_direction)
    k = (directional_factor - 1.0) * elongation_weight
    samples = int(2.0 * math.pi / angular_step) + 1

    points: list[tuple[float, float]] = []
    last_x = last_y = 0.0
    for i in range(samples):
        theta = i * angular_step
        r = directional_radius(theta, base_radius, k, wind_rad)
        x = r * math.cos(theta)
        y = r * math.sin(theta)
        if not points or math.hypot(x - last_x, y - last_y) >= min_spacing:
            points.append((x, y))
            last_x, last_y = x, y

    return points


def close_ring(points: list) -> list:
    """Return a copy of ``points`` whose last vertex repeats the first."""
    if not points:
        return []
    ring = list(points)
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def polygon_area(points: list[tuple[float, float]]) -> float:
    """Unsigned polygon area using the Shoelace formula."""
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        xi, yi = points[i]
        xj, yj = points[(i + 1) % n]
        area += xi * yj - xj * yi
    return abs(area) / 2.0
