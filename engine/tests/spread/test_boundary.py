"""Tests for fire-front boundary geometry."""

import math

import pytest

from firefront.spread.boundary import (
    close_ring,
    directional_radius,
    generate_boundary,
    polygon_area,
)


def _consecutive_distances(points):
    return [
        math.hypot(points[i + 1][0] - points[i][0], points[i + 1][1] - points[i][1])
        for i in range(len(points) - 1)
    ]


class TestDirectionalRadius:
    """Test the polar radius kernel."""

    def test_no_elongation_is_constant(self):
        for theta in (0.0, 1.0, 3.0, 5.5):
            assert directional_radius(theta, 40.0, 0.0, 1.2) == pytest.approx(40.0)

    def test_maximum_toward_wind(self):
        """Radius peaks in the wind direction and bottoms out opposite it."""
        wind = math.radians(90.0)
        head = directional_radius(wind, 10.0, 0.5, wind)
        back = directional_radius(wind + math.pi, 10.0, 0.5, wind)
        assert head == pytest.approx(15.0)
        assert back == pytest.approx(5.0)


class TestGenerateBoundary:
    """Test polar boundary sampling."""

    def test_zero_radius_degenerate(self):
        """Zero radius yields a non-empty set of points at the origin."""
        for wind, factor in [(0.0, 1.0), (135.0, 2.5), (300.0, 0.0)]:
            pts = generate_boundary(0.0, wind, factor)
            assert len(pts) >= 1
            for x, y in pts:
                assert abs(x) < 1e-12
                assert abs(y) < 1e-12

    def test_zero_radius_zero_spacing_keeps_all_samples(self):
        pts = generate_boundary(0.0, 0.0, 1.0, min_spacing=0.0)
        assert len(pts) == 629

    def test_full_turn_sample_count(self):
        """0.01 rad steps over [0, 2π] give 629 samples."""
        pts = generate_boundary(100.0, 0.0, 1.0, min_spacing=0.0)
        assert len(pts) == 629

    @pytest.mark.parametrize(
        "radius,wind,factor,spacing",
        [
            (100.0, 0.0, 1.0, 3.0),
            (250.0, 45.0, 1.8, 3.0),
            (40.0, 200.0, 2.7, 5.0),
            (12.0, 310.0, 1.1, 1.0),
        ],
    )
    def test_minimum_spacing(self, radius, wind, factor, spacing):
        """Consecutive accepted points are at least min_spacing apart."""
        pts = generate_boundary(radius, wind, factor, min_spacing=spacing)
        assert len(pts) >= 2
        for d in _consecutive_distances(pts):
            assert d >= spacing

    def test_circle_without_wind(self):
        """Directional factor 1 gives a circle of the base radius."""
        pts = generate_boundary(50.0, 123.0, 1.0)
        for x, y in pts:
            assert math.hypot(x, y) == pytest.approx(50.0)

    def test_first_point_at_zero_angle(self):
        pts = generate_boundary(20.0, 0.0, 1.2)
        k = (1.2 - 1.0) * 1.5
        assert pts[0] == pytest.approx((20.0 * (1 + k), 0.0))

    def test_elongated_toward_wind(self):
        """The farthest point lies in the wind direction (90° = +y)."""
        pts = generate_boundary(100.0, 90.0, 1.5)
        far = max(pts, key=lambda p: math.hypot(*p))
        assert far[1] > 170.0
        assert abs(far[0]) < 10.0
        assert math.hypot(*far) == pytest.approx(175.0, rel=1e-3)

    def test_larger_radius_more_points(self):
        small = generate_boundary(20.0, 0.0, 1.0)
        large = generate_boundary(200.0, 0.0, 1.0)
        assert len(large) > len(small)

    def test_zero_directional_factor_does_not_raise(self):
        pts = generate_boundary(30.0, 0.0, 0.0)
        assert len(pts) >= 1

    def test_pure_function(self):
        a = generate_boundary(80.0, 30.0, 1.4)
        b = generate_boundary(80.0, 30.0, 1.4)
        assert a == b

    def test_custom_elongation_weight(self):
        pts = generate_boundary(10.0, 0.0, 2.0, elongation_weight=1.0, min_spacing=0.0)
        assert pts[0] == pytest.approx((20.0, 0.0))

    def test_invalid_angular_step(self):
        with pytest.raises(ValueError):
            generate_boundary(10.0, 0.0, 1.0, angular_step=0.0)


class TestPolygonHelpers:
    """Test ring closing and area."""

    def test_close_ring_appends_first(self):
        ring = close_ring([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)])
        assert ring[0] == ring[-1]
        assert len(ring) == 4

    def test_close_ring_already_closed(self):
        ring = close_ring([(0.0, 0.0), (1.0, 0.0), (0.0, 0.0)])
        assert len(ring) == 3

    def test_close_ring_empty(self):
        assert close_ring([]) == []

    def test_circle_area(self):
        pts = generate_boundary(100.0, 0.0, 1.0)
        assert polygon_area(pts) == pytest.approx(math.pi * 100.0**2, rel=0.01)

    def test_degenerate_area_zero(self):
        assert polygon_area(generate_boundary(0.0, 0.0, 1.0)) == 0.0
        assert polygon_area([(0.0, 0.0), (1.0, 1.0)]) == 0.0

    def test_area_independent_of_orientation(self):
        square = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)]
        assert polygon_area(square) == polygon_area(list(reversed(square))) == 4.0
