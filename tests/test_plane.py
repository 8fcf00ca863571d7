"""Unit tests for plane intersection.

Tests cover:
- Normal normalization and validation
- Hits from either side
- Parallel rays and planes behind the ray
"""

import numpy as np
import pytest

from pathtracer.core.ray import make_ray, vec3
from pathtracer.geometry.plane import Plane, hit_plane
from pathtracer.materials.material import Material


def floor():
    return Plane(point=(0.0, 0.0, 0.0), normal=(0.0, 0.0, 2.0), material=Material())


class TestPlaneBasics:
    """Tests for the Plane dataclass."""

    def test_normal_is_normalized(self):
        """Test the normal is stored with unit length."""
        assert np.allclose(floor().normal, (0.0, 0.0, 1.0))

    def test_zero_normal_rejected(self):
        """Test a zero normal raises ValueError."""
        with pytest.raises(ValueError, match="non-zero"):
            Plane(point=(0, 0, 0), normal=(0, 0, 0), material=Material())


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_hit_from_above(self):
        """Test ray falling onto the floor."""
        hit = hit_plane(floor(), make_ray(vec3(1, 2, 5), vec3(0, 0, -1)))
        assert hit is not None
        assert abs(hit.t - 5.0) < 1e-9
        assert np.allclose(hit.point, (1.0, 2.0, 0.0))
        assert np.allclose(hit.normal, (0.0, 0.0, 1.0))

    def test_hit_from_below_keeps_normal(self):
        """Test hits from the back side report the plane normal as given."""
        hit = hit_plane(floor(), make_ray(vec3(0, 0, -3), vec3(0, 0, 1)))
        assert hit is not None
        assert abs(hit.t - 3.0) < 1e-9
        assert np.allclose(hit.normal, (0.0, 0.0, 1.0))

    def test_parallel_ray_misses(self):
        """Test rays parallel to the plane never hit."""
        assert hit_plane(floor(), make_ray(vec3(0, 0, 1), vec3(1, 0, 0))) is None

    def test_plane_behind_ray(self):
        """Test planes behind the origin are not hit."""
        assert hit_plane(floor(), make_ray(vec3(0, 0, 1), vec3(0, 0, 1))) is None

    def test_origin_on_plane(self):
        """Test a ray starting on the plane does not hit it."""
        assert hit_plane(floor(), make_ray(vec3(0, 0, 0), vec3(0, 1, -1))) is None
