"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, cross, normalize, length, reflect)
- Componentwise color multiplication
"""

import math

import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from tinypath.core.ray import Ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-12
        assert abs(r[1] - 2.0) < 1e-12
        assert abs(r[2] - 3.0) < 1e-12

    def test_ray_at_positive_t(self):
        """Test ray_at computes the point along the ray."""
        from tinypath.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, -5.0), vec3(0.0, 0.0, 1.0))
            result[None] = ray_at(ray, 4.0)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-12
        assert abs(r[1]) < 1e-12
        assert abs(r[2] - (-1.0)) < 1e-12


class TestVectorUtilities:
    """Tests for vector utility functions."""

    def test_length(self):
        """Test vector length computation."""
        from tinypath.core.ray import length, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = length(vec3(3.0, 4.0, 0.0))

        test_kernel()
        assert abs(result[None] - 5.0) < 1e-12

    def test_normalize_unit_vector_is_noop(self):
        """Test normalizing a unit vector leaves it unchanged."""
        from tinypath.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        s = 1.0 / math.sqrt(3.0)

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(s, s, s))

        test_kernel()
        r = result[None]
        for c in range(3):
            assert abs(r[c] - s) < 1e-6

    def test_normalize_scales_to_unit_length(self):
        """Test normalize output has unit length and keeps the direction."""
        from tinypath.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 3.0, 4.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-12
        assert abs(r[1] - 0.6) < 1e-12
        assert abs(r[2] - 0.8) < 1e-12

    def test_dot_and_cross(self):
        """Test dot and cross products of the axis vectors."""
        from tinypath.core.ray import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f64, shape=())
        cross_result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            x = vec3(1.0, 0.0, 0.0)
            y = vec3(0.0, 1.0, 0.0)
            dot_result[None] = dot(x, y)
            cross_result[None] = cross(x, y)

        test_kernel()
        assert abs(dot_result[None]) < 1e-12
        c = cross_result[None]
        assert abs(c[0]) < 1e-12
        assert abs(c[1]) < 1e-12
        assert abs(c[2] - 1.0) < 1e-12

    def test_mult_color(self):
        """Test componentwise color multiplication."""
        from tinypath.core.ray import mult_color, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = mult_color(vec3(0.5, 2.0, 1.0), vec3(0.2, 0.25, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.1) < 1e-12
        assert abs(r[1] - 0.5) < 1e-12
        assert abs(r[2]) < 1e-12

    def test_reflect_keeps_angle(self):
        """Test the mirror direction makes the same angle with the normal."""
        from tinypath.core.ray import dot, normalize, reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        cosines = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            wo = normalize(vec3(1.0, 1.0, 0.0))
            wi = reflect(wo, n)
            result[None] = wi
            cosines[0] = dot(wo, n)
            cosines[1] = dot(wi, n)

        test_kernel()
        r = result[None]
        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        assert abs(r[0] + inv_sqrt2) < 1e-12
        assert abs(r[1] - inv_sqrt2) < 1e-12
        assert abs(r[2]) < 1e-12
        assert abs(cosines[0] - cosines[1]) < 1e-12
