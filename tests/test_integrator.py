"""Unit tests for the path tracing integrator.

Tests cover:
- Escaping rays and depth truncation
- Emission gathering and closed-form estimates
- Mirror bounces
- Sample sanitizing
- Row-batched rendering and seed reproducibility
"""

import math

import numpy as np
import pytest
import taichi as ti


def _enclosing_light(emission, radius=100.0):
    """Scene with a single emissive sphere around the origin."""
    from tinypath.materials import Emissive
    from tinypath.scene.manager import Scene

    scene = Scene()
    scene.add_sphere((0.0, 0.0, 0.0), radius, Emissive(emission))
    return scene


class TestTraceRay:
    """Tests for single-path estimates."""

    def test_miss_is_black(self):
        """Test a ray that escapes returns zero radiance."""
        from tinypath.core.integrator import trace_ray
        from tinypath.materials import Emissive
        from tinypath.scene.manager import Scene, upload_scene

        scene = Scene()
        scene.add_sphere((0.0, 0.0, 10.0), 1.0, Emissive((5.0, 5.0, 5.0)))
        upload_scene(scene)

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_empty_scene_is_black(self):
        """Test an empty scene returns zero radiance."""
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import Scene, upload_scene

        upload_scene(Scene())
        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0)) == (0.0, 0.0, 0.0)

    def test_depth_zero_returns_emission(self):
        """Test max_depth=0 gathers only the emission of the first hit."""
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import upload_scene

        upload_scene(_enclosing_light((0.3, 2.0, 7.5)))

        result = trace_ray((0.0, 0.0, 0.0), (0.2, -0.4, 1.0), max_depth=0)
        assert result == pytest.approx((0.3, 2.0, 7.5))

    def test_depth_above_max_is_black(self):
        """Test a path starting past max_depth contributes nothing."""
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import upload_scene

        upload_scene(_enclosing_light((1.0, 1.0, 1.0)))

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), max_depth=2, depth=3) == (0.0, 0.0, 0.0)

    def test_start_depth_at_max_gathers_emission_only(self):
        """Test a path starting at max_depth adds one emission and stops."""
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import upload_scene

        upload_scene(_enclosing_light((0.5, 0.5, 0.5)))

        result = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), max_depth=2, depth=2)
        assert result == pytest.approx((0.5, 0.5, 0.5))

    @pytest.mark.parametrize("max_depth", [0, 1, 2, 4])
    def test_enclosing_emitter_geometric_series(self, max_depth):
        """Test radiance inside a closed emitter is E * (1 + a + ... + a^max_depth).

        Every diffuse bounce weights the path by f * cos / pdf = albedo, so
        the estimate does not depend on the sampled directions.
        """
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import upload_scene

        emission = 0.5
        upload_scene(_enclosing_light((emission, emission, emission)))

        expected = emission * sum(emission**k for k in range(max_depth + 1))
        for seed in (0, 1, 99):
            result = trace_ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), max_depth=max_depth, seed=seed)
            assert result == pytest.approx((expected, expected, expected), rel=1e-9)

    def test_mirror_bounce(self):
        """Test a mirror passes light through weighted by its albedo."""
        from tinypath.core.integrator import trace_ray
        from tinypath.materials import Specular
        from tinypath.scene.manager import upload_scene

        scene = _enclosing_light((1.0, 2.0, 3.0))
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, Specular((0.5, 0.5, 0.5)))
        upload_scene(scene)

        # Depth 0 hits the mirror, depth 1 the surrounding light
        result = trace_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), max_depth=1)
        assert result == pytest.approx((0.5, 1.0, 1.5))

    def test_returns_plain_floats(self):
        """Test the estimate is an RGB tuple of Python floats."""
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import upload_scene

        upload_scene(_enclosing_light((0.5, 0.5, 0.5)))

        result = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), max_depth=1, seed=3)
        assert isinstance(result, tuple)
        assert len(result) == 3
        assert all(isinstance(c, float) for c in result)

    def test_direction_is_normalized(self):
        """Test an unnormalized direction gives the same estimate."""
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import upload_scene

        upload_scene(_enclosing_light((0.5, 0.5, 0.5)))

        a = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), seed=5)
        b = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 40.0), seed=5)
        assert a == pytest.approx(b)


class TestZeroPdfBounce:
    """Tests for paths whose sampled direction has zero pdf.

    A ray from (1, 0, -5) along +z grazes the unit sphere at the origin:
    the discriminant is exactly 0, the hit normal is (1, 0, 0) and n . wo = 0,
    so the mirror direction has pdf = n . wi = 0.
    """

    def _grazing_mirror_scene(self):
        from tinypath.materials import Specular
        from tinypath.scene.manager import upload_scene

        scene = _enclosing_light((1.0, 1.0, 1.0))
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, Specular())
        upload_scene(scene)

    def test_path_ends_without_nan(self):
        """Test the raw estimate is exactly zero rather than NaN."""
        from tinypath.core.integrator import trace_radiance
        from tinypath.core.ray import vec3

        self._grazing_mirror_scene()
        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            for _pass in range(1):
                radiance, next_state = trace_radiance(
                    vec3(1.0, 0.0, -5.0), vec3(0.0, 0.0, 1.0), 0, 2, ti.cast(7, ti.u32)
                )
                result[None] = radiance

        test_kernel()
        r = result[None].to_numpy()
        assert np.all(np.isfinite(r))
        assert r == pytest.approx([0.0, 0.0, 0.0])

    def test_emission_before_zero_pdf_survives(self):
        """Test light gathered at the grazing hit is kept when the path ends there."""
        from tinypath.core.integrator import trace_ray
        from tinypath.scene.manager import material_emissions

        self._grazing_mirror_scene()
        # Material 0 is the surrounding light, material 1 the mirror
        material_emissions[1] = (2.0, 3.0, 4.0)

        result = trace_ray((1.0, 0.0, -5.0), (0.0, 0.0, 1.0), max_depth=2)
        assert result == pytest.approx((2.0, 3.0, 4.0))


class TestSanitize:
    """Tests for replacing invalid sample values."""

    def test_invalid_components_become_zero(self):
        """Test NaN, infinite and negative components are zeroed."""
        from tinypath.core.integrator import _sanitize

        values = ti.Vector.field(3, dtype=ti.f64, shape=2)
        result = ti.Vector.field(3, dtype=ti.f64, shape=2)
        values[0] = (math.nan, math.inf, -1.0)
        values[1] = (0.25, 3.0, 0.0)

        @ti.kernel
        def test_kernel():
            for i in range(2):
                result[i] = _sanitize(values[i])

        test_kernel()
        assert result[0].to_numpy() == pytest.approx([0.0, 0.0, 0.0])
        assert result[1].to_numpy() == pytest.approx([0.25, 3.0, 0.0])


class TestRenderRows:
    """Tests for row-batched rendering."""

    def _prepare(self, scene_and_camera):
        from tinypath.camera.pinhole import setup_camera
        from tinypath.scene.manager import upload_scene

        scene, camera = scene_and_camera
        upload_scene(scene)
        setup_camera(camera)

    def test_writes_only_its_rows(self, emissive_box):
        """Test a batch leaves rows outside [row_start, row_end) untouched."""
        from tinypath.core.integrator import render_rows

        self._prepare(emissive_box)
        image = np.full((8, 6, 3), -1.0)
        render_rows(image, 2, 5, spp=2)

        assert np.all(image[:2] == -1.0)
        assert np.all(image[5:] == -1.0)
        assert np.all(image[2:5] >= 0.0)

    def test_same_seed_reproduces_image(self, emissive_box):
        """Test two renders with the same seed are identical."""
        from tinypath.core.integrator import render_rows

        self._prepare(emissive_box)
        a = np.zeros((8, 8, 3))
        b = np.zeros((8, 8, 3))
        render_rows(a, 0, 8, spp=4, seed=7)
        render_rows(b, 0, 8, spp=4, seed=7)

        np.testing.assert_array_equal(a, b)

    def test_batching_does_not_change_result(self, emissive_box):
        """Test rendering in several batches matches a single batch."""
        from tinypath.core.integrator import render_rows

        self._prepare(emissive_box)
        whole = np.zeros((8, 8, 3))
        split = np.zeros((8, 8, 3))
        render_rows(whole, 0, 8, spp=3, seed=2)
        for start in range(0, 8, 3):
            render_rows(split, start, min(start + 3, 8), spp=3, seed=2)

        np.testing.assert_array_equal(whole, split)

    def test_different_seed_changes_image(self, emissive_box):
        """Test a different seed gives a different noise pattern."""
        from tinypath.core.integrator import render_rows

        self._prepare(emissive_box)
        a = np.zeros((8, 8, 3))
        b = np.zeros((8, 8, 3))
        render_rows(a, 0, 8, spp=4, seed=1)
        render_rows(b, 0, 8, spp=4, seed=2)

        assert not np.array_equal(a, b)

    def test_pixels_are_finite_and_non_negative(self, emissive_box):
        """Test every rendered value is a finite non-negative number."""
        from tinypath.core.integrator import render_rows

        self._prepare(emissive_box)
        image = np.zeros((12, 12, 3))
        render_rows(image, 0, 12, spp=8)

        assert np.all(np.isfinite(image))
        assert np.all(image >= 0.0)
        assert image.mean() > 0.0
