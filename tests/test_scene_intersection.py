"""Unit tests for scene-level intersection.

Tests cover:
- Sphere storage in the scene fields
- Nearest-hit selection among several spheres
- Tie-breaking by scene order
- Miss records
"""

import math

import pytest
import taichi as ti


class TestSceneStorage:
    """Tests for the sphere fields."""

    def test_add_sphere(self):
        """Test adding a sphere to the scene fields."""
        from tinypath.scene.intersection import add_sphere, get_sphere_count

        assert get_sphere_count() == 0
        idx = add_sphere((1.0, 2.0, 3.0), 0.5, material_id=1)
        assert idx == 0
        assert get_sphere_count() == 1

    def test_clear_scene(self):
        """Test clearing all spheres."""
        from tinypath.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, 0.0), 1.0)
        add_sphere((3.0, 0.0, 0.0), 1.0)
        assert get_sphere_count() == 2

        clear_scene()
        assert get_sphere_count() == 0

    def test_capacity_exceeded(self):
        """Test adding more than MAX_SPHERES spheres raises SceneError."""
        from tinypath.errors import SceneError
        from tinypath.scene.intersection import MAX_SPHERES, add_sphere, num_spheres

        num_spheres[None] = MAX_SPHERES
        with pytest.raises(SceneError):
            add_sphere((0.0, 0.0, 0.0), 1.0)


class TestIntersectScene:
    """Tests for the nearest-hit scan."""

    def test_miss_record(self):
        """Test an empty scene returns a miss record."""
        from tinypath.core.ray import make_ray, vec3
        from tinypath.scene.intersection import intersect_scene

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f64, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())
        sphere_index = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _pass in range(1):
                rec = intersect_scene(make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0)))
                hit[None] = rec.hit
                t_val[None] = rec.t
                material_id[None] = rec.material_id
                sphere_index[None] = rec.sphere_index

        test_kernel()
        assert hit[None] == 0
        assert math.isinf(t_val[None])
        assert material_id[None] == -1
        assert sphere_index[None] == -1

    def test_closest_sphere_wins(self):
        """Test the nearest of several spheres along the ray is returned."""
        from tinypath.core.ray import make_ray, vec3
        from tinypath.scene.intersection import add_sphere, intersect_scene

        add_sphere((0.0, 0.0, 10.0), 1.0, material_id=0)
        add_sphere((0.0, 0.0, 5.0), 1.0, material_id=1)
        add_sphere((0.0, 0.0, 20.0), 1.0, material_id=2)

        t_val = ti.field(dtype=ti.f64, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())
        point = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            for _pass in range(1):
                rec = intersect_scene(make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0)))
                t_val[None] = rec.t
                material_id[None] = rec.material_id
                point[None] = rec.point

        test_kernel()
        assert abs(t_val[None] - 4.0) < 1e-9
        assert material_id[None] == 1
        assert abs(point[None][2] - 4.0) < 1e-9

    def test_tie_keeps_first_sphere(self):
        """Test two coincident spheres resolve to the first in scene order."""
        from tinypath.scene.intersection import add_sphere, query_nearest

        add_sphere((0.0, 0.0, 5.0), 1.0, material_id=7)
        add_sphere((0.0, 0.0, 5.0), 1.0, material_id=8)

        result = query_nearest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert result is not None
        t, index, normal = result
        assert t == pytest.approx(4.0)
        assert index == 0
        assert normal == pytest.approx([0.0, 0.0, -1.0])

    def test_query_nearest_miss(self):
        """Test query_nearest returns None when nothing is hit."""
        from tinypath.scene.intersection import add_sphere, query_nearest

        add_sphere((0.0, 0.0, 5.0), 1.0)
        assert query_nearest((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) is None

    def test_inside_enclosing_sphere(self):
        """Test a ray inside a large sphere hits a smaller sphere in front first."""
        from tinypath.scene.intersection import add_sphere, query_nearest

        add_sphere((0.0, 0.0, 0.0), 100.0, material_id=0)
        add_sphere((0.0, 0.0, 10.0), 2.0, material_id=1)

        t, index, _ = query_nearest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert index == 1
        assert t == pytest.approx(8.0)

        t, index, normal = query_nearest((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert index == 0
        assert t == pytest.approx(100.0)
        assert normal == pytest.approx([0.0, 0.0, -1.0])
