"""Unit tests for the demo scene factories.

Tests cover:
- Layout of the random final scene (ground, small spheres, feature spheres)
- Seeded reproducibility
- Material mix and clearance around the metal sphere
- Parameter validation
- The small demo scene and the default cameras
"""

import numpy as np
import pytest

from lumen.core.color import Color
from lumen.core.ray import Ray, vec3
from lumen.errors import ConfigurationError
from lumen.geometry import Sphere
from lumen.materials import Dielectric, Lambertian, Metal
from lumen.scene.intersection import intersect_scene, iter_spheres
from lumen.scene.random_scene import (
    RandomSceneParams,
    create_random_scene,
    create_simple_scene,
    default_camera,
    simple_camera,
)


def describe(world):
    """Flatten a scene into comparable (center, radius, material) tuples."""
    return [(s.center, s.radius, s.material) for s in iter_spheres(world)]


class TestRandomScene:
    """Tests for the random final scene."""

    def test_ground_and_feature_spheres(self):
        """Test that the ground comes first and the three large spheres last."""
        spheres = list(iter_spheres(create_random_scene(RandomSceneParams(seed=1))))

        ground = spheres[0]
        assert ground.center == (0.0, -1000.0, 0.0)
        assert ground.radius == 1000.0
        assert ground.material == Lambertian(Color(0.5, 0.5, 0.5))

        glass, diffuse, metal = spheres[-3:]
        assert (glass.center, glass.material) == ((0.0, 1.0, 0.0), Dielectric(1.5))
        assert (diffuse.center, diffuse.material) == ((-4.0, 1.0, 0.0), Lambertian(Color(0.4, 0.2, 0.1)))
        assert (metal.center, metal.material) == ((4.0, 1.0, 0.0), Metal(Color(0.7, 0.6, 0.5), 0.0))

    def test_small_sphere_grid(self):
        """Test that at most 22x22 small spheres sit on the ground plane."""
        spheres = list(iter_spheres(create_random_scene(RandomSceneParams(seed=2))))
        small = spheres[1:-3]
        assert 0 < len(small) <= 22 * 22
        for sphere in small:
            assert sphere.radius == 0.2
            assert sphere.center[1] == 0.2
            assert -11.0 <= sphere.center[0] < 11.0
            assert -11.0 <= sphere.center[2] < 11.0

    def test_clearance_around_metal_sphere(self):
        """Test that no small sphere is placed near (4, 0.2, 0)."""
        spheres = list(iter_spheres(create_random_scene(RandomSceneParams(seed=3))))
        for sphere in spheres[1:-3]:
            assert np.linalg.norm(np.array(sphere.center) - (4.0, 0.2, 0.0)) > 0.9

    def test_material_mix(self):
        """Test that the default probabilities produce all three materials."""
        spheres = list(iter_spheres(create_random_scene(RandomSceneParams(seed=4))))
        kinds = {type(s.material) for s in spheres[1:-3]}
        assert kinds == {Lambertian, Metal, Dielectric}
        for sphere in spheres[1:-3]:
            if isinstance(sphere.material, Metal):
                assert 0.0 <= sphere.material.fuzz <= 0.5
                assert min(sphere.material.albedo.to_tuple()[:3]) >= 0.5

    def test_only_diffuse(self):
        """Test that a diffuse probability of 1 yields only Lambertian spheres."""
        params = RandomSceneParams(seed=5, grid_extent=3, diffuse_probability=1.0, metal_probability=0.0)
        spheres = list(iter_spheres(create_random_scene(params)))
        assert all(isinstance(s.material, Lambertian) for s in spheres[1:-3])

    def test_seeded_reproducible(self):
        """Test that equal seeds give equal scenes."""
        a = create_random_scene(RandomSceneParams(seed=7, grid_extent=4))
        b = create_random_scene(RandomSceneParams(seed=7, grid_extent=4))
        assert describe(a) == describe(b)

    def test_empty_grid(self):
        """Test that grid_extent 0 leaves only the ground and feature spheres."""
        world = create_random_scene(RandomSceneParams(seed=0, grid_extent=0))
        assert len(world) == 4

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"grid_extent": -1},
            {"small_radius": 0.0},
            {"diffuse_probability": -0.1},
            {"diffuse_probability": 0.9, "metal_probability": 0.2},
        ],
    )
    def test_invalid_params(self, kwargs):
        """Test that invalid parameters are rejected."""
        with pytest.raises(ConfigurationError):
            RandomSceneParams(**kwargs)


class TestSimpleScene:
    """Tests for the small demo scene."""

    def test_layout(self):
        """Test the ground plus three spheres."""
        world = create_simple_scene()
        assert len(world) == 4
        assert all(isinstance(obj, Sphere) for obj in world)

    def test_center_ray_hits_diffuse_sphere(self):
        """Test that the simple camera's center ray hits the middle sphere."""
        world = create_simple_scene()
        ray = simple_camera().viewport(2, 2).emit_ray((0.5, 0.5), np.random.default_rng(0))
        hit = intersect_scene(world, ray)
        assert hit is not None
        assert hit.t == pytest.approx(0.5)
        assert hit.material == Lambertian(Color(0.1, 0.2, 0.5))


class TestCameras:
    """Tests for the default cameras."""

    def test_default_camera(self):
        """Test the framing of the final scene."""
        camera = default_camera()
        assert camera.position == (13.0, 2.0, 3.0)
        assert camera.vertical_fov_degrees == 20.0
        assert camera.aperture == 0.1
        assert camera.focus_distance == 10.0

    def test_default_camera_looks_at_origin(self):
        """Test that the center ray of a pinhole version passes through the origin."""
        camera = default_camera()
        viewport = camera.viewport(3, 3)
        center = viewport.lower_left_corner + 0.5 * viewport.horizontal + 0.5 * viewport.vertical
        ray = Ray(viewport.origin, center - viewport.origin)
        # The origin is on the center ray: origin = position + t * direction
        t = -ray.origin[0] / ray.direction[0]
        np.testing.assert_allclose(ray.at(t), vec3(0.0, 0.0, 0.0), atol=1e-9)
