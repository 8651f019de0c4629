"""Demo scene factories.

This module provides the "final scene": a large grey ground sphere covered by
a grid of small randomly placed and randomly shaded spheres, with three large
feature spheres (glass, diffuse brown, mirror metal) in the middle. It also
provides a small scene of three spheres on a ground sphere that renders quickly, used by the
examples and tests.

Example:
    >>> world = create_random_scene(RandomSceneParams(seed=42))
    >>> camera = default_camera()
    >>> camera.vertical_fov_degrees
    20.0
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from lumen.camera.thin_lens import Camera, LookAt
from lumen.core.color import Color
from lumen.errors import ConfigurationError
from lumen.geometry.sphere import Sphere
from lumen.materials import Dielectric, Lambertian, Material, Metal
from lumen.scene.intersection import ObjectList

# =============================================================================
# Random Scene Parameters
# =============================================================================


@dataclass
class RandomSceneParams:
    """Parameters for generating the random final scene.

    Attributes:
        seed: Seed for the scene generator (None draws fresh entropy).
        grid_extent: Small spheres are placed on the integer grid
            ``[-grid_extent, grid_extent)`` in x and z. Default 11 gives 22x22.
        small_radius: Radius of the small spheres.
        jitter: Maximum random offset added to each grid position.
        diffuse_probability: Probability that a small sphere is diffuse.
        metal_probability: Probability that a small sphere is metal. The rest
            are glass.
        clearance: Small spheres closer than this to (4, 0.2, 0) are skipped
            so they do not intersect the large metal sphere.

    Example:
        >>> params = RandomSceneParams(seed=1, grid_extent=3)
        >>> len(create_random_scene(params)) <= 1 + 36 + 3
        True
    """

    seed: int | None = None
    grid_extent: int = 11
    small_radius: float = 0.2
    jitter: float = 0.9
    diffuse_probability: float = 0.8
    metal_probability: float = 0.15
    clearance: float = 0.9

    def __post_init__(self) -> None:
        if self.grid_extent < 0:
            raise ConfigurationError(f"grid_extent must be >= 0, got {self.grid_extent}")
        if not self.small_radius > 0.0:
            raise ConfigurationError(f"small_radius must be positive, got {self.small_radius}")
        if self.diffuse_probability < 0.0 or self.metal_probability < 0.0:
            raise ConfigurationError("Material probabilities must be non-negative")
        if self.diffuse_probability + self.metal_probability > 1.0:
            raise ConfigurationError(
                "diffuse_probability + metal_probability must not exceed 1, got "
                f"{self.diffuse_probability + self.metal_probability}"
            )


# =============================================================================
# Scene Constants
# =============================================================================

GROUND_ALBEDO = Color(0.5, 0.5, 0.5)
GLASS_IOR = 1.5
BROWN_ALBEDO = Color(0.4, 0.2, 0.1)
BRONZE_ALBEDO = Color(0.7, 0.6, 0.5)

# Small spheres keep clear of this point (below the large metal sphere)
_CLEARANCE_POINT = np.array((4.0, 0.2, 0.0))


# =============================================================================
# Scene Factories
# =============================================================================


def _random_material(rng: np.random.Generator, params: RandomSceneParams) -> Material:
    choice = rng.random()
    if choice < params.diffuse_probability:
        albedo = rng.random(3) * rng.random(3)
        return Lambertian(Color(*(float(c) for c in albedo)))
    if choice < params.diffuse_probability + params.metal_probability:
        albedo = rng.uniform(0.5, 1.0, 3)
        return Metal(Color(*(float(c) for c in albedo)), fuzz=float(rng.uniform(0.0, 0.5)))
    return Dielectric(GLASS_IOR)


def create_random_scene(params: RandomSceneParams | None = None) -> ObjectList:
    """Create the random final scene.

    Args:
        params: Optional RandomSceneParams. If None, uses the defaults.

    Returns:
        An ObjectList with the ground first, then the small spheres, then the
        three large spheres.
    """
    if params is None:
        params = RandomSceneParams()
    rng = np.random.default_rng(params.seed)

    world = ObjectList([Sphere((0.0, -1000.0, 0.0), 1000.0, Lambertian(GROUND_ALBEDO))])

    for a in range(-params.grid_extent, params.grid_extent):
        for b in range(-params.grid_extent, params.grid_extent):
            center = np.array(
                (
                    a + params.jitter * rng.random(),
                    params.small_radius,
                    b + params.jitter * rng.random(),
                )
            )
            if np.linalg.norm(center - _CLEARANCE_POINT) <= params.clearance:
                continue
            world.add(Sphere(tuple(center), params.small_radius, _random_material(rng, params)))

    world.add(Sphere((0.0, 1.0, 0.0), 1.0, Dielectric(GLASS_IOR)))
    world.add(Sphere((-4.0, 1.0, 0.0), 1.0, Lambertian(BROWN_ALBEDO)))
    world.add(Sphere((4.0, 1.0, 0.0), 1.0, Metal(BRONZE_ALBEDO, fuzz=0.0)))
    return world


def default_camera() -> Camera:
    """Camera framing the final scene from (13, 2, 3) toward the origin."""
    return Camera(
        position=(13.0, 2.0, 3.0),
        direction=LookAt(look_at=(0.0, 0.0, 0.0), up=(0.0, 1.0, 0.0)),
        vertical_fov_degrees=20.0,
        aperture=0.1,
        focus_distance=10.0,
    )


def create_simple_scene() -> ObjectList:
    """Create a small scene: ground, a diffuse center sphere, glass left and metal right."""
    return ObjectList(
        [
            Sphere((0.0, -100.5, -1.0), 100.0, Lambertian(Color(0.8, 0.8, 0.0))),
            Sphere((0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.1, 0.2, 0.5))),
            Sphere((-1.0, 0.0, -1.0), 0.5, Dielectric(GLASS_IOR)),
            Sphere((1.0, 0.0, -1.0), 0.5, Metal(Color(0.8, 0.6, 0.2), fuzz=0.0)),
        ]
    )


def simple_camera() -> Camera:
    """Pinhole camera at the origin looking down -z, framing the simple scene."""
    return Camera(
        position=(0.0, 0.0, 0.0),
        direction=LookAt(look_at=(0.0, 0.0, -1.0), up=(0.0, 1.0, 0.0)),
        vertical_fov_degrees=90.0,
        aperture=0.0,
        focus_distance=1.0,
    )
