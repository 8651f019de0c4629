"""Lambertian (ideal diffuse) material implementation.

The scattered direction is the surface normal plus a random unit vector,
which yields a cosine-weighted distribution over the hemisphere around the
normal. With that distribution the BRDF and PDF cosine terms cancel, so the
attenuation is simply the albedo:

    attenuation = (albedo / pi) * cos_theta / (cos_theta / pi) = albedo

Example:
    >>> import numpy as np
    >>> from lumen.core.color import Color
    >>> material = Lambertian(albedo=Color(0.8, 0.3, 0.3))
    >>> # attenuation, scattered = material.scatter(ray, hit, np.random.default_rng())
"""

from __future__ import annotations

from dataclasses import dataclass

from lumen.core.color import Color
from lumen.core.ray import Hit, RandomSource, Ray, near_zero, random_unit_vector
from lumen.materials.material import Material, ScatterResult, validate_albedo


@dataclass(frozen=True)
class Lambertian(Material):
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: Color

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)

    def scatter(self, ray_in: Ray, hit: Hit, rng: RandomSource) -> ScatterResult:
        """Scatter diffusely around the hit normal.

        Args:
            ray_in: The incoming ray (unused; diffuse scattering ignores it).
            hit: The intersection record.
            rng: Random source for the scatter direction.

        Returns:
            A tuple of (albedo, scattered_ray) with the scattered ray starting
            at the hit point.
        """
        scatter_direction = hit.normal + random_unit_vector(rng)

        # A random unit vector exactly opposite the normal would cancel it
        if near_zero(scatter_direction):
            scatter_direction = hit.normal

        return self.albedo, Ray(hit.point, scatter_direction)
