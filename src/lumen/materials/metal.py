"""Metal (specular reflective) material implementation.

This module implements specular reflection with optional fuzziness. A perfect
metal (fuzz=0) is a mirror; larger fuzz values perturb the reflected
direction by a random point in a sphere of that radius.

The reflection formula is:
    R = I - 2(I . N)N

where I is the normalized incident direction and N is the surface normal.

Example:
    >>> from lumen.core.color import Color
    >>> mirror = Metal(albedo=Color(0.7, 0.6, 0.5), fuzz=0.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from lumen.core.color import Color
from lumen.core.ray import (
    Hit,
    RandomSource,
    Ray,
    normalize,
    random_in_unit_sphere,
    reflect,
)
from lumen.errors import ConfigurationError
from lumen.materials.material import Material, ScatterResult, validate_albedo


@dataclass(frozen=True)
class Metal(Material):
    """Metal (specular reflective) material properties.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: The surface roughness in [0, 1]. 0 = perfect mirror.
    """

    albedo: Color
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)
        if self.fuzz < 0.0 or self.fuzz > 1.0:
            raise ConfigurationError(
                f"Fuzz = {self.fuzz} is outside [0, 1]. "
                "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )

    def scatter(self, ray_in: Ray, hit: Hit, rng: RandomSource) -> ScatterResult:
        """Reflect the incoming ray about the hit normal.

        The reflected direction is perturbed by ``fuzz * random_in_unit_sphere``.
        Metals tint the reflected light by their albedo; the ray is never
        absorbed, even when fuzz pushes it below the surface.

        Args:
            ray_in: The incoming ray.
            hit: The intersection record.
            rng: Random source for the fuzz perturbation.

        Returns:
            A tuple of (albedo, reflected_ray).
        """
        reflected = reflect(normalize(ray_in.direction), hit.normal)
        if self.fuzz > 0.0:
            reflected = reflected + self.fuzz * random_in_unit_sphere(rng)
        return self.albedo, Ray(hit.point, reflected)
