"""Dielectric (glass/water) material implementation.

This module implements transparent materials like glass and water with
refraction and Fresnel reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The material randomly chooses between reflection and refraction based on
the Fresnel reflectance probability, which increases at grazing angles.

Example:
    >>> glass = Dielectric(refractive_index=1.5)
    >>> glass.refraction_ratio(front_face=True)
    0.6666666666666666
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from lumen.core.color import Color
from lumen.core.ray import (
    Hit,
    RandomSource,
    Ray,
    Vec3,
    dot,
    normalize,
    reflect,
    refract,
    schlick_reflectance,
)
from lumen.errors import ConfigurationError
from lumen.materials.material import Material, ScatterResult


def cannot_refract(cos_theta: float, refraction_ratio: float) -> bool:
    """Determine if total internal reflection occurs.

    Args:
        cos_theta: Cosine of the incident angle (clamped to at most 1).
        refraction_ratio: Ratio of refractive indices for this crossing.

    Returns:
        True if no refracted direction exists.
    """
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    return refraction_ratio * sin_theta > 1.0


def will_reflect(cos_theta: float, refraction_ratio: float, draw: float) -> bool:
    """Decide between reflection and refraction.

    Reflection is chosen on total internal reflection, or when the uniform
    draw falls below the Schlick reflectance.

    Args:
        cos_theta: Cosine of the incident angle.
        refraction_ratio: Ratio of refractive indices for this crossing.
        draw: A uniform random number in [0, 1).

    Returns:
        True to reflect, False to refract.
    """
    return cannot_refract(cos_theta, refraction_ratio) or draw < schlick_reflectance(
        cos_theta, refraction_ratio
    )


@dataclass(frozen=True)
class Dielectric(Material):
    """Dielectric (glass/water) material properties.

    Attributes:
        refractive_index: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    refractive_index: float

    def __post_init__(self) -> None:
        if not self.refractive_index > 0.0:
            raise ConfigurationError(
                f"Index of refraction = {self.refractive_index} must be positive."
            )

    def refraction_ratio(self, front_face: bool) -> float:
        """Ratio of refractive indices for a crossing.

        Entering the medium (front face) gives 1/index; leaving it gives index.
        """
        return 1.0 / self.refractive_index if front_face else self.refractive_index

    def scatter_direction(self, unit_direction: Vec3, hit: Hit, draw: float) -> Vec3:
        """Compute the outgoing direction for a given random draw.

        Args:
            unit_direction: Normalized incoming direction.
            hit: The intersection record.
            draw: Uniform random number deciding Fresnel reflection.

        Returns:
            The reflected or refracted direction.
        """
        ratio = self.refraction_ratio(hit.front_face)
        cos_theta = min(dot(-unit_direction, hit.normal), 1.0)

        if will_reflect(cos_theta, ratio, draw):
            return reflect(unit_direction, hit.normal)
        return refract(unit_direction, hit.normal, ratio)

    def scatter(self, ray_in: Ray, hit: Hit, rng: RandomSource) -> ScatterResult:
        """Reflect or refract the incoming ray.

        Args:
            ray_in: The incoming ray.
            hit: The intersection record.
            rng: Random source for the Fresnel decision.

        Returns:
            A tuple of (white, scattered_ray). Clear dielectrics absorb nothing.
        """
        unit_direction = normalize(ray_in.direction)
        direction = self.scatter_direction(unit_direction, hit, float(rng.random()))
        return Color.WHITE, Ray(hit.point, direction)
