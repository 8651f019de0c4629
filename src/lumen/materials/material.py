"""Base material interface.

A material turns an incoming ray and a surface hit into an attenuation color
and a scattered continuation ray. No material absorbs a ray outright; energy
loss is expressed only through the attenuation multiplied in at each bounce.
"""

from __future__ import annotations

import abc

from lumen.core.color import Color
from lumen.core.ray import Hit, RandomSource, Ray
from lumen.errors import ConfigurationError

ScatterResult = tuple[Color, Ray]


class Material(abc.ABC):
    """Scattering law evaluated at a surface hit."""

    @abc.abstractmethod
    def scatter(self, ray_in: Ray, hit: Hit, rng: RandomSource) -> ScatterResult:
        """Scatter an incoming ray.

        Args:
            ray_in: The ray that hit the surface.
            hit: The intersection record (normal faces against ray_in).
            rng: Random source for stochastic scattering.

        Returns:
            A tuple of (attenuation, scattered_ray).
        """


def validate_albedo(albedo: Color) -> None:
    """Check that the RGB albedo components are in [0, 1].

    Raises:
        ConfigurationError: If any component would violate energy conservation.
    """
    for i, component in enumerate((albedo.r, albedo.g, albedo.b)):
        if component < 0.0 or component > 1.0:
            raise ConfigurationError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
