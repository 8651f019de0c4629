"""Materials module for scattering models.

This module implements the material models for light scattering:

Components:
    material: Base material interface
    lambertian: Ideal diffuse (Lambertian) reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like materials with refraction (Schlick Fresnel)

Each material provides:
    - scatter(): Produce an attenuation color and a continuation ray

Materials are immutable values and can be shared across primitives.
"""

from .dielectric import Dielectric, cannot_refract, will_reflect
from .lambertian import Lambertian
from .material import Material, ScatterResult, validate_albedo
from .metal import Metal

__all__ = [
    "Material",
    "ScatterResult",
    "validate_albedo",
    # Lambertian
    "Lambertian",
    # Metal
    "Metal",
    # Dielectric
    "Dielectric",
    "cannot_refract",
    "will_reflect",
]
