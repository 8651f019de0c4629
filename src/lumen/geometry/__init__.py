"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    hittable: The SceneObject intersection protocol
    sphere: Sphere primitive with ray-sphere intersection

Ray-object intersection follows the pattern:
    hit = scene_object.hit(ray, t_min, t_max)  # Hit or None
"""

from .hittable import SceneObject
from .sphere import Sphere

__all__ = [
    "SceneObject",
    "Sphere",
]
