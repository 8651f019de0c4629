"""Sphere primitive with ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |ray_origin + t * ray_direction - center|^2 = radius^2

Expanding and rearranging gives the quadratic equation:
    a*t^2 + 2*h*t + c = 0

where:
    a = dot(direction, direction)
    h = dot(direction, oc)  (half of traditional b)
    c = dot(oc, oc) - radius^2
    oc = origin - center

The smaller root is preferred when it lies in the query range, then the
larger one, so the nearest valid intersection is reported even when the ray
starts inside the sphere.

Example:
    >>> from lumen.core.color import Color
    >>> from lumen.materials import Lambertian
    >>> sphere = Sphere(center=(0.0, 0.0, -1.0), radius=0.5,
    ...                 material=Lambertian(Color(0.5, 0.5, 0.5)))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from lumen.core.ray import Face, Hit, Ray, Vec3, as_vec3
from lumen.errors import ConfigurationError
from lumen.geometry.hittable import SceneObject
from lumen.materials.material import Material


@dataclass(frozen=True, eq=False)
class Sphere(SceneObject):
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (x, y, z).
        radius: The radius of the sphere (positive float).
        material: The material of the sphere surface.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material
    _center: Vec3 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise ConfigurationError(f"Sphere radius must be positive, got {self.radius}")
        center = as_vec3(self.center)
        object.__setattr__(self, "center", tuple(float(c) for c in center))
        object.__setattr__(self, "_center", center)

    def hit(self, ray: Ray, t_min: float, t_max: float = math.inf) -> Hit | None:
        """Test for ray-sphere intersection.

        Args:
            ray: The ray to test.
            t_min: Minimum t value for a valid hit (avoids self-intersection).
            t_max: Maximum t value (exclusive).

        Returns:
            A Hit for the nearest root in [t_min, t_max), or None.
        """
        direction = ray.direction
        oc = ray.origin - self._center

        a = float(np.dot(direction, direction))
        h = float(np.dot(oc, direction))
        c = float(np.dot(oc, oc)) - self.radius * self.radius

        discriminant = h * h - a * c
        if discriminant < 0.0 or a == 0.0:
            return None
        sqrt_d = math.sqrt(discriminant)

        # Find the nearest root that lies in the acceptable range
        root = (-h - sqrt_d) / a
        if not (t_min <= root < t_max):
            root = (-h + sqrt_d) / a
            if not (t_min <= root < t_max):
                return None

        point = ray.at(root)
        outward_normal = (point - self._center) / self.radius

        # Front face: ray direction and outward normal point in opposite directions
        if float(np.dot(direction, outward_normal)) < 0.0:
            face, normal = Face.FRONT, outward_normal
        else:
            face, normal = Face.BACK, -outward_normal

        return Hit(point=point, normal=normal, face=face, t=root, material=self.material)
