"""Scene-level intersection testing.

This module provides the ObjectList container, which holds an ordered tree of
scene objects (spheres and nested lists) and reports the closest hit among
its children, and the scene query used by the path tracer.

Example:
    >>> from lumen.core.color import Color
    >>> from lumen.core.ray import Ray, vec3
    >>> from lumen.geometry import Sphere
    >>> from lumen.materials import Lambertian
    >>> grey = Lambertian(Color(0.5, 0.5, 0.5))
    >>> world = ObjectList([Sphere((0, 0, -1), 0.5, grey), Sphere((0, -100.5, -1), 100, grey)])
    >>> hit = intersect_scene(world, Ray(vec3(0, 0, 0), vec3(0, 0, -1)))
    >>> round(hit.t, 6)
    0.5
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator

from lumen.core.ray import Hit, Ray
from lumen.geometry.hittable import SceneObject
from lumen.geometry.sphere import Sphere

# Lower bound of every scene query; keeps scattered rays from re-hitting the
# surface they start on due to floating point error
T_MIN = 0.001
T_MAX = math.inf


class ObjectList(SceneObject):
    """An ordered container of scene objects.

    Children may themselves be ObjectLists, forming a composition tree.
    """

    def __init__(self, objects: Iterable[SceneObject] = ()) -> None:
        self._objects: list[SceneObject] = list(objects)

    def add(self, obj: SceneObject) -> None:
        """Append a child object."""
        self._objects.append(obj)

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        return tuple(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self._objects)

    def __repr__(self) -> str:
        return f"ObjectList({len(self._objects)} objects)"

    def hit(self, ray: Ray, t_min: float, t_max: float = math.inf) -> Hit | None:
        """Find the closest hit among all children.

        Each child is tested against the range shrunk to the closest hit found
        so far, which yields the child hit with minimum t.

        Args:
            ray: The ray to test.
            t_min: Minimum t value to consider a valid hit.
            t_max: Maximum t value (exclusive).

        Returns:
            The closest Hit, or None for an empty list or a miss.
        """
        closest: Hit | None = None
        closest_t = t_max

        for obj in self._objects:
            rec = obj.hit(ray, t_min, closest_t)
            if rec is not None:
                closest_t = rec.t
                closest = rec

        return closest


def intersect_scene(world: SceneObject, ray: Ray) -> Hit | None:
    """Intersect a ray with the scene over [T_MIN, T_MAX)."""
    return world.hit(ray, T_MIN, T_MAX)


def iter_spheres(world: SceneObject) -> Iterator[Sphere]:
    """Yield every sphere in a scene tree, depth first."""
    if isinstance(world, Sphere):
        yield world
    elif isinstance(world, ObjectList):
        for child in world:
            yield from iter_spheres(child)
