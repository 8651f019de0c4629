"""Ray intersection protocol shared by primitives and containers."""

from __future__ import annotations

import abc
import math

from lumen.core.ray import Hit, Ray


class SceneObject(abc.ABC):
    """Anything a ray can be intersected with.

    A root ``t`` is inside the query range iff ``t_min <= t < t_max``.
    """

    @abc.abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float = math.inf) -> Hit | None:
        """Find the nearest intersection of the ray within [t_min, t_max).

        Returns:
            The hit record, or None if the ray does not intersect in range.
        """
