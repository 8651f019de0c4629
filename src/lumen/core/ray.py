"""Ray and hit data structures, vector utilities and random sampling.

This module provides the fundamental Ray value, the transient Hit record
produced by intersection tests, and the vector and random sampling helpers
used by the materials and the camera. Vectors are plain ``numpy`` arrays of
shape ``(3,)``.

Random sampling functions take an explicit random source (a
``numpy.random.Generator`` or anything exposing a compatible
``random(size=None)`` method) so that each render task can own its generator
and tests can substitute a scripted one.

Example:
    >>> import numpy as np
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> ray.at(5.0)  # Point 5 units along the ray
    array([ 0.,  0., -5.])
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeVar

import numpy as np
import numpy.typing as npt

from lumen.errors import SamplingError

if TYPE_CHECKING:
    from lumen.materials.material import Material

Vec3 = npt.NDArray[np.float64]

T = TypeVar("T")

# Rejection sampling cap; the acceptance rate is ~52% for the unit ball and
# ~79% for the unit disk, so this is never reached with a working generator.
MAX_REJECTION_ATTEMPTS = 100

# Lower bound on squared length for accepted unit-vector candidates
_MIN_LENGTH_SQUARED = 1e-160


class RandomSource(Protocol):
    """Anything that draws uniform floats in [0, 1) like ``numpy.random.Generator``."""

    def random(self, size: int | None = None) -> float | npt.NDArray[np.float64]: ...


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3D vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(values: Sequence[float] | Vec3) -> Vec3:
    """Convert a 3-tuple (or array) into a float64 vector."""
    return np.asarray(values, dtype=np.float64).reshape(3)


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. Not required to be unit
            length.
    """

    origin: Vec3
    direction: Vec3

    def at(self, t: float) -> Vec3:
        """Compute the point ``origin + t * direction``."""
        return self.origin + t * self.direction


class Face(enum.Enum):
    """Which side of a surface a ray hit."""

    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True, eq=False)
class Hit:
    """Record of a ray-surface intersection.

    Attributes:
        point: The 3D point where the ray intersected the surface.
        normal: Unit surface normal, oriented against the incoming ray.
        face: FRONT if the ray hit the outside of the surface, BACK otherwise.
        t: The ray parameter of the intersection, inside the queried range.
        material: The material of the surface that was hit.
    """

    point: Vec3
    normal: Vec3
    face: Face
    t: float
    material: Material

    @property
    def front_face(self) -> bool:
        return self.face is Face.FRONT


# =============================================================================
# Vector Utility Functions
# =============================================================================


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector."""
    return float(np.dot(v, v))


def length(v: Vec3) -> float:
    """Compute the length (magnitude) of a vector."""
    return float(np.sqrt(np.dot(v, v)))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. If v is zero-length,
        returns a zero vector.
    """
    norm = length(v)
    if norm == 0.0:
        return np.zeros(3, dtype=np.float64)
    return v / norm


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(np.dot(a, b))


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product of two 3D vectors."""
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=np.float64,
    )


def near_zero(v: Vec3) -> bool:
    """Check if a vector is near zero in all components.

    Useful for detecting degenerate scatter directions.
    """
    s = 1e-8
    return bool(abs(v[0]) < s and abs(v[1]) < s and abs(v[2]) < s)


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Computes ``v - 2 * dot(v, n) * n``. The normal should be unit length.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal.

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def refract(unit_direction: Vec3, normal: Vec3, refraction_ratio: float) -> Vec3:
    """Refract a unit direction through a surface using Snell's law.

    The caller is responsible for checking total internal reflection first;
    this function always returns a transmitted direction.

    Args:
        unit_direction: The incoming direction (normalized).
        normal: The surface normal, facing against the incoming ray.
        refraction_ratio: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction vector.
    """
    cos_theta = min(dot(-unit_direction, normal), 1.0)
    r_out_perp = refraction_ratio * (unit_direction + cos_theta * normal)
    r_out_parallel = -np.sqrt(abs(1.0 - length_squared(r_out_perp))) * normal
    return r_out_perp + r_out_parallel


def schlick_reflectance(cosine: float, refraction_ratio: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        refraction_ratio: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance, equal to r0 at normal incidence.
    """
    r0 = ((1.0 - refraction_ratio) / (1.0 + refraction_ratio)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def rejection_sample(
    draw: Callable[[], T],
    accept: Callable[[T], bool],
    max_attempts: int = MAX_REJECTION_ATTEMPTS,
) -> T:
    """Draw candidates until one is accepted.

    Args:
        draw: Produces a new candidate on each call.
        accept: Predicate deciding whether a candidate is kept.
        max_attempts: Upper bound on the number of draws.

    Returns:
        The first accepted candidate.

    Raises:
        SamplingError: If no candidate was accepted within max_attempts.
    """
    for _ in range(max_attempts):
        candidate = draw()
        if accept(candidate):
            return candidate
    raise SamplingError(f"No sample accepted after {max_attempts} attempts")


def _random_in_cube(rng: RandomSource) -> Vec3:
    return np.asarray(rng.random(3), dtype=np.float64) * 2.0 - 1.0


def random_in_unit_sphere(rng: RandomSource) -> Vec3:
    """Generate a random point inside the unit sphere.

    Uses rejection sampling in the [-1, 1]^3 cube, so points are uniformly
    distributed within the ball.
    """
    return rejection_sample(
        lambda: _random_in_cube(rng),
        lambda p: length_squared(p) < 1.0,
    )


def random_unit_vector(rng: RandomSource) -> Vec3:
    """Generate a random unit vector uniformly distributed on the sphere.

    Candidates that are too close to the origin are rejected as well, so the
    normalization is always well defined.
    """
    p = rejection_sample(
        lambda: _random_in_cube(rng),
        lambda p: _MIN_LENGTH_SQUARED < length_squared(p) <= 1.0,
    )
    return p / length(p)


def random_in_unit_disk(rng: RandomSource) -> Vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for thin-lens depth of field sampling.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """

    def draw() -> Vec3:
        x, y = np.asarray(rng.random(2), dtype=np.float64) * 2.0 - 1.0
        return np.array((x, y, 0.0), dtype=np.float64)

    return rejection_sample(draw, lambda p: p[0] * p[0] + p[1] * p[1] < 1.0)
