"""Thin-lens camera model for perspective projection with depth of field.

This module implements a camera that generates primary rays through a
virtual image plane placed at the focus distance. Rays start on a lens disk
of radius ``aperture / 2`` so that only objects at the focus distance are
sharp.

The camera orientation is a rotation matrix whose columns are the camera
basis vectors (u, v, w):
- u: points right in the image plane
- v: points up in the image plane
- w: points backward (opposite the view direction)

It is specified either directly (``Rotation``), from a target point
(``LookAt``) or from Euler angles (``RollPitchYaw``).

A ``Camera`` is an immutable value. Per render pass it is turned into a
``Viewport`` for a given output size; the viewport emits the rays.

Example:
    >>> import numpy as np
    >>> camera = Camera(
    ...     position=(0.0, 0.0, 0.0),
    ...     direction=LookAt(look_at=(0.0, 0.0, -1.0), up=(0.0, 1.0, 0.0)),
    ...     vertical_fov_degrees=90.0,
    ...     aperture=0.0,
    ...     focus_distance=1.0,
    ... )
    >>> viewport = camera.viewport(200, 100)
    >>> ray = viewport.emit_ray((0.5, 0.5), np.random.default_rng(0))
    >>> ray.direction
    array([ 0.,  0., -1.])
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

import numpy as np
import numpy.typing as npt

from lumen.core.ray import RandomSource, Ray, Vec3, as_vec3, cross, length, random_in_unit_disk
from lumen.errors import ConfigurationError

Matrix3 = npt.NDArray[np.float64]

# =============================================================================
# Camera Direction Variants
# =============================================================================


@dataclass(frozen=True)
class LookAt:
    """Orient the camera toward a target point.

    Attributes:
        look_at: Point the camera is looking at in world space (x, y, z).
        up: Up direction vector for camera orientation (typically (0, 1, 0)).
    """

    look_at: tuple[float, float, float]
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "look_at", _as_tuple(self.look_at))
        object.__setattr__(self, "up", _as_tuple(self.up))

    def to_matrix(self, position: Sequence[float]) -> Matrix3:
        """Resolve the look-at into a basis matrix with columns [u v w].

        Raises:
            ConfigurationError: If the target coincides with the position, or
                the up vector is parallel to the view direction.
        """
        w = as_vec3(position) - as_vec3(self.look_at)
        w_len = length(w)
        if w_len == 0.0:
            raise ConfigurationError(
                f"Camera position {tuple(position)} coincides with look_at {self.look_at}"
            )
        w = w / w_len

        u = cross(as_vec3(self.up), w)
        u_len = length(u)
        if u_len < 1e-12:
            raise ConfigurationError(
                f"Up vector {self.up} is parallel to the view direction"
            )
        u = u / u_len

        v = cross(w, u)
        return np.column_stack((u, v, w))


@dataclass(frozen=True)
class Rotation:
    """Orient the camera with an explicit 3x3 rotation matrix.

    The columns are the camera right, up and backward vectors.

    Attributes:
        matrix: Row-major matrix entries as a tuple of three rows.
    """

    matrix: tuple[tuple[float, float, float], ...]

    def __post_init__(self) -> None:
        m = np.asarray(self.matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise ConfigurationError(f"Rotation matrix must be 3x3, got shape {m.shape}")
        if not np.all(np.isfinite(m)):
            raise ConfigurationError("Rotation matrix must contain only finite values")
        object.__setattr__(self, "matrix", tuple(tuple(float(x) for x in row) for row in m))

    @classmethod
    def from_array(cls, matrix: npt.ArrayLike) -> Rotation:
        return cls(tuple(map(tuple, np.asarray(matrix, dtype=np.float64))))

    @classmethod
    def identity(cls) -> Rotation:
        return cls.from_array(np.eye(3))

    def to_matrix(self, position: Sequence[float] | None = None) -> Matrix3:
        return np.array(self.matrix, dtype=np.float64)


@dataclass(frozen=True)
class RollPitchYaw:
    """Euler angles in radians, converted to ``R_y(yaw) @ R_x(pitch) @ R_z(roll)``.

    With all angles zero the camera looks down -z with +y up.

    Attributes:
        roll: Rotation about the view axis.
        pitch: Rotation about the right axis (positive tilts up).
        yaw: Rotation about the world up axis (positive turns left).
    """

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0

    def to_matrix(self, position: Sequence[float] | None = None) -> Matrix3:
        cr, sr = math.cos(self.roll), math.sin(self.roll)
        cp, sp = math.cos(self.pitch), math.sin(self.pitch)
        cy, sy = math.cos(self.yaw), math.sin(self.yaw)

        r_z = np.array([[cr, -sr, 0.0], [sr, cr, 0.0], [0.0, 0.0, 1.0]])
        r_x = np.array([[1.0, 0.0, 0.0], [0.0, cp, -sp], [0.0, sp, cp]])
        r_y = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
        return r_y @ r_x @ r_z

    def to_rotation(self) -> Rotation:
        return Rotation.from_array(self.to_matrix())


CameraDirection = Union[LookAt, Rotation]


def _as_tuple(values: Sequence[float]) -> tuple[float, float, float]:
    x, y, z = (float(c) for c in values)
    return (x, y, z)


# =============================================================================
# Camera
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Configuration for a thin-lens camera.

    Cameras are compared by value; a changed camera is a new instance
    (see ``dataclasses.replace``).

    Attributes:
        position: Camera position in world space (x, y, z).
        direction: A LookAt or Rotation describing the orientation.
        vertical_fov_degrees: Vertical field of view in degrees, in (0, 180).
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_distance: Distance from the lens to the plane in focus.
    """

    position: tuple[float, float, float]
    direction: CameraDirection
    vertical_fov_degrees: float = 90.0
    aperture: float = 0.0
    focus_distance: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_tuple(self.position))
        if isinstance(self.direction, RollPitchYaw):
            object.__setattr__(self, "direction", self.direction.to_rotation())
        if not isinstance(self.direction, (LookAt, Rotation)):
            raise ConfigurationError(f"Unsupported camera direction: {self.direction!r}")
        if not 0.0 < self.vertical_fov_degrees < 180.0:
            raise ConfigurationError(
                f"vertical_fov_degrees must be in (0, 180), got {self.vertical_fov_degrees}"
            )
        if self.aperture < 0.0:
            raise ConfigurationError(f"aperture must be >= 0, got {self.aperture}")
        if not self.focus_distance > 0.0:
            raise ConfigurationError(
                f"focus_distance must be positive, got {self.focus_distance}"
            )
        if isinstance(self.direction, LookAt):
            # A degenerate look-at is rejected at construction
            self.direction.to_matrix(self.position)

    def rotation(self) -> Matrix3:
        """Camera basis as a 3x3 matrix with columns [u v w]."""
        return self.direction.to_matrix(self.position)

    def viewport(self, width: int, height: int) -> Viewport:
        """Build the viewport for an output image of the given size.

        The viewport is a virtual image plane at ``focus_distance`` in front
        of the camera. Ray directions are computed by interpolating across it.

        Args:
            width: Output image width in pixels.
            height: Output image height in pixels.

        Returns:
            An immutable Viewport for one render pass.

        Raises:
            ConfigurationError: If the size is not positive or the camera
                orientation is degenerate.
        """
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Viewport size must be positive, got {width}x{height}")

        rotation = self.rotation()
        h = math.tan(math.radians(self.vertical_fov_degrees) / 2.0)
        viewport_height = 2.0 * h
        viewport_width = viewport_height * width / height

        origin = as_vec3(self.position)
        horizontal = rotation @ np.array((viewport_width * self.focus_distance, 0.0, 0.0))
        vertical = rotation @ np.array((0.0, viewport_height * self.focus_distance, 0.0))
        depth = rotation @ np.array((0.0, 0.0, self.focus_distance))
        lower_left_corner = origin - vertical / 2.0 - horizontal / 2.0 - depth

        return Viewport(
            origin=origin,
            image_width=float(width),
            image_height=float(height),
            horizontal=horizontal,
            vertical=vertical,
            lower_left_corner=lower_left_corner,
            lens_u=rotation @ np.array((1.0, 0.0, 0.0)),
            lens_v=rotation @ np.array((0.0, 1.0, 0.0)),
            lens_radius=self.aperture / 2.0,
        )


# =============================================================================
# Viewport (per render pass)
# =============================================================================


@dataclass(frozen=True, eq=False)
class Viewport:
    """Projection geometry derived from a camera and an output size.

    Attributes:
        origin: Center of the lens in world space.
        image_width: Output width in pixels.
        image_height: Output height in pixels.
        horizontal: Full width of the image plane.
        vertical: Full height of the image plane.
        lower_left_corner: Lower-left corner of the image plane.
        lens_u: Lens right axis.
        lens_v: Lens up axis.
        lens_radius: Half the aperture.
    """

    origin: Vec3
    image_width: float
    image_height: float
    horizontal: Vec3
    vertical: Vec3
    lower_left_corner: Vec3
    lens_u: Vec3
    lens_v: Vec3
    lens_radius: float

    def emit_ray(self, p: Sequence[float], rng: RandomSource) -> Ray:
        """Generate a ray through normalized image coordinates.

        The coordinates are normalized:
        - p[0] = 0: left edge, 1: right edge
        - p[1] = 0: bottom edge, 1: top edge

        Args:
            p: The (u, v) point on the image plane.
            rng: Random source for sampling the lens disk.

        Returns:
            A ray from a point on the lens toward the image plane point.
        """
        rd = random_in_unit_disk(rng)
        offset = self.lens_radius * (rd[0] * self.lens_u + rd[1] * self.lens_v)
        origin = self.origin + offset
        direction = (
            self.lower_left_corner + p[0] * self.horizontal + p[1] * self.vertical - origin
        )
        return Ray(origin, direction)
