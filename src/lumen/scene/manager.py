"""Lock-guarded owner of the current camera, scene and input state.

The SceneManager is the single place where the interactive front end and the
render worker meet. The front end replaces the camera or world and records
which movement keys are held; the render worker asks for a ``SceneSnapshot``
(an immutable camera value plus a reference to the world tree) and renders
it without holding any lock.

Example:
    >>> from lumen.scene.random_scene import create_simple_scene, simple_camera
    >>> manager = SceneManager(simple_camera(), create_simple_scene())
    >>> manager.set_control("forward", True)
    >>> manager.advance(0.5)
    True
    >>> manager.snapshot().camera.position
    (0.0, 0.0, -0.5)
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Any

import numpy as np

from lumen.camera.thin_lens import Camera, LookAt
from lumen.core.ray import Vec3, as_vec3, length
from lumen.errors import ConfigurationError
from lumen.geometry.hittable import SceneObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Controls:
    """Which movement inputs are currently held.

    Attributes:
        forward: Move along the view direction.
        backward: Move against the view direction.
        left: Move along the camera's negative right axis.
        right: Move along the camera's right axis.
        up: Move along the camera's up axis.
        down: Move along the camera's negative up axis.
    """

    forward: bool = False
    backward: bool = False
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False

    def movement(self) -> Vec3:
        """Unnormalized camera-space movement direction (+x right, +y up, -z forward)."""
        x = float(self.right) - float(self.left)
        y = float(self.up) - float(self.down)
        z = float(self.backward) - float(self.forward)
        return np.array((x, y, z), dtype=np.float64)

    @property
    def active(self) -> bool:
        return any(dataclasses.astuple(self))


CONTROL_NAMES = tuple(f.name for f in dataclasses.fields(Controls))


@dataclass(frozen=True, eq=False)
class SceneSnapshot:
    """A consistent view of the scene for one render pass.

    Attributes:
        camera: The camera value at snapshot time.
        world: Root of the scene tree. Treated as read-only while rendering.
        controls: The held movement inputs at snapshot time.
    """

    camera: Camera
    world: SceneObject
    controls: Controls


class SceneManager:
    """Thread-safe holder of the camera, world and controls.

    All state is replaced wholesale under one lock; readers receive immutable
    snapshots.
    """

    def __init__(self, camera: Camera, world: SceneObject) -> None:
        self._lock = threading.Lock()
        self._camera = camera
        self._world = world
        self._controls = Controls()

    def __repr__(self) -> str:
        return f"SceneManager(camera={self._camera!r})"

    @property
    def camera(self) -> Camera:
        with self._lock:
            return self._camera

    @property
    def world(self) -> SceneObject:
        with self._lock:
            return self._world

    @property
    def controls(self) -> Controls:
        with self._lock:
            return self._controls

    def snapshot(self) -> SceneSnapshot:
        """Take a consistent snapshot of camera, world and controls."""
        with self._lock:
            return SceneSnapshot(self._camera, self._world, self._controls)

    def set_camera(self, camera: Camera) -> None:
        with self._lock:
            self._camera = camera

    def update_camera(self, **changes: Any) -> Camera:
        """Replace camera fields, e.g. ``update_camera(aperture=0.2)``.

        Returns:
            The new camera value.

        Raises:
            ConfigurationError: If the resulting camera is invalid.
        """
        with self._lock:
            self._camera = dataclasses.replace(self._camera, **changes)
            return self._camera

    def set_world(self, world: SceneObject) -> None:
        with self._lock:
            self._world = world

    def set_control(self, name: str, pressed: bool) -> None:
        """Record a movement input being pressed or released.

        Args:
            name: One of forward, backward, left, right, up, down.
            pressed: True while the input is held.

        Raises:
            ConfigurationError: If the control name is unknown.
        """
        if name not in CONTROL_NAMES:
            raise ConfigurationError(
                f"Unknown control '{name}' (expected one of {', '.join(CONTROL_NAMES)})"
            )
        with self._lock:
            self._controls = dataclasses.replace(self._controls, **{name: bool(pressed)})

    def release_all(self) -> None:
        """Release every movement input."""
        with self._lock:
            self._controls = Controls()

    def advance(self, elapsed: float, move_speed: float = 1.0) -> bool:
        """Move the camera according to the held controls.

        The camera moves by ``R @ movement * move_speed * elapsed`` where R is
        the camera rotation. A look-at camera keeps its target and refocuses
        on it. A step that would land a look-at camera on its target is
        refused and the camera stays put.

        Args:
            elapsed: Seconds since the last call.
            move_speed: World units per second.

        Returns:
            True if the camera changed.
        """
        with self._lock:
            movement = self._controls.movement()
            if not movement.any() or elapsed <= 0.0:
                return False

            camera = self._camera
            delta = camera.rotation() @ movement * move_speed * elapsed
            position = as_vec3(camera.position) + delta
            changes: dict[str, Any] = {"position": tuple(float(c) for c in position)}
            if isinstance(camera.direction, LookAt):
                distance = length(position - as_vec3(camera.direction.look_at))
                if distance > 0.0:
                    changes["focus_distance"] = distance
            try:
                self._camera = dataclasses.replace(camera, **changes)
            except ConfigurationError as exc:
                logger.debug("Camera move refused: %s", exc)
                return False
            return True
