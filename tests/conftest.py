"""Pytest configuration for tracer tests.

This module provides shared fixtures for all test modules: seeded random
generators, a scripted random source for exact sampling tests, small scenes
and cameras. Taichi is only needed by the viewer tests, which request the
``taichi_session`` fixture explicitly.
"""

from collections.abc import Iterable

import matplotlib
import numpy as np
import pytest

from lumen.camera import Camera, LookAt
from lumen.core.color import Color
from lumen.geometry import Sphere
from lumen.materials import Lambertian
from lumen.scene.intersection import ObjectList

# Never open windows from tests
matplotlib.use("Agg")


class ScriptedRandom:
    """Random source that replays a fixed sequence of uniform draws.

    Implements the ``random(size=None)`` subset of ``numpy.random.Generator``
    used by the tracer. Raises IndexError when the script runs out.
    """

    def __init__(self, values: Iterable[float]) -> None:
        self._values = list(values)
        self._index = 0

    @property
    def consumed(self) -> int:
        return self._index

    def _next(self) -> float:
        value = self._values[self._index]
        self._index += 1
        return value

    def random(self, size=None):
        if size is None:
            return self._next()
        return np.array([self._next() for _ in range(size)], dtype=np.float64)


@pytest.fixture
def rng():
    """Seeded numpy generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom


@pytest.fixture
def grey():
    """A mid-grey Lambertian material."""
    return Lambertian(Color(0.5, 0.5, 0.5))


@pytest.fixture
def unit_sphere_world(grey):
    """A single radius-0.5 sphere centered at (0, 0, -1)."""
    return ObjectList([Sphere((0.0, 0.0, -1.0), 0.5, grey)])


@pytest.fixture
def empty_world():
    """A scene with no objects; every ray sees the background."""
    return ObjectList()


@pytest.fixture
def pinhole_camera():
    """Pinhole camera at the origin looking down -z with a 90 degree FOV."""
    return Camera(
        position=(0.0, 0.0, 0.0),
        direction=LookAt(look_at=(0.0, 0.0, -1.0), up=(0.0, 1.0, 0.0)),
        vertical_fov_degrees=90.0,
        aperture=0.0,
        focus_distance=1.0,
    )


@pytest.fixture(scope="session")
def taichi_session():
    """Initialize Taichi once for the viewer tests.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti = pytest.importorskip("taichi")
    ti.init(arch=ti.cpu, random_seed=42)
    yield ti
