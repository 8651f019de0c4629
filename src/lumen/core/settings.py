"""Render settings shared by the integrator and the frame scheduler."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from lumen.errors import ConfigurationError

# Maximum ray bounces (path length)
MAX_BOUNCES = 50

# Rows of pixels rendered by one scheduler task
LINES_PER_WORK = 50


class ShadingMode(enum.Enum):
    """How a camera ray is turned into a color."""

    PATH = "path"
    NORMALS = "normals"


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for rendering a frame.

    Attributes:
        max_bounces: Bounce budget per camera ray. 0 renders black.
        lines_per_work: Number of image rows per scheduler task.
        workers: Number of render processes (None uses the CPU count, 1
            renders inline).
        seed: Seed for the per-frame SeedSequence (None draws fresh entropy).
        shading: PATH for full path tracing, NORMALS for normal visualization.
        lock_timeout: Seconds to wait for the frame lock before failing
            (None blocks indefinitely).
    """

    max_bounces: int = MAX_BOUNCES
    lines_per_work: int = LINES_PER_WORK
    workers: int | None = None
    seed: int | None = None
    shading: ShadingMode = ShadingMode.PATH
    lock_timeout: float | None = 10.0

    def __post_init__(self) -> None:
        if self.max_bounces < 0:
            raise ConfigurationError(f"max_bounces must be >= 0, got {self.max_bounces}")
        if self.lines_per_work <= 0:
            raise ConfigurationError(
                f"lines_per_work must be positive, got {self.lines_per_work}"
            )
        if self.workers is not None and self.workers <= 0:
            raise ConfigurationError(f"workers must be positive, got {self.workers}")
        if self.lock_timeout is not None and self.lock_timeout <= 0:
            raise ConfigurationError(
                f"lock_timeout must be positive, got {self.lock_timeout}"
            )
        if not isinstance(self.shading, ShadingMode):
            raise ConfigurationError(f"Unknown shading mode: {self.shading!r}")
