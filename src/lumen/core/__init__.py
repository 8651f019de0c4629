"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray and Hit values, vector helpers and rejection sampling
    color: Float colors and fixed-point pixel formats
    sampling: Sub-pixel sample patterns for anti-aliasing
    settings: Render settings and shading modes
    frame: The shared, lock-guarded frame buffer
    integrator: Recursive light-path evaluation (render_ray, render_pixel)
    scheduler: Parallel row-chunk frame rendering
    progressive: The render-trigger loop and its worker thread
"""

from .color import RGBA8, Color, PixelFormat
from .frame import Frame
from .ray import (
    MAX_REJECTION_ATTEMPTS,
    Face,
    Hit,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    normalize,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    reflect,
    refract,
    rejection_sample,
    schlick_reflectance,
    vec3,
)
from .sampling import (
    MULTISAMPLE_2X_PATTERN,
    MULTISAMPLE_4X_PATTERN,
    MULTISAMPLE_8X_PATTERN,
    SINGLE_SAMPLE_PATTERN,
    SamplePattern,
)
from .settings import LINES_PER_WORK, MAX_BOUNCES, RenderSettings, ShadingMode

# Note: integrator, scheduler and progressive are NOT imported here to avoid
# circular imports (they depend on lumen.scene, which depends on lumen.core).
# Import directly from lumen.core.integrator, lumen.core.scheduler or
# lumen.core.progressive when needed.

__all__ = [
    # Ray
    "Ray",
    "Hit",
    "Face",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "near_zero",
    "reflect",
    "refract",
    "schlick_reflectance",
    "rejection_sample",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "MAX_REJECTION_ATTEMPTS",
    # Color
    "Color",
    "PixelFormat",
    "RGBA8",
    # Sampling
    "SamplePattern",
    "SINGLE_SAMPLE_PATTERN",
    "MULTISAMPLE_2X_PATTERN",
    "MULTISAMPLE_4X_PATTERN",
    "MULTISAMPLE_8X_PATTERN",
    # Settings
    "RenderSettings",
    "ShadingMode",
    "MAX_BOUNCES",
    "LINES_PER_WORK",
    # Frame
    "Frame",
]
