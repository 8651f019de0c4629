"""Path tracing integrator for Monte Carlo light transport.

This module implements the recursive light-path evaluator. A camera ray is
traced through the scene, bouncing off surfaces according to their material,
and the attenuation of every bounce is multiplied into the color of the
background the path finally escapes to.

Key features:
    - Material dispatch through ``Material.scatter``
    - Fixed bounce budget (a path that runs out contributes black)
    - Fixed sub-pixel sample patterns, averaged and gamma corrected
    - Normal-visualization shading for debugging scenes

Example:
    >>> import numpy as np
    >>> from lumen.camera import Camera, LookAt
    >>> from lumen.core.sampling import SamplePattern
    >>> from lumen.scene.random_scene import create_simple_scene
    >>>
    >>> world = create_simple_scene()
    >>> camera = Camera((0.0, 0.0, 0.0), LookAt((0.0, 0.0, -1.0)))
    >>> viewport = camera.viewport(64, 32)
    >>> rng = np.random.default_rng(7)
    >>> color = render_pixel(32, 16, viewport, world, SamplePattern.standard(4), rng)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from lumen.core.color import Color
from lumen.core.ray import RandomSource, Ray, normalize
from lumen.core.settings import MAX_BOUNCES, ShadingMode
from lumen.scene.intersection import intersect_scene

if TYPE_CHECKING:
    from lumen.camera.thin_lens import Viewport
    from lumen.core.sampling import SamplePattern
    from lumen.geometry.hittable import SceneObject

# Maps an escaping ray to the color it receives from the environment
Background = Callable[[Ray], Color]


def sky_background(ray: Ray) -> Color:
    """Vertical white-to-blue gradient.

    A ray pointing straight down receives white and one pointing straight up
    receives ``Color.SKY_BLUE``.
    """
    unit_direction = normalize(ray.direction)
    t = 0.5 * (float(unit_direction[1]) + 1.0)
    return Color.lerp(Color.WHITE, Color.SKY_BLUE, t)


def render_ray(
    ray: Ray,
    world: SceneObject,
    bounces_left: int,
    rng: RandomSource,
    background: Background = sky_background,
) -> Color:
    """Compute the color carried back along a ray.

    Args:
        ray: The ray to trace.
        world: Root of the scene tree.
        bounces_left: Remaining bounce budget. At 0 the path contributes black.
        rng: Random source for material scattering.
        background: Color of rays that escape the scene.

    Returns:
        The unclamped color of the path.
    """
    if bounces_left <= 0:
        return Color.BLACK

    hit = intersect_scene(world, ray)
    if hit is None:
        return background(ray)

    attenuation, scattered = hit.material.scatter(ray, hit, rng)
    return attenuation * render_ray(scattered, world, bounces_left - 1, rng, background)


def shade_normals(
    ray: Ray,
    world: SceneObject,
    background: Background = sky_background,
) -> Color:
    """Color a ray by the surface normal it hits, mapped from [-1, 1] to [0, 1]."""
    hit = intersect_scene(world, ray)
    if hit is None:
        return background(ray)
    return Color.visualize_normal(hit.normal)


def render_pixel(
    x: int,
    y: int,
    viewport: Viewport,
    world: SceneObject,
    pattern: SamplePattern,
    rng: RandomSource,
    *,
    max_bounces: int = MAX_BOUNCES,
    background: Background = sky_background,
    shading: ShadingMode = ShadingMode.PATH,
) -> Color:
    """Render one pixel by averaging one camera ray per pattern offset.

    Pixel (0, 0) is the lower-left corner of the image. The pixel center
    coordinates are normalized over ``image_width - 1`` and
    ``image_height - 1``, so the last column and row land on the image edge.

    Args:
        x: Pixel column.
        y: Pixel row, counted from the bottom.
        viewport: Projection geometry for this render pass.
        world: Root of the scene tree.
        pattern: Sub-pixel offsets, one ray each.
        rng: Random source for lens and scatter sampling.
        max_bounces: Bounce budget per camera ray.
        background: Color of rays that escape the scene.
        shading: PATH for path tracing, NORMALS for normal visualization.

    Returns:
        The gamma-corrected, opaque pixel color (not yet clamped).
    """
    # Single-pixel images have no extent to normalize over
    u_scale = max(viewport.image_width - 1.0, 1.0)
    v_scale = max(viewport.image_height - 1.0, 1.0)

    total = Color(0.0, 0.0, 0.0, 0.0)
    for offset_x, offset_y in pattern:
        u = (x + offset_x) / u_scale
        v = (y + offset_y) / v_scale
        ray = viewport.emit_ray((u, v), rng)
        if shading is ShadingMode.NORMALS:
            total = total + shade_normals(ray, world, background)
        else:
            total = total + render_ray(ray, world, max_bounces, rng, background)

    return (total / len(pattern)).gamma_corrected().with_alpha(1.0)
