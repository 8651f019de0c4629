#!/usr/bin/env python3
"""Render the random final scene to a PNG file.

This script renders one full frame of the random sphere scene with the
parallel row-chunk scheduler and saves it as an RGBA PNG.

Usage:
    python examples/render_random_scene.py [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --height HEIGHT         Image height in pixels (default: 225)
    --samples {1,2,4,8}     Standard multisample pattern (default: 8)
    --bounces BOUNCES       Maximum bounces per ray (default: 50)
    --lines-per-work LINES  Image rows per render task (default: 50)
    --workers WORKERS       Render processes (default: CPU count)
    --seed SEED             Seed for the scene and the renderer
    --scene {random,simple} Scene to render (default: random)
    --normals               Render surface normals instead of path tracing
    --output OUTPUT         Output file path (default: random_scene.png)
    --verbose               Log every rendered chunk

Example:
    python examples/render_random_scene.py --width 200 --height 112 --samples 4 --seed 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lumen.core.frame import Frame
from lumen.core.sampling import SamplePattern
from lumen.core.scheduler import FrameScheduler
from lumen.core.settings import LINES_PER_WORK, MAX_BOUNCES, RenderSettings, ShadingMode
from lumen.errors import ConfigurationError
from lumen.preview.export import save_png
from lumen.scene.random_scene import (
    RandomSceneParams,
    create_random_scene,
    create_simple_scene,
    default_camera,
    simple_camera,
)

logger = logging.getLogger("render_random_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=400, help="Image width in pixels (default: 400)")
    parser.add_argument("--height", type=int, default=225, help="Image height in pixels (default: 225)")
    parser.add_argument(
        "--samples",
        type=int,
        choices=(1, 2, 4, 8),
        default=8,
        help="Standard multisample pattern (default: 8)",
    )
    parser.add_argument(
        "--bounces",
        type=int,
        default=MAX_BOUNCES,
        help=f"Maximum bounces per ray (default: {MAX_BOUNCES})",
    )
    parser.add_argument(
        "--lines-per-work",
        type=int,
        default=LINES_PER_WORK,
        help=f"Image rows per render task (default: {LINES_PER_WORK})",
    )
    parser.add_argument("--workers", type=int, default=None, help="Render processes")
    parser.add_argument("--seed", type=int, default=None, help="Seed for scene and renderer")
    parser.add_argument(
        "--scene",
        choices=("random", "simple"),
        default="random",
        help="Scene to render (default: random)",
    )
    parser.add_argument(
        "--normals",
        action="store_true",
        help="Render surface normals instead of path tracing",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="random_scene.png",
        help="Output file path (default: random_scene.png)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every rendered chunk")
    return parser.parse_args(argv)


def render_random_scene(args: argparse.Namespace) -> Path:
    """Render the selected scene and save it.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Path to the saved image file.
    """
    settings = RenderSettings(
        max_bounces=args.bounces,
        lines_per_work=args.lines_per_work,
        workers=args.workers,
        seed=args.seed,
        shading=ShadingMode.NORMALS if args.normals else ShadingMode.PATH,
    )

    if args.scene == "random":
        world = create_random_scene(RandomSceneParams(seed=args.seed))
        camera = default_camera()
    else:
        world = create_simple_scene()
        camera = simple_camera()

    logger.info("Scene has %d top-level objects", len(world))

    frame = Frame(args.width, args.height)
    with FrameScheduler(settings) as scheduler:
        stats = scheduler.render_frame(
            frame, camera, world, SamplePattern.standard(args.samples)
        )

    output_file = Path(args.output)
    save_png(frame, output_file)
    logger.info(
        "Saved to %s (%d chunks, %.2fs)", output_file.absolute(), stats.chunks, stats.elapsed
    )
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        render_random_scene(args)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
