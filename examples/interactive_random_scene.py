#!/usr/bin/env python3
"""Interactive random scene viewer with keyboard camera movement.

This script opens a Taichi GGUI window showing the random sphere scene. A
background worker re-renders the whole frame whenever the camera changes;
the window shows the frame as the chunks complete.

Usage:
    python examples/interactive_random_scene.py [--width W] [--height H] [--samples N]

Controls:
    - W/A/S/D or arrow keys: move forward/left/backward/right
    - E / Q: move up / down
    - FOV, Aperture, Focus sliders: adjust the lens
    - Export PNG: save the current frame with a timestamp

Requires the ``viewer`` extra (taichi).
"""

from __future__ import annotations

import argparse
import logging
import platform
import sys

import taichi as ti

logger = logging.getLogger("interactive_random_scene")


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    if platform.system() == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except RuntimeError:
            logger.debug("Metal backend unavailable", exc_info=True)

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except RuntimeError:
        logger.debug("GPU backend unavailable", exc_info=True)

    ti.init(arch=ti.cpu)
    return "CPU"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Interactive random scene viewer.")
    parser.add_argument("--width", type=int, default=800, help="Window width (default: 800)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument(
        "--samples",
        type=int,
        choices=(1, 2, 4, 8),
        default=8,
        help="Standard multisample pattern (default: 8)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the scene")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the interactive viewer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Taichi must be initialized before the preview allocates its fields
    backend = initialize_taichi()
    logger.info("Taichi backend: %s", backend)

    from lumen.core.sampling import SamplePattern
    from lumen.preview.interactive import InteractivePreview
    from lumen.scene import RandomSceneParams, SceneManager, create_random_scene, default_camera

    if not InteractivePreview.is_display_available():
        logger.error("No display available. This script requires a graphical environment.")
        return 1

    manager = SceneManager(default_camera(), create_random_scene(RandomSceneParams(seed=args.seed)))
    preview = InteractivePreview(
        args.width, args.height, manager, pattern=SamplePattern.standard(args.samples)
    )

    logger.info("Starting interactive rendering; close the window to exit")
    try:
        preview.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        preview.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
