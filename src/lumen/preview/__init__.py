"""Preview module for output and visualization.

This module handles presenting and saving rendered frames:

Components:
    display: Matplotlib-based preview display
    export: PNG export utilities (Pillow)
    interactive: Taichi GGUI-based interactive preview window

Frames store row 0 at the bottom of the image; every presenter here takes
care of the orientation.

Example:
    >>> from lumen.preview import show_preview, save_png
    >>> show_preview(frame)
    >>> save_png(frame, "output.png")

For interactive GGUI preview (requires taichi):
    >>> from lumen.preview.interactive import InteractivePreview
    >>> InteractivePreview(800, 600, manager).run()
"""

from lumen.preview.display import image_to_float, show_comparison, show_preview
from lumen.preview.export import (
    compute_rmse,
    frame_to_image_array,
    save_png,
    save_png_from_array,
)

# Note: interactive is NOT imported here; taichi is an optional dependency.

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    "image_to_float",
    # Export functions
    "frame_to_image_array",
    "save_png",
    "save_png_from_array",
    "compute_rmse",
]
