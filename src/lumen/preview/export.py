"""Image export utilities for rendered frames.

This module converts a frame buffer into a top-down image array and saves it
to disk. Frames store row 0 at the bottom of the image, so exported images
are flipped vertically.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from lumen.core.frame import Frame
    >>> from lumen.preview.export import save_png
    >>>
    >>> frame = Frame(320, 240)
    >>> frame.fill_gradient()
    >>> save_png(frame, "gradient.png")
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from lumen.core.frame import Frame

logger = logging.getLogger(__name__)


def frame_to_image_array(frame: Frame) -> npt.NDArray[np.uint8]:
    """Copy a frame into a top-down image array.

    Args:
        frame: The frame to read. Its lock is held only for the copy.

    Returns:
        Array of shape (height, width, channels) with row 0 at the top.
    """
    pixels = frame.snapshot()
    image = pixels.reshape(frame.height, frame.width, frame.pixel_format.channels)
    return np.ascontiguousarray(np.flipud(image))


def save_png(frame: Frame, filepath: str | os.PathLike[str]) -> None:
    """Save the frame as an RGBA PNG file.

    Args:
        frame: The frame to save. Must use an 8-bit four channel format.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the frame's pixel format is not 8-bit RGBA.
    """
    image = frame_to_image_array(frame)
    if image.dtype != np.uint8 or image.shape[2] != 4:
        raise ValueError(
            f"PNG export needs 8-bit RGBA pixels, got {image.shape[2]} channels of {image.dtype}"
        )

    pil_image = PILImage.fromarray(image)
    pil_image.save(filepath)
    logger.info("Saved %dx%d frame to %s", frame.width, frame.height, filepath)


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str | os.PathLike[str]) -> None:
    """Save a top-down (H, W, 3) or (H, W, 4) uint8 array as a PNG file."""
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3) or (H, W, 4) image, got shape {image.shape}")
    # Pillow infers RGB or RGBA from the channel count
    PILImage.fromarray(np.ascontiguousarray(image, dtype=np.uint8)).save(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
