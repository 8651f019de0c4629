"""Matplotlib-based preview display for rendered frames.

Frames already hold gamma-corrected, clamped 8-bit pixels, so display is a
matter of flipping the buffer to a top-down image and showing it.

Features:
    - Static preview window for a single frame
    - Side-by-side comparison with an amplified difference view

Example:
    >>> from lumen.core.frame import Frame
    >>> from lumen.preview.display import show_preview
    >>>
    >>> frame = Frame(320, 240)
    >>> frame.fill_gradient()
    >>> show_preview(frame, title="Gradient")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from lumen.preview.export import compute_rmse, frame_to_image_array

if TYPE_CHECKING:
    from lumen.core.frame import Frame


def image_to_float(image: npt.NDArray[np.generic]) -> npt.NDArray[np.float32]:
    """Convert an 8-bit image to float32 in [0, 1]; float images are clipped."""
    if np.issubdtype(image.dtype, np.integer):
        return (image.astype(np.float32) / 255.0).astype(np.float32)
    return np.clip(image, 0.0, 1.0).astype(np.float32)


def show_preview(
    frame: Frame,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the current frame contents as a Matplotlib figure.

    Args:
        frame: The frame to display.
        title: Custom title (default shows the frame size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = frame_to_image_array(frame)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image)
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {frame.width}x{frame.height}")

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display side-by-side comparison of two images with difference view.

    Shows two images and their amplified difference, along with RMSE metric.

    Args:
        image_a: First top-down image (H, W, C), uint8 or float in [0, 1].
        image_b: Second image with the same shape.
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two images in [0, 1] display space.
    """
    import matplotlib.pyplot as plt

    display_a = image_to_float(image_a)
    display_b = image_to_float(image_b)
    rmse = compute_rmse(display_a, display_b)

    diff = np.abs(display_a.astype(np.float64) - display_b.astype(np.float64))
    diff_amplified = np.clip(diff * diff_scale, 0.0, 1.0)
    if diff_amplified.shape[-1] == 4:
        # Alpha differences would make the difference view transparent
        diff_amplified[..., 3] = 1.0

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
