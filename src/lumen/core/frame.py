"""Shared, lock-guarded frame buffer.

The frame is the only mutable state shared between the render workers and the
presentation layer. Pixels are stored row-major as a ``(width * height,
channels)`` array in the frame's pixel format, with row 0 at the bottom of
the image. Writers replace whole pixel runs; readers take a copy. Both go
through the same lock, so a reader may observe a mix of old and new chunks
(a torn frame) but never a partially copied chunk.

Example:
    >>> frame = Frame(4, 2)
    >>> frame.fill_gradient()
    >>> frame.snapshot().shape
    (8, 4)
"""

from __future__ import annotations

import contextlib
import threading
from collections.abc import Iterator

import numpy as np
import numpy.typing as npt

from lumen.core.color import RGBA8, PixelFormat
from lumen.errors import ConfigurationError, FrameLockError


class Frame:
    """A fixed-size pixel buffer guarded by one lock.

    A resize is a new Frame. If a writer raises while holding the lock the
    frame is poisoned and every later lock attempt fails with FrameLockError.

    Attributes:
        pixels: The ``(width * height, channels)`` pixel array. Access it only
            under ``locked()``.
        pixel_format: The PixelFormat subclass the pixels are stored in.
    """

    def __init__(self, width: int, height: int, pixel_format: type[PixelFormat] = RGBA8) -> None:
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Frame size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self.pixel_format = pixel_format
        self.pixels = np.zeros((width * height, pixel_format.channels), dtype=pixel_format.dtype)
        self._lock = threading.Lock()
        self._poisoned = False

    def __repr__(self) -> str:
        return f"Frame({self._width}x{self._height}, {self.pixel_format.__name__})"

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return (self._width, self._height)

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @contextlib.contextmanager
    def locked(self, timeout: float | None = None) -> Iterator[npt.NDArray[np.generic]]:
        """Hold the frame lock and yield the pixel array.

        Args:
            timeout: Seconds to wait for the lock, or None to block.

        Raises:
            FrameLockError: If the lock was not acquired in time or the frame
                is poisoned.
        """
        acquired = self._lock.acquire() if timeout is None else self._lock.acquire(timeout=timeout)
        if not acquired:
            raise FrameLockError(f"Timed out after {timeout}s waiting for the frame lock")
        try:
            if self._poisoned:
                raise FrameLockError("Frame is poisoned by a failed writer")
            try:
                yield self.pixels
            except BaseException:
                self._poisoned = True
                raise
        finally:
            self._lock.release()

    def write(self, start: int, block: npt.NDArray[np.generic], timeout: float | None = None) -> None:
        """Copy a finished run of pixels into the buffer at ``start``.

        Args:
            start: Index of the first pixel of the run.
            block: Pixels of shape ``(n, channels)`` in the frame's format.
            timeout: Seconds to wait for the lock, or None to block.

        Raises:
            ValueError: If the block is not in the frame's pixel format or the
                run does not fit inside the frame.
            FrameLockError: If the lock cannot be taken.
        """
        block = np.asarray(block)
        channels = self.pixel_format.channels
        if block.ndim != 2 or block.shape[1] != channels:
            raise ValueError(f"Expected a (n, {channels}) pixel block, got shape {block.shape}")
        if block.dtype != self.pixels.dtype:
            raise ValueError(f"Expected {self.pixels.dtype} pixels, got {block.dtype}")
        end = start + block.shape[0]
        if start < 0 or end > self.pixels.shape[0]:
            raise ValueError(
                f"Pixel run [{start}, {end}) is outside the frame of {self.pixels.shape[0]} pixels"
            )
        with self.locked(timeout) as pixels:
            pixels[start:end] = block

    def snapshot(self, timeout: float | None = None) -> npt.NDArray[np.generic]:
        """Return a copy of the current pixels."""
        with self.locked(timeout) as pixels:
            return pixels.copy()

    def pixel(self, x: int, y: int) -> npt.NDArray[np.generic]:
        """Return a copy of the pixel at column x, row y (row 0 at the bottom)."""
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} frame")
        with self.locked() as pixels:
            return pixels[y * self._width + x].copy()

    def clear(self, rgba: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)) -> None:
        """Fill every pixel with one color."""
        value = self.pixel_format.from_colors(np.array([rgba], dtype=np.float64))[0]
        with self.locked() as pixels:
            pixels[:] = value

    def fill_gradient(self) -> None:
        """Fill the frame with a red/green test gradient.

        Red grows left to right and green grows bottom to top, which makes
        orientation mistakes in a viewer easy to spot.
        """
        xs = np.arange(self._width, dtype=np.float64) / max(self._width - 1, 1)
        ys = np.arange(self._height, dtype=np.float64) / max(self._height - 1, 1)
        colors = np.zeros((self._height, self._width, 4), dtype=np.float64)
        colors[..., 0] = xs[np.newaxis, :]
        colors[..., 1] = ys[:, np.newaxis]
        colors[..., 3] = 1.0
        block = self.pixel_format.from_colors(colors.reshape(-1, 4))
        with self.locked() as pixels:
            pixels[:] = block
