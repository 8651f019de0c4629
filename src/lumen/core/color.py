"""Floating-point color and fixed-point pixel formats.

Colors are accumulated as unclamped floats while tracing and are only clamped
when converted to an output pixel format. The conversion is vectorized over a
whole chunk of pixels, so the scheduler converts once per chunk before taking
the frame lock.

Example:
    >>> import numpy as np
    >>> c = Color(0.5, 0.25, 1.0)
    >>> RGBA8.from_colors(np.array([c.to_tuple()]))
    array([[127,  63, 255, 255]], dtype=uint8)
"""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass
from typing import ClassVar

import numpy as np
import numpy.typing as npt


@dataclass(frozen=True, slots=True)
class Color:
    """An RGBA color with float channels.

    Arithmetic is component-wise over all four channels. Values are not
    clamped; see PixelFormat for the conversion to displayable pixels.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
        a: Alpha channel (default 1.0).
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    WHITE: ClassVar[Color]
    BLACK: ClassVar[Color]
    SKY_BLUE: ClassVar[Color]

    def __add__(self, other: Color) -> Color:
        return Color(self.r + other.r, self.g + other.g, self.b + other.b, self.a + other.a)

    def __mul__(self, other: Color | float) -> Color:
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b, self.a * other.a)
        return Color(self.r * other, self.g * other, self.b * other, self.a * other)

    def __rmul__(self, other: float) -> Color:
        return self * other

    def __truediv__(self, scalar: float) -> Color:
        return Color(self.r / scalar, self.g / scalar, self.b / scalar, self.a / scalar)

    def gamma_corrected(self) -> Color:
        """Apply gamma-2.0 correction (square root) to the RGB channels.

        Negative channels are treated as zero. Alpha is preserved.
        """
        return Color(
            math.sqrt(max(self.r, 0.0)),
            math.sqrt(max(self.g, 0.0)),
            math.sqrt(max(self.b, 0.0)),
            self.a,
        )

    def clamped(self) -> Color:
        """Clamp every channel into [0, 1]."""
        return Color(*(min(max(c, 0.0), 1.0) for c in self.to_tuple()))

    def with_alpha(self, alpha: float) -> Color:
        return Color(self.r, self.g, self.b, alpha)

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    @classmethod
    def lerp(cls, start: Color, end: Color, t: float) -> Color:
        """Linearly interpolate between two colors: (1 - t) * start + t * end."""
        return (1.0 - t) * start + t * end

    @classmethod
    def visualize_normal(cls, normal: npt.ArrayLike) -> Color:
        """Map a unit normal from [-1, 1]^3 to an opaque color in [0, 1]^3."""
        x, y, z = (float(c) for c in np.asarray(normal).reshape(3))
        return cls((x + 1.0) * 0.5, (y + 1.0) * 0.5, (z + 1.0) * 0.5, 1.0)


Color.WHITE = Color(1.0, 1.0, 1.0, 1.0)
Color.BLACK = Color(0.0, 0.0, 0.0, 1.0)
Color.SKY_BLUE = Color(0.5, 0.6, 1.0, 1.0)


# =============================================================================
# Pixel Formats
# =============================================================================


class PixelFormat(abc.ABC):
    """A fixed-point output format for frame buffers.

    Subclasses define the number of channels, the storage dtype and the
    conversion from an ``(N, 4)`` float RGBA array.
    """

    channels: ClassVar[int]
    dtype: ClassVar[type[np.generic]]

    @classmethod
    @abc.abstractmethod
    def from_colors(cls, colors: npt.NDArray[np.floating]) -> npt.NDArray[np.generic]:
        """Convert float RGBA rows of shape (N, 4) into pixels of shape (N, channels)."""

    @classmethod
    def from_color(cls, color: Color) -> npt.NDArray[np.generic]:
        """Convert a single color into one pixel."""
        return cls.from_colors(np.array([color.to_tuple()], dtype=np.float64))[0]

    @classmethod
    def bytes_per_pixel(cls) -> int:
        return cls.channels * np.dtype(cls.dtype).itemsize


class RGBA8(PixelFormat):
    """Four 8-bit unsigned channels, RGBA order.

    Each channel is clamped to [0, 1], scaled by 255 and truncated. NaN
    channels become 0.
    """

    channels = 4
    dtype = np.uint8

    @classmethod
    def from_colors(cls, colors: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
        colors = np.asarray(colors, dtype=np.float64).reshape(-1, 4)
        colors = np.nan_to_num(colors, nan=0.0, posinf=1.0, neginf=0.0)
        return (np.clip(colors, 0.0, 1.0) * 255.0).astype(np.uint8)
