"""Fixed sub-pixel sample patterns for anti-aliasing.

A sample pattern is a deterministic set of offsets inside the unit pixel
square. Each offset produces one camera ray per pixel; the results are
averaged. The standard patterns follow the Direct3D standard multisample
quality levels (offsets on a 1/16 grid).

Example:
    >>> pattern = SamplePattern.standard(4)
    >>> len(pattern)
    4
    >>> pattern.offsets[0]
    (0.125, 0.375)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from lumen.errors import ConfigurationError


@dataclass(frozen=True)
class SamplePattern:
    """An ordered, non-empty sequence of 2D offsets in [0, 1] x [0, 1].

    Attributes:
        offsets: The (x, y) sub-pixel offsets.
    """

    offsets: tuple[tuple[float, float], ...]

    def __init__(self, offsets: Iterable[tuple[float, float]]) -> None:
        normalized = tuple((float(x), float(y)) for x, y in offsets)
        if not normalized:
            raise ConfigurationError("Sample pattern must contain at least one offset")
        for i, (x, y) in enumerate(normalized):
            if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
                raise ConfigurationError(
                    f"Sample offset {i} = ({x}, {y}) is outside [0, 1] x [0, 1]"
                )
        object.__setattr__(self, "offsets", normalized)

    def __len__(self) -> int:
        return len(self.offsets)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        return iter(self.offsets)

    @classmethod
    def standard(cls, count: int) -> SamplePattern:
        """Look up one of the standard 1x, 2x, 4x or 8x patterns.

        Raises:
            ConfigurationError: If no standard pattern has that many samples.
        """
        try:
            return _STANDARD_PATTERNS[count]
        except KeyError:
            raise ConfigurationError(
                f"No standard sample pattern with {count} samples "
                f"(available: {sorted(_STANDARD_PATTERNS)})"
            ) from None

    @classmethod
    def grid(cls, n: int) -> SamplePattern:
        """Build an n x n stratified grid with one sample at each cell center."""
        if n <= 0:
            raise ConfigurationError(f"Grid size must be positive, got {n}")
        step = 1.0 / n
        return cls(
            ((i + 0.5) * step, (j + 0.5) * step) for j in range(n) for i in range(n)
        )


SINGLE_SAMPLE_PATTERN = SamplePattern([(0.5, 0.5)])

MULTISAMPLE_2X_PATTERN = SamplePattern(
    [
        (0.25, 0.75),
        (0.75, 0.25),
    ]
)

MULTISAMPLE_4X_PATTERN = SamplePattern(
    [
        (0.125, 0.375),
        (0.375, 0.875),
        (0.625, 0.125),
        (0.875, 0.625),
    ]
)

MULTISAMPLE_8X_PATTERN = SamplePattern(
    [
        (0.0625, 0.5625),
        (0.1875, 0.1875),
        (0.3125, 0.8125),
        (0.4375, 0.3125),
        (0.5625, 0.6875),
        (0.6875, 0.0625),
        (0.8125, 0.4375),
        (0.9375, 0.9375),
    ]
)

_STANDARD_PATTERNS = {
    1: SINGLE_SAMPLE_PATTERN,
    2: MULTISAMPLE_2X_PATTERN,
    4: MULTISAMPLE_4X_PATTERN,
    8: MULTISAMPLE_8X_PATTERN,
}
