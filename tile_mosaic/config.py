"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

import operator
from dataclasses import dataclass

from tile_mosaic.errors import InvalidConfigurationError


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        square_size: Side of one grid cell and of every resized tile, in pixels.
        color_space: Distance metric - "rgb" (plain Euclidean) or "lab" (perceptual).
        workers:     Thread count for tile preparation and rendering (1 = serial).
        chunk_size:  Rows of the cost matrix computed per batch (controls peak RAM).
    """

    # Grid
    square_size: int = 16

    # Matching
    color_space: str = "rgb"
    chunk_size: int = 512

    # Execution
    workers: int = 1

    COLOR_SPACES: frozenset[str] = frozenset({"rgb", "lab"})

    def __post_init__(self) -> None:
        for name, minimum in (("square_size", 1), ("workers", 1), ("chunk_size", 1)):
            object.__setattr__(self, name, _as_int(name, getattr(self, name), minimum))
        if self.color_space not in self.COLOR_SPACES:
            msg = (
                f"Unknown color_space {self.color_space!r}; "
                f"choose from {sorted(self.COLOR_SPACES)}"
            )
            raise InvalidConfigurationError(msg)


def _as_int(name: str, value: object, minimum: int) -> int:
    """Coerce an integer-like *value* (e.g. ``np.int64``) to a range-checked ``int``."""
    if isinstance(value, bool):
        msg = f"{name} must be an int, got {value!r}"
        raise InvalidConfigurationError(msg)
    try:
        result = operator.index(value)
    except TypeError as exc:
        msg = f"{name} must be an int, got {value!r}"
        raise InvalidConfigurationError(msg) from exc
    if result < minimum:
        msg = f"{name} must be at least {minimum}, got {result}"
        raise InvalidConfigurationError(msg)
    return result
