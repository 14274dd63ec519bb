"""Colour profile of the target: a square grid of cells with their average colour.

The grid dimension is derived from the target's *width* only, so the grid is
always ``n x n`` with ``n = width // square_size + 1``.  For a square target
this covers the image plus one trailing row and column that fall (partly or
wholly) outside it.  Non-square targets are not special-cased: a tall target
loses its bottom rows, a wide one gets rows lying below the image, whose
cells carry no colour.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np
from PIL import Image

from tile_mosaic.color_utils import Bounds, Color, average_color
from tile_mosaic.errors import InvalidConfigurationError
from tile_mosaic.image_io import as_rgba

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSquare:
    """One grid cell: its clipped bounds and their average colour.

    ``avg_color`` is ``None`` when the cell lies entirely outside the target.
    """

    bounds: Bounds
    avg_color: Color | None

    @property
    def is_empty(self) -> bool:
        return self.avg_color is None


Grid = list[list[ImageSquare]]


def grid_dimension(width: int, square_size: int) -> int:
    """Rows (and columns) of the profile grid for a target *width* pixels wide."""
    if square_size <= 0:
        msg = f"square_size must be positive, got {square_size}"
        raise InvalidConfigurationError(msg)
    return width // square_size + 1


def color_profile(target: Image.Image | np.ndarray, square_size: int) -> Grid:
    """Split *target* into ``n x n`` squares and average each one.

    Args:
        target:      Target image (PIL image or uint8 array).
        square_size: Side of one square in pixels.

    Returns:
        ``grid[row][col]`` of :class:`ImageSquare`.
    """
    pixels = as_rgba(target)
    h, w = pixels.shape[:2]
    n = grid_dimension(w, square_size)
    if h != w:
        logger.debug(
            "Target is %dx%d; grid sized from width only (%dx%d cells)", w, h, n, n,
        )

    t0 = time.perf_counter()
    grid: Grid = []
    for row in range(n):
        y = row * square_size
        cells = []
        for col in range(n):
            x = col * square_size
            bounds = Bounds(x, y, x + square_size, y + square_size).clip(w, h)
            color = None if bounds.is_empty else average_color(pixels, bounds)
            cells.append(ImageSquare(bounds, color))
        grid.append(cells)

    logger.info(
        "Profiled %dx%d target into %dx%d squares  (%.2f s)",
        w, h, n, n, time.perf_counter() - t0,
    )
    return grid
