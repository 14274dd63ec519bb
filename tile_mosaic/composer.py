"""Nearest-colour tile matching and mosaic composition."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

import numpy as np
from PIL import Image

from tile_mosaic.color_profile import color_profile
from tile_mosaic.color_utils import Color, compute_cost_matrix
from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import DegenerateInputError, EmptyTileSetError
from tile_mosaic.image_io import as_rgba, new_canvas
from tile_mosaic.tiles import TileImage, prepare_tiles

logger = logging.getLogger(__name__)


def match_tiles(
    colors: Sequence[Color] | np.ndarray,
    tiles: Sequence[TileImage],
    color_space: str = "rgb",
    chunk_size: int = 512,
) -> np.ndarray:
    """Index of the closest tile for every colour in *colors*.

    Ties resolve to the earliest tile in *tiles*.

    Returns:
        (M,) int array of indices into *tiles*.
    """
    if len(tiles) == 0:
        msg = "No tiles to match against"
        raise EmptyTileSetError(msg)
    tile_colors = np.array([t.avg_color for t in tiles], dtype=np.float64)
    cost = compute_cost_matrix(colors, tile_colors, color_space, chunk_size)
    # argmin returns the first occurrence of the minimum
    return np.argmin(cost, axis=1)


def closest_tile(
    color: Color,
    tiles: Sequence[TileImage],
    color_space: str = "rgb",
) -> TileImage:
    """The tile whose average colour is nearest to *color* (first wins on ties)."""
    return tiles[int(match_tiles([color], tiles, color_space)[0])]


def compose(
    target: Image.Image | np.ndarray,
    tiles: Sequence[Image.Image | np.ndarray],
    config: MosaicConfig | None = None,
) -> np.ndarray:
    """Build a photomosaic of *target* out of *tiles*.

    The target is profiled into an ``n x n`` grid (see
    :func:`~tile_mosaic.color_profile.color_profile`) and a zeroed
    ``S*n x S*n`` RGBA canvas is allocated.  Cells in rows and columns
    ``0 .. n-2`` are replaced by their closest tile; the last row and column
    are never drawn and stay transparent black.

    Args:
        target: Target image (PIL image or uint8 array).
        tiles:  Candidate tile images, in priority order.
        config: Run parameters; defaults to :class:`MosaicConfig()`.

    Returns:
        (S*n, S*n, 4) uint8 RGBA canvas.
    """
    cfg = config or MosaicConfig()
    size = cfg.square_size

    if len(tiles) == 0:
        msg = "At least one tile image is required"
        raise EmptyTileSetError(msg)
    pixels = as_rgba(target)

    tile_imgs = prepare_tiles(tiles, size, workers=cfg.workers)
    grid = color_profile(pixels, size)
    n = len(grid)
    canvas = new_canvas(size * n, size * n)

    rendered = n - 1
    if rendered <= 0:
        logger.info("Target narrower than one square; nothing to render")
        return canvas

    cells = [grid[row][col] for row in range(rendered) for col in range(rendered)]
    for idx, cell in enumerate(cells):
        if cell.is_empty:
            row, col = divmod(idx, rendered)
            msg = (
                f"Square ({row}, {col}) at {tuple(cell.bounds)} has no pixels; "
                f"target {pixels.shape[1]}x{pixels.shape[0]} is wider than it is tall"
            )
            raise DegenerateInputError(msg)

    logger.info(
        "Matching %d squares against %d tiles (%s) …",
        len(cells), len(tile_imgs), cfg.color_space,
    )
    t0 = time.perf_counter()
    choice = match_tiles(
        [cell.avg_color for cell in cells], tile_imgs,
        color_space=cfg.color_space, chunk_size=cfg.chunk_size,
    ).reshape(rendered, rendered)
    logger.info("Matching done  (%.2f s)", time.perf_counter() - t0)

    def render_row(row: int) -> None:
        y = row * size
        for col in range(rendered):
            x = col * size
            tile = tile_imgs[choice[row, col]]
            canvas[y:y + size, x:x + size] = tile.pixels
            logger.debug("Square (%d, %d) -> tile %d", row, col, choice[row, col])

    t0 = time.perf_counter()
    if cfg.workers > 1:
        # Each row writes its own horizontal band of the canvas.
        with ThreadPoolExecutor(max_workers=cfg.workers) as pool:
            list(pool.map(render_row, range(rendered)))
    else:
        for row in range(rendered):
            render_row(row)
    logger.info(
        "Rendered %dx%d mosaic  (%.2f s)",
        canvas.shape[1], canvas.shape[0], time.perf_counter() - t0,
    )
    return canvas


def mosaic(
    target: Image.Image | np.ndarray,
    tiles: Sequence[Image.Image | np.ndarray],
    square_size: int,
    *,
    color_space: str = "rgb",
    workers: int = 1,
) -> np.ndarray:
    """Convenience wrapper around :func:`compose` taking plain arguments."""
    cfg = MosaicConfig(
        square_size=square_size, color_space=color_space, workers=workers,
    )
    return compose(target, tiles, cfg)
