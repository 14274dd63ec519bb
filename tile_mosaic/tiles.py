"""Tile preparation: nearest-neighbour resize plus cached average colour."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np
from PIL import Image

from tile_mosaic.color_utils import Color, average_color
from tile_mosaic.errors import InvalidConfigurationError
from tile_mosaic.image_io import as_rgba

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TileImage:
    """A resized, read-only tile and its average colour.

    Attributes:
        pixels:    (S, S, 4) uint8 RGBA, write-protected.
        avg_color: Mean colour of *pixels* in the 16-bit sample range.
    """

    pixels: np.ndarray
    avg_color: Color

    @property
    def size(self) -> int:
        return self.pixels.shape[0]


def resize_tile(image: Image.Image | np.ndarray, square_size: int) -> np.ndarray:
    """Point-sample *image* to exactly ``square_size x square_size``.

    Returns:
        (square_size, square_size, 4) uint8 array.
    """
    rgba = as_rgba(image)
    if rgba.shape[:2] == (square_size, square_size):
        return rgba.copy()
    img = Image.fromarray(rgba)
    img = img.resize((square_size, square_size), Image.NEAREST)
    return np.array(img, dtype=np.uint8)


def _prepare_one(image: Image.Image | np.ndarray, square_size: int) -> TileImage:
    pixels = resize_tile(image, square_size)
    pixels.setflags(write=False)
    return TileImage(pixels, average_color(pixels))


def prepare_tiles(
    images: Sequence[Image.Image | np.ndarray],
    square_size: int,
    workers: int = 1,
) -> list[TileImage]:
    """Resize every candidate tile and attach its average colour.

    Args:
        images:      Tile images (PIL images or uint8 arrays), in priority order.
        square_size: Target side length in pixels.
        workers:     Threads to spread the work over (1 = serial).

    Returns:
        One :class:`TileImage` per input, in input order.
    """
    if square_size <= 0:
        msg = f"square_size must be positive, got {square_size}"
        raise InvalidConfigurationError(msg)

    t0 = time.perf_counter()
    if workers > 1 and len(images) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            tiles = list(pool.map(lambda im: _prepare_one(im, square_size), images))
    else:
        tiles = [_prepare_one(im, square_size) for im in images]

    logger.info(
        "Prepared %d tiles at %dx%d  (%.2f s)",
        len(tiles), square_size, square_size, time.perf_counter() - t0,
    )
    return tiles
