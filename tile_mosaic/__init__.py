"""
Tile Mosaic
===========

Rebuild a target image out of smaller tile images.  The target is cut into
a grid of equal squares, each square's average colour is measured, and the
square is replaced by the tile whose own average colour is closest.

Images go in and come out as in-memory pixel grids (``PIL.Image`` or
``(H, W, 4)`` uint8 arrays); reading and writing files is up to the caller.
"""

__version__ = "1.0.0"

from tile_mosaic.color_profile import ImageSquare, color_profile, grid_dimension
from tile_mosaic.color_utils import Bounds, Color, average_color, color_distance
from tile_mosaic.composer import closest_tile, compose, match_tiles, mosaic
from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import (
    DegenerateInputError,
    EmptyTileSetError,
    InvalidConfigurationError,
    MosaicError,
)
from tile_mosaic.image_io import as_rgba, new_canvas, to_image
from tile_mosaic.tiles import TileImage, prepare_tiles

__all__ = [
    "Bounds",
    "Color",
    "DegenerateInputError",
    "EmptyTileSetError",
    "ImageSquare",
    "InvalidConfigurationError",
    "MosaicConfig",
    "MosaicError",
    "TileImage",
    "as_rgba",
    "average_color",
    "closest_tile",
    "color_distance",
    "color_profile",
    "compose",
    "grid_dimension",
    "match_tiles",
    "mosaic",
    "new_canvas",
    "prepare_tiles",
    "to_image",
]
