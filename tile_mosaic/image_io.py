"""In-memory pixel grids: normalising inputs, allocating and exporting canvases.

Every stage of the pipeline works on ``(H, W, 4)`` uint8 RGBA arrays.  Decoding
and encoding files is left to the caller; this module only converts between
``PIL.Image`` objects, plain arrays and that canonical layout.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from tile_mosaic.errors import DegenerateInputError

CHANNELS = 4
OPAQUE = 255


def as_rgba(image: Image.Image | np.ndarray) -> np.ndarray:
    """Return *image* as an ``(H, W, 4)`` uint8 RGBA array.

    Accepts a ``PIL.Image`` in any mode, or a uint8 array shaped ``(H, W)``
    (grayscale), ``(H, W, 3)`` (RGB, made opaque) or ``(H, W, 4)``.

    Raises:
        DegenerateInputError: the image has zero width or height.
        ValueError: the array has an unsupported shape or dtype.
    """
    if isinstance(image, Image.Image):
        arr = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    else:
        arr = np.asarray(image)
        if arr.dtype != np.uint8:
            msg = f"Pixel arrays must be uint8, got {arr.dtype}"
            raise ValueError(msg)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
        if arr.ndim != 3 or arr.shape[2] not in (3, CHANNELS):
            msg = f"Expected (H, W), (H, W, 3) or (H, W, 4) array, got {arr.shape}"
            raise ValueError(msg)
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), OPAQUE, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)

    h, w = arr.shape[:2]
    if h == 0 or w == 0:
        msg = f"Image has zero area ({w}x{h})"
        raise DegenerateInputError(msg)
    return arr


def new_canvas(width: int, height: int) -> np.ndarray:
    """Allocate a transparent-black ``(height, width, 4)`` canvas."""
    return np.zeros((height, width, CHANNELS), dtype=np.uint8)


def to_image(pixels: np.ndarray) -> Image.Image:
    """Wrap an RGBA pixel grid as a ``PIL.Image`` for saving or display."""
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
