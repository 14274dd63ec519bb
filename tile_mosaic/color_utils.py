"""Average colours, colour distance and cost-matrix computation.

Colours are kept in the 16-bit sample range (0..65535): an 8-bit sample ``v``
expands to ``v * 257``, so pure red is ``(65535, 0, 0)``.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np
from scipy.spatial.distance import cdist
from skimage.color import rgb2lab

from tile_mosaic.errors import DegenerateInputError, InvalidConfigurationError

SAMPLE_SCALE = 257  # 0xFF -> 0xFFFF
SAMPLE_MAX = 65535.0
OPAQUE = 255.0


class Color(NamedTuple):
    """RGB triple of floats in the 16-bit sample range."""

    r: float
    g: float
    b: float


class Bounds(NamedTuple):
    """Half-open pixel rectangle ``[x0, x1) x [y0, y1)``."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return max(0, self.x1 - self.x0)

    @property
    def height(self) -> int:
        return max(0, self.y1 - self.y0)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.area == 0

    def clip(self, width: int, height: int) -> Bounds:
        """Intersect with the ``width x height`` image rectangle."""
        return Bounds(
            min(max(self.x0, 0), width),
            min(max(self.y0, 0), height),
            min(max(self.x1, 0), width),
            min(max(self.y1, 0), height),
        )


def average_color(pixels: np.ndarray, bounds: Bounds | None = None) -> Color:
    """Mean alpha-premultiplied RGB of *pixels* inside *bounds*.

    Each colour sample is scaled by its pixel's alpha before averaging, so a
    fully transparent pixel counts as black.  Alpha itself is not averaged;
    grids without an alpha channel are treated as opaque.

    Args:
        pixels: (H, W, 3|4) uint8 pixel grid.
        bounds: Region to average; the whole grid when omitted. Clipped to
            the grid before use.

    Raises:
        DegenerateInputError: the (clipped) region holds no pixels.
    """
    h, w = pixels.shape[:2]
    region = Bounds(0, 0, w, h) if bounds is None else bounds.clip(w, h)
    if region.is_empty:
        msg = f"Cannot average an empty region {tuple(region)}"
        raise DegenerateInputError(msg)

    block = pixels[region.y0:region.y1, region.x0:region.x1].astype(np.float64)
    rgb = block[..., :3]
    if block.shape[2] > 3:
        rgb = rgb * (block[..., 3:4] / OPAQUE)
    samples = rgb.reshape(-1, 3) * SAMPLE_SCALE
    r, g, b = samples.sum(axis=0) / region.area
    return Color(float(r), float(g), float(b))


def color_distance(c1: Color, c2: Color) -> float:
    """Euclidean distance between two colours in RGB space."""
    return math.sqrt(
        (c1.r - c2.r) ** 2 + (c1.g - c2.g) ** 2 + (c1.b - c2.b) ** 2
    )


def to_lab(colors: np.ndarray) -> np.ndarray:
    """Convert (N, 3) 16-bit-range RGB → (N, 3) float64 CIELAB."""
    rgb = np.clip(colors / SAMPLE_MAX, 0.0, 1.0)
    return rgb2lab(rgb.reshape(1, -1, 3)).reshape(-1, 3)


def compute_cost_matrix(
    colors: np.ndarray,
    candidates: np.ndarray,
    color_space: str = "rgb",
    chunk_size: int = 512,
) -> np.ndarray:
    """Pairwise Euclidean distance between *colors* and *candidates*.

    Args:
        colors:      (M, 3) float, 16-bit-range RGB.
        candidates:  (N, 3) float, 16-bit-range RGB.
        color_space: ``"rgb"`` or ``"lab"``.
        chunk_size:  Rows computed per batch (controls peak RAM).

    Returns:
        (M, N) float64 cost matrix.
    """
    a = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
    b = np.asarray(candidates, dtype=np.float64).reshape(-1, 3)
    if color_space == "lab":
        a = to_lab(a)
        b = to_lab(b)
    elif color_space != "rgb":
        msg = f"Unknown color_space {color_space!r}"
        raise InvalidConfigurationError(msg)

    m = len(a)
    cost = np.empty((m, len(b)), dtype=np.float64)
    for i in range(0, m, chunk_size):
        j = min(i + chunk_size, m)
        cost[i:j] = cdist(a[i:j], b, metric="euclidean")
    return cost
