"""Exceptions raised by the mosaic pipeline."""

from __future__ import annotations


class MosaicError(ValueError):
    """Base class for every error raised by :mod:`tile_mosaic`."""


class InvalidConfigurationError(MosaicError):
    """A run parameter (square size, worker count, colour space) is unusable."""


class EmptyTileSetError(MosaicError):
    """No tile images were supplied, so no cell can be matched."""


class DegenerateInputError(MosaicError):
    """An image or region has no pixels to average."""
