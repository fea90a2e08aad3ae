"""In-memory raster of color indices used by the tracer."""

from typing import List, Optional, Tuple
import logging

import numpy as np
from scipy import ndimage

from ..exceptions import InvalidParameterError

logger = logging.getLogger(__name__)

# Pixel coordinates and traced geometry
Point = Tuple[int, int]
Shape = List[Point]
Frame = List[Shape]
Animation = List[Frame]


def pack_rgb(r: int, g: int, b: int) -> int:
    """Pack an RGB triple into a single integer color index."""
    return (int(r) << 16) | (int(g) << 8) | int(b)


class Raster:
    """A width x height grid of integer color indices.

    Pixels are stored row-major (``pixels[y, x]``). When ``palette`` is given
    the indices refer to its rows; otherwise each index is a packed RGB value
    (see :func:`pack_rgb`).
    """

    def __init__(self, pixels: np.ndarray, palette: Optional[np.ndarray] = None):
        pixels = np.asarray(pixels)
        if pixels.ndim != 2:
            raise InvalidParameterError(
                f"Raster pixels must be a 2-D array, got shape {pixels.shape}"
            )
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidParameterError(f"Raster must not be empty, got shape {pixels.shape}")

        self.pixels = pixels.astype(np.int64, copy=True)
        self.palette = None if palette is None else np.asarray(palette, dtype=np.uint8).reshape(-1, 3)

    @classmethod
    def filled(cls, width: int, height: int, color: int,
               palette: Optional[np.ndarray] = None) -> "Raster":
        """Create a raster where every pixel has ``color``."""
        return cls(np.full((height, width), color, dtype=np.int64), palette=palette)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def color_at(self, x: int, y: int) -> int:
        """Return the color index at pixel (x, y)."""
        return int(self.pixels[y, x])

    def copy(self) -> "Raster":
        return Raster(self.pixels, palette=self.palette)

    def find_clear_color(self, r: int, g: int, b: int) -> Optional[int]:
        """Resolve an exact RGB triple to a color index, or None if absent.

        Palette rasters match against palette entries (first match wins),
        packed rasters match against the pixels actually present.
        """
        if self.palette is not None:
            matches = np.flatnonzero(np.all(self.palette == (r, g, b), axis=1))
            return int(matches[0]) if matches.size else None

        packed = pack_rgb(r, g, b)
        return packed if np.any(self.pixels == packed) else None

    def rgb_of(self, color: int) -> Tuple[int, int, int]:
        """Return the RGB triple a color index stands for."""
        if self.palette is not None:
            r, g, b = self.palette[color]
            return int(r), int(g), int(b)
        return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF

    def foreground_count(self, clear_color: int) -> int:
        """Number of pixels whose color differs from ``clear_color``."""
        return int(np.count_nonzero(self.pixels != clear_color))

    def is_clear(self, clear_color: int) -> bool:
        return self.foreground_count(clear_color) == 0

    def clear_region(self, x: int, y: int, clear_color: int) -> int:
        """Flood-fill the 4-connected same-colored region at (x, y) with ``clear_color``.

        Returns the number of pixels that changed.
        """
        target = self.pixels[y, x]
        if target == clear_color:
            return 0

        labeled, _ = ndimage.label(self.pixels == target)
        region = labeled == labeled[y, x]
        self.pixels[region] = clear_color

        changed = int(np.count_nonzero(region))
        logger.debug(f"Cleared region at ({x}, {y}): {changed} pixels")
        return changed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        kind = "palette" if self.palette is not None else "rgb"
        return f"Raster({self.width}x{self.height}, {kind})"
