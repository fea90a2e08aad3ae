"""Line-art thickening ("erosion") ahead of contour tracing."""

import logging

import numpy as np

from .raster import Raster
from ..exceptions import InvalidParameterError

logger = logging.getLogger(__name__)

ERODE_BLOT = 1  # blot square has sides of 2 * ERODE_BLOT + 1


def erode(raster: Raster, clear_color: int, blot_radius: int = ERODE_BLOT) -> Raster:
    """Blot every non-clear pixel into the square around it.

    Thin or broken strokes become solid regions the tracer can walk around.
    The result is a new raster; ``raster`` is not modified. Overlapping blots
    take the color of the source pixel that comes last when scanning columns
    left to right and each column top to bottom.

    Args:
        raster: Source raster.
        clear_color: Background color index; never blotted.
        blot_radius: Half-width of the blot square.

    Returns:
        Eroded raster of the same size and palette.
    """
    if blot_radius < 0:
        raise InvalidParameterError(f"blot_radius must be non-negative, got {blot_radius}")

    src = raster.pixels
    height, width = src.shape
    out = np.full_like(src, clear_color)

    # (sx, sy) ascends in the same order the source pixels would be painted,
    # so a later offset overwrites an earlier one.
    offsets = [
        (sx, sy)
        for sx in range(-blot_radius, blot_radius + 1)
        for sy in range(-blot_radius, blot_radius + 1)
    ]
    for sx, sy in offsets:
        # target (x, y) receives source (x + sx, y + sy)
        ty0, ty1 = max(0, -sy), min(height, height - sy)
        tx0, tx1 = max(0, -sx), min(width, width - sx)
        if ty0 >= ty1 or tx0 >= tx1:
            continue

        source = src[ty0 + sy:ty1 + sy, tx0 + sx:tx1 + sx]
        target = out[ty0:ty1, tx0:tx1]
        ink = source != clear_color
        target[ink] = source[ink]

    eroded = Raster(out, palette=raster.palette)
    logger.debug(
        f"Eroded {raster.width}x{raster.height} raster with radius {blot_radius}: "
        f"{raster.foreground_count(clear_color)} -> {eroded.foreground_count(clear_color)} ink pixels"
    )
    return eroded
