"""Shape location and boundary tracing using the 'ant' method.

The tracer walks a turtle over the raster: on an ink pixel it records the
position and turns left, on a clear pixel it turns right, then it steps
forward. The alternating turns keep it hugging the boundary between ink and
background until it either comes back to where it started or walks off the
edge of the image.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple
import logging

from .erode import ERODE_BLOT, erode
from .raster import Point, Raster, Shape
from ..exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Facing direction of the tracing ant."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Turn taken after landing on an ink pixel
COUNTERCLOCKWISE: Dict[Direction, Direction] = {
    Direction.UP: Direction.LEFT,
    Direction.LEFT: Direction.DOWN,
    Direction.DOWN: Direction.RIGHT,
    Direction.RIGHT: Direction.UP,
}

# Turn taken after landing on a clear pixel
CLOCKWISE: Dict[Direction, Direction] = {
    Direction.UP: Direction.RIGHT,
    Direction.RIGHT: Direction.DOWN,
    Direction.DOWN: Direction.LEFT,
    Direction.LEFT: Direction.UP,
}

# (dx, dy) for one step; y grows downwards
STEP: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


def turn(direction: Direction, on_ink: bool) -> Direction:
    """Return the new facing direction after reading a pixel."""
    return COUNTERCLOCKWISE[direction] if on_ink else CLOCKWISE[direction]


def step(x: int, y: int, direction: Direction) -> Point:
    """Move one pixel forward."""
    dx, dy = STEP[direction]
    return x + dx, y + dy


def locate_shape(raster: Raster, clear_color: int) -> Optional[Point]:
    """Find the next ink pixel, scanning from the bottom-right corner.

    Rows are scanned bottom to top and each row right to left; the first
    non-clear pixel wins.
    """
    ink = raster.pixels != clear_color
    rows = ink.any(axis=1).nonzero()[0]
    if rows.size == 0:
        return None

    y = int(rows[-1])
    x = int(ink[y].nonzero()[0][-1])
    return x, y


def trace_shape(raster: Raster, clear_color: int, start: Point) -> Shape:
    """Trace the boundary of the region containing ``start``.

    The walk stops when it returns to ``start`` or leaves the raster. In the
    latter case the result is an open contour, which is a valid shape. The
    step map is invertible on (position, direction) states, so a walk that
    stays in bounds always revisits its starting position.

    Returns:
        Ink points in the order they were visited. A point may repeat.
    """
    start_x, start_y = start
    if not raster.in_bounds(start_x, start_y):
        raise InvalidParameterError(
            f"Start point {start} is outside the {raster.width}x{raster.height} raster"
        )

    pixels = raster.pixels
    width, height = raster.width, raster.height

    x, y = start_x, start_y
    direction = Direction.UP
    shape: Shape = []

    while True:
        on_ink = pixels[y, x] != clear_color
        if on_ink:
            shape.append((x, y))
        direction = turn(direction, on_ink)
        x, y = step(x, y, direction)

        if not (0 <= x < width and 0 <= y < height):
            logger.debug(f"Contour from {start} left the raster at ({x}, {y}) after {len(shape)} points")
            break
        if x == start_x and y == start_y:
            break

    return shape


def trace_all(raster: Raster, clear_color: int) -> List[Shape]:
    """Trace every shape in ``raster``, clearing each one once traced.

    ``raster`` is consumed: when this returns every pixel is ``clear_color``.
    """
    shapes: List[Shape] = []

    while True:
        start = locate_shape(raster, clear_color)
        if start is None:
            break

        shape = trace_shape(raster, clear_color, start)
        shapes.append(shape)
        raster.clear_region(start[0], start[1], clear_color)
        logger.debug(f"Shape {len(shapes)} at {start}: {len(shape)} points")

    return shapes


class AntTracer:
    """Erode a raster and trace every shape in it."""

    def __init__(self, blot_radius: int = ERODE_BLOT):
        if blot_radius < 0:
            raise InvalidParameterError(f"blot_radius must be non-negative, got {blot_radius}")
        self.blot_radius = blot_radius

    def trace(self, raster: Raster, clear_color: int) -> List[Shape]:
        """Return the shapes found in ``raster``; the input raster is left untouched."""
        eroded = erode(raster, clear_color, self.blot_radius)
        shapes = trace_all(eroded, clear_color)

        if shapes:
            total_points = sum(len(s) for s in shapes)
            logger.info(f"Traced {len(shapes)} shapes ({total_points} points)")
        else:
            logger.warning("No shapes found; image contains only the background color")
        return shapes
