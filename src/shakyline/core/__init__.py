"""Core tracing and animation modules for shakyline."""

from .raster import Raster, Point, Shape, Frame, Animation
from .erode import erode
from .trace import AntTracer, Direction, locate_shape, trace_shape, trace_all
from .animate import ShakyAnimator
from .render import FrameRenderer, GifEncoder

__all__ = [
    "Raster",
    "Point",
    "Shape",
    "Frame",
    "Animation",
    "erode",
    "AntTracer",
    "Direction",
    "locate_shape",
    "trace_shape",
    "trace_all",
    "ShakyAnimator",
    "FrameRenderer",
    "GifEncoder",
]
