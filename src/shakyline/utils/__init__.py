"""Utility modules for shakyline."""

from .image import load_raster, ImageLoader, validate_raster_dimensions, require_clear_color, parse_color
from .profiler import StageProfiler, global_profiler

__all__ = [
    "load_raster",
    "ImageLoader",
    "validate_raster_dimensions",
    "require_clear_color",
    "parse_color",
    "StageProfiler",
    "global_profiler",
]
