"""shakyline - Turn still line art into shaky hand-drawn animated GIFs."""

__version__ = "0.1.0"
__description__ = "Trace the shapes in an image and redraw them as a shaky-line GIF animation"

from .core.raster import Raster
from .core.trace import AntTracer
from .core.animate import ShakyAnimator
from .core.render import FrameRenderer, GifEncoder
from .pipeline import PipelineConfig, render_animation
from .utils.image import load_raster

__all__ = [
    "Raster",
    "AntTracer",
    "ShakyAnimator",
    "FrameRenderer",
    "GifEncoder",
    "PipelineConfig",
    "render_animation",
    "load_raster",
]
