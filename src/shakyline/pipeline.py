"""End-to-end conversion of an image into a shaky-line animated GIF."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple
import logging

from .core.animate import ShakyAnimator
from .core.erode import ERODE_BLOT
from .core.raster import Animation, Raster, Shape
from .core.render import FrameRenderer, GifEncoder
from .core.trace import AntTracer
from .exceptions import InvalidParameterError
from .utils.image import load_raster, require_clear_color
from .utils.profiler import global_profiler

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass
class PipelineConfig:
    """Tunables for one image-to-animation run."""

    # Animation
    sloppiness: float = 0.1
    shakiness: int = 1
    shaky_freq: float = 0.25
    frame_count: int = 5
    seed: Optional[int] = None
    max_workers: int = 1

    # Tracing
    blot_radius: int = ERODE_BLOT
    clear_rgb: RGB = (255, 255, 255)
    input_frame: int = 0

    # Output
    ink_rgb: RGB = (0, 0, 0)
    outline: bool = False
    delay_ms: int = 100
    loop: bool = True

    def __post_init__(self):
        if self.blot_radius < 0:
            raise InvalidParameterError(f"blot_radius must be non-negative, got {self.blot_radius}")
        if self.delay_ms < 0:
            raise InvalidParameterError(f"delay_ms must be non-negative, got {self.delay_ms}")
        if self.input_frame < 0:
            raise InvalidParameterError(f"input_frame must be non-negative, got {self.input_frame}")
        for name in ("clear_rgb", "ink_rgb"):
            rgb = getattr(self, name)
            if len(rgb) != 3 or not all(0 <= c <= 255 for c in rgb):
                raise InvalidParameterError(f"{name} must be an RGB triple, got {rgb}")
        # raises on out-of-range animation parameters
        self.make_animator()

    def make_tracer(self) -> AntTracer:
        return AntTracer(blot_radius=self.blot_radius)

    def make_animator(self) -> ShakyAnimator:
        return ShakyAnimator(
            sloppiness=self.sloppiness,
            shakiness=self.shakiness,
            shaky_freq=self.shaky_freq,
            frame_count=self.frame_count,
            seed=self.seed,
            max_workers=self.max_workers,
        )


@dataclass
class PipelineResult:
    """Summary of a completed run."""

    width: int
    height: int
    shape_count: int
    frame_count: int
    output_bytes: int


@global_profiler.profile_function("load")
def _load(input_path: Path, config: PipelineConfig) -> Tuple[Raster, int]:
    raster = load_raster(input_path, frame=config.input_frame)
    clear_color = require_clear_color(raster, config.clear_rgb)
    logger.info(f"Loaded {input_path}: {raster.width}x{raster.height}, clear color index {clear_color}")
    return raster, clear_color


@global_profiler.profile_function("trace")
def _trace(tracer: AntTracer, raster: Raster, clear_color: int) -> List[Shape]:
    return tracer.trace(raster, clear_color)


@global_profiler.profile_function("animate")
def _animate(animator: ShakyAnimator, shapes: List[Shape]) -> Animation:
    return animator.animate(shapes)


@global_profiler.profile_function("render")
def _render(renderer: FrameRenderer, animation: Animation):
    return renderer.render_animation(animation)


@global_profiler.profile_function("encode")
def _encode(encoder: GifEncoder, frames, output_path: Path) -> int:
    return encoder.write(frames, output_path)


def render_animation(
    input_path: Path,
    output_path: Path,
    config: Optional[PipelineConfig] = None,
    tracer: Optional[AntTracer] = None,
    animator: Optional[ShakyAnimator] = None,
    progress: Optional[Callable[[str], None]] = None,
) -> PipelineResult:
    """Trace ``input_path`` and write its shaky animation to ``output_path``.

    ``tracer`` and ``animator`` default to ones built from ``config``.
    ``progress`` is called with a short label before each stage.
    """
    notify = progress or (lambda stage: None)
    config = config or PipelineConfig()
    tracer = tracer or config.make_tracer()
    animator = animator or config.make_animator()

    notify("Loading image")
    raster, clear_color = _load(Path(input_path), config)
    notify("Tracing shapes")
    shapes = _trace(tracer, raster, clear_color)
    notify("Animating")
    animation = _animate(animator, shapes)

    notify("Rendering frames")
    renderer = FrameRenderer(
        raster.width,
        raster.height,
        ink=config.ink_rgb,
        background=config.clear_rgb,
        outline=config.outline,
    )
    frames = _render(renderer, animation)

    notify("Writing GIF")
    encoder = GifEncoder(delay_ms=config.delay_ms, loop=config.loop)
    output_bytes = _encode(encoder, frames, Path(output_path))

    return PipelineResult(
        width=raster.width,
        height=raster.height,
        shape_count=len(shapes),
        frame_count=len(frames),
        output_bytes=output_bytes,
    )
