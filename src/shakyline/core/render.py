"""Frame rasterization and animated GIF assembly."""

from io import BytesIO
from pathlib import Path
from typing import List, Sequence, Tuple
import logging

from PIL import Image, ImageDraw

from .raster import Shape
from ..exceptions import EncodeError

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

MIN_POLYGON_POINTS = 3


class FrameRenderer:
    """Draw one frame of shapes as polygons on a plain background."""

    def __init__(
        self,
        width: int,
        height: int,
        ink: RGB = (0, 0, 0),
        background: RGB = (255, 255, 255),
        outline: bool = False,
    ):
        self.width = width
        self.height = height
        self.ink = tuple(ink)
        self.background = tuple(background)
        self.outline = outline

    def render_frame(self, shapes: Sequence[Shape]) -> Image.Image:
        """Render ``shapes`` into a new RGB image.

        Shapes with fewer than three points are skipped. Points outside the
        canvas are clipped by the drawing backend.
        """
        image = Image.new("RGB", (self.width, self.height), self.background)
        draw = ImageDraw.Draw(image)

        skipped = 0
        for shape in shapes:
            if len(shape) < MIN_POLYGON_POINTS:
                skipped += 1
                continue

            points = [(int(x), int(y)) for x, y in shape]
            if self.outline:
                draw.polygon(points, outline=self.ink)
            else:
                draw.polygon(points, fill=self.ink, outline=self.ink)

        if skipped:
            logger.debug(f"Skipped {skipped} shapes with fewer than {MIN_POLYGON_POINTS} points")
        return image

    def render_animation(self, animation: Sequence[Sequence[Shape]]) -> List[Image.Image]:
        """Render every frame of an animation in order."""
        return [self.render_frame(frame) for frame in animation]


class GifEncoder:
    """Assemble rendered frames into a (looping) animated GIF."""

    def __init__(self, delay_ms: int = 100, loop: bool = True):
        self.delay_ms = delay_ms
        self.loop = loop

    def assemble(self, frames: Sequence[Image.Image]) -> bytes:
        """Encode ``frames`` as one GIF and return its bytes."""
        if not frames:
            raise EncodeError("Cannot assemble an animation with no frames")

        first, *rest = [frame.convert("P", palette=Image.Palette.ADAPTIVE) for frame in frames]
        save_kwargs = {
            "format": "GIF",
            "save_all": True,
            "append_images": rest,
            "duration": self.delay_ms,
        }
        if self.loop:
            # 0 means repeat forever
            save_kwargs["loop"] = 0

        buffer = BytesIO()
        try:
            first.save(buffer, **save_kwargs)
        except (OSError, ValueError) as e:
            raise EncodeError(f"Failed to encode GIF: {e}") from e

        data = buffer.getvalue()
        logger.debug(f"Encoded {len(frames)} frames into {len(data)} bytes")
        return data

    def write(self, frames: Sequence[Image.Image], path: Path) -> int:
        """Encode ``frames`` and write them to ``path``. Returns bytes written."""
        data = self.assemble(frames)
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise EncodeError(f"Failed to write {path}: {e}") from e

        logger.info(f"Wrote {len(frames)}-frame animation to {path} ({len(data)} bytes)")
        return len(data)
