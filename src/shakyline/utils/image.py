"""Image loading and validation utilities."""

from PIL import Image, ImageOps, UnidentifiedImageError
import numpy as np
from pathlib import Path
from typing import Tuple
import logging

from ..core.raster import Raster, pack_rgb
from ..exceptions import DecodeError, InvalidParameterError, NoClearColorError

logger = logging.getLogger(__name__)

MAX_DIMENSION = 8192
MAX_PIXELS = 33_554_432


class ImageLoader:
    """Load an image file into a :class:`Raster` of color indices."""

    SUPPORTED_FORMATS = {".png", ".jpg", ".jpeg", ".gif"}

    def __init__(self, path: Path, frame: int = 0):
        self.path = Path(path)
        self.frame = frame
        self._validate_format()
        self._validate_frame_number()

    def _validate_format(self) -> None:
        """Validate image format is supported."""
        if not self.path.exists():
            raise DecodeError(f"Image file not found: {self.path}")

        if not self.path.is_file():
            raise DecodeError(f"Path is not a file: {self.path}")

        suffix = self.path.suffix.lower()
        if suffix not in self.SUPPORTED_FORMATS:
            supported = ", ".join(sorted(self.SUPPORTED_FORMATS))
            raise DecodeError(
                f"Unsupported format '{suffix}'. Supported formats: {supported}"
            )

    def _validate_frame_number(self) -> None:
        if self.frame < 0:
            raise DecodeError(f"Frame number must be non-negative, got {self.frame}")

    def load(self) -> Raster:
        """Decode the image into a raster."""
        try:
            with Image.open(self.path) as img:
                logger.debug(f"Loaded image: {img.format} {img.mode} {img.size}")
                img.verify()

            # verify() leaves the image unusable, so open it again
            with Image.open(self.path) as img:
                if getattr(img, "is_animated", False):
                    self._seek_frame(img)
                return self._to_raster(img)

        except DecodeError:
            raise
        except (OSError, EOFError, UnidentifiedImageError, SyntaxError) as e:
            raise DecodeError(f"Failed to load image {self.path}: {e}") from e

    def _seek_frame(self, img: Image.Image) -> None:
        """Select a frame of an animated image."""
        total_frames = getattr(img, "n_frames", 1)
        if self.frame >= total_frames:
            raise DecodeError(
                f"Frame {self.frame} not available. Image has {total_frames} frames (0-{total_frames-1})"
            )

        try:
            img.seek(self.frame)
        except EOFError as e:
            raise DecodeError(f"Cannot seek to frame {self.frame} in {self.path}") from e
        logger.debug(f"Selected frame {self.frame} of {total_frames}")

    def _to_raster(self, img: Image.Image) -> Raster:
        """Convert a PIL image to a raster of palette indices or packed RGB."""
        if self.frame > 0 and not getattr(img, "is_animated", False):
            raise DecodeError(f"Frame {self.frame} requested but {self.path} is not animated")

        if img.mode == "P":
            pixels = np.array(img, dtype=np.int64)
            palette = np.array((img.getpalette() or [])[:768], dtype=np.uint8).reshape(-1, 3)
            logger.debug(f"Palette image with {len(palette)} colors")
            return Raster(pixels, palette=palette)

        img = ImageOps.exif_transpose(img)
        original_mode = img.mode
        if img.mode in ("RGBA", "LA"):
            # Composite transparency onto white
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img.convert("RGBA"), mask=img.convert("RGBA").split()[-1])
            img = background
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if original_mode != "RGB":
            logger.debug(f"Converted image from {original_mode} to RGB")

        rgb = np.array(img, dtype=np.int64)
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise DecodeError(f"Expected RGB array, got shape {rgb.shape}")

        pixels = (rgb[:, :, 0] << 16) | (rgb[:, :, 1] << 8) | rgb[:, :, 2]
        return Raster(pixels)


def load_raster(path: Path, frame: int = 0) -> Raster:
    """Convenience function to load an image file as a raster."""
    raster = ImageLoader(path, frame).load()
    validate_raster_dimensions(raster)
    return raster


def validate_raster_dimensions(raster: Raster) -> None:
    """Reject rasters too large to trace in memory."""
    width, height = raster.size

    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise DecodeError(
            f"Image too large: {width}×{height}. "
            f"Maximum size: {MAX_DIMENSION}×{MAX_DIMENSION} pixels. "
            f"Consider downscaling your image before processing."
        )

    total_pixels = width * height
    if total_pixels > MAX_PIXELS:
        megapixels = total_pixels / 1_000_000
        raise DecodeError(
            f"Image has too many pixels: {megapixels:.1f}MP. "
            f"Maximum: {MAX_PIXELS / 1_000_000:.1f}MP."
        )

    logger.debug(f"Image dimensions validated: {width}×{height} ({total_pixels:,} pixels)")


def require_clear_color(raster: Raster, rgb: Tuple[int, int, int]) -> int:
    """Resolve the background color index, failing if the image lacks it."""
    clear_color = raster.find_clear_color(*rgb)
    if clear_color is None:
        raise NoClearColorError(
            f"Background color #{pack_rgb(*rgb):06x} does not occur in the image"
        )
    return clear_color


def parse_color(value: str) -> Tuple[int, int, int]:
    """Parse 'rrggbb', '#rrggbb' or '#rgb' into an RGB triple."""
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise InvalidParameterError(f"Invalid color '{value}': expected rrggbb")

    try:
        packed = int(text, 16)
    except ValueError as e:
        raise InvalidParameterError(f"Invalid color '{value}': expected rrggbb") from e
    return (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF
