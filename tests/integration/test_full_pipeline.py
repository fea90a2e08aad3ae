"""Integration tests for the complete shakyline pipeline."""

import logging
import tempfile
from pathlib import Path

import pytest
import numpy as np
from PIL import Image, ImageDraw

from shakyline.core.animate import ShakyAnimator
from shakyline.core.raster import Raster
from shakyline.core.render import FrameRenderer
from shakyline.core.trace import AntTracer
from shakyline.exceptions import DecodeError, NoClearColorError
from shakyline.pipeline import PipelineConfig, render_animation
from shakyline.utils.image import load_raster, require_clear_color
from shakyline.utils.profiler import global_profiler

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


class TestSquareScenario:
    """A 10x10 image with one 4x4 square, animated without any noise."""

    def setup_method(self):
        pixels = np.zeros((10, 10), dtype=int)
        pixels[3:7, 3:7] = 1
        self.raster = Raster(pixels)

    def test_still_animation_of_one_square(self):
        shapes = AntTracer(blot_radius=1).trace(self.raster, 0)
        animation = ShakyAnimator(
            sloppiness=0.0, shakiness=0, shaky_freq=1.0, frame_count=3
        ).animate(shapes)

        assert len(shapes) == 1
        assert len(animation) == 3
        for frame in animation:
            assert frame == shapes
        assert animation[0] == animation[1] == animation[2]

    def test_rendered_frames_cover_square(self):
        shapes = AntTracer().trace(self.raster, 0)
        frame = FrameRenderer(10, 10).render_frame(shapes)

        # eroded square spans 2..7
        assert frame.getpixel((4, 4)) == BLACK
        assert frame.getpixel((2, 2)) == BLACK
        assert frame.getpixel((0, 0)) == WHITE
        assert frame.getpixel((9, 9)) == WHITE


class TestFullPipelineIntegration:
    """Test complete pipeline integration from image file to GIF."""

    def setup_method(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        global_profiler.reset()

    def teardown_method(self):
        self.temp_dir.cleanup()

    def _line_art(self, name="art.png", size=(80, 60)) -> Path:
        """Thin strokes: a rectangle outline, an unclosed arc and a dot."""
        img = Image.new("RGB", size, WHITE)
        draw = ImageDraw.Draw(img)
        draw.rectangle((8, 8, 30, 28), outline=BLACK)
        draw.line([(45, 10), (70, 10), (70, 40)], fill=BLACK)
        draw.point((20, 50), fill=BLACK)
        path = self.root / name
        img.save(path)
        return path

    def test_end_to_end(self):
        input_path = self._line_art()
        output_path = self.root / "out" / "shaky.gif"
        config = PipelineConfig(shakiness=2, shaky_freq=1.0, frame_count=4, seed=12)

        result = render_animation(input_path, output_path, config)

        assert result.width == 80
        assert result.height == 60
        assert result.frame_count == 4
        assert result.output_bytes == output_path.stat().st_size

        with Image.open(output_path) as gif:
            assert gif.size == (80, 60)
            assert gif.n_frames == 4
            assert gif.info["loop"] == 0
            assert gif.info["duration"] == 100

    def test_shape_count_for_line_art(self):
        """Each separate stroke becomes its own shape."""
        raster = load_raster(self._line_art())
        clear = require_clear_color(raster, WHITE)

        shapes = AntTracer().trace(raster, clear)

        # the rectangle outline is one region, the arc and the dot are separate
        assert len(shapes) == 3

    def test_seeded_runs_are_identical(self):
        input_path = self._line_art()
        config = PipelineConfig(seed=99, frame_count=3)

        render_animation(input_path, self.root / "a.gif", config)
        render_animation(input_path, self.root / "b.gif", config)

        assert (self.root / "a.gif").read_bytes() == (self.root / "b.gif").read_bytes()

    def test_gif_input_with_palette(self):
        img = Image.new("RGB", (30, 30), WHITE)
        ImageDraw.Draw(img).ellipse((8, 8, 22, 22), fill=BLACK)
        input_path = self.root / "dot.gif"
        img.convert("P").save(input_path)

        result = render_animation(input_path, self.root / "dot_out.gif", PipelineConfig(seed=1))
        assert result.shape_count == 1

    def test_blank_image(self, caplog):
        input_path = self.root / "blank.png"
        Image.new("RGB", (20, 20), WHITE).save(input_path)

        with caplog.at_level(logging.WARNING):
            result = render_animation(input_path, self.root / "blank.gif", PipelineConfig(seed=1))

        assert result.shape_count == 0
        assert (self.root / "blank.gif").exists()
        assert "No shapes found" in caplog.text

    def test_missing_background_color(self):
        input_path = self.root / "dark.png"
        Image.new("RGB", (20, 20), (40, 40, 40)).save(input_path)

        with pytest.raises(NoClearColorError):
            render_animation(input_path, self.root / "dark.gif")
        assert not (self.root / "dark.gif").exists()

    def test_custom_background_color(self):
        img = Image.new("RGB", (30, 30), BLACK)
        img.paste(WHITE, (10, 10, 20, 20))
        input_path = self.root / "inverse.png"
        img.save(input_path)

        config = PipelineConfig(clear_rgb=BLACK, ink_rgb=WHITE, seed=2)
        result = render_animation(input_path, self.root / "inverse.gif", config)

        assert result.shape_count == 1

    def test_unreadable_input(self):
        input_path = self.root / "broken.gif"
        input_path.write_bytes(b"not an image at all")

        with pytest.raises(DecodeError):
            render_animation(input_path, self.root / "never.gif")

    def test_progress_callback_and_profile(self):
        stages = []
        render_animation(
            self._line_art(), self.root / "p.gif", PipelineConfig(seed=4), progress=stages.append
        )

        assert stages == [
            "Loading image", "Tracing shapes", "Animating", "Rendering frames", "Writing GIF",
        ]
        summary = global_profiler.get_summary()
        assert set(summary["by_stage"]) == {"load", "trace", "animate", "render", "encode"}
