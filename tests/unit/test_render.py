"""Tests for frame rendering and GIF assembly."""

import io
import tempfile
from pathlib import Path

import pytest
from PIL import Image

from shakyline.core.render import FrameRenderer, GifEncoder
from shakyline.exceptions import EncodeError

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

SQUARE = [(2, 2), (7, 2), (7, 7), (2, 7)]


class TestFrameRenderer:
    """Test polygon rasterization of one frame."""

    def test_canvas_size_and_background(self):
        image = FrameRenderer(12, 8).render_frame([])

        assert image.size == (12, 8)
        assert image.mode == "RGB"
        assert image.getpixel((0, 0)) == WHITE

    def test_filled_polygon(self):
        image = FrameRenderer(10, 10).render_frame([SQUARE])

        assert image.getpixel((4, 4)) == BLACK
        assert image.getpixel((2, 2)) == BLACK
        assert image.getpixel((0, 0)) == WHITE
        assert image.getpixel((9, 9)) == WHITE

    def test_outline_mode_leaves_interior(self):
        image = FrameRenderer(10, 10, outline=True).render_frame([SQUARE])

        assert image.getpixel((2, 5)) == BLACK
        assert image.getpixel((4, 4)) == WHITE

    def test_custom_colors(self):
        red, blue = (255, 0, 0), (0, 0, 255)
        image = FrameRenderer(10, 10, ink=red, background=blue).render_frame([SQUARE])

        assert image.getpixel((4, 4)) == red
        assert image.getpixel((0, 0)) == blue

    def test_short_shapes_skipped(self):
        """Shapes with fewer than three points are not drawn and do not raise."""
        image = FrameRenderer(10, 10).render_frame([[], [(1, 1)], [(1, 1), (5, 5)]])
        assert image.getcolors() == [(100, WHITE)]

    def test_out_of_bounds_points_clipped(self):
        """Jittered points outside the canvas are tolerated."""
        shape = [(-5, -5), (14, -3), (14, 14), (-2, 13)]
        image = FrameRenderer(10, 10).render_frame([shape])

        assert image.size == (10, 10)
        assert image.getpixel((5, 5)) == BLACK

    def test_open_contour_drawn_as_polygon(self):
        """A border-truncated contour is filled as traced."""
        shape = [(0, 0), (6, 0), (6, 6)]
        image = FrameRenderer(8, 8).render_frame([shape])
        assert image.getpixel((5, 1)) == BLACK

    def test_render_animation_keeps_order(self):
        renderer = FrameRenderer(10, 10)
        frames = renderer.render_animation([[SQUARE], [], [SQUARE]])

        assert len(frames) == 3
        assert frames[0].getpixel((4, 4)) == BLACK
        assert frames[1].getpixel((4, 4)) == WHITE
        assert frames[2].getpixel((4, 4)) == BLACK


class TestGifEncoder:
    """Test animated GIF assembly."""

    def setup_method(self):
        renderer = FrameRenderer(10, 10)
        # consecutive frames must differ or the GIF writer merges them
        self.frames = renderer.render_animation([
            [SQUARE],
            [[(1, 1), (5, 1), (5, 5), (1, 5)]],
            [[(3, 3), (8, 3), (8, 8), (3, 8)]],
        ])

    def test_assemble_returns_gif(self):
        data = GifEncoder().assemble(self.frames)

        assert data[:6] == b"GIF89a"
        with Image.open(io.BytesIO(data)) as gif:
            assert gif.n_frames == 3
            assert gif.size == (10, 10)

    def test_delay_and_loop(self):
        data = GifEncoder(delay_ms=70, loop=True).assemble(self.frames)

        with Image.open(io.BytesIO(data)) as gif:
            assert gif.info["duration"] == 70
            assert gif.info["loop"] == 0

    def test_no_loop(self):
        data = GifEncoder(loop=False).assemble(self.frames)

        with Image.open(io.BytesIO(data)) as gif:
            assert "loop" not in gif.info

    def test_frame_content_preserved(self):
        data = GifEncoder().assemble(self.frames)

        with Image.open(io.BytesIO(data)) as gif:
            gif.seek(0)
            first = gif.convert("RGB")
            assert first.getpixel((4, 4)) == BLACK
            assert first.getpixel((0, 0)) == WHITE

    def test_empty_frames_rejected(self):
        with pytest.raises(EncodeError):
            GifEncoder().assemble([])

    def test_write(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "nested" / "out.gif"
            written = GifEncoder().write(self.frames, path)

            assert path.exists()
            assert path.stat().st_size == written

    def test_write_failure_wrapped(self):
        """Filesystem errors surface as EncodeError."""
        with tempfile.TemporaryDirectory() as temp_dir:
            blocker = Path(temp_dir) / "blocker"
            blocker.write_text("not a directory")

            with pytest.raises(EncodeError):
                GifEncoder().write(self.frames, blocker / "out.gif")
