"""Shaky hand-drawn animation of traced shapes."""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence
import logging
import math

import numpy as np

from .raster import Animation, Frame, Shape
from ..exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


def drop_points(shape: Sequence, sloppiness: float, rng: np.random.Generator) -> Shape:
    """Remove ``floor(sloppiness * len(shape))`` distinct random points.

    The surviving points keep their original order.
    """
    n = len(shape)
    drop_count = min(n, math.floor(sloppiness * n))
    if drop_count == 0:
        return list(shape)

    keep = np.ones(n, dtype=bool)
    keep[rng.choice(n, size=drop_count, replace=False)] = False
    return [point for point, kept in zip(shape, keep) if kept]


def jitter_points(shape: Shape, shakiness: int, probability: float,
                  rng: np.random.Generator) -> Shape:
    """Displace each point with ``probability`` by up to ``shakiness`` pixels per axis.

    Coordinates are not clamped to the image.
    """
    n = len(shape)
    if n == 0:
        return []

    shaken = rng.random(n) < probability
    offsets = rng.integers(-shakiness, shakiness + 1, size=(n, 2))
    offsets[~shaken] = 0
    return [
        (int(x + dx), int(y + dy))
        for (x, y), (dx, dy) in zip(shape, offsets)
    ]


class ShakyAnimator:
    """Animate shapes in a shaky, sloppily redrawn style.

    Every frame is an independent perturbation of the original shapes: some
    points are left out (sloppiness) and the rest may be nudged around
    (shakiness, applied with probability ``shaky_freq``).
    """

    def __init__(
        self,
        sloppiness: float = 0.1,
        shakiness: int = 1,
        shaky_freq: float = 0.25,
        frame_count: int = 5,
        seed: Optional[int] = None,
        max_workers: int = 1,
    ):
        self.sloppiness = float(sloppiness)
        self.shakiness = int(shakiness)
        self.shaky_freq = float(shaky_freq)
        self.frame_count = int(frame_count)
        self.seed = seed
        self.max_workers = int(max_workers)
        self._validate()

    def _validate(self) -> None:
        if not (0.0 <= self.sloppiness <= 1.0):
            raise InvalidParameterError(f"sloppiness must be in [0, 1], got {self.sloppiness}")
        if self.shakiness < 0:
            raise InvalidParameterError(f"shakiness must be non-negative, got {self.shakiness}")
        if not math.isfinite(self.shaky_freq) or self.shaky_freq <= 0:
            raise InvalidParameterError(f"shaky_freq must be positive, got {self.shaky_freq}")
        if self.frame_count < 0:
            raise InvalidParameterError(f"frame_count must be non-negative, got {self.frame_count}")
        if self.max_workers < 1:
            raise InvalidParameterError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def shake_probability(self) -> float:
        """Per-point chance of being displaced in a frame."""
        return min(1.0, self.shaky_freq)

    def animate(self, shapes: Sequence[Shape]) -> Animation:
        """Create ``frame_count`` perturbed copies of ``shapes``.

        ``shapes`` is not modified. With a fixed ``seed`` the result is
        reproducible whatever the worker count, since each frame draws from
        its own generator spawned from that seed.
        """
        frame_seeds = np.random.SeedSequence(self.seed).spawn(self.frame_count)

        if self.max_workers > 1 and self.frame_count > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self._make_frame, shapes, frame_seed)
                    for frame_seed in frame_seeds
                ]
                animation = [future.result() for future in futures]
        else:
            animation = [self._make_frame(shapes, frame_seed) for frame_seed in frame_seeds]

        logger.info(
            f"Animated {len(shapes)} shapes over {len(animation)} frames "
            f"(sloppiness={self.sloppiness}, shakiness={self.shakiness}, "
            f"shaky_freq={self.shaky_freq})"
        )
        return animation

    def _make_frame(self, shapes: Sequence[Shape], frame_seed: np.random.SeedSequence) -> Frame:
        rng = np.random.default_rng(frame_seed)
        frame = []
        for shape in shapes:
            kept = drop_points(shape, self.sloppiness, rng)
            frame.append(jitter_points(kept, self.shakiness, self.shake_probability, rng))
        return frame
