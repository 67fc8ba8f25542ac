"""Canvas: composite effects built on the pixel buffer engine."""

import logging
import math

import numpy as np

from color import filters
from color.filters import FilterRegistry
from color.model import RGB, check_multiplier
from engine.buffer import PixelBuffer
from engine.determinism import derive_seed, make_rng
from surface.base import draw_image_at

logger = logging.getLogger(__name__)

BLUR_OPACITY = 0.125
BLUR_OFFSETS = tuple((dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1))

DEFAULT_PASSES = 1
NOISE_DECAY = 0.025
AGE_DECAY = 0.05
SATURATE_MULTIPLIER = 1.5
DESATURATE_MULTIPLIER = 0.5
MIX_WEIGHT = 0.5


def coerce_passes(passes) -> int:
    """None -> 1; negative -> 0; anything non-integral is rejected."""
    if passes is None:
        return DEFAULT_PASSES
    if isinstance(passes, bool) or not isinstance(passes, (int, np.integer)):
        raise ValueError(f"passes must be an integer, got {passes!r}")
    return max(0, int(passes))


def coerce_noise_passes(passes) -> int:
    """Missing, zero or non-integral -> 1; negative -> 0.

    Unlike blur, a noise pass count of 0 means "use the default".
    """
    if (
        not passes
        or isinstance(passes, bool)
        or not isinstance(passes, (int, np.integer))
    ):
        return DEFAULT_PASSES
    return max(0, int(passes))


def coerce_decay(decay, default: float) -> float:
    """Missing or non-finite -> default; otherwise clamped to (0, 1]."""
    if decay is None or isinstance(decay, bool):
        return default
    decay = float(decay)
    if not math.isfinite(decay) or decay <= 0.0:
        return default
    return min(1.0, decay)


def _coerce_multiplier(multiplier, default: float) -> float:
    """None or non-finite -> default; negative or non-numeric -> ValueError."""
    if multiplier is None:
        return default
    if isinstance(multiplier, (int, float, np.number)) and not math.isfinite(multiplier):
        return default
    return check_multiplier(multiplier)


class Canvas(PixelBuffer):
    """Pixel buffer with blur, noise, aging, mixing and color adjustments.

    Randomised passes draw from ``rng`` when one is injected. Otherwise each
    pass gets its own generator derived from ``seed`` (and unseeded when
    ``seed`` is None), so a seeded canvas replays identically.
    """

    def __init__(
        self,
        surface,
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        filters: FilterRegistry | None = None,
    ):
        super().__init__(surface, filters)
        self.seed = seed
        self.rng = rng
        self._random_passes = 0

    def _next_rng(self, operation: str) -> np.random.Generator:
        if self.rng is not None:
            return self.rng
        index = self._random_passes
        self._random_passes += 1
        if self.seed is None:
            return make_rng()
        return make_rng(derive_seed(self.seed, operation, index))

    def blur(self, passes: int | None = 1):
        """Approximate a box blur by redrawing the surface at 9 offsets.

        Each pass snapshots the surface and draws the snapshot back at every
        (dx, dy) in {-1, 0, 1}^2 at 1/8 opacity.
        """
        passes = coerce_passes(passes)
        if not self.is_operable():
            return
        for _ in range(passes):
            source = self.surface.snapshot()
            for dx, dy in BLUR_OFFSETS:
                draw_image_at(self.surface, source, dx, dy, BLUR_OPACITY)
        # Drawing bypasses the buffer; resync before the next filter pass
        self.refresh()
        logger.debug("Blurred %dx%d surface, %d passes", self.width, self.height, passes)

    def noise(self, passes: int | None = 1, decay: float | None = NOISE_DECAY):
        passes = coerce_noise_passes(passes)
        decay = coerce_decay(decay, NOISE_DECAY)
        if not self.is_operable():
            return
        for _ in range(passes):
            self.apply_filter(filters.mutate, decay, self._next_rng("noise"))

    def age(self):
        """Make the image look old: light noise, then one blur pass."""
        if not self.is_operable():
            return
        self.apply_filter(filters.mutate, AGE_DECAY, self._next_rng("age"))
        self.blur(1)

    def mix(self, color, weight: float = MIX_WEIGHT):
        """Blend every pixel toward ``color`` (string, RGB or RGBA)."""
        # Normalise once; filters.mix would otherwise parse per pixel
        color = RGB(color)
        weight = float(weight)
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"weight must be in [0, 1], got {weight}")
        if not self.is_operable():
            return
        self.apply_filter(filters.mix, color, weight)

    def complement(self):
        self.apply_filter(filters.complement)

    def invert(self):
        self.apply_filter(filters.invert)

    def saturate(self, multiplier: float | None = SATURATE_MULTIPLIER):
        self.apply_filter(
            filters.saturate, _coerce_multiplier(multiplier, SATURATE_MULTIPLIER)
        )

    def desaturate(self, multiplier: float | None = DESATURATE_MULTIPLIER):
        self.apply_filter(
            filters.desaturate, _coerce_multiplier(multiplier, DESATURATE_MULTIPLIER)
        )

    def grayscale(self):
        self.apply_filter(filters.grayscale)

    def histogram(self, use_hex: bool = False, minimum_count: int | None = None):
        return self.color_histogram(use_hex, minimum_count)
