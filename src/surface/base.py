"""Drawing surface backed by a numpy RGBA array.

Provides the host-side primitives the pixel engine relies on: reading and
writing raw RGBA bytes, and drawing one image onto another at an offset under
a global alpha.

CRITICAL: All compositing math uses float32 to avoid uint8 overflow/wrap.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass

import numpy as np
from PIL import Image

from engine.errors import NotARenderableSurface

logger = logging.getLogger(__name__)


@dataclass
class ImageData:
    """Raw pixels read from a surface: (height, width, 4) uint8 RGBA."""

    width: int
    height: int
    data: np.ndarray


class Surface:
    """A 2D drawing target with pixel-level read/write access."""

    def __init__(self, width: int, height: int, pixels: np.ndarray | None = None):
        if width < 0 or height < 0:
            raise ValueError(f"invalid surface size {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.global_alpha = 1.0
        if pixels is None:
            self.pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        else:
            self.pixels = _check_pixels(pixels, self.width, self.height)

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "Surface":
        """Wrap an (H, W, 4) uint8 array (copied)."""
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"expected (H, W, 4) array, got shape {pixels.shape}")
        height, width = pixels.shape[:2]
        return cls(width, height, pixels)

    def resize(self, width: int, height: int):
        """Resize the surface. Clears its contents."""
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)

    def get_image_data(self) -> np.ndarray:
        return self.pixels.copy()

    def put_image_data(self, data: np.ndarray):
        self.pixels = _check_pixels(data, self.width, self.height)

    def snapshot(self) -> np.ndarray:
        return self.pixels.copy()

    @contextmanager
    def override_alpha(self, alpha: float):
        """Temporarily set ``global_alpha``; restored to 1.0 on every exit."""
        self.global_alpha = min(1.0, max(0.0, float(alpha)))
        try:
            yield self
        finally:
            self.global_alpha = 1.0

    def draw_image(self, source: np.ndarray, dx: int = 0, dy: int = 0):
        """Source-over composite ``source`` at (dx, dy), scaled by ``global_alpha``."""
        if self.global_alpha <= 0.0:
            return
        src_h, src_w = source.shape[:2]

        # Destination window clipped to the surface
        x0, y0 = max(0, dx), max(0, dy)
        x1, y1 = min(self.width, dx + src_w), min(self.height, dy + src_h)
        if x0 >= x1 or y0 >= y1:
            return

        src = source[y0 - dy : y1 - dy, x0 - dx : x1 - dx].astype(np.float32)
        dst = self.pixels[y0:y1, x0:x1].astype(np.float32)

        src_a = (src[:, :, 3:4] / 255.0) * self.global_alpha
        dst_a = dst[:, :, 3:4] / 255.0
        out_a = src_a + dst_a * (1.0 - src_a)

        # Straight (non-premultiplied) alpha; safe divide where fully transparent
        safe_a = np.where(out_a > 0, out_a, 1.0)
        out_rgb = (src[:, :, :3] * src_a + dst[:, :, :3] * dst_a * (1.0 - src_a)) / safe_a
        out_rgb = np.where(out_a > 0, out_rgb, 0.0)

        out = np.concatenate([out_rgb, out_a * 255.0], axis=2)
        self.pixels[y0:y1, x0:x1] = np.clip(np.rint(out), 0, 255).astype(np.uint8)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)


def _check_pixels(data: np.ndarray, width: int, height: int) -> np.ndarray:
    data = np.asarray(data)
    if data.shape != (height, width, 4):
        raise ValueError(
            f"pixel data has shape {data.shape}, expected {(height, width, 4)}"
        )
    if data.dtype != np.uint8:
        data = np.clip(data, 0, 255).astype(np.uint8)
    return data.copy()


def acquire_buffer(surface) -> ImageData:
    """Read the current RGBA bytes of ``surface``.

    Raises:
        NotARenderableSurface: If ``surface`` is not a Surface.
    """
    if not isinstance(surface, Surface):
        raise NotARenderableSurface(
            f"{type(surface).__name__} is not a renderable surface"
        )
    return ImageData(surface.width, surface.height, surface.get_image_data())


def commit_buffer(surface: Surface, data: np.ndarray):
    """Write a mutated buffer back to ``surface``."""
    if not isinstance(surface, Surface):
        raise NotARenderableSurface(
            f"{type(surface).__name__} is not a renderable surface"
        )
    surface.put_image_data(data)


def draw_image_at(
    surface: Surface, source: np.ndarray, dx: int, dy: int, opacity: float
):
    """Draw ``source`` at (dx, dy) with a scoped global alpha of ``opacity``."""
    with surface.override_alpha(opacity):
        surface.draw_image(source, dx, dy)
