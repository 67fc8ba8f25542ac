import numpy as np
import pytest

from surface.base import Surface


def make_solid_surface(
    r: int, g: int, b: int, a: int = 255, w: int = 4, h: int = 4
) -> Surface:
    """Create a solid color RGBA surface."""
    return Surface.from_array(np.full((h, w, 4), [r, g, b, a], dtype=np.uint8))


@pytest.fixture
def solid_surface():
    """Factory fixture: solid_surface(r, g, b, a=255, w=4, h=4)."""
    return make_solid_surface


@pytest.fixture
def random_surface():
    """Deterministic 16x12 surface of random RGBA bytes."""
    rng = np.random.default_rng(42)
    return Surface.from_array(rng.integers(0, 256, (12, 16, 4), dtype=np.uint8))


@pytest.fixture
def empty_surface():
    """Zero-area surface; the engine treats it as not operable."""
    return Surface(0, 0)
