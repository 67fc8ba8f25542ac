"""Tests for util.* color effects."""

import numpy as np
import pytest

from effects.canvas import Canvas
from effects.util import desaturate, grayscale, mix, saturate

pytestmark = pytest.mark.smoke


def test_saturate_default(solid_surface):
    surface = solid_surface(200, 100, 50, w=1, h=1)
    saturate.apply(Canvas(surface), {"multiplier": 2.0})
    np.testing.assert_array_equal(surface.pixels[0, 0], [255, 76, 0, 255])


def test_desaturate_identity_at_one(random_surface):
    before = random_surface.get_image_data()
    desaturate.apply(Canvas(random_surface), {"multiplier": 1.0})
    np.testing.assert_array_equal(random_surface.pixels, before)


def test_desaturate_zero_is_grayscale(random_surface):
    desaturate.apply(Canvas(random_surface), {"multiplier": 0.0})
    px = random_surface.pixels
    np.testing.assert_array_equal(px[:, :, 0], px[:, :, 1])
    np.testing.assert_array_equal(px[:, :, 1], px[:, :, 2])


def test_grayscale(random_surface):
    before = random_surface.get_image_data()
    grayscale.apply(Canvas(random_surface), {})
    px = random_surface.pixels
    np.testing.assert_array_equal(px[:, :, 0], px[:, :, 2])
    np.testing.assert_array_equal(px[:, :, 3], before[:, :, 3])


def test_mix_named_color(solid_surface):
    surface = solid_surface(0, 0, 0, w=3, h=2)
    mix.apply(Canvas(surface), {"color": "white", "weight": 1.0})
    np.testing.assert_array_equal(surface.pixels[:, :, :3], 255)


def test_mix_weight_zero_is_identity(random_surface):
    before = random_surface.get_image_data()
    mix.apply(Canvas(random_surface), {"color": "red", "weight": 0.0})
    np.testing.assert_array_equal(random_surface.pixels, before)
