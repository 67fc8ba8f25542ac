"""Tests for engine.pipeline: chain execution, ordering, depth cap, timing stats."""

from unittest.mock import patch

import numpy as np
import pytest

from effects.canvas import Canvas
from engine.errors import UnknownFilterMethod
from engine.pipeline import (
    EFFECT_WARN_MS,
    MAX_CHAIN_DEPTH,
    apply_chain,
    flush_timing,
    get_effect_stats,
)

pytestmark = pytest.mark.smoke


@pytest.fixture(autouse=True)
def _clean_timing():
    flush_timing()
    yield
    flush_timing()


def test_single_effect_chain(random_surface):
    before = random_surface.get_image_data()
    applied = apply_chain(Canvas(random_surface), [{"effect_id": "fx.invert"}])
    assert applied == ["fx.invert"]
    np.testing.assert_array_equal(random_surface.pixels[:, :, 0], 255 - before[:, :, 0])


def test_three_effect_chain(random_surface):
    before = random_surface.get_image_data()
    chain = [{"effect_id": "fx.invert", "params": {}}] * 3
    apply_chain(Canvas(random_surface), chain)
    np.testing.assert_array_equal(random_surface.pixels[:, :, 0], 255 - before[:, :, 0])


def test_order_matters(solid_surface):
    a = solid_surface(200, 100, 50, w=2, h=2)
    b = solid_surface(200, 100, 50, w=2, h=2)
    mix_white = {"effect_id": "util.mix", "params": {"color": "white", "weight": 0.5}}
    invert = {"effect_id": "fx.invert"}
    apply_chain(Canvas(a), [mix_white, invert])
    apply_chain(Canvas(b), [invert, mix_white])
    assert not np.array_equal(a.pixels, b.pixels)


def test_disabled_effect_skipped(random_surface):
    before = random_surface.get_image_data()
    applied = apply_chain(
        Canvas(random_surface), [{"effect_id": "fx.invert", "enabled": False}]
    )
    assert applied == []
    np.testing.assert_array_equal(random_surface.pixels, before)


def test_empty_chain(random_surface):
    assert apply_chain(Canvas(random_surface), []) == []


def test_chain_depth_cap(random_surface):
    chain = [{"effect_id": "fx.invert"}] * (MAX_CHAIN_DEPTH + 1)
    with pytest.raises(ValueError, match="exceeds maximum"):
        apply_chain(Canvas(random_surface), chain)


def test_chain_at_depth_cap_runs(solid_surface):
    chain = [{"effect_id": "fx.invert"}] * MAX_CHAIN_DEPTH
    assert len(apply_chain(Canvas(solid_surface(1, 2, 3)), chain)) == MAX_CHAIN_DEPTH


def test_unknown_effect_raises(random_surface):
    with pytest.raises(UnknownFilterMethod):
        apply_chain(Canvas(random_surface), [{"effect_id": "fx.nonexistent"}])


def test_timing_recorded(solid_surface):
    apply_chain(Canvas(solid_surface(1, 2, 3)), [{"effect_id": "util.grayscale"}])
    stats = get_effect_stats()
    assert stats["util.grayscale"]["samples"] == 1
    assert stats["util.grayscale"]["p95"] is None


def test_slow_effect_logs_warning(solid_surface, caplog):
    # monotonic() is read before and after the step
    ticks = iter([0.0, (EFFECT_WARN_MS + 50) / 1000])
    with patch("engine.pipeline.time.monotonic", side_effect=lambda: next(ticks, 10.0)):
        apply_chain(Canvas(solid_surface(1, 2, 3)), [{"effect_id": "fx.invert"}])
    assert any("warn threshold" in r.getMessage() for r in caplog.records)
