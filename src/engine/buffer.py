"""Pixel buffer engine: run a filter over every pixel, commit once.

Pipeline per pass: acquire -> per-pixel filter on a working copy -> commit.
A pass either completes and commits, or leaves buffer and surface untouched.
"""

import logging
from collections import Counter
from typing import Callable

import numpy as np
import sentry_sdk

from color.filters import FilterRegistry, as_rgba, default_filters
from color.model import RGBA
from engine.errors import UnknownFilterMethod
from surface.base import acquire_buffer, commit_buffer

logger = logging.getLogger(__name__)

# Color methods reachable through apply_method(); anything else is rejected
COLOR_METHODS = frozenset(
    {"complement", "invert", "saturate", "desaturate", "grayscale", "mix", "mutate"}
)


def _capture_with_context(e: Exception, operation: str, extra: dict):
    """Capture exception to Sentry with operation-level context and fingerprint dedup."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("operation", operation)
        scope.fingerprint = ["filter-crash", operation, type(e).__name__]
        scope.set_context("filter", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def _filter_name(fn) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


class PixelBuffer:
    """RGBA pixel buffer read from a surface.

    The buffer owns its pixel array; the surface is only read from and
    written to.
    """

    def __init__(self, surface, filters: FilterRegistry | None = None):
        self.surface = surface
        self.filters = filters if filters is not None else default_filters()
        self.commits = 0
        self._load()

    def _load(self):
        image = acquire_buffer(self.surface)
        self.data: np.ndarray = image.data
        self.width = image.width
        self.height = image.height
        self.length = image.width * image.height

    def refresh(self):
        """Re-read pixels from the surface after drawing on it directly.

        A resize (e.g. by ``to_canvas``) is picked up automatically by
        ``is_operable``; same-size drawing needs an explicit refresh.
        """
        self._load()

    def _sync_size(self):
        if (self.surface.width, self.surface.height) != (self.width, self.height):
            logger.debug(
                "Surface resized %dx%d -> %dx%d, re-reading buffer",
                self.width,
                self.height,
                self.surface.width,
                self.surface.height,
            )
            self._load()

    def is_operable(self) -> bool:
        """True when the buffer holds pixels; re-reads a resized surface first."""
        self._sync_size()
        return self.length > 0

    def pixel(self, index: int) -> RGBA:
        """Color at flat pixel ``index`` (row-major)."""
        if not 0 <= index < self.length:
            raise IndexError(f"pixel index {index} out of range [0, {self.length})")
        return RGBA.from_bytes(*self.data.reshape(-1, 4)[index])

    def pixels(self) -> list[RGBA]:
        return [RGBA.from_bytes(*px) for px in self.data.reshape(-1, 4).tolist()]

    def commit(self):
        commit_buffer(self.surface, self.data)
        self.commits += 1

    def _run_pass(self, fn: Callable, args: tuple, kwargs: dict, operation: str):
        rows = self.data.reshape(-1, 4).tolist()
        out: list[tuple[int, int, int, int]] = []

        try:
            for i in range(self.length):
                r, g, b, a = rows[i]
                color = RGBA.from_bytes(r, g, b, a)
                result = as_rgba(fn(color, *args, **kwargs), color.alpha)
                out.append(result.as_bytes())
        except Exception as e:
            _capture_with_context(
                e,
                operation,
                {
                    "width": self.width,
                    "height": self.height,
                    "arg_count": len(args) + len(kwargs),
                },
            )
            logger.error(
                "Filter %s failed on %dx%d buffer: %s",
                operation,
                self.width,
                self.height,
                type(e).__name__,
            )
            logger.debug("Filter %s exception detail: %s", operation, e)
            raise

        self.data = np.array(out, dtype=np.uint8).reshape(self.data.shape)
        self.commit()
        logger.debug("Applied %s to %d pixels", operation, self.length)

    def apply_filter(self, fn: Callable | str, *args, **kwargs):
        """Apply ``fn(color, *args, **kwargs)`` to every pixel, then commit once.

        Args:
            fn: A filter callable, or the id of a filter in ``self.filters``.

        Raises:
            UnknownFilterMethod: If ``fn`` is an unregistered filter id.
            TypeError: If the filter returns something other than RGB/RGBA.
        """
        if isinstance(fn, str):
            fn = self.filters.get(fn)
        if not callable(fn):
            raise TypeError(f"filter must be callable, got {type(fn).__name__}")
        if not self.is_operable():
            return
        self._run_pass(fn, args, kwargs, _filter_name(fn))

    def apply_method(self, method_name: str, *args, strict: bool = True, **kwargs):
        """Call ``RGBA.<method_name>(*args)`` on every pixel, then commit once.

        Only names in ``COLOR_METHODS`` are accepted. Unknown names raise
        ``UnknownFilterMethod``; with ``strict=False`` the pass is skipped.
        """
        if method_name not in COLOR_METHODS:
            if strict:
                raise UnknownFilterMethod(method_name, COLOR_METHODS)
            logger.warning("Skipping unknown color method %r", method_name)
            return
        if not self.is_operable():
            return

        def _call(color: RGBA, *a, **kw):
            return getattr(color, method_name)(*a, **kw)

        self._run_pass(_call, args, kwargs, method_name)

    def color_histogram(
        self, use_hex: bool = False, minimum_count: int | None = None
    ) -> dict[str, int] | None:
        """Count pixels per distinct color.

        Args:
            use_hex: Key by ``#rrggbb`` (alpha variants merge) instead of
                the full ``rgba(...)`` identifier.
            minimum_count: Drop entries seen fewer times than this.

        Returns:
            {color_id: count}, or None if the buffer is empty.
        """
        if minimum_count is not None and (
            isinstance(minimum_count, bool)
            or not isinstance(minimum_count, (int, np.integer))
            or minimum_count < 1
        ):
            raise ValueError(
                f"minimum_count must be a positive integer, got {minimum_count!r}"
            )
        if not self.is_operable():
            return None

        unique, counts = np.unique(
            self.data.reshape(-1, 4), axis=0, return_counts=True
        )
        histogram: Counter = Counter()
        for px, count in zip(unique.tolist(), counts.tolist()):
            color = RGBA.from_bytes(*px)
            histogram[color.to_hex() if use_hex else str(color)] += count

        if minimum_count is not None:
            return {k: v for k, v in histogram.items() if v >= minimum_count}
        return dict(histogram)
