"""Filter functions: pure ``(color, *args) -> color`` transforms.

Each filter copies its input and applies the matching color method, so the
color handed in is never modified. Filters are looked up by id through an
explicit ``FilterRegistry`` rather than by global name.
"""

from typing import Callable

import numpy as np

from color.model import RGB, RGBA
from engine.errors import UnknownFilterMethod

FilterFn = Callable[..., RGB]


def complement(color: RGB) -> RGB:
    return color.copy().complement()


def invert(color: RGB) -> RGB:
    return color.copy().invert()


def saturate(color: RGB, multiplier: float = 1.5) -> RGB:
    return color.copy().saturate(multiplier)


def desaturate(color: RGB, multiplier: float = 0.5) -> RGB:
    return color.copy().desaturate(multiplier)


def grayscale(color: RGB) -> RGB:
    return color.copy().grayscale()


def mix(color: RGB, other: RGB | str, weight: float = 0.5) -> RGB:
    return color.copy().mix(other, weight)


def mutate(
    color: RGB, decay: float = 0.025, rng: np.random.Generator | None = None
) -> RGB:
    """Random per-channel drift bounded by ``decay*255``."""
    return color.copy().mutate(decay, rng)


BUILTIN_FILTERS: dict[str, FilterFn] = {
    "complement": complement,
    "invert": invert,
    "saturate": saturate,
    "desaturate": desaturate,
    "grayscale": grayscale,
    "mix": mix,
    "mutate": mutate,
}


class FilterRegistry:
    """Explicit mapping from filter id to filter function."""

    def __init__(self, filters: dict[str, FilterFn] | None = None):
        self._filters: dict[str, FilterFn] = {}
        for name, fn in (filters or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: FilterFn):
        """Register (or replace) a filter."""
        if not isinstance(name, str) or not name:
            raise ValueError("filter id must be a non-empty string")
        if not callable(fn):
            raise TypeError(f"filter {name!r} is not callable")
        self._filters[name] = fn

    def get(self, name: str) -> FilterFn:
        try:
            return self._filters[name]
        except KeyError:
            raise UnknownFilterMethod(name, self._filters) from None

    def names(self) -> list[str]:
        return sorted(self._filters)

    def __contains__(self, name) -> bool:
        return name in self._filters

    def __len__(self) -> int:
        return len(self._filters)


def default_filters() -> FilterRegistry:
    """Fresh registry holding the built-in filters."""
    return FilterRegistry(BUILTIN_FILTERS)


def as_rgba(color: RGB, alpha: float) -> RGBA:
    """Promote a filter result to RGBA, keeping ``alpha`` for plain RGB."""
    if isinstance(color, RGBA):
        return color
    if isinstance(color, RGB):
        return color.to_rgba(alpha)
    raise TypeError(f"filter returned {type(color).__name__}, expected RGB or RGBA")
