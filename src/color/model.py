"""Color values: RGB and RGBA with clamped components and in-place transforms.

Channels are integers in [0, 255], rounded half-up before clamping so that
repeated transforms do not drift darker. Alpha is a float in [0.0, 1.0].

Transforms (invert, complement, saturate, desaturate, grayscale, mix, mutate)
modify the color in place and return it, so they chain:

    RGBA(200, 100, 50).desaturate(0.5).invert()

Use the functions in ``color.filters`` for copy-on-apply semantics.
"""

import math
import re
from numbers import Real

import numpy as np
from PIL import ImageColor

# BT.601 luma weights (same weights as the luminance histogram)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

_RGBA_PATTERN = re.compile(
    r"^\s*rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9]*\.?[0-9]+(?:[eE][-+]?\d+)?)\s*\)\s*$"
)

_default_rng = np.random.default_rng()


class InvalidColor(ValueError):
    """Raised when a color cannot be built from the given input."""


def round_channel(value: float) -> int:
    """Round half-up and clamp to [0, 255]."""
    return min(255, max(0, int(math.floor(value + 0.5))))


def _check_number(name: str, value, error: type[ValueError] = ValueError) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
        raise error(f"{name} must be a number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise error(f"{name} must be finite, got {value}")
    return value


def _channel(name: str, value) -> int:
    return round_channel(_check_number(name, value, InvalidColor))


def _alpha(value) -> float:
    return min(1.0, max(0.0, _check_number("alpha", value, InvalidColor)))


def parse_color(text: str) -> tuple[int, int, int, float]:
    """Parse a color string into ``(red, green, blue, alpha)``.

    Accepts hex (``#rgb``, ``#rrggbb``, ``#rrggbbaa``), CSS names, ``rgb()``
    and ``hsl()`` through Pillow, plus the ``rgba(r, g, b, a)`` identifier
    produced by ``str(RGBA)`` where ``a`` is a float.

    Raises:
        InvalidColor: If the string is not a recognised color.
    """
    if not isinstance(text, str):
        raise InvalidColor(f"expected a color string, got {type(text).__name__}")

    match = _RGBA_PATTERN.match(text)
    if match:
        red, green, blue = (int(match.group(i)) for i in (1, 2, 3))
        alpha = float(match.group(4))
        if max(red, green, blue) > 255 or alpha > 1.0:
            raise InvalidColor(f"color component out of range: {text!r}")
        return red, green, blue, alpha

    try:
        parsed = ImageColor.getrgb(text.strip())
    except ValueError as e:
        raise InvalidColor(f"unrecognised color: {text!r}") from e

    if len(parsed) == 4:
        return parsed[0], parsed[1], parsed[2], parsed[3] / 255
    return parsed[0], parsed[1], parsed[2], 1.0


class RGB:
    """An opaque color with integer channels in [0, 255]."""

    __slots__ = ("red", "green", "blue")

    def __init__(self, red=0, green=None, blue=None):
        if green is None and blue is None:
            source = red
            if isinstance(source, RGB):
                red, green, blue = source.red, source.green, source.blue
            elif isinstance(source, str):
                red, green, blue, _ = parse_color(source)
            elif isinstance(source, (tuple, list)) and len(source) in (3, 4):
                red, green, blue = source[:3]
            elif isinstance(source, int) and source == 0:
                red, green, blue = 0, 0, 0
            else:
                raise InvalidColor(
                    f"cannot build {type(self).__name__} from {type(source).__name__}"
                )
        elif green is None or blue is None:
            raise InvalidColor("red, green and blue are all required")

        self.red = _channel("red", red)
        self.green = _channel("green", green)
        self.blue = _channel("blue", blue)

    # Representation

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def to_rgb(self) -> "RGB":
        return RGB(self.red, self.green, self.blue)

    def to_rgba(self, alpha: float = 1.0) -> "RGBA":
        return RGBA(self.red, self.green, self.blue, alpha)

    def copy(self):
        return type(self)(self)

    def _key(self) -> tuple:
        return (self.red, self.green, self.blue)

    def __str__(self) -> str:
        return f"rgb({self.red}, {self.green}, {self.blue})"

    def __repr__(self) -> str:
        args = ", ".join(repr(v) for v in self._key())
        return f"{type(self).__name__}({args})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, RGB) or type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._key())

    def __iter__(self):
        return iter(self._key())

    # Transforms (in place, alpha untouched)

    def _set_rgb(self, red: float, green: float, blue: float):
        self.red = round_channel(red)
        self.green = round_channel(green)
        self.blue = round_channel(blue)
        return self

    def luma(self) -> float:
        wr, wg, wb = LUMA_WEIGHTS
        return wr * self.red + wg * self.green + wb * self.blue

    def invert(self):
        return self._set_rgb(255 - self.red, 255 - self.green, 255 - self.blue)

    def complement(self):
        # HSL hue + 180 deg with the same saturation and lightness
        total = max(self.red, self.green, self.blue) + min(
            self.red, self.green, self.blue
        )
        return self._set_rgb(total - self.red, total - self.green, total - self.blue)

    def _scale_from_gray(self, multiplier) -> "RGB":
        multiplier = check_multiplier(multiplier)
        gray = self.luma()
        return self._set_rgb(
            gray + (self.red - gray) * multiplier,
            gray + (self.green - gray) * multiplier,
            gray + (self.blue - gray) * multiplier,
        )

    def saturate(self, multiplier: float = 1.5):
        """Push channels away from the pixel's gray value."""
        return self._scale_from_gray(multiplier)

    def desaturate(self, multiplier: float = 0.5):
        """Pull channels toward the pixel's gray value. 0 is grayscale."""
        return self._scale_from_gray(multiplier)

    def grayscale(self):
        return self.desaturate(0.0)

    def mix(self, other, weight: float = 0.5):
        """Interpolate toward ``other`` by ``weight`` (0 keeps self)."""
        if not isinstance(other, RGB):
            other = RGB(other)
        weight = _check_number("weight", weight)
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"weight must be in [0, 1], got {weight}")
        return self._set_rgb(
            self.red + (other.red - self.red) * weight,
            self.green + (other.green - self.green) * weight,
            self.blue + (other.blue - self.blue) * weight,
        )

    def mutate(self, decay: float, rng: np.random.Generator | None = None):
        """Shift each channel by a uniform random amount in ``±decay*255``."""
        decay = _check_number("decay", decay)
        if decay < 0.0:
            raise ValueError(f"decay must be >= 0, got {decay}")
        rng = rng if rng is not None else _default_rng
        spread = decay * 255.0
        dr, dg, db = rng.uniform(-spread, spread, 3)
        return self._set_rgb(self.red + dr, self.green + dg, self.blue + db)


class RGBA(RGB):
    """A color with integer RGB channels and a float alpha in [0, 1]."""

    __slots__ = ("alpha",)

    def __init__(self, red=0, green=None, blue=None, alpha=None):
        if green is None and blue is None and isinstance(red, str):
            red, green, blue, parsed_alpha = parse_color(red)
            alpha = parsed_alpha if alpha is None else alpha
        elif green is None and blue is None and isinstance(red, RGB):
            source = red
            red, green, blue = source.red, source.green, source.blue
            if alpha is None:
                alpha = getattr(source, "alpha", 1.0)
        elif green is None and blue is None and isinstance(red, (tuple, list)):
            if len(red) == 4 and alpha is None:
                alpha = red[3]
        super().__init__(red, green, blue)
        self.alpha = _alpha(1.0 if alpha is None else alpha)

    @classmethod
    def from_bytes(cls, red: int, green: int, blue: int, alpha: int) -> "RGBA":
        """Build from four raw buffer bytes (alpha as 0-255)."""
        return cls(int(red), int(green), int(blue), int(alpha) / 255)

    def as_bytes(self) -> tuple[int, int, int, int]:
        return (self.red, self.green, self.blue, round_channel(self.alpha * 255))

    def to_rgba(self, alpha: float | None = None) -> "RGBA":
        return RGBA(self.red, self.green, self.blue, self.alpha if alpha is None else alpha)

    def _key(self) -> tuple:
        return (self.red, self.green, self.blue, self.alpha)

    def __str__(self) -> str:
        return f"rgba({self.red}, {self.green}, {self.blue}, {self.alpha!r})"


def check_multiplier(multiplier) -> float:
    """Validate a saturate/desaturate strength: finite and non-negative."""
    multiplier = _check_number("multiplier", multiplier)
    if multiplier < 0.0:
        raise ValueError(f"multiplier must be >= 0, got {multiplier}")
    return multiplier
