"""Saturate effect: pushes channels away from each pixel's gray value."""

from effects.canvas import SATURATE_MULTIPLIER, Canvas

EFFECT_ID = "util.saturate"
EFFECT_NAME = "Saturate"
EFFECT_CATEGORY = "util"

PARAMS: dict = {
    "multiplier": {
        "type": "float",
        "min": 1.0,
        "max": 5.0,
        "default": SATURATE_MULTIPLIER,
        "label": "Strength",
        "curve": "linear",
        "unit": "x",
        "description": "1 leaves the image unchanged",
    }
}


def apply(canvas: Canvas, params: dict) -> None:
    canvas.saturate(params["multiplier"])
