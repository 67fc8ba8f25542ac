"""Desaturate effect: pulls channels toward each pixel's gray value."""

from effects.canvas import DESATURATE_MULTIPLIER, Canvas

EFFECT_ID = "util.desaturate"
EFFECT_NAME = "Desaturate"
EFFECT_CATEGORY = "util"

PARAMS: dict = {
    "multiplier": {
        "type": "float",
        "min": 0.0,
        "max": 1.0,
        "default": DESATURATE_MULTIPLIER,
        "label": "Remaining Color",
        "curve": "linear",
        "unit": "%",
        "description": "1 leaves the image unchanged, 0 is grayscale",
    }
}


def apply(canvas: Canvas, params: dict) -> None:
    canvas.desaturate(params["multiplier"])
