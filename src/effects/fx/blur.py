"""Blur effect: low-opacity redraw at nine one-pixel offsets."""

from effects.canvas import Canvas

EFFECT_ID = "fx.blur"
EFFECT_NAME = "Blur"
EFFECT_CATEGORY = "distortion"

PARAMS: dict = {
    "passes": {
        "type": "int",
        "min": 0,
        "max": 20,
        "default": 1,
        "label": "Passes",
        "curve": "linear",
        "unit": "",
        "description": "Blur passes; each pass softens by roughly one more pixel",
    }
}


def apply(canvas: Canvas, params: dict) -> None:
    """Approximate box blur. Stateless."""
    canvas.blur(params["passes"])
