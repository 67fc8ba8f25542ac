"""Mix effect: blends every pixel toward a single color."""

from effects.canvas import MIX_WEIGHT, Canvas

EFFECT_ID = "util.mix"
EFFECT_NAME = "Mix"
EFFECT_CATEGORY = "util"

PARAMS: dict = {
    "color": {
        "type": "color",
        "default": "#000000",
        "label": "Color",
        "description": "Hex, CSS name, rgb() or rgba() color to blend toward",
    },
    "weight": {
        "type": "float",
        "min": 0.0,
        "max": 1.0,
        "default": MIX_WEIGHT,
        "label": "Amount",
        "curve": "linear",
        "unit": "%",
        "description": "0 keeps the image, 1 replaces it with the color",
    },
}


def apply(canvas: Canvas, params: dict) -> None:
    canvas.mix(params["color"], params["weight"])
