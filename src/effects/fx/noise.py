"""Noise effect: random per-channel drift on every pixel."""

from effects.canvas import NOISE_DECAY, Canvas

EFFECT_ID = "fx.noise"
EFFECT_NAME = "Noise"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {
    "passes": {
        "type": "int",
        "min": 1,
        "max": 20,
        "default": 1,
        "label": "Passes",
        "curve": "linear",
        "unit": "",
        "description": "Number of mutate passes; drift accumulates across passes",
    },
    "decay": {
        "type": "float",
        "min": 0.001,
        "max": 1.0,
        "default": NOISE_DECAY,
        "label": "Decay",
        "curve": "exponential",
        "unit": "%",
        "description": "How far a channel may drift per pass, as a fraction of 255",
    },
}


def apply(canvas: Canvas, params: dict) -> None:
    """Add noise. Seeded through the canvas for determinism."""
    canvas.noise(params["passes"], params["decay"])
