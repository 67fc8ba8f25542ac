"""Age effect: light noise followed by a single blur pass."""

from effects.canvas import Canvas

EFFECT_ID = "fx.age"
EFFECT_NAME = "Age"
EFFECT_CATEGORY = "texture"

PARAMS: dict = {}  # Fixed recipe


def apply(canvas: Canvas, params: dict) -> None:
    canvas.age()
