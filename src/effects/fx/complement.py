"""Complement effect: rotates every pixel's hue by 180 degrees."""

from effects.canvas import Canvas

EFFECT_ID = "fx.complement"
EFFECT_NAME = "Complement"
EFFECT_CATEGORY = "color"

PARAMS: dict = {}


def apply(canvas: Canvas, params: dict) -> None:
    canvas.complement()
