"""Grayscale effect: fully desaturates using BT.601 luma."""

from effects.canvas import Canvas

EFFECT_ID = "util.grayscale"
EFFECT_NAME = "Grayscale"
EFFECT_CATEGORY = "util"

PARAMS: dict = {}


def apply(canvas: Canvas, params: dict) -> None:
    canvas.grayscale()
