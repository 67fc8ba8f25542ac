"""Invert effect: inverts RGB channels, preserves alpha."""

from effects.canvas import Canvas

EFFECT_ID = "fx.invert"
EFFECT_NAME = "Invert"
EFFECT_CATEGORY = "fx"

PARAMS: dict = {}  # No user-facing params


def apply(canvas: Canvas, params: dict) -> None:
    """Invert RGB channels. Stateless."""
    canvas.invert()
