"""Effect registry: central lookup for all registered canvas effects."""

import logging
import math
from typing import Any, Callable

from engine.errors import UnknownFilterMethod

logger = logging.getLogger(__name__)

EffectFn = Callable[[Any, dict], None]

_REGISTRY: dict[str, dict] = {}


def register(effect_id: str, fn: EffectFn, params: dict, name: str, category: str):
    """Register an effect."""
    _REGISTRY[effect_id] = {
        "fn": fn,
        "params": params,
        "name": name,
        "category": category,
    }


def get(effect_id: str) -> dict | None:
    """Get effect info by ID."""
    return _REGISTRY.get(effect_id)


def list_all() -> list[dict]:
    """List all registered effects with metadata."""
    return [
        {
            "id": eid,
            "name": info["name"],
            "category": info["category"],
            "params": info["params"],
        }
        for eid, info in _REGISTRY.items()
    ]


def resolve_params(schema: dict, params: dict) -> dict:
    """Fill defaults and clamp numeric values to the schema range.

    NaN/Inf values are dropped so the default applies. Keys not in the
    schema are ignored.
    """
    resolved = {}
    for key, pdef in schema.items():
        value = params.get(key, pdef["default"])
        ptype = pdef.get("type")
        if ptype in ("int", "float"):
            try:
                value = float(value)
            except (TypeError, ValueError):
                logger.warning("Param %s=%r is not numeric, using default", key, value)
                value = float(pdef["default"])
            if not math.isfinite(value):
                value = float(pdef["default"])
            value = max(pdef["min"], min(pdef["max"], value))
            value = int(round(value)) if ptype == "int" else value
        resolved[key] = value
    return resolved


def apply(canvas, effect_id: str, params: dict | None = None):
    """Run a registered effect on ``canvas`` with sanitised params.

    Raises:
        UnknownFilterMethod: If ``effect_id`` is not registered.
    """
    info = get(effect_id)
    if info is None:
        raise UnknownFilterMethod(effect_id, _REGISTRY)
    resolved = resolve_params(info["params"], params or {})
    logger.debug("Applying %s with %s", effect_id, resolved)
    info["fn"](canvas, resolved)


def _auto_register():
    """Import and register all built-in effects."""
    from effects.fx import age, blur, complement, invert, noise
    from effects.util import desaturate, grayscale, mix, saturate

    for mod in [
        invert,
        complement,
        noise,
        blur,
        age,
        mix,
        saturate,
        desaturate,
        grayscale,
    ]:
        register(
            mod.EFFECT_ID, mod.apply, mod.PARAMS, mod.EFFECT_NAME, mod.EFFECT_CATEGORY
        )


_auto_register()
