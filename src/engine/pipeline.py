"""Effect pipeline: applies an ordered chain of effects to a canvas.

Each step is timed; slow steps are logged and kept in rolling stats.
"""

import logging
import threading
import time
from collections import defaultdict, deque

import sentry_sdk

from effects import registry

logger = logging.getLogger(__name__)

# Maximum effects in a single chain
MAX_CHAIN_DEPTH = 10

# Per-effect timing threshold (milliseconds)
EFFECT_WARN_MS = 250

# Rolling timing stats per effect
_timing_lock = threading.Lock()
_effect_timing: dict[str, deque] = defaultdict(lambda: deque(maxlen=100))


def record_timing(effect_id: str, elapsed_ms: float):
    """Record a timing sample for an effect."""
    with _timing_lock:
        _effect_timing[effect_id].append(elapsed_ms)


def get_effect_stats() -> dict[str, dict]:
    """Return p50/p95/max per effect."""
    result = {}
    with _timing_lock:
        snapshot = {eid: list(samples) for eid, samples in _effect_timing.items()}
    for eid, samples in snapshot.items():
        s = sorted(samples)
        result[eid] = {
            "p50": s[len(s) // 2] if s else 0,
            "p95": s[int(len(s) * 0.95)] if len(s) >= 20 else None,
            "max": max(s) if s else 0,
            "samples": len(s),
        }
    return result


def flush_timing():
    """Clear all timing stats."""
    with _timing_lock:
        _effect_timing.clear()


def apply_chain(canvas, chain: list[dict]) -> list[str]:
    """Apply an ordered chain of effects to a canvas.

    Args:
        canvas: The Canvas to mutate.
        chain:  List of effect instances, each:
                {"effect_id": str, "params": dict, "enabled": bool}.

    Returns:
        Effect ids that ran, in order.

    Raises:
        ValueError: If chain exceeds MAX_CHAIN_DEPTH.
        UnknownFilterMethod: If the chain names an unknown effect.
    """
    if len(chain) > MAX_CHAIN_DEPTH:
        raise ValueError(f"Chain depth {len(chain)} exceeds maximum {MAX_CHAIN_DEPTH}")

    applied: list[str] = []

    for i, effect_instance in enumerate(chain):
        if not effect_instance.get("enabled", True):
            continue

        effect_id = effect_instance.get("effect_id")
        params = dict(effect_instance.get("params", {}))

        sentry_sdk.add_breadcrumb(
            category="effect",
            message=f"Processing {effect_id}",
            data={"chain_position": i},
            level="info",
        )

        t0 = time.monotonic()
        registry.apply(canvas, effect_id, params)
        elapsed_ms = (time.monotonic() - t0) * 1000

        record_timing(effect_id, elapsed_ms)
        if elapsed_ms > EFFECT_WARN_MS:
            logger.warning(
                "Effect %s took %.0fms (>%dms warn threshold) on %dx%d canvas",
                effect_id,
                elapsed_ms,
                EFFECT_WARN_MS,
                canvas.width,
                canvas.height,
            )

        applied.append(effect_id)

    return applied
