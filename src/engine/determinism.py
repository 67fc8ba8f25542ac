"""Seeded determinism for reproducible noise passes."""

import hashlib

import numpy as np


def derive_seed(base_seed: int, operation: str, pass_index: int) -> int:
    """Derive a deterministic seed from context. Same inputs = same output, always."""
    key = f"{base_seed}:{operation}:{pass_index}"
    return int(hashlib.sha256(key.encode()).hexdigest()[:16], 16)


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create an RNG; unseeded when ``seed`` is None."""
    return np.random.default_rng(seed)
