"""Pluggable fault injection for simulating flaky destinations."""

from __future__ import annotations

import random
from typing import Callable

FaultPolicy = Callable[[], bool]


def never() -> bool:
    return False


def always() -> bool:
    return True


def probabilistic(probability: float, rng: random.Random | None = None) -> FaultPolicy:
    """Inject a fault with the given probability, drawing from ``rng``."""
    if not 0.0 <= probability <= 1.0:
        raise ValueError("probability must be between 0 and 1")
    source = rng or random.Random()

    def policy() -> bool:
        return source.random() < probability

    return policy
