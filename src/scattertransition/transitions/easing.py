"""
Easing Functions
================
Symmetric (in-out) easing curves mapping [0, 1] onto [0, 1].
The curves follow the d3-ease family: ease(0) == 0 and ease(1) == 1.
"""
from __future__ import annotations

from typing import Callable

EaseFn = Callable[[float], float]


def linear(t: float) -> float:
    return t


def ease_quad(t: float) -> float:
    """Quadratic ease-in-out."""
    t *= 2
    if t <= 1:
        return t * t / 2
    t -= 1
    return (t * (2 - t) + 1) / 2


def ease_cubic(t: float) -> float:
    """Cubic ease-in-out."""
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def _tpmt(x: float) -> float:
    # 2^(-10x), shifted and rescaled so that _tpmt(0) == 1 and _tpmt(1) == 0
    return (2 ** (-10 * x) - 0.0009765625) * 1.0009775171065494


def ease_exp(t: float) -> float:
    """Exponential ease-in-out."""
    t *= 2
    if t <= 1:
        return _tpmt(1 - t) / 2
    return (2 - _tpmt(t - 1)) / 2


EASING_VARIANTS: list[tuple[str, EaseFn]] = [
    ("linear", linear),
    ("quad", ease_quad),
    ("cubic", ease_cubic),
    ("exp", ease_exp),
]
