"""
Easing functions for animated transitions.

Each maps linear progress in [0, 1] to eased progress in [0, 1] with
f(0) == 0 and f(1) == 1.
"""

from typing import Callable, Dict

EasingFunction = Callable[[float], float]


def linear(p: float) -> float:
    return p


def ease_in(p: float) -> float:
    return p * p


def ease_out(p: float) -> float:
    return 1.0 - (1.0 - p) * (1.0 - p)


def ease_in_out(p: float) -> float:
    """Quadratic ease-in mirrored around the midpoint."""
    if p <= 0.5:
        return ease_in(2.0 * p) / 2.0
    return (2.0 - ease_in(2.0 * (1.0 - p))) / 2.0


EASINGS: Dict[str, EasingFunction] = {
    "linear": linear,
    "ease_in": ease_in,
    "ease_out": ease_out,
    "ease_in_out": ease_in_out,
}


def get_easing(name: str) -> EasingFunction:
    """
    Look up an easing function by name.

    Raises:
        ValueError: If no easing has that name
    """
    try:
        return EASINGS[name]
    except KeyError:
        raise ValueError(f"Unknown easing: {name}") from None
