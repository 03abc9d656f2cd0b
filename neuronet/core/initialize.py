"""
Initial connection weights.

Weights are drawn with zero mean and a spread that shrinks with the fan-in
of the receiving neurons, which keeps the first weighted sums away from the
saturated ends of the activation functions. Draws come from numpy's global
random state; call ``seed`` for reproducible networks.
"""

import numbers
from typing import Callable, Dict, Optional

import numpy as np


def _check_fan_in(fan_in) -> int:
    if isinstance(fan_in, bool) or not isinstance(fan_in, numbers.Integral) or fan_in < 1:
        raise ValueError(f"fan_in must be a positive integer, got {fan_in!r}")
    return int(fan_in)


def weight(fan_in: int) -> float:
    """Normal draw with std 1/sqrt(fan_in) (LeCun initialization)."""
    n = _check_fan_in(fan_in)
    return float(np.random.randn() / np.sqrt(n))


def uniform_weight(fan_in: int) -> float:
    """Uniform draw in [-1/sqrt(fan_in), 1/sqrt(fan_in)]."""
    n = _check_fan_in(fan_in)
    limit = 1.0 / np.sqrt(n)
    return float(np.random.uniform(-limit, limit))


def he_weight(fan_in: int) -> float:
    """Normal draw with std sqrt(2/fan_in), suited to rectified units."""
    n = _check_fan_in(fan_in)
    return float(np.random.randn() * np.sqrt(2.0 / n))


WEIGHT_INITIALIZERS: Dict[str, Callable[[int], float]] = {
    'normal': weight,
    'uniform': uniform_weight,
    'he': he_weight,
}


def get_initializer(name) -> Callable[[int], float]:
    """Get a weight initializer by name (callables pass through)."""
    if callable(name):
        return name
    if name not in WEIGHT_INITIALIZERS:
        available = ', '.join(WEIGHT_INITIALIZERS.keys())
        raise ValueError(f"Unknown initializer '{name}'. Available: {available}")
    return WEIGHT_INITIALIZERS[name]


def seed(value: Optional[int]) -> None:
    """Seed the random state used for weight draws. None leaves it untouched."""
    if value is not None:
        np.random.seed(value)
