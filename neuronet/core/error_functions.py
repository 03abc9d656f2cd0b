"""
Error (cost) functions - how wrong was the network's output.

Every function takes ``(target, actual)`` vectors and returns a scalar. The
paired gradient is taken with respect to ``actual`` and seeds the output
layer's deltas during backprop; constant factors are dropped, so the mean
squared gradient is simply ``actual - target``.
"""

import numpy as np
from typing import Callable, Dict, List, Sequence, Tuple


def _as_vectors(target: Sequence[float], actual: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    target = np.asarray(target, dtype=float).ravel()
    actual = np.asarray(actual, dtype=float).ravel()
    if target.shape != actual.shape:
        raise ValueError(
            f"target and actual must have the same length, got {target.size} and {actual.size}"
        )
    return target, actual


def mean_squared(target, actual) -> float:
    """(1/n) * sum((actual - target)^2)."""
    target, actual = _as_vectors(target, actual)
    return float(np.mean((actual - target) ** 2))


def difference_gradient(target, actual) -> np.ndarray:
    target, actual = _as_vectors(target, actual)
    return actual - target


def sum_squared(target, actual) -> float:
    """0.5 * sum((actual - target)^2)."""
    target, actual = _as_vectors(target, actual)
    return float(0.5 * np.sum((actual - target) ** 2))


def root_mean_squared(target, actual) -> float:
    target, actual = _as_vectors(target, actual)
    return float(np.sqrt(np.mean((actual - target) ** 2)))


def root_mean_squared_gradient(target, actual) -> np.ndarray:
    target, actual = _as_vectors(target, actual)
    rms = np.sqrt(np.mean((actual - target) ** 2))
    if rms == 0:
        return np.zeros_like(actual)
    return (actual - target) / (actual.size * rms)


def mean_absolute(target, actual) -> float:
    target, actual = _as_vectors(target, actual)
    return float(np.mean(np.abs(actual - target)))


def mean_absolute_gradient(target, actual) -> np.ndarray:
    target, actual = _as_vectors(target, actual)
    return np.sign(actual - target)


def binary_cross_entropy(target, actual) -> float:
    """Cross-entropy for outputs in (0, 1)."""
    target, actual = _as_vectors(target, actual)
    eps = 1e-15
    actual = np.clip(actual, eps, 1 - eps)
    return float(-np.mean(target * np.log(actual) + (1 - target) * np.log(1 - actual)))


def binary_cross_entropy_gradient(target, actual) -> np.ndarray:
    target, actual = _as_vectors(target, actual)
    eps = 1e-15
    actual = np.clip(actual, eps, 1 - eps)
    return (actual - target) / (actual * (1 - actual))


class ErrorFunction:
    """Wrapper for a cost function and its gradient with respect to the output."""

    def __init__(self, name: str, func: Callable, derivative: Callable, description: str = ''):
        self.name = name
        self.func = func
        self.derivative = derivative
        self.description = description

    def __call__(self, target, actual) -> float:
        return self.func(target, actual)

    def grad(self, target, actual) -> List[float]:
        return [float(g) for g in self.derivative(target, actual)]

    def __repr__(self):
        return f"ErrorFunction({self.name})"


ERROR_FUNCTIONS: Dict[str, ErrorFunction] = {
    'mean_squared': ErrorFunction(
        'mean_squared', mean_squared, difference_gradient,
        'Mean squared error - the default cost'
    ),
    'sum_squared': ErrorFunction(
        'sum_squared', sum_squared, difference_gradient,
        'Half the sum of squared errors'
    ),
    'root_mean_squared': ErrorFunction(
        'root_mean_squared', root_mean_squared, root_mean_squared_gradient,
        'Square root of the mean squared error'
    ),
    'mean_absolute': ErrorFunction(
        'mean_absolute', mean_absolute, mean_absolute_gradient,
        'Mean absolute error'
    ),
    'binary_cross_entropy': ErrorFunction(
        'binary_cross_entropy', binary_cross_entropy, binary_cross_entropy_gradient,
        'Cross-entropy for logistic outputs'
    ),
}


def get_error_function(name) -> ErrorFunction:
    """
    Resolve an error function.

    Accepts a registered name, an ErrorFunction, or any plain callable
    ``f(target, actual) -> float``. Plain callables are wrapped with the
    ``actual - target`` gradient.
    """
    if isinstance(name, ErrorFunction):
        return name
    if callable(name):
        label = getattr(name, '__name__', 'custom')
        return ErrorFunction(label, name, difference_gradient)
    if name not in ERROR_FUNCTIONS:
        available = ', '.join(ERROR_FUNCTIONS.keys())
        raise ValueError(f"Unknown error function '{name}'. Available: {available}")
    return ERROR_FUNCTIONS[name]
