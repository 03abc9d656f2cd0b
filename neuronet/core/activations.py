"""
Activation functions for neurons and layers.

Each activation function family has distinct properties:
- Linear: No nonlinearity, the pre-activation is passed on directly
- Smooth: Differentiable everywhere, bounded or unbounded
- Piecewise: Clamped or thresholded, cheap to evaluate
- Periodic: Oscillating
- Radial: Distance-like outputs for radial units
- Normalized: Need the whole layer's pre-activations (softmax, unit sum)

Pointwise functions take a single value. Normalized functions also take the
vector of sibling pre-activations and must only be evaluated once every
sibling in the layer has been summed.
"""

import numpy as np
from typing import Callable, Dict, List, Optional, Sequence


# LeCun's recommended scaled tanh, "Efficient BackProp" section 4.4
TANH_SCALE = 1.7159
TANH_SLOPE = 2.0 / 3.0


def identity(x, vector=None):
    """Identity activation - no nonlinearity."""
    return x


def identity_derivative(x):
    return np.ones_like(x, dtype=float)


def logistic(x, vector=None):
    """Logistic sigmoid - smooth, bounded (0, 1)."""
    # Clip to avoid overflow
    x = np.clip(x, -500, 500)
    return 1 / (1 + np.exp(-x))


def logistic_derivative(x):
    s = logistic(x)
    return s * (1 - s)


def tanh(x, vector=None):
    """Scaled tanh, bounded (-1.7159, 1.7159)."""
    return TANH_SCALE * np.tanh(TANH_SLOPE * x)


def tanh_derivative(x):
    return TANH_SCALE * TANH_SLOPE * (1 - np.tanh(TANH_SLOPE * x) ** 2)


def hyperbolic(x, vector=None):
    """Hyperbolic tangent - smooth, zero-centered, bounded (-1, 1)."""
    return np.tanh(x)


def hyperbolic_derivative(x):
    return 1 - np.tanh(x) ** 2


def rational_tanh(x, vector=None):
    """
    Rational approximation of tanh.

    Saturates to exactly -1/+1 outside [-3, 3] instead of evaluating the
    rational form there.
    """
    x = np.asarray(x, dtype=float)
    rational = x * (27 + x * x) / (27 + 9 * x * x)
    return np.where(x < -3, -1.0, np.where(x > 3, 1.0, rational))


def rational_tanh_derivative(x):
    x = np.asarray(x, dtype=float)
    # d/dx x(27 + x^2) / (27 + 9x^2) simplifies to 9(x^2 - 9)^2 / (27 + 9x^2)^2
    inside = 9 * (x * x - 9) ** 2 / (27 + 9 * x * x) ** 2
    return np.where(np.abs(x) > 3, 0.0, inside)


def relu(x, vector=None):
    """Rectified Linear Unit."""
    return np.maximum(0, x)


def relu_derivative(x):
    return (np.asarray(x) > 0).astype(float)


def softplus(x, vector=None):
    """Softplus - smooth approximation of ReLU."""
    return np.logaddexp(0, x)


def softplus_derivative(x):
    return logistic(x)


def ramp(x, vector=None):
    """Piecewise linear sigmoid, clamped to [-1, 1]."""
    return np.clip(x, -1, 1)


def ramp_derivative(x):
    x = np.asarray(x)
    return ((x > -1) & (x < 1)).astype(float)


def step(x, vector=None):
    """Heaviside step - 0 for negative input, 1 otherwise."""
    return np.where(np.asarray(x) < 0, 0.0, 1.0)


def step_derivative(x):
    return np.zeros_like(x, dtype=float)


def sine(x, vector=None):
    """Sinusoidal activation - periodic."""
    return np.sin(x)


def sine_derivative(x):
    return np.cos(x)


def square_root(x, vector=None):
    """Square root of the (non-negative part of the) input."""
    return np.sqrt(np.maximum(x, 0))


def square_root_derivative(x):
    x = np.maximum(x, 0)
    return np.where(x > 0, 0.5 / np.sqrt(np.maximum(x, 1e-300)), 0.0)


def exponential(x, vector=None):
    """Negative exponential, e^-x. Range (0, inf)."""
    return np.exp(-np.clip(x, -500, 500))


def exponential_derivative(x):
    return -exponential(x)


def softmax(x, vector):
    """
    Exponential normalized over the layer so the outputs sum to 1.

    The layer maximum is subtracted before exponentiating, which keeps large
    pre-activations from overflowing.
    """
    vector = np.asarray(vector, dtype=float)
    shift = np.max(vector)
    return np.exp(x - shift) / np.sum(np.exp(vector - shift))


def softmax_backward(pre_activations, outputs, upstream):
    s = np.asarray(outputs, dtype=float)
    g = np.asarray(upstream, dtype=float)
    return s * (g - np.dot(g, s))


def unit_sum(x, vector):
    """Divide by the layer total so the outputs sum to 1 (0 if the total is 0)."""
    total = np.sum(vector)
    if total == 0:
        return 0.0
    return x / total


def unit_sum_backward(pre_activations, outputs, upstream):
    total = np.sum(pre_activations)
    if total == 0:
        return np.zeros(len(outputs))
    a = np.asarray(outputs, dtype=float)
    g = np.asarray(upstream, dtype=float)
    return (g - np.dot(g, a)) / total


class Activation:
    """
    Wrapper for an activation function with its derivative and metadata.

    For pointwise activations ``derivative`` maps a pre-activation to the
    local slope. For normalized activations it is a vector-Jacobian product
    ``derivative(pre_activations, outputs, upstream) -> gradients`` over the
    whole layer.
    """

    def __init__(
        self,
        name: str,
        func: Callable,
        derivative: Callable,
        family: str,
        properties: Dict
    ):
        self.name = name
        self.func = func
        self.derivative = derivative
        self.family = family
        self.properties = properties

    @property
    def normalized(self) -> bool:
        return self.family == 'normalized'

    def __call__(self, x, vector: Optional[Sequence[float]] = None):
        if self.normalized:
            if vector is None:
                raise ValueError(f"Activation '{self.name}' needs the layer's pre-activations")
            return self.func(x, vector)
        return self.func(x)

    def grad(self, x):
        if self.normalized:
            raise ValueError(f"Activation '{self.name}' is normalized; use backward()")
        return self.derivative(x)

    def backward(
        self,
        pre_activations: Sequence[float],
        outputs: Sequence[float],
        upstream: Sequence[float]
    ) -> List[float]:
        """Map output-side gradients of the whole layer to pre-activation gradients."""
        if self.normalized:
            grads = self.derivative(pre_activations, outputs, upstream)
        else:
            grads = np.asarray(upstream, dtype=float) * self.derivative(
                np.asarray(pre_activations, dtype=float)
            )
        return [float(g) for g in grads]

    def __repr__(self):
        return f"Activation({self.name}, family={self.family})"


# Registry of all activation functions
ACTIVATIONS: Dict[str, Activation] = {
    'identity': Activation(
        name='identity',
        func=identity,
        derivative=identity_derivative,
        family='linear',
        properties={
            'bounded': False,
            'smooth': True,
            'monotonic': True,
            'range': (-np.inf, np.inf),
            'description': 'Identity function - no nonlinearity'
        }
    ),
    'logistic': Activation(
        name='logistic',
        func=logistic,
        derivative=logistic_derivative,
        family='smooth',
        properties={
            'bounded': True,
            'smooth': True,
            'monotonic': True,
            'range': (0, 1),
            'description': 'Logistic sigmoid - S-shaped, bounded between 0 and 1'
        }
    ),
    'tanh': Activation(
        name='tanh',
        func=tanh,
        derivative=tanh_derivative,
        family='smooth',
        properties={
            'bounded': True,
            'smooth': True,
            'monotonic': True,
            'range': (-TANH_SCALE, TANH_SCALE),
            'description': 'Scaled tanh 1.7159 * tanh(2x/3), recommended for hidden layers'
        }
    ),
    'hyperbolic': Activation(
        name='hyperbolic',
        func=hyperbolic,
        derivative=hyperbolic_derivative,
        family='smooth',
        properties={
            'bounded': True,
            'smooth': True,
            'monotonic': True,
            'range': (-1, 1),
            'description': 'Hyperbolic tangent - zero-centered sigmoid curve'
        }
    ),
    'rational_tanh': Activation(
        name='rational_tanh',
        func=rational_tanh,
        derivative=rational_tanh_derivative,
        family='smooth',
        properties={
            'bounded': True,
            'smooth': True,
            'monotonic': True,
            'range': (-1, 1),
            'description': 'Fast rational tanh approximation, saturates outside [-3, 3]'
        }
    ),
    'relu': Activation(
        name='relu',
        func=relu,
        derivative=relu_derivative,
        family='rectified',
        properties={
            'bounded': False,
            'smooth': False,
            'monotonic': True,
            'range': (0, np.inf),
            'description': 'Rectified Linear Unit - piecewise linear, sparse'
        }
    ),
    'softplus': Activation(
        name='softplus',
        func=softplus,
        derivative=softplus_derivative,
        family='rectified',
        properties={
            'bounded': False,
            'smooth': True,
            'monotonic': True,
            'range': (0, np.inf),
            'description': 'Softplus - smooth approximation of ReLU'
        }
    ),
    'ramp': Activation(
        name='ramp',
        func=ramp,
        derivative=ramp_derivative,
        family='piecewise',
        properties={
            'bounded': True,
            'smooth': False,
            'monotonic': True,
            'range': (-1, 1),
            'description': 'Piece-wise linear sigmoid - fast, clamps to [-1, 1]'
        }
    ),
    'step': Activation(
        name='step',
        func=step,
        derivative=step_derivative,
        family='piecewise',
        properties={
            'bounded': True,
            'smooth': False,
            'monotonic': True,
            'range': (0, 1),
            'description': 'Outputs exactly 0 or 1 - perceptron threshold'
        }
    ),
    'sine': Activation(
        name='sine',
        func=sine,
        derivative=sine_derivative,
        family='periodic',
        properties={
            'bounded': True,
            'smooth': True,
            'monotonic': False,
            'range': (-1, 1),
            'description': 'Sinusoidal - periodic, for radially distributed data'
        }
    ),
    'square_root': Activation(
        name='square_root',
        func=square_root,
        derivative=square_root_derivative,
        family='radial',
        properties={
            'bounded': False,
            'smooth': False,
            'monotonic': True,
            'range': (0, np.inf),
            'description': 'Square root - turns a squared distance into a distance'
        }
    ),
    'exponential': Activation(
        name='exponential',
        func=exponential,
        derivative=exponential_derivative,
        family='radial',
        properties={
            'bounded': False,
            'smooth': True,
            'monotonic': True,
            'range': (0, np.inf),
            'description': 'Negative exponential - Gaussian-like radial units'
        }
    ),
    'softmax': Activation(
        name='softmax',
        func=softmax,
        derivative=softmax_backward,
        family='normalized',
        properties={
            'bounded': True,
            'smooth': True,
            'monotonic': True,
            'range': (0, 1),
            'description': 'Softmax - outputs read as class probabilities'
        }
    ),
    'unit_sum': Activation(
        name='unit_sum',
        func=unit_sum,
        derivative=unit_sum_backward,
        family='normalized',
        properties={
            'bounded': True,
            'smooth': True,
            'monotonic': True,
            'range': (0, 1),
            'description': 'Divide by the layer total so outputs sum to 1'
        }
    ),
}

ACTIVATIONS['sigmoid'] = ACTIVATIONS['logistic']


def central_difference(func: Callable, h: float = 1e-6) -> Callable:
    """Numerical derivative for pointwise callables without a known one."""
    def derivative(x):
        return (func(x + h) - func(x - h)) / (2 * h)
    return derivative


def get_activation(name) -> Activation:
    """
    Resolve an activation.

    Accepts a registered name, an Activation, one of this module's catalog
    functions (``logistic``, ``softmax``...) or any pointwise callable
    ``f(x) -> float``. Unknown callables get a central-difference derivative.
    """
    if isinstance(name, Activation):
        return name
    if callable(name):
        for act in ACTIVATIONS.values():
            if act.func is name:
                return act
        label = getattr(name, '__name__', 'custom')
        return Activation(label, name, central_difference(name), 'custom', {})
    if name not in ACTIVATIONS:
        available = ', '.join(ACTIVATIONS.keys())
        raise ValueError(f"Unknown activation '{name}'. Available: {available}")
    return ACTIVATIONS[name]


def list_activations() -> Dict[str, Dict]:
    """List all available activations with their properties."""
    return {
        name: {
            'family': act.family,
            **act.properties
        }
        for name, act in ACTIVATIONS.items()
    }


ACTIVATION_FAMILIES = {
    'linear': ['identity'],
    'smooth': ['logistic', 'tanh', 'hyperbolic', 'rational_tanh'],
    'rectified': ['relu', 'softplus'],
    'piecewise': ['ramp', 'step'],
    'periodic': ['sine'],
    'radial': ['square_root', 'exponential'],
    'normalized': ['softmax', 'unit_sum'],
}


def get_family_activations(family: str) -> list:
    """Get all activations in a family."""
    return ACTIVATION_FAMILIES.get(family, [])
