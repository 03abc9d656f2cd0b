"""
Toy datasets for training small networks.

These datasets are designed to:
1. Be small enough to train neuron-by-neuron in pure Python
2. Cover classic logic gates as well as a noisy classification cloud
3. Include a regression target for identity-output networks

Targets are always 2D (n_samples, n_outputs) so every row can be passed
straight to ``Network.backprop``.
"""

import numpy as np
from typing import Tuple, Dict, Optional


def _truth_table(outputs) -> Tuple[np.ndarray, np.ndarray]:
    X = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=float)
    y = np.array(outputs, dtype=float).reshape(-1, 1)
    return X, y


def xor_truth_table() -> Tuple[np.ndarray, np.ndarray]:
    """
    The four XOR examples - the simplest non-linearly separable problem.

    Requires at least one hidden layer to solve.
    """
    return _truth_table([0, 1, 1, 0])


def and_truth_table() -> Tuple[np.ndarray, np.ndarray]:
    """The four AND examples - linearly separable."""
    return _truth_table([0, 0, 0, 1])


def or_truth_table() -> Tuple[np.ndarray, np.ndarray]:
    """The four OR examples - linearly separable."""
    return _truth_table([0, 1, 1, 1])


def xor_dataset(
    n_samples: int = 40,
    noise: float = 0.1,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Noisy XOR cloud around the four corners of the unit square.

    Args:
        n_samples: Number of samples (rounded down to a multiple of 4)
        noise: Standard deviation of Gaussian noise
        seed: Random seed

    Returns:
        X: Features of shape (n_samples, 2)
        y: Targets of shape (n_samples, 1)
    """
    if seed is not None:
        np.random.seed(seed)

    n_per_corner = n_samples // 4
    corners, labels = xor_truth_table()

    X = np.vstack([
        np.random.randn(n_per_corner, 2) * noise + corner for corner in corners
    ])
    y = np.repeat(labels, n_per_corner, axis=0)

    # Shuffle
    indices = np.random.permutation(len(y))
    return X[indices], y[indices]


def sine_wave(
    n_samples: int = 50,
    noise: float = 0.0,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    One period of sin(x) over [-pi, pi] - a smooth regression target.

    Args:
        n_samples: Number of evenly spaced samples
        noise: Standard deviation of Gaussian noise on the target
        seed: Random seed

    Returns:
        X: Inputs of shape (n_samples, 1)
        y: Targets of shape (n_samples, 1)
    """
    if seed is not None:
        np.random.seed(seed)

    X = np.linspace(-np.pi, np.pi, n_samples).reshape(-1, 1)
    y = np.sin(X)
    if noise > 0:
        y = y + np.random.randn(*y.shape) * noise
    return X, y


DATASETS = {
    'xor': {
        'function': xor_truth_table,
        'name': 'XOR',
        'description': 'XOR truth table - needs a hidden layer',
        'task': 'classification',
        'requires_hidden': True,
        'default_params': {},
    },
    'and': {
        'function': and_truth_table,
        'name': 'AND',
        'description': 'AND truth table - linearly separable',
        'task': 'classification',
        'requires_hidden': False,
        'default_params': {},
    },
    'or': {
        'function': or_truth_table,
        'name': 'OR',
        'description': 'OR truth table - linearly separable',
        'task': 'classification',
        'requires_hidden': False,
        'default_params': {},
    },
    'xor_noisy': {
        'function': xor_dataset,
        'name': 'Noisy XOR',
        'description': 'Gaussian clouds around the XOR corners',
        'task': 'classification',
        'requires_hidden': True,
        'default_params': {'n_samples': 40, 'noise': 0.1},
    },
    'sine': {
        'function': sine_wave,
        'name': 'Sine',
        'description': 'One period of sin(x) - use an identity output',
        'task': 'regression',
        'requires_hidden': True,
        'default_params': {'n_samples': 50, 'noise': 0.0},
    },
}


def get_dataset(
    name: str,
    **kwargs
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Get a dataset by name.

    Args:
        name: Dataset name
        **kwargs: Override default parameters

    Returns:
        X: Features
        y: Targets
    """
    if name not in DATASETS:
        available = ', '.join(DATASETS.keys())
        raise ValueError(f"Unknown dataset '{name}'. Available: {available}")

    dataset_info = DATASETS[name]
    params = dataset_info['default_params'].copy()
    params.update(kwargs)

    return dataset_info['function'](**params)


def list_datasets() -> Dict[str, Dict]:
    """List all available datasets with their metadata."""
    return {
        name: {k: v for k, v in info.items() if k != 'function'}
        for name, info in DATASETS.items()
    }
