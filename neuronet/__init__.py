"""neuronet - a small feedforward neural network engine."""

from .core import (
    Layer,
    Network,
    NetworkConfig,
    Trainer,
    TrainingConfig,
    get_activation,
    get_error_function,
)

__version__ = '0.1.0'

__all__ = [
    'Layer',
    'Network',
    'NetworkConfig',
    'Trainer',
    'TrainingConfig',
    'get_activation',
    'get_error_function',
]
