"""Core network engine: activations, errors, neurons, layers and networks."""

from .activations import ACTIVATIONS, Activation, get_activation
from .error_functions import ERROR_FUNCTIONS, ErrorFunction, get_error_function
from .initialize import WEIGHT_INITIALIZERS, get_initializer
from .exceptions import (
    NetworkError,
    ConstructionError,
    ShapeMismatchError,
    TrainingOrderError,
    NumericError,
)
from .connection import Connection
from .neuron import Neuron
from .graph import Graph
from .layer import Layer
from .network import Network, NetworkConfig, NetworkState
from .training import Trainer, TrainingConfig, train_network

__all__ = [
    'ACTIVATIONS',
    'Activation',
    'get_activation',
    'ERROR_FUNCTIONS',
    'ErrorFunction',
    'get_error_function',
    'WEIGHT_INITIALIZERS',
    'get_initializer',
    'NetworkError',
    'ConstructionError',
    'ShapeMismatchError',
    'TrainingOrderError',
    'NumericError',
    'Connection',
    'Neuron',
    'Graph',
    'Layer',
    'Network',
    'NetworkConfig',
    'NetworkState',
    'Trainer',
    'TrainingConfig',
    'train_network',
]
