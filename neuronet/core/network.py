"""
Networks - ordered layers of neurons trained by backpropagation.

A Network is built either from a list of layer sizes or from a list of
pre-built Layer instances. The first layer receives input, the last layer is
the output, everything between is hidden.

One training step walks a fixed sequence of states:

    IDLE -> ACTIVATED -> ERROR_COMPUTED -> DELTAS_PROPAGATED
         -> GRADIENTS_ACCUMULATED -> (update_weights) -> IDLE

Several activate/backprop/accumulate cycles may run before a single
``update_weights`` (mini-batch). Calls made out of order raise
TrainingOrderError instead of silently training on stale state.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from . import initialize
from .connection import Connection
from .error_functions import ErrorFunction, get_error_function
from .exceptions import (
    ConstructionError,
    NumericError,
    ShapeMismatchError,
    TrainingOrderError,
)
from .graph import Graph
from .layer import Layer

logger = logging.getLogger(__name__)


class NetworkState(Enum):
    IDLE = 'idle'
    ACTIVATED = 'activated'
    ERROR_COMPUTED = 'error_computed'
    DELTAS_PROPAGATED = 'deltas_propagated'
    GRADIENTS_ACCUMULATED = 'gradients_accumulated'


@dataclass
class NetworkConfig:
    """Configuration for a network built from layer sizes."""
    sizes: List[int]  # Neurons per layer, input first, output last
    activation: str = 'logistic'  # Hidden layer activation
    output_activation: Optional[str] = None  # Defaults to `activation`
    bias: bool = True  # Bias neuron on the input and hidden layers
    error_function: str = 'mean_squared'
    initializer: str = 'normal'
    seed: Optional[int] = None

    @property
    def depth(self) -> int:
        """Number of hidden layers."""
        return max(len(self.sizes) - 2, 0)

    @property
    def total_params(self) -> int:
        """Number of connections (bias connections included)."""
        params = 0
        for fan_in, fan_out in zip(self.sizes[:-1], self.sizes[1:]):
            params += (fan_in + (1 if self.bias else 0)) * fan_out
        return params


def _is_size(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


class Network:
    """
    A feedforward network of fully connected layers.

    Example:
        net = Network([2, 4, 1], activation='hyperbolic', seed=0)
        net.activate([0, 1])
        net.backprop([1])
        net.accumulate_gradients()
        net.update_weights(0.5)
    """

    def __init__(
        self,
        layers,
        error_function='mean_squared',
        activation='logistic',
        output_activation=None,
        bias: bool = True,
        initializer='normal',
        seed: Optional[int] = None,
        connect: bool = True
    ):
        if not isinstance(layers, (list, tuple)):
            raise ConstructionError(
                f"Network() layers must be a list of sizes or Layers, not: {type(layers).__name__}"
            )
        if len(layers) == 0:
            raise ConstructionError("Network() needs at least one layer")

        try:
            self.error_function: ErrorFunction = get_error_function(error_function)
        except ValueError as e:
            raise ConstructionError(str(e)) from e

        initialize.seed(seed)

        if all(isinstance(layer, Layer) for layer in layers):
            self.layers = self._adopt_layers(layers)
        elif all(_is_size(size) for size in layers):
            self.layers = self._build_layers(layers, activation, output_activation, bias)
        else:
            raise ConstructionError(
                "Network() every layers element must be a positive size or a Layer instance, "
                "and the two cannot be mixed"
            )

        if connect:
            for layer, next_layer in zip(self.layers[:-1], self.layers[1:]):
                if not layer.is_connected_to(next_layer):
                    layer.connect(next_layer, initializer)

        self.graph: Graph = self.layers[0].graph
        for layer in self.layers[1:]:
            if layer.graph is not self.graph:
                self.graph.absorb(layer.graph)

        self.last_output: List[float] = []
        self.last_error = 0.0
        self.state = NetworkState.IDLE
        self._pending_gradients = 0

        logger.debug("Built %r with %d connections", self, len(self.graph.connections))

    @staticmethod
    def _adopt_layers(layers: Sequence[Layer]) -> List[Layer]:
        if len({id(layer) for layer in layers}) != len(layers):
            raise ConstructionError("Network() the same Layer instance appears twice")
        return list(layers)  # copy so the caller's list can't mutate ours

    @staticmethod
    def _build_layers(sizes, activation, output_activation, bias) -> List[Layer]:
        graph = Graph()
        last = len(sizes) - 1
        layers = []
        try:
            for i, size in enumerate(sizes):
                if i == 0:
                    fn = 'identity'
                elif i == last:
                    fn = output_activation or activation
                else:
                    fn = activation
                layers.append(Layer(size, fn, bias=bias and i < last, graph=graph))
        except ConstructionError:
            raise
        except ValueError as e:
            raise ConstructionError(str(e)) from e
        return layers

    @classmethod
    def from_config(cls, config: NetworkConfig) -> 'Network':
        return cls(
            config.sizes,
            error_function=config.error_function,
            activation=config.activation,
            output_activation=config.output_activation,
            bias=config.bias,
            initializer=config.initializer,
            seed=config.seed,
        )

    @property
    def input_layer(self) -> Layer:
        return self.layers[0]

    @property
    def hidden_layers(self) -> List[Layer]:
        return self.layers[1:-1]

    @property
    def output_layer(self) -> Layer:
        return self.layers[-1]

    @property
    def input_size(self) -> int:
        return self.input_layer.size

    @property
    def output_size(self) -> int:
        return self.output_layer.size

    @property
    def connections(self) -> List[Connection]:
        return self.graph.connections

    def weights(self) -> List[float]:
        return [connection.weight for connection in self.graph.connections]

    def gradients(self) -> List[float]:
        return [connection.gradient for connection in self.graph.connections]

    def _vector(self, values, expected: int, label: str) -> List[float]:
        vector = np.asarray(values, dtype=float).ravel()
        if vector.size != expected:
            raise ShapeMismatchError(f"Expected {expected} {label} values, got {vector.size}")
        return [float(v) for v in vector]

    def _require(self, action: str, *states: NetworkState) -> None:
        if self.state not in states:
            allowed = ', '.join(s.value for s in states)
            raise TrainingOrderError(
                f"Cannot {action} while the network is {self.state.value} (needs: {allowed})"
            )

    def activate(self, inputs) -> List[float]:
        """
        Activate the network with one input vector.

        Layers are activated strictly in order. Returns (and stores as
        ``last_output``) the output layer's values without any bias slot.
        """
        values = self._vector(inputs, self.input_size, 'input')

        self.input_layer.activate(values)
        for layer in self.layers[1:]:
            layer.activate()

        output = self.output_layer.outputs()
        if not all(math.isfinite(v) for v in output):
            # Neuron values now belong to the failed pass; stale deltas must not be trained on
            self.last_output = []
            self.state = NetworkState.IDLE
            raise NumericError(f"Network output is not finite: {output}")

        self.last_output = output
        self.state = NetworkState.ACTIVATED
        return list(output)

    def compute_error(self, target) -> float:
        """Error of the last output against ``target``; neuron state is untouched."""
        if self.state == NetworkState.IDLE:
            raise TrainingOrderError("Cannot compute error before the network is activated")
        target = self._vector(target, self.output_size, 'target')
        self.last_error = self.error_function(target, self.last_output)
        if self.state == NetworkState.ACTIVATED:
            self.state = NetworkState.ERROR_COMPUTED
        return self.last_error

    def backprop(self, target) -> None:
        """
        Set the output deltas from ``target`` and propagate them backward.

        Hidden layers run last to first. The input layer is skipped: nothing
        reads its deltas and it has no incoming connections to train.
        """
        self._require('backprop', NetworkState.ACTIVATED, NetworkState.ERROR_COMPUTED)
        target = self._vector(target, self.output_size, 'target')

        self.last_error = self.error_function(target, self.last_output)
        self.output_layer.backprop(self.error_function.grad(target, self.last_output))
        for layer in reversed(self.hidden_layers):
            layer.backprop()

        self.state = NetworkState.DELTAS_PROPAGATED

    def accumulate_gradients(self) -> None:
        """
        Add this example's gradient to every connection without updating.

        Runs from the output layer back to the input layer.
        """
        self._require('accumulate gradients', NetworkState.DELTAS_PROPAGATED)
        for layer in reversed(self.layers):
            layer.accumulate_gradients()
        self._pending_gradients += 1
        self.state = NetworkState.GRADIENTS_ACCUMULATED

    def update_weights(self, learning_rate: float) -> None:
        """
        Apply and reset every connection's accumulated gradient once.

        Must follow ``accumulate_gradients`` (or a failed activation, which
        leaves the network IDLE): deltas from a backprop that was never
        accumulated would otherwise be dropped. Every new weight is checked
        before any is written, so a NumericError leaves weights, gradients
        and state untouched.
        """
        self._require(
            'update weights', NetworkState.GRADIENTS_ACCUMULATED, NetworkState.IDLE
        )
        if self._pending_gradients == 0:
            raise TrainingOrderError("Cannot update weights: no gradients have been accumulated")
        for connection in self.graph.connections:
            if not math.isfinite(connection.weight - learning_rate * connection.gradient):
                raise NumericError(
                    f"Update would make connection {connection.source}->{connection.target} "
                    f"weight non-finite (gradient={connection.gradient})"
                )
        for layer in reversed(self.layers):
            layer.apply_weight_updates(learning_rate)
        logger.debug(
            "Updated weights from %d accumulated example(s), lr=%s",
            self._pending_gradients, learning_rate
        )
        self._pending_gradients = 0
        self.state = NetworkState.IDLE

    def train_step(self, inputs, target, learning_rate: float) -> float:
        """One full online step. Returns the error before the update."""
        self.activate(inputs)
        self.backprop(target)
        self.accumulate_gradients()
        self.update_weights(learning_rate)
        return self.last_error

    @property
    def pending_gradients(self) -> int:
        """Examples accumulated since the last weight update."""
        return self._pending_gradients

    def __repr__(self):
        arch = "→".join(
            f"{layer.size}{'+b' if layer.bias else ''}" for layer in self.layers
        )
        return f"Network(arch={arch}, error={self.error_function.name})"
