"""
Layers - ordered groups of neurons activated and trained together.

A layer's neuron order is fixed at construction and defines the positions
of its input and output vectors. When a bias neuron is requested it is
always the last neuron, so positions ``0..size-1`` are the regular units.
"""

import logging
import numbers
from typing import List, Optional, Sequence

from .activations import get_activation
from .exceptions import ConstructionError, ShapeMismatchError
from .graph import Graph
from .initialize import get_initializer
from .neuron import Neuron

logger = logging.getLogger(__name__)


class Layer:
    """
    A single dimension of neurons with an optional trailing bias neuron.

    Layers built on their own get a private Graph; connecting two layers
    merges their graphs so a network ends up with a single arena.
    """

    def __init__(
        self,
        size: int,
        activation='logistic',
        bias: bool = False,
        graph: Optional[Graph] = None
    ):
        if isinstance(size, bool) or not isinstance(size, numbers.Integral) or size < 1:
            raise ConstructionError(f"Layer size must be a positive integer, got {size!r}")

        self.activation = get_activation(activation)
        self.bias = bias
        self.graph = graph if graph is not None else Graph()
        self.graph.layers.append(self)
        self.successors: List['Layer'] = []
        self.predecessors: List['Layer'] = []

        self.neurons: List[Neuron] = []
        for _ in range(int(size)):
            self._add(Neuron(self.activation))
        if bias:
            self._add(Neuron(self.activation, is_bias=True))

    def _add(self, neuron: Neuron):
        self.graph.add_neuron(neuron)
        self.neurons.append(neuron)

    @property
    def size(self) -> int:
        """Number of regular (non-bias) neurons."""
        return len(self.neurons) - (1 if self.bias else 0)

    @property
    def units(self) -> List[Neuron]:
        """The regular neurons, in order, without the bias neuron."""
        return self.neurons[:self.size]

    def is_connected_to(self, other: 'Layer') -> bool:
        return any(layer is other for layer in self.successors)

    def connect(self, next_layer: 'Layer', initializer='normal') -> None:
        """
        Connect every neuron here to every regular neuron of ``next_layer``.

        Initial weights use this layer's neuron count (bias included) as the
        fan-in. Bias neurons of ``next_layer`` receive no connections.
        """
        if not isinstance(next_layer, Layer):
            raise ConstructionError(f"Can only connect to a Layer, not {type(next_layer).__name__}")
        if next_layer is self:
            raise ConstructionError("A layer cannot connect to itself")
        if self.is_connected_to(next_layer):
            raise ConstructionError("These layers are already connected")

        if next_layer.graph is not self.graph:
            self.graph.absorb(next_layer.graph)

        init = get_initializer(initializer)
        fan_in = len(self.neurons)
        for source in self.neurons:
            for target in next_layer.units:
                self.graph.connect(source.index, target.index, init(fan_in))

        self.successors.append(next_layer)
        next_layer.predecessors.append(self)
        logger.debug(
            "Connected layer of %d neurons to layer of %d (%d connections)",
            len(self.neurons), next_layer.size, len(self.neurons) * next_layer.size
        )

    def activate(self, inputs: Optional[Sequence[float]] = None) -> List[float]:
        """
        Activate every neuron in order.

        ``inputs`` feed the regular neurons positionally (input layer only).
        The returned vector holds every neuron's value, including the bias
        neuron's constant 1.0 in the last slot when the layer has one.
        """
        if inputs is not None and len(inputs) != self.size:
            raise ShapeMismatchError(f"Expected {self.size} inputs, got {len(inputs)}")

        siblings = None
        if self.activation.normalized:
            siblings = [neuron.weighted_sum(self.graph) for neuron in self.units]

        return [
            neuron.activate(
                self.graph,
                inputs[i] if inputs is not None and not neuron.is_bias else None,
                siblings
            )
            for i, neuron in enumerate(self.neurons)
        ]

    def values(self, include_bias: bool = False) -> List[float]:
        neurons = self.neurons if include_bias else self.units
        return [neuron.value for neuron in neurons]

    def outputs(self) -> List[float]:
        """Current output vector without the bias slot."""
        return self.values(include_bias=False)

    def backprop(self, error_gradients: Optional[Sequence[float]] = None) -> None:
        """
        Compute this layer's deltas.

        With ``error_gradients`` (output layer) each regular neuron's delta is
        its gradient through the activation derivative. Without, deltas are
        propagated back from the successor layer, whose deltas must be final.
        """
        units = self.units
        if error_gradients is not None and len(error_gradients) != len(units):
            raise ShapeMismatchError(
                f"Expected {len(units)} error gradients, got {len(error_gradients)}"
            )

        if self.activation.normalized:
            if error_gradients is None:
                signals = [neuron.error_signal(self.graph) for neuron in units]
            else:
                signals = list(error_gradients)
            deltas = self.activation.backward(
                [neuron.pre_activation for neuron in units],
                [neuron.value for neuron in units],
                signals
            )
            for neuron, delta in zip(units, deltas):
                neuron.delta = delta
        elif error_gradients is not None:
            for neuron, gradient in zip(units, error_gradients):
                neuron.apply_error_signal(gradient)
        else:
            for neuron in units:
                neuron.propagate_delta(self.graph)

        for neuron in self.neurons[len(units):]:
            neuron.delta = 0.0

    def accumulate_gradients(self) -> None:
        for neuron in self.neurons:
            neuron.accumulate_gradients(self.graph)

    def apply_weight_updates(self, learning_rate: float) -> None:
        for neuron in self.neurons:
            neuron.apply_weight_updates(self.graph, learning_rate)

    def __len__(self):
        return len(self.neurons)

    def __repr__(self):
        bias = "+bias" if self.bias else ""
        return f"Layer({self.size}{bias}, activation={self.activation.name})"
