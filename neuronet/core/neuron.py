"""
A single neuron.

Neurons keep their own state (value, pre-activation, delta) and the handles
of the connections that touch them. Everything they read from other neurons
goes through the Graph passed in, so a neuron never holds a reference to a
neighbour. Neurons do no ordering checks: the Layer and Network are
responsible for activating and back-propagating in topological order.
"""

from typing import List, Optional, Sequence

from .activations import Activation, get_activation

BIAS_OUTPUT = 1.0


class Neuron:
    """A unit with an activation value, an error delta and weighted edges."""

    def __init__(self, activation='logistic', is_bias: bool = False):
        self.activation: Activation = get_activation(activation)
        self.is_bias = is_bias
        self.index: Optional[int] = None
        self.incoming: List[int] = []
        self.outgoing: List[int] = []
        self.value = BIAS_OUTPUT if is_bias else 0.0
        self.pre_activation = 0.0
        self.delta = 0.0

    def weighted_sum(self, graph) -> float:
        """Sum of incoming source values times connection weights."""
        total = 0.0
        for handle in self.incoming:
            connection = graph.connections[handle]
            total += graph.neurons[connection.source].value * connection.weight
        return total

    def activate(
        self,
        graph,
        explicit_input: Optional[float] = None,
        siblings: Optional[Sequence[float]] = None
    ) -> float:
        """
        Compute and store this neuron's output.

        Bias neurons always output 1.0. A neuron with no incoming connections
        takes ``explicit_input`` as-is (input layer). Otherwise the weighted
        sum goes through the activation function; ``siblings`` carries the
        layer's pre-activations for normalized activations.
        """
        if self.is_bias:
            self.value = BIAS_OUTPUT
            return self.value

        if not self.incoming and explicit_input is not None:
            self.pre_activation = float(explicit_input)
            self.value = float(explicit_input)
            return self.value

        self.pre_activation = self.weighted_sum(graph)
        if self.activation.normalized:
            self.value = float(self.activation(self.pre_activation, siblings))
        else:
            self.value = float(self.activation(self.pre_activation))
        return self.value

    def local_derivative(self) -> float:
        return float(self.activation.grad(self.pre_activation))

    def apply_error_signal(self, signal: float) -> None:
        """delta = signal * f'(pre_activation). Bias neurons keep a zero delta."""
        if self.is_bias:
            self.delta = 0.0
            return
        self.delta = signal * self.local_derivative()

    def set_output_delta(self, target: float) -> None:
        """Output-layer delta for a squared-error target."""
        self.apply_error_signal(self.value - target)

    def error_signal(self, graph) -> float:
        """Sum of outgoing weights times the deltas they feed into."""
        total = 0.0
        for handle in self.outgoing:
            connection = graph.connections[handle]
            total += connection.weight * graph.neurons[connection.target].delta
        return total

    def propagate_delta(self, graph) -> None:
        """Hidden-layer delta; every successor delta must already be final."""
        self.apply_error_signal(self.error_signal(graph))

    def accumulate_gradients(self, graph) -> None:
        for handle in self.outgoing:
            connection = graph.connections[handle]
            connection.accumulate_gradient(self.value, graph.neurons[connection.target].delta)

    def apply_weight_updates(self, graph, learning_rate: float) -> None:
        for handle in self.outgoing:
            graph.connections[handle].apply_update(learning_rate)

    def __repr__(self):
        kind = 'bias' if self.is_bias else self.activation.name
        return f"Neuron(#{self.index}, {kind}, value={self.value:.4f}, delta={self.delta:.4f})"
