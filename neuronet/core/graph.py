"""
Arena holding the neurons and connections of a network.

Neurons and connections are addressed by integer handles into the Graph's
lists. Connections point at neurons by handle and neurons list the handles
of their connections, so ownership stays acyclic: the Graph owns everything.
"""

from typing import List

from .connection import Connection
from .neuron import Neuron


class Graph:
    """Owns every neuron and connection reachable from its layers."""

    def __init__(self):
        self.neurons: List[Neuron] = []
        self.connections: List[Connection] = []
        self.layers: list = []

    def add_neuron(self, neuron: Neuron) -> int:
        neuron.index = len(self.neurons)
        self.neurons.append(neuron)
        return neuron.index

    def connect(self, source: int, target: int, weight: float) -> Connection:
        """Create an edge and register it on both of its neurons."""
        connection = Connection(source=source, target=target, weight=float(weight))
        handle = len(self.connections)
        self.connections.append(connection)
        self.neurons[source].outgoing.append(handle)
        self.neurons[target].incoming.append(handle)
        return connection

    def absorb(self, other: 'Graph') -> None:
        """
        Move every neuron, connection and layer of ``other`` into this graph.

        Handles from ``other`` are shifted past the ones already here and its
        layers are repointed at this graph. ``other`` is left empty.
        """
        if other is self:
            return
        neuron_offset = len(self.neurons)
        connection_offset = len(self.connections)

        for neuron in other.neurons:
            neuron.index += neuron_offset
            neuron.incoming = [h + connection_offset for h in neuron.incoming]
            neuron.outgoing = [h + connection_offset for h in neuron.outgoing]
        for connection in other.connections:
            connection.source += neuron_offset
            connection.target += neuron_offset
        for layer in other.layers:
            layer.graph = self

        self.neurons.extend(other.neurons)
        self.connections.extend(other.connections)
        self.layers.extend(other.layers)
        other.neurons, other.connections, other.layers = [], [], []

    def __len__(self):
        return len(self.neurons)

    def __repr__(self):
        return f"Graph(neurons={len(self.neurons)}, connections={len(self.connections)})"
