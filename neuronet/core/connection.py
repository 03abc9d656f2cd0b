"""Weighted edges between neurons."""

import math
from dataclasses import dataclass

from .exceptions import NumericError


@dataclass
class Connection:
    """
    A directed, weighted edge from one neuron to another.

    ``source`` and ``target`` are neuron handles (indices into the owning
    Graph), not neuron objects. The edge owns its weight and the gradient
    accumulated for it since the last update.
    """
    source: int
    target: int
    weight: float
    gradient: float = 0.0

    def accumulate_gradient(self, source_output: float, target_delta: float) -> None:
        """Add one example's gradient; call once per example in a mini-batch."""
        self.gradient += source_output * target_delta

    def apply_update(self, learning_rate: float) -> None:
        """Step the weight against the accumulated gradient and reset it."""
        self.weight -= learning_rate * self.gradient
        self.gradient = 0.0
        if not math.isfinite(self.weight):
            raise NumericError(
                f"Connection {self.source}->{self.target} weight became {self.weight}"
            )
