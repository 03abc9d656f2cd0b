"""Errors raised while building, running or training a network."""


class NetworkError(Exception):
    """Base class for every neuronet error."""


class ConstructionError(NetworkError, ValueError):
    """The layers given to a Network or Layer do not describe a valid network."""


class ShapeMismatchError(NetworkError, ValueError):
    """An input or target vector does not match the size of its layer."""


class TrainingOrderError(NetworkError, RuntimeError):
    """A training step was called out of order (e.g. backprop before activate)."""


class NumericError(NetworkError, ArithmeticError):
    """An output or weight became NaN or infinite."""
