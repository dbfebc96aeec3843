"""Core numerical primitives for mlpnet."""

from . import activations, errors, network, types
from .activations import Activation, Sigmoid, Tanh, get_activation
from .errors import InvalidArgument, PredictRequiredError
from .network import MultilayerPerceptron

__all__ = [
    "Activation",
    "InvalidArgument",
    "MultilayerPerceptron",
    "PredictRequiredError",
    "Sigmoid",
    "Tanh",
    "activations",
    "errors",
    "get_activation",
    "network",
    "types",
]
