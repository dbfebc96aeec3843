"""mlpnet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.activations import Activation, Sigmoid, Tanh, get_activation
from .core.errors import InvalidArgument, PredictRequiredError
from .core.network import MultilayerPerceptron
from .data import ClassMapping, get_dataset
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "Activation",
    "ClassMapping",
    "InvalidArgument",
    "MultilayerPerceptron",
    "PredictRequiredError",
    "Sigmoid",
    "Tanh",
    "Trainer",
    "activations",
    "get_activation",
    "get_dataset",
    "load_preset",
    "presets",
    "run_pipeline",
    "types",
]
