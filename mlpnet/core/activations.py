"""Activation strategies for mlpnet.

An activation is a pair of element-wise functions.  ``function`` maps the
pre-activation sum to the neuron output and ``derivative`` returns the local
slope *given that output*, so the backward pass never needs the
pre-activation sum.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Protocol, Union

import numpy as np

from .types import Array

Real = Union[float, Array]


class Activation(Protocol):
    """Protocol implemented by activation strategies."""

    name: str

    def function(self, x: Real) -> Real:
        """Return the activation of the pre-activation sum ``x``."""

    def derivative(self, y: Real) -> Real:
        """Return the slope at the already-activated output ``y``."""


@dataclass(frozen=True)
class Sigmoid:
    """Logistic activation with outputs in ``(0, 1)``."""

    name: str = "sigmoid"

    def function(self, x: Real) -> Real:
        return 1.0 / (1.0 + np.exp(-x))

    def derivative(self, y: Real) -> Real:
        return y * (1.0 - y)


@dataclass(frozen=True)
class Tanh:
    """Hyperbolic tangent activation with outputs in ``(-1, 1)``."""

    name: str = "tanh"

    def function(self, x: Real) -> Real:
        return np.tanh(x)

    def derivative(self, y: Real) -> Real:
        return 1.0 - y * y


_REGISTRY: Dict[str, Callable[[], Activation]] = {
    "sigmoid": Sigmoid,
    "tanh": Tanh,
}


def get_activation(name: str) -> Activation:
    """Return a fresh activation strategy registered under ``name``."""

    key = name.strip().lower()
    if key not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown activation {name!r}. Available activations: {available}")
    return _REGISTRY[key]()


def available_activations() -> Iterable[str]:
    return sorted(_REGISTRY)


def resolve_activation(activation: Union[str, Activation]) -> Activation:
    if isinstance(activation, str):
        return get_activation(activation)
    for attr in ("function", "derivative"):
        if not callable(getattr(activation, attr, None)):
            raise TypeError(f"Activation must provide a callable {attr!r}")
    return activation


__all__ = [
    "Activation",
    "Sigmoid",
    "Tanh",
    "available_activations",
    "get_activation",
    "resolve_activation",
]
