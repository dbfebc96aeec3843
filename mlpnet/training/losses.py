"""Loss registry used to monitor online training."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

from ..core.types import Array

LossFn = Callable[[Array, Array], float]


@dataclass(frozen=True)
class Loss:
    """Named loss over a single output/target pair."""

    name: str
    fn: LossFn

    def __call__(self, output: Array, target: Array) -> float:
        return self.fn(output, target)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, fn: LossFn) -> None:
        self._registry[name] = Loss(name, fn)

    def get(self, name: str) -> Loss:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown loss {name!r}. Available losses: {available}")
        return self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = LossRegistry()


def _mse(output: Array, target: Array) -> float:
    return float(np.mean(np.square(output - target)))


def _mae(output: Array, target: Array) -> float:
    return float(np.mean(np.abs(output - target)))


def _sse(output: Array, target: Array) -> float:
    # Half sum of squares: the error whose gradient the backward pass follows.
    return float(0.5 * np.sum(np.square(target - output)))


REGISTRY.register("mse", _mse)
REGISTRY.register("mae", _mae)
REGISTRY.register("sse", _sse)

__all__ = ["Loss", "LossRegistry", "REGISTRY"]
