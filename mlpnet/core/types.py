"""Core typing contracts for mlpnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Example:
    """A single supervised example fed to the network one at a time."""

    inputs: Array
    targets: Array


@dataclass(frozen=True)
class NetworkDescription:
    """Description of the feed-forward network architecture."""

    layer_sizes: Tuple[int, ...]
    activation: str

    @property
    def hidden_sizes(self) -> Tuple[int, ...]:
        return self.layer_sizes[1:-1]


@dataclass
class TrainResult:
    """Summary returned by :meth:`mlpnet.training.trainer.Trainer.run`."""

    epochs: int
    steps: int
    history: List[Tuple[int, Mapping[str, float]]] = field(default_factory=list)
    final_metrics: Dict[str, float] = field(default_factory=dict)
    stopped_early: bool = False


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`mlpnet.training.pipelines.run_pipeline`."""

    epochs: int
    steps: int
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
    final_metrics: Mapping[str, float] = field(default_factory=dict)
