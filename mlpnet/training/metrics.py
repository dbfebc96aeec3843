"""Metric helpers for the online trainer."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..core.types import Array
from ..data.labels import ClassMapping


def default_metrics(task_type: str) -> List[str]:
    if task_type == "regression":
        return ["mse", "mae", "min_accuracy"]
    if task_type == "classification":
        return ["mse", "class_accuracy"]
    raise ValueError(f"Unknown task type: {task_type}")


def compute_metric(
    name: str,
    outputs: Array,
    targets: Array,
    *,
    classes: ClassMapping | None = None,
) -> float:
    """Return metric ``name`` over row-aligned ``outputs`` and ``targets``.

    ``min_accuracy`` and ``mean_accuracy`` score each output as
    ``1 - |output - target|``; ``class_accuracy`` decodes both through
    ``classes`` and counts matches.
    """

    key = name.lower()
    outputs = np.atleast_2d(np.asarray(outputs, dtype=np.float64))
    targets = np.atleast_2d(np.asarray(targets, dtype=np.float64))
    if outputs.shape != targets.shape:
        raise ValueError(
            f"outputs {outputs.shape} and targets {targets.shape} must have the same shape"
        )
    diff = outputs - targets
    if key == "mse":
        return float(np.mean(diff**2))
    if key == "mae":
        return float(np.mean(np.abs(diff)))
    if key == "rmse":
        return float(np.sqrt(np.mean(diff**2)))
    if key == "min_accuracy":
        return float(np.min(1.0 - np.abs(diff)))
    if key == "mean_accuracy":
        return float(np.mean(1.0 - np.abs(diff)))
    if key == "class_accuracy":
        if classes is None:
            raise ValueError("class_accuracy requires a ClassMapping")
        hits = [
            classes.decode_output(out) == classes.decode_output(tgt)
            for out, tgt in zip(outputs, targets)
        ]
        return float(np.mean(hits))
    raise KeyError(f"Unknown metric: {name}")


def compute_metrics(
    names: Iterable[str],
    outputs: Array,
    targets: Array,
    *,
    classes: ClassMapping | None = None,
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        results[name.lower()] = compute_metric(name, outputs, targets, classes=classes)
    return results


__all__ = ["compute_metric", "compute_metrics", "default_metrics"]
