"""Shared builder for labelled tabular classification datasets."""

from __future__ import annotations

from typing import Any, Dict, Hashable, Sequence

import numpy as np

from ..core.types import Array
from .labels import ClassMapping
from .registry import DatasetSpec, DataSpec
from .utils import deterministic_split, encode_targets, min_max_scale, split_examples


def build_classification_spec(
    name: str,
    features: Array,
    labels: Sequence[Hashable],
    classes: ClassMapping,
    *,
    one_hot: bool,
    scale_inputs: bool,
    val_split: float,
    test_split: float,
    seed: int,
    provenance: Dict[str, Any],
) -> DatasetSpec:
    features = np.asarray(features, dtype=np.float64)
    if features.ndim != 2:
        raise ValueError(f"{name} features must be two-dimensional")
    if features.shape[0] != len(labels):
        raise ValueError(f"{name} has {features.shape[0]} rows but {len(labels)} labels")

    normalization: Dict[str, Any] = {}
    if scale_inputs:
        features, mins, maxs = min_max_scale(features, low=-1.0, high=1.0)
        normalization["inputs"] = {
            "method": "min_max",
            "range": [-1.0, 1.0],
            "min": mins.tolist(),
            "max": maxs.tolist(),
        }

    targets = encode_targets(labels, classes, one_hot=one_hot)
    splits = deterministic_split(
        features.shape[0], val_split=val_split, test_split=test_split, seed=seed
    )

    data_spec = DataSpec(
        d_in=int(features.shape[1]),
        d_out=int(targets.shape[1]),
        task_type="classification",
        classes=classes,
        normalization=normalization,
    )
    provenance = dict(provenance)
    provenance.update(
        {
            "val_split": val_split,
            "test_split": test_split,
            "seed": seed,
            "one_hot": one_hot,
            "scale_inputs": scale_inputs,
            "classes": [str(label) for label in classes.classes],
            "target_range": [classes.low, classes.high],
        }
    )
    return DatasetSpec(
        name=name,
        splits=split_examples(features, targets, splits),
        data_spec=data_spec,
        provenance=provenance,
    )


__all__ = ["build_classification_spec"]
