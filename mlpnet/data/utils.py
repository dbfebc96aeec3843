"""Utility helpers for dataset builders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Mapping, Sequence, Tuple

import numpy as np

from ..core.types import Array, Example
from .labels import ClassMapping


@dataclass(frozen=True)
class SplitIndices:
    """Indices for train/validation/test partitions."""

    train: np.ndarray
    val: np.ndarray
    test: np.ndarray

    @property
    def sizes(self) -> Mapping[str, int]:
        return {
            "train": int(self.train.size),
            "val": int(self.val.size),
            "test": int(self.test.size),
        }


def deterministic_split(
    n_samples: int,
    *,
    val_split: float = 0.0,
    test_split: float = 0.0,
    seed: int = 0,
) -> SplitIndices:
    """Return deterministic indices for the requested split ratios.

    With both ratios at zero every sample trains, in its original order.
    """

    if not 0 <= val_split < 1:
        raise ValueError("val_split must be in [0, 1)")
    if not 0 <= test_split < 1:
        raise ValueError("test_split must be in [0, 1)")
    if val_split + test_split >= 1:
        raise ValueError("val_split + test_split must be < 1")

    indices = np.arange(n_samples)
    if val_split == 0 and test_split == 0:
        empty = indices[:0]
        return SplitIndices(train=indices, val=empty, test=empty)

    rng = np.random.default_rng(seed)
    rng.shuffle(indices)

    test_size = int(round(n_samples * test_split))
    val_size = int(round(n_samples * val_split))
    # At least one sample per requested split when possible
    test_size = min(max(test_size, 1 if test_split > 0 else 0), n_samples)
    remaining = n_samples - test_size
    val_size = min(max(val_size, 1 if val_split > 0 else 0), remaining)
    train_size = n_samples - val_size - test_size
    if train_size <= 0:
        raise ValueError("Not enough samples for the requested splits")

    test_idx = indices[:test_size]
    val_idx = indices[test_size : test_size + val_size]
    train_idx = indices[test_size + val_size :]

    return SplitIndices(train=train_idx, val=val_idx, test=test_idx)


def min_max_scale(
    array: Array,
    *,
    low: float = -1.0,
    high: float = 1.0,
) -> Tuple[Array, Array, Array]:
    """Scale every column of ``array`` into ``[low, high]``.

    Returns the scaled array with the per-column minima and maxima.  Constant
    columns map to the midpoint of the range.
    """

    array = np.asarray(array, dtype=np.float64)
    mins = array.min(axis=0)
    maxs = array.max(axis=0)
    span = maxs - mins
    unit = np.divide(
        array - mins,
        span,
        out=np.full_like(array, 0.5),
        where=span != 0,
    )
    return low + unit * (high - low), mins, maxs


def encode_targets(
    labels: Sequence[Hashable], classes: ClassMapping, *, one_hot: bool
) -> Array:
    if one_hot:
        return np.stack([classes.encode_one_hot(label) for label in labels])
    return np.array([[classes.encode(label)] for label in labels], dtype=np.float64)


def to_examples(features: Array, targets: Array, indices: Sequence[int]) -> Tuple[Example, ...]:
    features = np.asarray(features, dtype=np.float64)
    targets = np.asarray(targets, dtype=np.float64)
    return tuple(
        Example(inputs=features[idx].copy(), targets=targets[idx].copy())
        for idx in indices
    )


def split_examples(
    features: Array, targets: Array, splits: SplitIndices
) -> Dict[str, Tuple[Example, ...]]:
    return {
        name: to_examples(features, targets, getattr(splits, name))
        for name in ("train", "val", "test")
    }


__all__ = [
    "SplitIndices",
    "deterministic_split",
    "encode_targets",
    "min_max_scale",
    "split_examples",
    "to_examples",
]
