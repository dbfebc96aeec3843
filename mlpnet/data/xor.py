"""The four canonical XOR examples."""

from __future__ import annotations

import numpy as np

from .registry import DatasetSpec, DataSpec, register_dataset
from .utils import to_examples

_PATTERNS = ((0, 0, 0), (1, 0, 1), (0, 1, 1), (1, 1, 0))


@register_dataset("xor")
def build_xor_dataset(*, low: float = 0.0, high: float = 1.0) -> DatasetSpec:
    """Return XOR with ``low``/``high`` as the two logic levels.

    Examples are ordered (0,0), (1,0), (0,1), (1,1).  ``low=-1`` suits a
    tanh network whose outputs should span the whole range.
    """

    if not high > low:
        raise ValueError("xor requires high > low")
    table = np.array(_PATTERNS, dtype=np.float64)
    table = np.where(table == 1, high, low)
    features, targets = table[:, :2], table[:, 2:]
    indices = range(len(_PATTERNS))
    return DatasetSpec(
        name="xor",
        splits={"train": to_examples(features, targets, indices)},
        data_spec=DataSpec(d_in=2, d_out=1, task_type="regression"),
        provenance={"source": "builtin", "low": low, "high": high},
    )


__all__ = ["build_xor_dataset"]
