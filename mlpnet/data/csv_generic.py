"""Generic CSV loader for classification tasks."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder

from .labels import ClassMapping
from .registry import DatasetSpec, register_dataset
from .tabular import build_classification_spec

FIXTURE_DIR = Path(__file__).resolve().parent / "_fixtures"


def _load_csv(path: Path, target_col: str | int, header: bool) -> tuple[np.ndarray, np.ndarray]:
    df = pd.read_csv(path, header=0 if header else None)
    if isinstance(target_col, int) and target_col not in df.columns:
        if not -len(df.columns) <= target_col < len(df.columns):
            raise KeyError(f"Target column {target_col!r} not found in CSV")
        target_col = df.columns[target_col]
    if target_col not in df.columns:
        raise KeyError(f"Target column {target_col!r} not found in CSV")
    y = df.pop(target_col).to_numpy()
    X = df.to_numpy(dtype=np.float64)
    return X, y


@register_dataset("csv_classification")
def load_csv_classification(
    *,
    csv_path: str | Path | None = None,
    target_col: str | int = -1,
    header: bool = False,
    one_hot: bool = False,
    low: float = -1.0,
    high: float = 1.0,
    val_split: float = 0.0,
    test_split: float = 0.0,
    seed: int = 0,
) -> DatasetSpec:
    """Load a classification dataset from a CSV file.

    By default the file has no header row and the label is the last column,
    which matches the common ``iris.csv`` layout.
    """

    path = Path(csv_path) if csv_path else FIXTURE_DIR / "iris_sample.csv"
    X, y_raw = _load_csv(path, target_col, header)
    encoder = LabelEncoder()
    encoder.fit(y_raw)
    classes = ClassMapping(tuple(encoder.classes_.tolist()), low=low, high=high)
    return build_classification_spec(
        "csv_classification",
        X,
        list(y_raw),
        classes,
        one_hot=one_hot,
        scale_inputs=True,
        val_split=val_split,
        test_split=test_split,
        seed=seed,
        provenance={"path": str(path), "target_col": target_col, "header": header},
    )


__all__ = ["load_csv_classification"]
