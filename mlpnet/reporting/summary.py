"""Summaries of the per-epoch metric logs of a run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

_SKIPPED = {"epoch", "seed"}


def compute_auc(points: Sequence[float]) -> float:
    """Trapezoidal area under ``points`` with one unit between epochs."""

    if len(points) < 2:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    return float(np.sum((y[1:] + y[:-1]) * 0.5))


def _lower_is_better(name: str) -> bool:
    return "accuracy" not in name


def _metric_stats(epochs: np.ndarray, values: np.ndarray, name: str, tail: int) -> Dict[str, float]:
    best = int(np.argmin(values) if _lower_is_better(name) else np.argmax(values))
    return {
        "min": float(np.min(values)),
        "max": float(np.max(values)),
        "mean": float(np.mean(values)),
        "last": float(values[-1]),
        "best": float(values[best]),
        "best_epoch": int(epochs[best]),
        "tail_auc": compute_auc(values[-tail:].tolist() if tail else []),
    }


def summarise_records(records: List[Mapping[str, object]], tail: int) -> Dict[str, object]:
    """Return min/max/mean/last/best statistics for every numeric metric."""

    columns: Dict[str, List[float]] = {}
    epochs: Dict[str, List[int]] = {}
    for idx, record in enumerate(records):
        epoch = int(record.get("epoch", idx + 1))  # type: ignore[arg-type]
        for key, value in record.items():
            if key in _SKIPPED or isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                columns.setdefault(key, []).append(float(value))
                epochs.setdefault(key, []).append(epoch)

    tail_window = min(tail, len(records))
    metrics = {
        name: _metric_stats(np.asarray(epochs[name]), np.asarray(values), name, tail_window)
        for name, values in sorted(columns.items())
    }
    return {
        "version": 1,
        "records": len(records),
        "tail_window": tail_window,
        "metrics": metrics,
    }


def write_summary(
    metrics_jsonl: str | Path, out_summary_json: str | Path, *, tail: int = 32
) -> str:
    """Summarise the JSONL log ``metrics_jsonl`` into ``out_summary_json``."""

    source = Path(metrics_jsonl)
    target = Path(out_summary_json)
    target.parent.mkdir(parents=True, exist_ok=True)

    records: List[Mapping[str, object]] = []
    if source.exists():
        with source.open(encoding="utf-8") as handle:
            records = [json.loads(line) for line in handle if line.strip()]

    target.write_text(json.dumps(summarise_records(records, tail), sort_keys=True, indent=2))
    return str(target)


__all__ = ["compute_auc", "summarise_records", "write_summary"]
