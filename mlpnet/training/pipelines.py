"""Pipeline assembly: config -> dataset -> network -> trainer -> artifacts."""

from __future__ import annotations

import itertools
import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

import yaml

from ..core.network import MultilayerPerceptron
from ..core.types import RunResult
from ..data import registry
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-tanh": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [10, 10], "activation": "tanh"},
        "train": {
            "epochs": 3000,
            "learn_rate": 0.05,
            "momentum": 0.9,
            "seed": 0,
            "metrics": ["mse", "min_accuracy"],
            "run_dir": "runs/xor-tanh",
            "enable_plots": False,
        },
    },
    # Hyper-parameters of the classic XOR benchmark.  They converge for only
    # some initialisations; kept for comparison runs.
    "xor-tanh-reference": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [10, 10], "activation": "tanh"},
        "train": {
            "epochs": 10000,
            "learn_rate": 0.4,
            "momentum": 0.9,
            "seed": 0,
            "metrics": ["mse", "min_accuracy"],
            "run_dir": "runs/xor-tanh-reference",
            "enable_plots": False,
        },
    },
    "xor-sigmoid": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [10, 10], "activation": "sigmoid"},
        "train": {
            "epochs": 2000,
            "learn_rate": 0.4,
            "momentum": 0.9,
            "seed": 0,
            "metrics": ["mse", "min_accuracy"],
            "run_dir": "runs/xor-sigmoid",
            "enable_plots": False,
        },
    },
    "iris-tanh": {
        "data": {"name": "iris", "options": {}},
        "model": {"hidden": [10, 10], "activation": "tanh"},
        "train": {
            "epochs": 100,
            "learn_rate": 0.1,
            "momentum": 0.4,
            "seed": 0,
            "metrics": ["mse", "class_accuracy"],
            "run_dir": "runs/iris-tanh",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: Path) -> Mapping[str, object]:
    """Decode a JSON or YAML config file into a mapping."""

    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(
                        f"Preset {file.name} is missing required sections: {missing_str}"
                    )
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    if name not in _PRESETS:
        raise KeyError(f"Unknown preset: {name}")
    return deepcopy(_PRESETS[name])


def run_pipeline(config: Mapping[str, object]) -> RunResult | List[RunResult]:
    if "sweep" in config:
        return _run_sweep(config)
    return _train_single(config)


class _MetricsCapture:
    def __init__(self) -> None:
        self.history: list[tuple[int, Mapping[str, float]]] = []
        self.last: Mapping[str, float] = {}

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        payload = {k: float(v) for k, v in metrics.items()}
        self.history.append((int(epoch), payload))
        self.last = payload


def _run_sweep(config: Mapping[str, object]) -> List[RunResult]:
    sweep_cfg = dict(config["sweep"])
    train_cfg = dict(config.get("train", {}))
    model_cfg = dict(config.get("model", {}))
    seeds = sweep_cfg.get("seeds", [train_cfg.get("seed", 0)])
    learn_rates = sweep_cfg.get("learn_rates", [train_cfg.get("learn_rate", 0.1)])
    momentums = sweep_cfg.get("momentums", [train_cfg.get("momentum", 0.0)])
    hidden_options = sweep_cfg.get("hidden", [model_cfg.get("hidden", [])])
    base_dir = Path(train_cfg.get("run_dir", "runs/sweep"))

    results: List[RunResult] = []
    for hidden, lr, momentum, seed in itertools.product(
        hidden_options, learn_rates, momentums, seeds
    ):
        cfg = deepcopy(dict(config))
        cfg.pop("sweep", None)
        cfg.setdefault("model", {})["hidden"] = list(hidden)
        train = cfg.setdefault("train", {})
        train.update({"learn_rate": lr, "momentum": momentum, "seed": seed})
        hidden_tag = "-".join(str(h) for h in hidden) or "none"
        train["run_dir"] = str(base_dir / f"h{hidden_tag}_lr{lr}_m{momentum}_s{seed}")
        results.append(_train_single(cfg))
    return results


def _train_single(config: Mapping[str, object]) -> RunResult:
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dataset = registry.get_dataset(data_cfg["name"], **data_cfg.get("options", {}))
    data_spec = dataset.data_spec

    d_in = int(model_cfg.get("d_in", data_spec.d_in))
    d_out = int(model_cfg.get("d_out", data_spec.d_out))
    if d_in != data_spec.d_in:
        raise ValueError(f"Configured d_in={d_in} but dataset provides {data_spec.d_in}")
    if d_out != data_spec.d_out:
        raise ValueError(f"Configured d_out={d_out} but dataset provides {data_spec.d_out}")

    seed = int(train_cfg.get("seed", 0))
    model_seed = model_cfg.get("seed")
    network = MultilayerPerceptron(
        d_in,
        [int(h) for h in model_cfg.get("hidden", [])],
        d_out,
        str(model_cfg.get("activation", "tanh")),
        seed=seed if model_seed is None else int(model_seed),
    )

    metrics_cfg = train_cfg.get("metrics", "default")
    metric_names = metrics_cfg if isinstance(metrics_cfg, str) else list(metrics_cfg)
    learn_rate = float(train_cfg.get("learn_rate", 0.1))
    momentum = float(train_cfg.get("momentum", 0.0))
    epochs = int(train_cfg.get("epochs", 1))
    early_stopping = train_cfg.get("early_stopping_patience")
    early_stopping = int(early_stopping) if early_stopping is not None else None

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    sizes = dataset.split_sizes()
    _print_startup_summary(
        dataset_name=dataset.name,
        layers=network.layer_sizes,
        activation=network.activation_name,
        learn_rate=learn_rate,
        momentum=momentum,
        epochs=epochs,
        param_count=network.parameter_count(),
        splits=sizes,
    )

    train_jsonl = JsonlSink(run_dir / "metrics_train.jsonl", split="train", seed=seed)
    train_csv = CsvSink(run_dir / "metrics_train.csv", split="train")
    capture_train = _MetricsCapture()
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    split_loggers: Dict[str, list] = {"train": [train_jsonl, train_csv, capture_train, plots]}
    if sizes.get("val"):
        split_loggers["val"] = [
            JsonlSink(run_dir / "metrics_val.jsonl", split="val", seed=seed),
            CsvSink(run_dir / "metrics_val.csv", split="val"),
        ]

    trainer = Trainer(network, learn_rate=learn_rate, momentum=momentum)
    result = trainer.run(
        dataset.splits["train"],
        epochs,
        val_examples=dataset.splits.get("val") or None,
        metric_names=metric_names,
        task_type=data_spec.task_type,
        classes=data_spec.classes,
        loss=str(train_cfg.get("loss", "mse")),
        eval_every=int(train_cfg.get("eval_every", 1)),
        split_loggers=split_loggers,
        shuffle_seed=seed if train_cfg.get("shuffle", False) else None,
        early_stopping_patience=early_stopping,
        target_metric=_target_metric(train_cfg.get("target_metric")),
    )
    plots.close()

    final_metrics = dict(result.final_metrics)
    if sizes.get("test"):
        test_metrics = trainer.evaluate(
            dataset.splits["test"],
            [m for m in capture_train.last if m != "loss"],
            classes=data_spec.classes,
            loss=str(train_cfg.get("loss", "mse")),
        )
        final_metrics.update({f"test_{k}": v for k, v in test_metrics.items()})
    (run_dir / "metrics_final.json").write_text(json.dumps(final_metrics, indent=2))

    safe_config = _safe_config(config)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        network={
            "layer_sizes": list(network.layer_sizes),
            "activation": network.activation_name,
            "parameters": network.parameter_count(),
            "epochs_run": result.epochs,
            "stopped_early": result.stopped_early,
        },
        dataset_provenance=dataset.provenance,
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(train_jsonl.path, run_dir / "summary.json", tail=summary_tail)
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))
    (run_dir / "metrics.jsonl").write_text(train_jsonl.path.read_text())

    return RunResult(
        epochs=result.epochs,
        steps=result.steps,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        final_metrics=final_metrics,
    )


def _target_metric(value: object) -> Tuple[str, float] | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return str(value["name"]), float(value["threshold"])
    name, threshold = value  # type: ignore[misc]
    return str(name), float(threshold)


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(train_cfg["run_dir"])
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _safe_config(config: Mapping[str, object]) -> Mapping[str, object]:
    return json.loads(json.dumps(config))


def _print_startup_summary(
    *,
    dataset_name: str,
    layers: Sequence[int],
    activation: str,
    learn_rate: float,
    momentum: float,
    epochs: int,
    param_count: int,
    splits: Mapping[str, int],
) -> None:
    split_text = ", ".join(f"{name}={count}" for name, count in splits.items() if count)
    print("=== mlpnet run ===")
    print(f"Dataset       : {dataset_name} ({split_text})")
    print(f"Layers        : {list(layers)}")
    print(f"Activation    : {activation}")
    print(f"Learn rate    : {learn_rate}")
    print(f"Momentum      : {momentum}")
    print(f"Epochs        : {epochs}")
    print(f"Parameters    : {param_count}")
    print("==================")


def merge_config(base: Dict[str, object], override: Mapping[str, object]) -> Dict[str, object]:
    """Recursively merge ``override`` into ``base`` and return ``base``."""

    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)  # type: ignore[arg-type]
        else:
            base[key] = deepcopy(value)
    return base


def available_presets() -> Iterable[str]:
    return sorted(presets())


__all__ = [
    "available_presets",
    "load_preset",
    "merge_config",
    "presets",
    "read_config_file",
    "run_pipeline",
]
