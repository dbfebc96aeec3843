"""Command line entry point for mlpnet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from mlpnet.core.activations import available_activations
from mlpnet.data import available_datasets
from mlpnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "epochs": result.epochs,
        "steps": result.steps,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "final": {k: round(v, 6) for k, v in result.final_metrics.items()},
    }
    if result.summary_path:
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def _parse_hidden(text: str) -> list[int]:
    text = text.strip()
    if not text:
        return []
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"--hidden expects comma separated integers, got {text!r}"
        ) from None


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-tanh",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--list-datasets", action="store_true", help="List registered datasets and exit"
    )
    parser.add_argument(
        "--dataset",
        choices=sorted(available_datasets()),
        help="Override the dataset used by the run",
    )
    parser.add_argument("--csv-path", help="Path to a CSV file for csv_classification")
    parser.add_argument(
        "--target-col",
        help="Label column for csv_classification (name, or position when numeric)",
    )
    parser.add_argument(
        "--activation",
        choices=sorted(available_activations()),
        help="Activation applied to every non-input neuron",
    )
    parser.add_argument(
        "--hidden",
        type=_parse_hidden,
        help="Hidden layer sizes, e.g. 10,10 (empty string for none)",
    )
    parser.add_argument("--epochs", type=int, help="Number of online epochs")
    parser.add_argument("--learn-rate", type=float, help="Learning rate")
    parser.add_argument("--momentum", type=float, help="Momentum coefficient")
    parser.add_argument(
        "--seed", type=int, help="Seed used for initialisation and shuffling"
    )
    parser.add_argument("--run-dir", help="Directory receiving run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Save a loss curve plot"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = pipelines.read_config_file(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    if args.dataset:
        options: dict = {}
        if args.dataset == "csv_classification":
            if args.csv_path:
                options["csv_path"] = args.csv_path
            if args.target_col:
                col = args.target_col
                options["target_col"] = int(col) if col.lstrip("-").isdigit() else col
                options["header"] = not col.lstrip("-").isdigit()
        config["data"] = {"name": args.dataset, "options": options}

    model_cfg = config.setdefault("model", {})
    if args.activation:
        model_cfg["activation"] = args.activation
    if args.hidden is not None:
        model_cfg["hidden"] = args.hidden

    train_cfg = config.setdefault("train", {})
    overrides = {
        "epochs": args.epochs,
        "learn_rate": args.learn_rate,
        "momentum": args.momentum,
        "seed": args.seed,
        "run_dir": args.run_dir,
    }
    train_cfg.update({k: v for k, v in overrides.items() if v is not None})
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.list_datasets:
        for name in available_datasets():
            print(name)
        raise SystemExit(0)

    config = build_config(args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)

    if isinstance(result, list):
        for item in result:
            print(_format_result(item))
    else:
        print(_format_result(result))


if __name__ == "__main__":
    main()
