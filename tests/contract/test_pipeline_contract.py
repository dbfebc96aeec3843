from __future__ import annotations

import json
from pathlib import Path

import pytest

from mlpnet.training import pipelines


def _xor_config(run_dir: Path, epochs: int = 20) -> dict:
    return {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [4], "activation": "sigmoid"},
        "train": {
            "epochs": epochs,
            "learn_rate": 0.4,
            "momentum": 0.9,
            "seed": 7,
            "metrics": ["mse", "min_accuracy"],
            "run_dir": str(run_dir),
        },
    }


def test_single_run_writes_artifacts(tmp_path, capsys):
    result = pipelines.run_pipeline(_xor_config(tmp_path / "run"))
    run_dir = tmp_path / "run"
    for name in (
        "metrics_train.jsonl",
        "metrics_train.csv",
        "metrics_final.json",
        "manifest.json",
        "summary.json",
        "config.json",
        "metrics.jsonl",
    ):
        assert (run_dir / name).exists(), name
    assert not (run_dir / "loss.png").exists()
    assert result.epochs == 20
    assert result.steps == 80
    assert set(result.final_metrics) == {"loss", "mse", "min_accuracy"}

    manifest = json.loads((run_dir / "manifest.json").read_text())
    assert manifest["network"]["layer_sizes"] == [2, 4, 1]
    assert manifest["network"]["parameters"] == 17
    assert "=== mlpnet run ===" in capsys.readouterr().out


def test_metrics_are_deterministic(tmp_path):
    first = pipelines.run_pipeline(_xor_config(tmp_path / "run_a"))
    second = pipelines.run_pipeline(_xor_config(tmp_path / "run_b"))
    assert Path(first.metrics_path).read_bytes() == Path(second.metrics_path).read_bytes()
    assert Path(first.summary_path).read_bytes() == Path(second.summary_path).read_bytes()
    assert first.final_metrics == second.final_metrics


def test_sweep_runs_every_combination(tmp_path):
    config = _xor_config(tmp_path / "sweep", epochs=2)
    config["sweep"] = {"seeds": [0, 1], "learn_rates": [0.1, 0.2], "hidden": [[3], []]}
    results = pipelines.run_pipeline(config)
    assert isinstance(results, list)
    assert len(results) == 8
    run_dirs = {Path(r.metrics_path).parent.name for r in results}
    assert "h3_lr0.1_m0.9_s0" in run_dirs
    assert "hnone_lr0.2_m0.9_s1" in run_dirs


def test_validation_and_test_splits_are_reported(tmp_path):
    config = {
        "data": {"name": "iris", "options": {"val_split": 0.2, "test_split": 0.2, "seed": 1}},
        "model": {"hidden": [6], "activation": "tanh"},
        "train": {"epochs": 2, "learn_rate": 0.1, "momentum": 0.4, "run_dir": str(tmp_path)},
    }
    result = pipelines.run_pipeline(config)
    assert "val_class_accuracy" in result.final_metrics
    assert "test_class_accuracy" in result.final_metrics
    assert (tmp_path / "metrics_val.jsonl").exists()


def test_dimension_mismatch_is_rejected(tmp_path):
    config = _xor_config(tmp_path)
    config["model"]["d_in"] = 3
    with pytest.raises(ValueError):
        pipelines.run_pipeline(config)


def test_builtin_and_file_presets_are_listed():
    names = set(pipelines.available_presets())
    assert {"xor-tanh", "xor-tanh-reference", "xor-sigmoid", "iris-tanh"} <= names
    assert "iris-sigmoid-onehot" in names
    preset = pipelines.load_preset("iris-sigmoid-onehot")
    assert preset["data"]["options"]["one_hot"] is True
    with pytest.raises(KeyError):
        pipelines.load_preset("does-not-exist")


def test_preset_copies_are_independent():
    preset = pipelines.load_preset("xor-tanh")
    preset["train"]["epochs"] = 1
    assert pipelines.load_preset("xor-tanh")["train"]["epochs"] == 3000


def test_read_config_file_formats(tmp_path):
    yaml_path = tmp_path / "cfg.yaml"
    yaml_path.write_text("train:\n  epochs: 3\n")
    assert pipelines.read_config_file(yaml_path) == {"train": {"epochs": 3}}
    txt_path = tmp_path / "cfg.txt"
    txt_path.write_text("{}")
    with pytest.raises(ValueError):
        pipelines.read_config_file(txt_path)


def test_merge_config_is_recursive():
    base = {"train": {"epochs": 3, "seed": 0}, "model": {"hidden": [2]}}
    merged = pipelines.merge_config(base, {"train": {"epochs": 5}})
    assert merged["train"] == {"epochs": 5, "seed": 0}
    assert merged["model"] == {"hidden": [2]}
