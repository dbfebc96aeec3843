import csv
import json

import pytest

from mlpnet.reporting import CsvSink, JsonlSink, PlotAdapter, write_manifest, write_summary
from mlpnet.reporting.artifacts import config_hash
from mlpnet.reporting.summary import compute_auc, summarise_records


def test_jsonl_sink_records_epochs(tmp_path):
    sink = JsonlSink(tmp_path / "m.jsonl", split="train", seed=3, sha="abc")
    sink.on_epoch(1, {"loss": 0.5, "label": "ignored"})
    sink(2, {"loss": 0.25})
    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert records == [
        {"epoch": 1, "split": "train", "seed": 3, "sha": "abc", "loss": 0.5},
        {"epoch": 2, "split": "train", "seed": 3, "sha": "abc", "loss": 0.25},
    ]


def test_csv_sink_writes_header_once(tmp_path):
    sink = CsvSink(tmp_path / "m.csv", split="val")
    sink.on_epoch(1, {"loss": 1.0, "mae": 0.5})
    sink.on_epoch(2, {"loss": 0.5, "mae": 0.25})
    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert [row["epoch"] for row in rows] == ["1", "2"]
    assert rows[1]["split"] == "val"


def test_summary_statistics(tmp_path):
    sink = JsonlSink(tmp_path / "m.jsonl", sha="abc")
    for epoch, loss in enumerate([1.0, 0.5, 0.25], start=1):
        sink.on_epoch(epoch, {"loss": loss})
    path = write_summary(sink.path, tmp_path / "summary.json", tail=2)
    summary = json.loads(open(path).read())
    stats = summary["metrics"]["loss"]
    assert summary["records"] == 3
    assert summary["tail_window"] == 2
    assert stats["min"] == 0.25 and stats["max"] == 1.0 and stats["last"] == 0.25
    assert stats["tail_auc"] == pytest.approx(0.375)
    assert stats["best_epoch"] == 3
    assert "seed" not in summary["metrics"]


def test_compute_auc_empty():
    assert compute_auc([]) == 0.0


def test_manifest_contents(tmp_path):
    path = write_manifest(
        tmp_path / "manifest.json",
        config={"train": {"seed": 1}},
        network={"layer_sizes": [2, 1]},
        dataset_provenance={"source": "builtin"},
    )
    manifest = json.loads(open(path).read())
    assert manifest["config"]["train"]["seed"] == 1
    assert manifest["network"]["layer_sizes"] == [2, 1]
    assert manifest["dataset"]["source"] == "builtin"
    assert {"git_sha", "generated_at", "environment"} <= set(manifest)


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter.on_epoch(1, {"loss": 1.0})
    adapter.on_epoch(2, {"loss": 0.5})
    assert adapter.close() == tmp_path / "loss.png"
    assert (tmp_path / "loss.png").exists()


def test_plot_adapter_disabled(tmp_path):
    adapter = PlotAdapter(tmp_path / "off")
    adapter.on_epoch(1, {"loss": 1.0})
    assert adapter.close() is None
    assert not (tmp_path / "off").exists()


def test_accuracy_best_is_maximum():
    records = [
        {"epoch": 1, "min_accuracy": 0.2},
        {"epoch": 2, "min_accuracy": 0.9},
        {"epoch": 3, "min_accuracy": 0.7},
    ]
    stats = summarise_records(records, tail=32)["metrics"]["min_accuracy"]
    assert stats["best"] == 0.9
    assert stats["best_epoch"] == 2


def test_csv_sink_keeps_first_schema(tmp_path):
    sink = CsvSink(tmp_path / "m.csv")
    sink.on_epoch(1, {"loss": 1.0})
    sink.on_epoch(2, {"loss": 0.5, "extra": 3.0})
    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert list(rows[0]) == ["epoch", "split", "loss"]
    assert rows[1]["loss"] == "0.5"


def test_config_hash_ignores_key_order():
    assert config_hash({"a": 1, "b": [1, 2]}) == config_hash({"b": [1, 2], "a": 1})
    assert config_hash({"a": 1}) != config_hash({"a": 2})


def test_plot_adapter_with_accuracy_panel(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter(1, {"loss": 1.0, "min_accuracy": 0.1, "mse": 1.0})
    adapter(2, {"loss": 0.5, "min_accuracy": 0.6, "mse": 0.5})
    assert adapter.close() == tmp_path / "loss.png"
