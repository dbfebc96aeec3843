"""Run reporting: metric sinks, summaries, manifests and plots."""

from .artifacts import config_hash, write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import summarise_records, write_summary

__all__ = [
    "CsvSink",
    "JsonlSink",
    "PlotAdapter",
    "config_hash",
    "summarise_records",
    "write_manifest",
    "write_summary",
]
