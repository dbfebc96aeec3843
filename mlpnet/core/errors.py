"""Exceptions raised by the network core."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised for malformed topologies or vectors of the wrong length."""


class PredictRequiredError(RuntimeError):
    """Raised when ``train`` is called without a fresh ``predict``."""


__all__ = ["InvalidArgument", "PredictRequiredError"]
