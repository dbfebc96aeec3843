import numpy as np
import pytest

from mlpnet.data import ClassMapping
from mlpnet.training.losses import REGISTRY
from mlpnet.training.metrics import compute_metric, compute_metrics, default_metrics


def test_losses_registry():
    out, tgt = np.array([0.5, 1.0]), np.array([1.0, 0.0])
    assert REGISTRY.get("mse")(out, tgt) == pytest.approx((0.25 + 1.0) / 2)
    assert REGISTRY.get("mae")(out, tgt) == pytest.approx(0.75)
    assert REGISTRY.get("sse")(out, tgt) == pytest.approx(0.625)
    assert list(REGISTRY.names()) == ["mae", "mse", "sse"]
    with pytest.raises(KeyError, match="Available losses"):
        REGISTRY.get("huber")


def test_accuracy_metrics():
    outputs = np.array([[0.01], [0.97], [0.99], [0.1]])
    targets = np.array([[0.0], [1.0], [1.0], [0.0]])
    assert compute_metric("min_accuracy", outputs, targets) == pytest.approx(0.9)
    assert compute_metric("mean_accuracy", outputs, targets) == pytest.approx(
        1 - (0.01 + 0.03 + 0.01 + 0.1) / 4
    )
    assert compute_metric("rmse", outputs, targets) == pytest.approx(
        np.sqrt(np.mean((outputs - targets) ** 2))
    )


def test_class_accuracy_decodes_outputs():
    classes = ClassMapping(("a", "b", "c"))
    outputs = np.array([[-0.9], [0.2], [0.1], [0.8]])
    targets = np.array([[-1.0], [0.0], [1.0], [1.0]])
    metrics = compute_metrics(["class_accuracy", "MAE"], outputs, targets, classes=classes)
    assert metrics["class_accuracy"] == pytest.approx(0.75)
    assert "mae" in metrics
    with pytest.raises(ValueError):
        compute_metric("class_accuracy", outputs, targets)


def test_metric_errors():
    with pytest.raises(KeyError):
        compute_metric("auc", np.zeros((1, 1)), np.zeros((1, 1)))
    with pytest.raises(ValueError):
        compute_metric("mse", np.zeros((2, 1)), np.zeros((2, 2)))
    with pytest.raises(ValueError):
        default_metrics("ranking")
    assert "class_accuracy" in default_metrics("classification")
