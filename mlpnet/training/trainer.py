"""Online (example-by-example) training loop for mlpnet."""

from __future__ import annotations

import warnings
from typing import Dict, Mapping, Sequence, Tuple

import numpy as np

from ..core.network import MultilayerPerceptron
from ..core.types import Example, TrainResult
from ..data.labels import ClassMapping
from .losses import REGISTRY as LOSS_REGISTRY
from .metrics import compute_metrics, default_metrics


class Trainer:
    """Drive ``predict``/``train`` pairs over a sequence of examples."""

    def __init__(
        self,
        network: MultilayerPerceptron,
        learn_rate: float,
        momentum: float = 0.0,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.learn_rate = float(learn_rate)
        self.momentum = float(momentum)
        self.callbacks = list(callbacks or [])

    def run(
        self,
        examples: Sequence[Example],
        epochs: int,
        *,
        val_examples: Sequence[Example] | None = None,
        metric_names: Sequence[str] | str = (),
        task_type: str = "regression",
        classes: ClassMapping | None = None,
        loss: str = "mse",
        eval_every: int = 1,
        split_loggers: Mapping[str, Sequence[object]] | None = None,
        shuffle_seed: int | None = None,
        early_stopping_patience: int | None = None,
        target_metric: Tuple[str, float] | None = None,
    ) -> TrainResult:
        """Train for up to ``epochs`` passes over ``examples``.

        Training metrics of an epoch are computed from the outputs produced
        just before each example's update.  Examples are visited in order
        unless ``shuffle_seed`` is given, in which case every epoch uses a
        fresh permutation drawn from that seed.  ``target_metric`` stops
        training once the named metric reaches the threshold.
        """

        if epochs < 0:
            raise ValueError("epochs must be non-negative")
        if not examples:
            raise ValueError("Trainer.run requires at least one training example")

        if isinstance(metric_names, str):
            metric_names = [m.strip() for m in metric_names.split(",") if m.strip()]
        if not metric_names or list(metric_names) == ["default"]:
            metric_names = default_metrics(task_type)
        if classes is None:
            metric_names = [m for m in metric_names if m != "class_accuracy"]
        loss_fn = LOSS_REGISTRY.get(loss)

        rng = np.random.default_rng(shuffle_seed) if shuffle_seed is not None else None
        split_loggers = split_loggers or {}
        result = TrainResult(epochs=0, steps=0)
        best_loss = float("inf")
        epochs_no_improve = 0
        warned_non_finite = False

        for epoch in range(1, epochs + 1):
            order = rng.permutation(len(examples)) if rng is not None else range(len(examples))
            outputs = []
            targets = []
            losses = []
            for idx in order:
                example = examples[idx]
                output = self.network.predict(example.inputs)
                self.network.train(example.targets, self.learn_rate, self.momentum)
                losses.append(loss_fn(output, example.targets))
                outputs.append(output)
                targets.append(example.targets)
            result.steps += len(losses)
            result.epochs = epoch

            train_metrics: Dict[str, float] = {"loss": float(np.mean(losses))}
            train_metrics.update(
                compute_metrics(
                    metric_names, np.stack(outputs), np.stack(targets), classes=classes
                )
            )
            if not np.isfinite(train_metrics["loss"]) and not warned_non_finite:
                warnings.warn(
                    f"Training loss became non-finite at epoch {epoch}; "
                    "consider a smaller learn_rate or momentum",
                    RuntimeWarning,
                    stacklevel=2,
                )
                warned_non_finite = True
            result.history.append((epoch, train_metrics))
            self._emit_epoch("train", epoch, train_metrics, split_loggers)

            val_metrics = None
            if val_examples and epoch % max(1, eval_every) == 0:
                val_metrics = self.evaluate(
                    val_examples, metric_names, classes=classes, loss=loss
                )
                self._emit_epoch("val", epoch, val_metrics, split_loggers)

            result.final_metrics = dict(train_metrics)
            if val_metrics is not None:
                result.final_metrics.update({f"val_{k}": v for k, v in val_metrics.items()})

            # With a validation set, stopping decisions only use validation epochs.
            if val_examples and val_metrics is None:
                continue
            monitored = val_metrics if val_metrics is not None else train_metrics
            if target_metric is not None:
                name, threshold = target_metric
                if name not in monitored:
                    raise KeyError(f"target metric {name!r} is not being computed")
                if monitored[name] >= threshold:
                    result.stopped_early = epoch < epochs
                    break

            current_loss = float(monitored["loss"])
            if current_loss < best_loss - 1e-12:
                best_loss = current_loss
                epochs_no_improve = 0
            else:
                epochs_no_improve += 1
                if early_stopping_patience and epochs_no_improve >= early_stopping_patience:
                    result.stopped_early = epoch < epochs
                    break

        return result

    def evaluate(
        self,
        examples: Sequence[Example],
        metric_names: Sequence[str] = (),
        *,
        classes: ClassMapping | None = None,
        loss: str = "mse",
    ) -> Mapping[str, float]:
        """Score ``examples`` with forward passes only."""

        if not examples:
            raise ValueError("Trainer.evaluate requires at least one example")
        loss_fn = LOSS_REGISTRY.get(loss)
        outputs = np.stack([self.network.predict(example.inputs) for example in examples])
        targets = np.stack([example.targets for example in examples])
        metrics: Dict[str, float] = {
            "loss": float(np.mean([loss_fn(o, t) for o, t in zip(outputs, targets)]))
        }
        names = [m for m in metric_names if classes is not None or m != "class_accuracy"]
        metrics.update(compute_metrics(names, outputs, targets, classes=classes))
        return metrics

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit_epoch(
        self,
        split: str,
        epoch: int,
        metrics: Mapping[str, float],
        loggers: Mapping[str, Sequence[object]],
    ) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
        for callback in loggers.get(split, []):
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Trainer"]
