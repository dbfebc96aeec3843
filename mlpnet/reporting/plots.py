"""Training curves saved with matplotlib's headless backend."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Tuple


class PlotAdapter:
    """Record per-epoch loss and accuracy, and draw them when closed.

    Nothing is collected or written unless ``enable_plots`` is set.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._curves: Dict[str, List[Tuple[int, float]]] = {}
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots:
            return
        for name, value in metrics.items():
            if name == "loss" or name.endswith("accuracy"):
                self._curves.setdefault(name, []).append((int(epoch), float(value)))

    __call__ = on_epoch

    def close(self) -> Path | None:
        if not self.enable_plots or "loss" not in self._curves:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        accuracy = {k: v for k, v in self._curves.items() if k != "loss"}
        fig, axes = plt.subplots(1, 2 if accuracy else 1, figsize=(10 if accuracy else 6, 4))
        loss_ax = axes[0] if accuracy else axes
        epochs, losses = zip(*self._curves["loss"])
        loss_ax.plot(epochs, losses)
        loss_ax.set_xlabel("Epoch")
        loss_ax.set_ylabel("Loss")
        loss_ax.set_title("Training loss")
        if accuracy:
            for name, points in sorted(accuracy.items()):
                xs, ys = zip(*points)
                axes[1].plot(xs, ys, label=name)
            axes[1].set_xlabel("Epoch")
            axes[1].set_ylim(top=1.0)
            axes[1].legend()
            axes[1].set_title("Accuracy")
        fig.tight_layout()
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path
