"""Fisher's Iris flowers, bundled with scikit-learn."""

from __future__ import annotations

from sklearn.datasets import load_iris

from .labels import ClassMapping
from .registry import DatasetSpec, register_dataset
from .tabular import build_classification_spec


@register_dataset("iris")
def build_iris_dataset(
    *,
    one_hot: bool = False,
    low: float = -1.0,
    high: float = 1.0,
    val_split: float = 0.0,
    test_split: float = 0.0,
    seed: int = 0,
) -> DatasetSpec:
    """Return the 150 Iris samples with features scaled into ``[-1, 1]``.

    Labels are spread over ``[low, high]`` on a single output, or one-hot
    encoded over three outputs when ``one_hot`` is set.
    """

    bunch = load_iris()
    names = [str(name) for name in bunch.target_names]
    labels = [names[int(idx)] for idx in bunch.target]
    classes = ClassMapping(tuple(names), low=low, high=high)
    return build_classification_spec(
        "iris",
        bunch.data,
        labels,
        classes,
        one_hot=one_hot,
        scale_inputs=True,
        val_split=val_split,
        test_split=test_split,
        seed=seed,
        provenance={"source": "sklearn.datasets.load_iris"},
    )


__all__ = ["build_iris_dataset"]
