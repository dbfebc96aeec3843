"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, MutableMapping, Tuple

from ..core.types import Example
from .labels import ClassMapping

TASK_TYPES = ("regression", "classification")


@dataclass(frozen=True)
class DataSpec:
    """Structural information about a dataset.

    Attributes
    ----------
    d_in:
        Number of network inputs.
    d_out:
        Number of network outputs the targets are encoded for.
    task_type:
        One of ``{"regression", "classification"}``.
    classes:
        Label mapping for classification datasets.  It decodes network
        outputs back into class labels.
    normalization:
        Metadata describing the scaling applied to the inputs.  The registry
        does not interpret these values.
    """

    d_in: int
    d_out: int
    task_type: str
    classes: ClassMapping | None = None
    normalization: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DatasetSpec:
    """Description of a dataset registered in the system."""

    name: str
    splits: Dict[str, Tuple[Example, ...]]
    data_spec: DataSpec
    provenance: Dict[str, Any]

    def iter_split(self, split: str) -> Iterator[Example]:
        """Iterate over ``split`` in its fixed order."""

        if split not in self.splits:
            raise ValueError(f"Unknown split: {split}")
        return iter(self.splits[split])

    def split_sizes(self) -> Dict[str, int]:
        return {name: len(examples) for name, examples in self.splits.items()}


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(name: str) -> Callable[[DatasetFactory], DatasetFactory]:
    """Register a dataset factory under ``name``::

        @register_dataset("xor")
        def build_xor(**options):
            ...
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[name] = func
        return func

    return _decorator


def get_dataset(name: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` built by the factory for ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset: {name}. Available datasets: {available}")
    spec = _REGISTRY[name](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if spec.data_spec.task_type not in TASK_TYPES:
        raise ValueError(f"Invalid task type: {spec.data_spec.task_type}")
    if spec.data_spec.task_type == "classification" and spec.data_spec.classes is None:
        raise ValueError("Classification datasets must define classes")
    if "train" not in spec.splits or not spec.splits["train"]:
        raise ValueError(f"Dataset {spec.name!r} has no training examples")
    for split, examples in spec.splits.items():
        for example in examples:
            if example.inputs.shape != (spec.data_spec.d_in,):
                raise ValueError(
                    f"Split {split!r} has inputs of shape {example.inputs.shape}, "
                    f"expected ({spec.data_spec.d_in},)"
                )
            if example.targets.shape != (spec.data_spec.d_out,):
                raise ValueError(
                    f"Split {split!r} has targets of shape {example.targets.shape}, "
                    f"expected ({spec.data_spec.d_out},)"
                )


__all__ = [
    "DataSpec",
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
