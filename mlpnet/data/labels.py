"""Mapping between class labels and numeric network targets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Sequence, Tuple

import numpy as np

from ..core.types import Array


@dataclass(frozen=True)
class ClassMapping:
    """Spread ``classes`` evenly over ``[low, high]``.

    With a single output neuron class ``i`` of ``n`` is encoded as
    ``low + (high - low) * i / (n - 1)``.  Decoding splits the normalized
    range into ``n`` equal bins, so ``-1, 0, 1`` decode to the three classes
    of a tanh network.  One-hot encoding uses ``high`` for the class and
    ``low`` elsewhere.
    """

    classes: Tuple[Hashable, ...]
    low: float = -1.0
    high: float = 1.0

    def __post_init__(self) -> None:
        if not self.classes:
            raise ValueError("ClassMapping requires at least one class")
        if len(set(self.classes)) != len(self.classes):
            raise ValueError("ClassMapping classes must be unique")
        if not self.high > self.low:
            raise ValueError("ClassMapping requires high > low")

    @classmethod
    def from_labels(
        cls, labels: Sequence[Hashable], *, low: float = -1.0, high: float = 1.0
    ) -> "ClassMapping":
        """Build a mapping over the labels in order of first appearance."""

        seen: dict = {}
        for label in labels:
            seen.setdefault(label, None)
        return cls(tuple(seen), low=low, high=high)

    def __len__(self) -> int:
        return len(self.classes)

    def index(self, label: Hashable) -> int:
        try:
            return self.classes.index(label)
        except ValueError:
            raise KeyError(f"{label!r} is not one of {list(self.classes)}") from None

    def encode(self, label: Hashable) -> float:
        n = len(self.classes)
        if n == 1:
            return (self.low + self.high) / 2.0
        return self.low + (self.high - self.low) * self.index(label) / (n - 1)

    def decode(self, value: float) -> Hashable:
        x = (float(value) - self.low) / (self.high - self.low)
        n = len(self.classes)
        for idx, label in enumerate(self.classes):
            if x < (idx + 1) / n:
                return label
        return self.classes[-1]

    def encode_one_hot(self, label: Hashable) -> Array:
        vector = np.full(len(self.classes), self.low, dtype=np.float64)
        vector[self.index(label)] = self.high
        return vector

    def decode_one_hot(self, values: Sequence[float] | Array) -> Hashable:
        return self.classes[int(np.argmax(values))]

    def decode_output(self, output: Sequence[float] | Array) -> Hashable:
        """Decode a network output vector of either encoding."""

        output = np.asarray(output, dtype=np.float64).reshape(-1)
        if output.size == 1:
            return self.decode(float(output[0]))
        if output.size == len(self.classes):
            return self.decode_one_hot(output)
        raise ValueError(
            f"Output of size {output.size} matches neither encoding of "
            f"{len(self.classes)} classes"
        )


__all__ = ["ClassMapping"]
