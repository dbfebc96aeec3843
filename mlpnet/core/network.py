"""Fully-connected feed-forward network trained online with momentum."""

from __future__ import annotations

from typing import List, Mapping, Sequence, Tuple, Union

import numpy as np

from .activations import Activation, resolve_activation
from .errors import InvalidArgument, PredictRequiredError
from .types import Array, NetworkDescription


def _check_size(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgument(f"{what} must be a positive integer, got {value!r}")
    if value <= 0:
        raise InvalidArgument(f"{what} must be a positive integer, got {value!r}")
    return int(value)


def _as_vector(values: Sequence[float] | Array, size: int, what: str) -> Array:
    vector = np.asarray(values, dtype=np.float64)
    if vector.ndim != 1 or vector.shape[0] != size:
        raise InvalidArgument(
            f"{what} must be a vector of length {size}, got shape {vector.shape}"
        )
    return vector


class MultilayerPerceptron:
    """Layered network of neurons joined by dense weighted synapses.

    Neuron state is stored per layer in contiguous vectors (``values``,
    ``biases``, ``bias_deltas``, ``gradients``) and synapse state per synapse
    layer in ``(source, target)`` matrices (``weights``, ``weight_deltas``).
    The input layer carries no bias.

    ``train`` consumes the neuron values cached by the most recent
    ``predict``, so every training call must follow a prediction on the same
    example.
    """

    def __init__(
        self,
        input_size: int,
        hidden_sizes: Sequence[int],
        output_size: int,
        activation: Union[str, Activation],
        *,
        seed: int | None = None,
    ) -> None:
        sizes = [_check_size(input_size, "input_size")]
        sizes.extend(
            _check_size(size, f"hidden_sizes[{idx}]")
            for idx, size in enumerate(hidden_sizes)
        )
        sizes.append(_check_size(output_size, "output_size"))

        self.activation = resolve_activation(activation)
        self.seed = seed
        self._sizes: Tuple[int, ...] = tuple(sizes)
        self._armed = False

        rng = np.random.default_rng(seed)
        self._values: List[Array] = [np.zeros(n) for n in sizes]
        self._gradients: List[Array] = [np.zeros(n) for n in sizes]
        self._bias_deltas: List[Array] = [np.zeros(n) for n in sizes]
        self._biases: List[Array] = [np.zeros(sizes[0])]
        for n in sizes[1:]:
            self._biases.append(rng.uniform(-1.0, 1.0, size=n))

        self._weights: List[Array] = []
        self._weight_deltas: List[Array] = []
        for n_source, n_target in zip(sizes[:-1], sizes[1:]):
            self._weights.append(rng.uniform(-1.0, 1.0, size=(n_source, n_target)))
            self._weight_deltas.append(np.zeros((n_source, n_target)))

    def __repr__(self) -> str:
        return (
            f"<MultilayerPerceptron layers={list(self._sizes)} "
            f"activation={self.activation_name}>"
        )

    # ------------------------------------------------------------------
    # Topology

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        return self._sizes

    @property
    def layer_count(self) -> int:
        return len(self._sizes)

    @property
    def input_size(self) -> int:
        return self._sizes[0]

    @property
    def output_size(self) -> int:
        return self._sizes[-1]

    @property
    def activation_name(self) -> str:
        return str(getattr(self.activation, "name", type(self.activation).__name__.lower()))

    def synapse_count(self, layer: int) -> int:
        """Number of synapses between layer ``layer`` and ``layer + 1``."""

        return int(self._weights[layer].size)

    def parameter_count(self) -> int:
        weights = sum(int(w.size) for w in self._weights)
        biases = sum(self._sizes[1:])
        return weights + biases

    def describe(self) -> NetworkDescription:
        return NetworkDescription(layer_sizes=self._sizes, activation=self.activation_name)

    # ------------------------------------------------------------------
    # Read-only views of the parameters

    @property
    def weights(self) -> List[Array]:
        """Copies of the synapse weights, indexed ``[source, target]``."""

        return [w.copy() for w in self._weights]

    @property
    def biases(self) -> List[Array]:
        """Copies of the biases of every non-input layer."""

        return [b.copy() for b in self._biases[1:]]

    @property
    def gradients(self) -> List[Array]:
        """Copies of the local gradients of every non-input layer."""

        return [g.copy() for g in self._gradients[1:]]

    @property
    def values(self) -> List[Array]:
        return [v.copy() for v in self._values]

    def state_dict(self) -> Mapping[str, Array]:
        state = {f"W{idx}": w.copy() for idx, w in enumerate(self._weights)}
        state.update({f"b{idx}": b.copy() for idx, b in enumerate(self._biases[1:])})
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        """Replace weights and biases, clearing momentum history.

        The network must be primed with ``predict`` again before training.
        """

        weights = []
        for idx, current in enumerate(self._weights):
            weights.append(self._state_entry(state, f"W{idx}", current.shape))
        biases = []
        for idx, current in enumerate(self._biases[1:]):
            biases.append(self._state_entry(state, f"b{idx}", current.shape))

        self._weights = weights
        self._biases = [self._biases[0]] + biases
        self._weight_deltas = [np.zeros_like(w) for w in weights]
        self._bias_deltas = [np.zeros(n) for n in self._sizes]
        self._armed = False

    @staticmethod
    def _state_entry(state: Mapping[str, Array], key: str, shape: Tuple[int, ...]) -> Array:
        if key not in state:
            raise KeyError(f"Missing parameter {key} in state dict")
        value = np.array(state[key], dtype=np.float64)
        if value.shape != shape:
            raise InvalidArgument(f"{key} must have shape {shape}, got {value.shape}")
        return value

    # ------------------------------------------------------------------
    # Forward and backward passes

    def predict(self, inputs: Sequence[float] | Array, out: Array | None = None) -> Array:
        """Run the forward pass and return the output layer values.

        When ``out`` is given it must be a float vector of ``output_size``
        elements; it is filled in place and returned.
        """

        x = _as_vector(inputs, self.input_size, "inputs")
        if out is not None and (np.ndim(out) != 1 or len(out) != self.output_size):
            raise InvalidArgument(
                f"out must be a vector of length {self.output_size}, "
                f"got shape {np.shape(out)}"
            )

        act = self.activation
        self._values[0][:] = x
        for idx, W in enumerate(self._weights):
            net = self._values[idx] @ W
            self._values[idx + 1][:] = act.function(net + self._biases[idx + 1])
        self._armed = True

        if out is None:
            return self._values[-1].copy()
        out[:] = self._values[-1]
        return out

    def train(
        self,
        expected_output: Sequence[float] | Array,
        learn_rate: float,
        momentum: float,
    ) -> None:
        """Backpropagate the error of the last prediction and update in place."""

        expected = _as_vector(expected_output, self.output_size, "expected_output")
        if not self._armed:
            raise PredictRequiredError(
                "train() requires a predict() on the same example since the last update"
            )

        act = self.activation
        values = self._values
        gradients = self._gradients
        last = self.layer_count - 1

        gradients[last][:] = (expected - values[last]) * act.derivative(values[last])
        # Hidden gradients read the weights before any of them is updated.
        for idx in range(last - 1, 0, -1):
            net = self._weights[idx] @ gradients[idx + 1]
            gradients[idx][:] = net * act.derivative(values[idx])

        for idx in range(last):
            target_grad = gradients[idx + 1]

            bias_delta = learn_rate * target_grad
            self._biases[idx + 1] += bias_delta + momentum * self._bias_deltas[idx + 1]
            self._bias_deltas[idx + 1] = bias_delta

            weight_delta = learn_rate * np.outer(values[idx], target_grad)
            self._weights[idx] += weight_delta + momentum * self._weight_deltas[idx]
            self._weight_deltas[idx] = weight_delta

        self._armed = False

    def train_example(
        self,
        inputs: Sequence[float] | Array,
        expected_output: Sequence[float] | Array,
        learn_rate: float,
        momentum: float,
    ) -> Array:
        """Predict ``inputs`` then train towards ``expected_output``.

        Returns the output computed before the update.
        """

        _as_vector(expected_output, self.output_size, "expected_output")
        output = self.predict(inputs)
        self.train(expected_output, learn_rate, momentum)
        return output


__all__ = ["MultilayerPerceptron"]
