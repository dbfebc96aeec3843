import math

import numpy as np
import pytest

from mlpnet.core.activations import (
    Sigmoid,
    Tanh,
    available_activations,
    get_activation,
    resolve_activation,
)

SAMPLES = [-50.0, -8.0, -1.5, -0.25, 0.0, 0.25, 1.5, 8.0, 50.0]


@pytest.mark.parametrize("x", SAMPLES)
def test_tanh_derivative_uses_output(x):
    act = Tanh()
    y = act.function(x)
    assert y == pytest.approx(math.tanh(x))
    assert act.derivative(y) == pytest.approx(1.0 - y**2)


@pytest.mark.parametrize("x", SAMPLES)
def test_sigmoid_derivative_uses_output(x):
    act = Sigmoid()
    y = act.function(x)
    assert y == pytest.approx(1.0 / (1.0 + math.exp(-x)))
    assert act.derivative(y) == pytest.approx(y * (1.0 - y))


def test_activations_are_elementwise_on_arrays():
    x = np.array(SAMPLES)
    for act in (Sigmoid(), Tanh()):
        y = act.function(x)
        assert y.shape == x.shape
        np.testing.assert_allclose(act.derivative(y), [act.derivative(v) for v in y])


def test_derivative_peaks_at_zero_input():
    assert Tanh().derivative(Tanh().function(0.0)) == pytest.approx(1.0)
    assert Sigmoid().derivative(Sigmoid().function(0.0)) == pytest.approx(0.25)


def test_registry_lookup_is_case_insensitive():
    assert isinstance(get_activation("TANH"), Tanh)
    assert isinstance(get_activation(" sigmoid "), Sigmoid)
    assert list(available_activations()) == ["sigmoid", "tanh"]


def test_unknown_activation_lists_available():
    with pytest.raises(KeyError, match="sigmoid, tanh"):
        get_activation("relu")


def test_resolve_accepts_custom_strategy():
    class Identity:
        name = "identity"

        def function(self, x):
            return x

        def derivative(self, y):
            return 1.0

    custom = Identity()
    assert resolve_activation(custom) is custom
    with pytest.raises(TypeError):
        resolve_activation(object())
