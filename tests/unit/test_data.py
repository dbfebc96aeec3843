import numpy as np
import pytest

from mlpnet.data import ClassMapping, available_datasets, get_dataset
from mlpnet.data.csv_generic import FIXTURE_DIR
from mlpnet.data.utils import deterministic_split, min_max_scale

IRIS = ("setosa", "versicolor", "virginica")


def test_registry_lists_builtins():
    assert {"xor", "iris", "csv_classification"} <= set(available_datasets())
    with pytest.raises(KeyError, match="Unknown dataset"):
        get_dataset("mnist")


def test_xor_examples_in_canonical_order():
    spec = get_dataset("xor")
    pairs = [(list(e.inputs), list(e.targets)) for e in spec.iter_split("train")]
    assert pairs == [
        ([0.0, 0.0], [0.0]),
        ([1.0, 0.0], [1.0]),
        ([0.0, 1.0], [1.0]),
        ([1.0, 1.0], [0.0]),
    ]
    assert spec.data_spec.d_in == 2 and spec.data_spec.d_out == 1
    with pytest.raises(ValueError):
        spec.iter_split("test")


def test_xor_signed_levels():
    spec = get_dataset("xor", low=-1.0)
    targets = [e.targets[0] for e in spec.splits["train"]]
    assert targets == [-1.0, 1.0, 1.0, -1.0]


def test_class_mapping_encodes_evenly():
    mapping = ClassMapping(IRIS)
    assert [mapping.encode(c) for c in IRIS] == [-1.0, 0.0, 1.0]
    assert [mapping.decode(v) for v in (-1.0, 0.0, 1.0)] == list(IRIS)
    assert mapping.decode(-0.4) == "setosa"
    assert mapping.decode(-0.3) == "versicolor"
    assert mapping.decode(0.34) == "virginica"
    assert mapping.decode(5.0) == "virginica"


def test_class_mapping_sigmoid_range_and_one_hot():
    mapping = ClassMapping(IRIS, low=0.0, high=1.0)
    assert mapping.encode("versicolor") == pytest.approx(0.5)
    np.testing.assert_array_equal(mapping.encode_one_hot("virginica"), [0.0, 0.0, 1.0])
    assert mapping.decode_one_hot([0.1, 0.7, 0.3]) == "versicolor"
    assert mapping.decode_output([0.9]) == "virginica"
    assert mapping.decode_output([0.2, 0.1, 0.05]) == "setosa"
    with pytest.raises(ValueError):
        mapping.decode_output([0.1, 0.2])


def test_class_mapping_rejects_unknown_and_bad_ranges():
    mapping = ClassMapping.from_labels(["b", "a", "b"])
    assert mapping.classes == ("b", "a")
    with pytest.raises(KeyError):
        mapping.encode("c")
    with pytest.raises(ValueError):
        ClassMapping(("a", "a"))
    with pytest.raises(ValueError):
        ClassMapping(("a",), low=1.0, high=1.0)


def test_min_max_scale_handles_constant_columns():
    data = np.array([[1.0, 5.0, 2.0], [3.0, 5.0, 4.0], [2.0, 5.0, 6.0]])
    scaled, mins, maxs = min_max_scale(data)
    np.testing.assert_allclose(scaled[:, 0], [-1.0, 1.0, 0.0])
    np.testing.assert_allclose(scaled[:, 1], [0.0, 0.0, 0.0])
    np.testing.assert_allclose(mins, [1.0, 5.0, 2.0])
    np.testing.assert_allclose(maxs, [3.0, 5.0, 6.0])


def test_deterministic_split_defaults_to_everything_in_order():
    split = deterministic_split(6)
    np.testing.assert_array_equal(split.train, np.arange(6))
    assert split.sizes == {"train": 6, "val": 0, "test": 0}


def test_deterministic_split_is_seeded_and_disjoint():
    first = deterministic_split(20, val_split=0.2, test_split=0.25, seed=4)
    second = deterministic_split(20, val_split=0.2, test_split=0.25, seed=4)
    np.testing.assert_array_equal(first.train, second.train)
    assert first.sizes == {"train": 11, "val": 4, "test": 5}
    combined = np.concatenate([first.train, first.val, first.test])
    assert sorted(combined.tolist()) == list(range(20))
    with pytest.raises(ValueError):
        deterministic_split(10, val_split=0.5, test_split=0.5)


def test_iris_single_output_encoding():
    spec = get_dataset("iris")
    train = spec.splits["train"]
    assert len(train) == 150
    assert spec.data_spec.d_in == 4 and spec.data_spec.d_out == 1
    assert spec.data_spec.classes.classes == IRIS
    inputs = np.stack([e.inputs for e in train])
    assert inputs.min() == pytest.approx(-1.0)
    assert inputs.max() == pytest.approx(1.0)
    assert sorted({float(e.targets[0]) for e in train}) == [-1.0, 0.0, 1.0]


def test_iris_one_hot_with_validation_split():
    spec = get_dataset("iris", one_hot=True, low=0.0, high=1.0, val_split=0.2, seed=1)
    assert spec.data_spec.d_out == 3
    assert spec.split_sizes() == {"train": 120, "val": 30, "test": 0}
    for example in spec.splits["val"]:
        assert example.targets.sum() == pytest.approx(1.0)


def test_csv_fixture_loads_headerless_iris_rows():
    spec = get_dataset("csv_classification")
    assert spec.data_spec.classes.classes == IRIS
    assert spec.split_sizes()["train"] == 15
    assert spec.provenance["path"].endswith("iris_sample.csv")
    first = spec.splits["train"][0]
    assert first.targets[0] == -1.0


def test_csv_with_header_and_named_target(tmp_path):
    path = tmp_path / "toy.csv"
    path.write_text("a,b,label\n0,1,no\n1,0,yes\n1,1,no\n0,0,yes\n")
    spec = get_dataset("csv_classification", csv_path=path, target_col="label", header=True)
    assert spec.data_spec.d_in == 2
    assert spec.data_spec.classes.classes == ("no", "yes")
    targets = [float(e.targets[0]) for e in spec.splits["train"]]
    assert targets == [-1.0, 1.0, -1.0, 1.0]
    with pytest.raises(KeyError):
        get_dataset("csv_classification", csv_path=path, target_col="missing", header=True)


def test_fixture_directory_exists():
    assert (FIXTURE_DIR / "iris_sample.csv").exists()
