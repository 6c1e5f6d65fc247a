from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from conditioning.config import FEATURES_COLUMN
from conditioning.exceptions import ColumnNotFoundError, ComputationError, UnsupportedTypeError
from conditioning.preprocessing.vectors import (
    assemble_features,
    from_vectors,
    has_feature_vector,
    numeric_column,
    to_vectors,
)


def _frame() -> pd.DataFrame:
    return pd.DataFrame({
        "a": [1, 2, 3],
        "b": [0.5, 1.5, 2.5],
        "flag": [True, False, True],
        "label": [0, 1, 0],
    })


def test_assemble_features_builds_float32_vectors():
    df = _frame()
    out = assemble_features(df, ["b", "flag", "a"])

    assert has_feature_vector(out)
    assert not has_feature_vector(df)
    vector = out[FEATURES_COLUMN].iloc[1]
    assert vector.dtype == np.float32
    np.testing.assert_array_equal(vector, np.array([1.5, 0.0, 2.0], dtype=np.float32))


def test_assemble_features_errors():
    df = _frame().assign(text=["x", "y", "z"])

    with pytest.raises(ColumnNotFoundError):
        assemble_features(df, ["a", "nope"])
    with pytest.raises(UnsupportedTypeError):
        assemble_features(df, ["a", "text"])


def test_to_vectors_prefers_assembled_column():
    df = assemble_features(_frame(), ["a", "b"])
    # named columns no longer match; the vector column wins
    df["a"] = 100

    X, y = to_vectors(df, ["a", "b"], "label")

    assert X.shape == (3, 2)
    np.testing.assert_array_equal(X[:, 0], np.array([1, 2, 3], dtype=np.float32))
    np.testing.assert_array_equal(y, np.array([0, 1, 0]))


def test_to_vectors_from_named_columns():
    X, y = to_vectors(_frame(), ["flag"], "label")
    np.testing.assert_array_equal(X[:, 0], np.array([1.0, 0.0, 1.0], dtype=np.float32))


def test_to_vectors_missing_target():
    with pytest.raises(ColumnNotFoundError):
        to_vectors(_frame(), ["a"], "target")


def test_from_vectors_round_layout():
    X = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
    df = from_vectors(X, np.array([1, 0]), ["p", "q"], "label")

    assert list(df.columns) == ["p", "q", "label", FEATURES_COLUMN]
    np.testing.assert_array_equal(df[FEATURES_COLUMN].iloc[1], X[1])


def test_from_vectors_width_mismatch():
    X = np.zeros((2, 3), dtype=np.float32)
    with pytest.raises(ComputationError):
        from_vectors(X, np.array([0, 1]), ["only", "two"], "label")


def test_numeric_column_coerces_bool():
    values = numeric_column(_frame(), "flag")
    assert values.dtype == np.float64
    assert list(values) == [1.0, 0.0, 1.0]
