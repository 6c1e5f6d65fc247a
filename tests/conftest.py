from __future__ import annotations

import numpy as np
import pandas as pd
import pytest


def make_imbalanced(n_zero: int, n_one: int, seed: int = 0, label_dtype: str = "int64") -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    zeros = rng.normal(loc=0.0, scale=1.0, size=(n_zero, 2))
    ones = rng.normal(loc=3.0, scale=1.0, size=(n_one, 2))
    df = pd.DataFrame(np.vstack([zeros, ones]), columns=["f1", "f2"])
    df["label"] = np.array([0] * n_zero + [1] * n_one).astype(label_dtype)
    return df


@pytest.fixture
def imbalanced_df() -> pd.DataFrame:
    """100 rows of label 0, 20 rows of label 1."""
    return make_imbalanced(100, 20)


@pytest.fixture
def correlated_df() -> pd.DataFrame:
    """
    Target 'y' with candidates A..D.

    |r| with y is about A=0.89, B=0.79, C=0.41, D=0.29; |r(A,B)| is about
    0.88 and every other pair stays under 0.4.
    """
    rng = np.random.default_rng(7)
    n = 5000
    z = rng.normal(size=(5, n))
    a = z[0] + 0.5 * z[1]
    b = a + 0.6 * z[2]
    c = 0.45 * z[0] + z[3]
    d = 0.3 * z[0] + z[4]
    return pd.DataFrame({"A": a, "B": b, "C": c, "D": d, "y": z[0]})
