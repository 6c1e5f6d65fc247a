"""
Feature-Vector Adapter.

Converts between a named-column DataFrame and the (feature matrix, labels)
form the balancing and selection stages compute on. An assembled vector
lives in the 'Features' column as one float32 array per row.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import FEATURES_COLUMN
from ..exceptions import ColumnNotFoundError, ComputationError, UnsupportedTypeError

logger = logging.getLogger(__name__)


def has_feature_vector(df: pd.DataFrame) -> bool:
    """Return True if the dataset already carries an assembled vector column."""
    return FEATURES_COLUMN in df.columns


def require_columns(df: pd.DataFrame, columns: Sequence[str]) -> None:
    """Raise ColumnNotFoundError for the first name missing from ``df``."""
    for col in columns:
        if col not in df.columns:
            raise ColumnNotFoundError(col, df.columns)


def numeric_column(df: pd.DataFrame, name: str) -> np.ndarray:
    """
    Extract one column as float64, coercing booleans to 0.0/1.0.

    Args:
        df: Input DataFrame
        name: Column to extract

    Returns:
        1-D float64 array
    """
    if name not in df.columns:
        raise ColumnNotFoundError(name, df.columns)

    series = df[name]
    if pd.api.types.is_bool_dtype(series.dtype):
        return series.astype('float64').to_numpy()
    if pd.api.types.is_numeric_dtype(series.dtype):
        return series.to_numpy(dtype='float64')
    raise UnsupportedTypeError(name, series.dtype)


def feature_matrix(df: pd.DataFrame, feature_names: Sequence[str]) -> np.ndarray:
    """Stack named columns into an [n_rows, n_features] float32 matrix."""
    require_columns(df, feature_names)
    if not feature_names:
        return np.empty((len(df), 0), dtype=np.float32)
    columns = [numeric_column(df, name) for name in feature_names]
    return np.column_stack(columns).astype(np.float32)


def vector_column(X: np.ndarray, index: pd.Index) -> pd.Series:
    """Wrap matrix rows as a 1-D object Series of float32 arrays."""
    cells = np.empty(X.shape[0], dtype=object)
    for i, row in enumerate(X):
        cells[i] = row
    return pd.Series(cells, index=index, name=FEATURES_COLUMN)


def assemble_features(df: pd.DataFrame, feature_names: Sequence[str]) -> pd.DataFrame:
    """
    Build the 'Features' column from named columns.

    Args:
        df: Input DataFrame (not modified)
        feature_names: Ordered columns to concatenate

    Returns:
        Copy of ``df`` with a 'Features' column
    """
    matrix = feature_matrix(df, feature_names)
    df = df.copy()
    df[FEATURES_COLUMN] = vector_column(matrix, df.index)
    logger.debug(f"Assembled {FEATURES_COLUMN} from {len(feature_names)} columns")
    return df


def to_vectors(
    df: pd.DataFrame,
    feature_names: Sequence[str],
    target_field: str,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert a dataset into (feature matrix, labels).

    Uses the assembled 'Features' column when present, otherwise the named
    feature columns.

    Args:
        df: Input DataFrame
        feature_names: Ordered feature columns
        target_field: Label column

    Returns:
        Tuple of (X float32 [n, width], y with the label column's dtype)
    """
    if target_field not in df.columns:
        raise ColumnNotFoundError(target_field, df.columns)

    if has_feature_vector(df):
        if len(df) == 0:
            X = np.empty((0, len(feature_names)), dtype=np.float32)
        else:
            rows = [np.asarray(v, dtype=np.float32) for v in df[FEATURES_COLUMN]]
            widths = {len(r) for r in rows}
            if len(widths) != 1:
                raise ComputationError(
                    f"{FEATURES_COLUMN} vectors have unequal lengths: {sorted(widths)}"
                )
            X = np.vstack(rows)
    else:
        X = feature_matrix(df, feature_names)

    y = df[target_field].to_numpy()
    return X, y


def from_vectors(
    X: np.ndarray,
    y: np.ndarray,
    feature_names: Sequence[str],
    target_field: str,
) -> pd.DataFrame:
    """
    Rebuild a dataset from (feature matrix, labels).

    Args:
        X: Feature matrix [n_rows, n_features]
        y: Labels [n_rows]
        feature_names: Names for the matrix columns, in order
        target_field: Label column name

    Returns:
        DataFrame with named feature columns, the target and 'Features'
    """
    X = np.asarray(X, dtype=np.float32)
    if X.ndim != 2 or X.shape[1] != len(feature_names):
        raise ComputationError(
            f"Feature matrix width {X.shape[-1] if X.ndim else 0} does not match "
            f"{len(feature_names)} feature names"
        )
    if len(y) != X.shape[0]:
        raise ComputationError(
            f"Label count {len(y)} does not match row count {X.shape[0]}"
        )

    df = pd.DataFrame(X, columns=list(feature_names))
    df[target_field] = y
    df[FEATURES_COLUMN] = vector_column(X, df.index)
    return df


def feature_names_without_target(
    candidate_feature_names: Sequence[str],
    target_field: str,
) -> List[str]:
    """Candidate names with the target removed, order preserved."""
    return [f for f in candidate_feature_names if f != target_field]
