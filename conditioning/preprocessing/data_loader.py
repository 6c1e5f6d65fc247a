"""
Data Loading Module.

Functions for loading the raw dataset the conditioning pipeline starts
from, either a CSV file or a table in a SQLite database. Feature columns
are read as float32; the target is typed by model kind.
"""

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..config import ModelKind
from ..exceptions import ColumnNotFoundError, TableNotFoundError, UnsupportedTypeError

logger = logging.getLogger(__name__)


def target_dtype(model_kind: ModelKind) -> str:
    """Storage type of the target column for a model kind."""
    if model_kind == ModelKind.REGRESSION:
        return 'float32'
    return 'int64'


def coerce_columns(
    df: pd.DataFrame,
    feature_columns: Sequence[str],
    target_column: str,
    model_kind: ModelKind,
) -> pd.DataFrame:
    """
    Convert feature columns to float32 and the target to its model type.

    Args:
        df: Input DataFrame
        feature_columns: Columns used as features
        target_column: Label column
        model_kind: Decides the target type

    Returns:
        DataFrame with converted types
    """
    df = df.copy()

    for col in list(feature_columns) + [target_column]:
        if col not in df.columns:
            raise ColumnNotFoundError(col, df.columns)

    for col in feature_columns:
        try:
            df[col] = df[col].astype(np.float32)
        except (TypeError, ValueError):
            raise UnsupportedTypeError(col, df[col].dtype) from None

    try:
        df[target_column] = df[target_column].astype(target_dtype(model_kind))
    except (TypeError, ValueError):
        raise UnsupportedTypeError(target_column, df[target_column].dtype) from None

    logger.info("Column types converted")
    return df


def load_raw_data(
    path: Union[str, Path],
    feature_columns: Optional[Sequence[str]] = None,
    target_column: Optional[str] = None,
    model_kind: ModelKind = ModelKind.BINARY_CLASSIFICATION,
    drop_duplicates: bool = False,
) -> pd.DataFrame:
    """
    Load a CSV dataset.

    Args:
        path: Path to CSV file
        feature_columns: Feature columns to keep (default: all but target)
        target_column: Label column; when given, types are converted
        model_kind: Decides the target type
        drop_duplicates: Whether to drop duplicate rows

    Returns:
        Loaded DataFrame
    """
    logger.info(f"Loading data from {path}")

    df = pd.read_csv(path, low_memory=False)
    logger.info(f"Loaded {len(df):,} rows, {len(df.columns)} columns")

    if drop_duplicates:
        initial_len = len(df)
        df = df.drop_duplicates().reset_index(drop=True)
        if len(df) < initial_len:
            logger.info(f"Removed {initial_len - len(df):,} duplicate rows")

    if target_column is None:
        return df

    if feature_columns is None:
        feature_columns = [c for c in df.columns if c != target_column]

    df = coerce_columns(df, feature_columns, target_column, model_kind)
    return df[list(feature_columns) + [target_column]]


def _split_table(table_name: str) -> Tuple[Optional[str], str]:
    """Split 'schema.table' into (schema, table); schema is None when absent."""
    schema, _, table = table_name.rpartition(".")
    return (schema or None), table


def _quote_table(table_name: str) -> str:
    """Quote a possibly schema-qualified table name."""
    schema, table = _split_table(table_name)
    return f'"{schema}"."{table}"' if schema else f'"{table}"'


def table_columns(con: sqlite3.Connection, table_name: str) -> List[str]:
    """Column names of a table, raising TableNotFoundError when it is absent."""
    schema, table = _split_table(table_name)
    prefix = f'"{schema}".' if schema else ""
    columns = [row[1] for row in con.execute(f'PRAGMA {prefix}table_info("{table}")')]
    if not columns:
        raise TableNotFoundError(table_name)
    return columns


def _where_clause(where: Optional[str]) -> str:
    return f" WHERE {where}" if where and where.strip() else ""


def count_rows(
    con: sqlite3.Connection,
    table_name: str,
    where: Optional[str] = None,
) -> int:
    """Number of rows the given filter selects."""
    sql = f"SELECT COUNT(*) FROM {_quote_table(table_name)}{_where_clause(where)}"
    return int(con.execute(sql).fetchone()[0])


def load_sql_table(
    db_path: Union[str, Path],
    table_name: str,
    feature_columns: Sequence[str],
    target_column: str,
    model_kind: ModelKind = ModelKind.BINARY_CLASSIFICATION,
    where: Optional[str] = None,
) -> Tuple[pd.DataFrame, int]:
    """
    Load feature and target columns from a SQLite table.

    Args:
        db_path: SQLite database file
        table_name: Source table
        feature_columns: Feature columns to select
        target_column: Label column
        model_kind: Decides the target type
        where: Optional SQL filter (without the WHERE keyword)

    Returns:
        Tuple of (DataFrame, row count reported by the database)
    """
    logger.info(f"Loading data from {db_path}:{table_name}")

    columns: List[str] = list(feature_columns) + [target_column]
    select_list = ", ".join(f'"{c}"' for c in columns)
    sql = f"SELECT {select_list} FROM {_quote_table(table_name)}{_where_clause(where)}"

    con = sqlite3.connect(str(db_path))
    try:
        existing = table_columns(con, table_name)
        for col in columns:
            if col not in existing:
                raise ColumnNotFoundError(col, existing)

        row_count = count_rows(con, table_name, where)
        df = pd.read_sql_query(sql, con)
    finally:
        con.close()

    logger.info(f"Loaded {len(df):,} rows ({row_count:,} reported)")

    df = coerce_columns(df, feature_columns, target_column, model_kind)
    return df, row_count
