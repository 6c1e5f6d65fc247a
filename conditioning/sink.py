"""
Conditioned Data Sink.

Persists the conditioned dataset into a SQLite table. The table is
recreated on every write; columns are the features in final selection
order followed by the target.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Sequence, Union

import numpy as np
import pandas as pd

from .config import SINK_BATCH_SIZE, ModelKind
from .preprocessing.data_loader import target_dtype
from .preprocessing.vectors import has_feature_vector, to_vectors

logger = logging.getLogger(__name__)


def output_frame(
    data: pd.DataFrame,
    feature_names: Sequence[str],
    target_field: str,
    model_kind: ModelKind,
) -> pd.DataFrame:
    """
    Lay out the rows to persist.

    Named feature columns are used when present, otherwise they are
    expanded from the 'Features' vector column.
    """
    names = list(feature_names)
    if has_feature_vector(data) and not all(n in data.columns for n in names):
        X, y = to_vectors(data, names, target_field)
        frame = pd.DataFrame(X, columns=names)
        frame[target_field] = y
    else:
        frame = data[names + [target_field]].copy()
        frame[names] = frame[names].astype(np.float32)

    frame[target_field] = frame[target_field].astype(target_dtype(model_kind))
    return frame[names + [target_field]]


class SqliteSink:
    """Writes conditioned datasets to a SQLite database."""

    def __init__(self, db_path: Union[str, Path], batch_size: int = SINK_BATCH_SIZE):
        self.db_path = str(db_path)
        self.batch_size = batch_size

    def write(
        self,
        table_name: str,
        data: pd.DataFrame,
        feature_names: Sequence[str],
        target_field: str,
        model_kind: ModelKind,
    ) -> int:
        """
        Replace ``table_name`` with the conditioned rows.

        Returns:
            Number of rows written
        """
        if not table_name or not table_name.strip():
            raise ValueError("Table name must be provided")

        frame = output_frame(data, feature_names, target_field, model_kind)

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        con = sqlite3.connect(self.db_path)
        try:
            frame.to_sql(
                table_name,
                con,
                if_exists='replace',
                index=False,
                chunksize=self.batch_size,
            )
            con.commit()
        finally:
            con.close()

        logger.info(f"Wrote {len(frame):,} rows to {self.db_path}:{table_name}")
        return len(frame)
