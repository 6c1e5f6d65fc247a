"""
Class Balancing Module.

Implements SMOTE-style resampling for handling class imbalance: the
majority group is randomly undersampled and the minority group is topped
up with synthetic rows interpolated between k-nearest minority neighbors.
"""

import logging
import math
from typing import List, Sequence

import numpy as np
import pandas as pd

from ..config import SYNTHETIC_LABEL_MINORITY, BalancingConfig, BalancingMethod
from ..exceptions import ComputationError, ConfigurationError
from .base import BaseBalancer
from .vectors import from_vectors, to_vectors

logger = logging.getLogger(__name__)


class NoOpBalancer(BaseBalancer):
    """Returns the dataset unchanged."""

    name = "None"

    def balance(
        self,
        data: pd.DataFrame,
        feature_names: Sequence[str],
        config: BalancingConfig,
        target_field: str,
    ) -> pd.DataFrame:
        logger.info("No data balancing applied - returning original dataset")
        return data


class SmoteBalancer(BaseBalancer):
    """
    SMOTE oversampling combined with random majority undersampling.

    Steps:
    1. Split rows into the label == 1 group and everything else; the
       smaller group is the minority.
    2. Shuffle the majority indices with a seeded generator and keep the
       first floor(majority * undersampling_ratio).
    3. Generate floor(kept_majority * minority_to_majority_ratio) - minority
       synthetic rows (never negative) by interpolating each minority row
       towards one of its k nearest minority neighbors.

    All feature arithmetic is float32. A new generator is seeded on every
    call, so one instance can serve concurrent callers and identical inputs
    always produce identical output.
    """

    name = "SMOTE"

    def balance(
        self,
        data: pd.DataFrame,
        feature_names: Sequence[str],
        config: BalancingConfig,
        target_field: str,
    ) -> pd.DataFrame:
        """
        Balance classes with undersampling plus SMOTE oversampling.

        Args:
            data: Input dataset (not modified)
            feature_names: Ordered feature names of the vector column
            config: Balancing settings
            target_field: Label column

        Returns:
            Dataset ordered as kept majority rows, original minority rows,
            synthetic rows
        """
        violations = config.validate(BalancingMethod.SMOTE)
        if violations:
            raise ConfigurationError(violations)

        logger.info("Balancing dataset with SMOTE")

        X, y = to_vectors(data, feature_names, target_field)

        positive = pd.Series(y).eq(1).to_numpy(dtype=bool)
        minority_idx = np.flatnonzero(positive)
        majority_idx = np.flatnonzero(~positive)

        swapped = len(minority_idx) > len(majority_idx)
        if swapped:
            minority_idx, majority_idx = majority_idx, minority_idx

        logger.info(
            f"Original counts - Minority: {len(minority_idx):,}, "
            f"Majority: {len(majority_idx):,}"
        )

        rng = np.random.default_rng(config.random_seed)

        # Undersample majority
        undersampled_count = int(math.floor(len(majority_idx) * config.undersampling_ratio))
        shuffled = rng.permutation(len(majority_idx))
        kept_majority_idx = majority_idx[shuffled[:undersampled_count]]

        target_minority_count = int(
            math.floor(undersampled_count * config.minority_to_majority_ratio)
        )
        synthetic_count = max(0, target_minority_count - len(minority_idx))

        minority_X = X[minority_idx]
        synthetic_X = self._generate_synthetic_samples(
            minority_X, synthetic_count, config.k_neighbors, rng
        )

        minority_labels = y[minority_idx]
        synthetic_y = self._synthetic_labels(
            minority_labels, len(synthetic_X), y.dtype, config, swapped
        )

        X_balanced = np.vstack([X[kept_majority_idx], minority_X, synthetic_X])
        y_balanced = np.concatenate([y[kept_majority_idx], minority_labels, synthetic_y])

        logger.info(
            f"Final counts - Minority: {len(minority_idx) + len(synthetic_X):,}, "
            f"Majority: {len(kept_majority_idx):,} "
            f"({len(synthetic_X):,} synthetic)"
        )

        return from_vectors(X_balanced, y_balanced, feature_names, target_field)

    def _generate_synthetic_samples(
        self,
        minority: np.ndarray,
        synthetic_count: int,
        k: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """
        Interpolate synthetic rows between minority neighbors.

        Each minority row in turn contributes up to
        ceil(synthetic_count / n_minority) rows until the total is reached.
        """
        width = minority.shape[1]
        if synthetic_count <= 0:
            return np.empty((0, width), dtype=np.float32)

        if len(minority) < 2:
            raise ComputationError(
                f"SMOTE needs at least two minority rows to interpolate, got {len(minority)}"
            )

        samples_per_instance = int(math.ceil(synthetic_count / len(minority)))
        synthetic: List[np.ndarray] = []

        for i in range(len(minority)):
            if len(synthetic) >= synthetic_count:
                break

            neighbors = self._nearest_neighbors(minority, i, k)

            for _ in range(samples_per_instance):
                if len(synthetic) >= synthetic_count:
                    break
                neighbor = neighbors[rng.integers(len(neighbors))]
                synthetic.append(self._interpolate(minority[i], minority[neighbor], rng))

        return np.vstack(synthetic).astype(np.float32)

    @staticmethod
    def _nearest_neighbors(samples: np.ndarray, index: int, k: int) -> np.ndarray:
        """Indices of the k closest other rows, nearest first (ties keep row order)."""
        diff = samples - samples[index]
        distances = np.sqrt(np.sum(diff * diff, axis=1, dtype=np.float32))

        others = np.delete(np.arange(len(samples)), index)
        order = np.argsort(distances[others], kind='stable')
        return others[order][:k]

    @staticmethod
    def _interpolate(a: np.ndarray, b: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        ratio = np.float32(rng.random())
        return a + ratio * (b - a)

    @staticmethod
    def _synthetic_labels(
        minority_labels: np.ndarray,
        count: int,
        dtype: np.dtype,
        config: BalancingConfig,
        swapped: bool,
    ) -> np.ndarray:
        """Labels for synthetic rows according to the configured policy."""
        if count == 0:
            return np.empty(0, dtype=dtype)

        if config.synthetic_label == SYNTHETIC_LABEL_MINORITY:
            label = pd.Series(minority_labels).mode().iloc[0]
            return np.full(count, label, dtype=dtype)

        if swapped:
            logger.warning(
                "Minority group is not the label == 1 group, but synthetic rows "
                "are labeled 1 (synthetic_label='positive')"
            )
        return np.full(count, 1, dtype=dtype)
