"""
Stage Interfaces.

Defines the contracts every balancer and feature selector implements,
plus the result value a selector hands back to the pipeline.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence, Tuple

import pandas as pd

from ..config import BalancingConfig, SelectionConfig


@dataclass(frozen=True)
class SelectionResult:
    """
    Output of one feature-selection call.

    Attributes:
        data: Transformed dataset with the 'Features' column rebuilt
        feature_names: Output feature names, in vector order
        report: Human-readable selection report
    """

    data: pd.DataFrame
    feature_names: Tuple[str, ...]
    report: str


class BaseBalancer(ABC):
    """
    Abstract base class for class-balancing variants.

    Balancers change row composition only; feature names pass through.
    """

    name: str = "BaseBalancer"

    @abstractmethod
    def balance(
        self,
        data: pd.DataFrame,
        feature_names: Sequence[str],
        config: BalancingConfig,
        target_field: str,
    ) -> pd.DataFrame:
        """
        Rebalance class counts.

        Args:
            data: Input dataset (not modified)
            feature_names: Ordered feature names of the vector column
            config: Balancing settings
            target_field: Label column

        Returns:
            New dataset
        """
        pass


class BaseFeatureSelector(ABC):
    """
    Abstract base class for feature-selection variants.

    Selectors may narrow, reorder or replace the feature set.
    """

    name: str = "BaseFeatureSelector"

    @abstractmethod
    def select(
        self,
        data: pd.DataFrame,
        candidate_features: Sequence[str],
        target_field: str,
        config: SelectionConfig,
    ) -> SelectionResult:
        """
        Select or transform features.

        Args:
            data: Input dataset (not modified)
            candidate_features: Ordered candidate feature columns
            target_field: Label column
            config: Selection settings

        Returns:
            SelectionResult with the new dataset, names and report
        """
        pass
