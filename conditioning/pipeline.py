"""
Data Conditioning Pipeline.

Main orchestrator that prepares a tabular dataset for model training.
Runs class balancing and feature selection in the configured order,
assembles the run summary and optionally persists the result.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import pandas as pd

from .config import (
    BalancingConfig,
    BalancingMethod,
    ModelKind,
    SelectionConfig,
    SelectionMethod,
)
from .exceptions import ConfigurationError
from .preprocessing.registry import create_balancer, create_selector, registry_violations
from .preprocessing.vectors import (
    assemble_features,
    feature_names_without_target,
    has_feature_vector,
)
from .sink import SqliteSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessedDataset:
    """
    Result of one conditioning run.

    Attributes:
        data: Conditioned dataset with the 'Features' column
        feature_names: Final feature names, in vector order
        original_row_count: Rows before any stage ran
        balanced_row_count: Rows after balancing (original when skipped)
        selection_report: Text report from the selection stage
        balancing_method: Balancing variant that was configured
        selection_method: Selection variant that was configured
        balancing_execution_order: Configured balancing order
        selection_execution_order: Configured selection order
    """

    data: pd.DataFrame
    feature_names: Tuple[str, ...]
    original_row_count: int
    balanced_row_count: int
    selection_report: str
    balancing_method: BalancingMethod
    selection_method: SelectionMethod
    balancing_execution_order: int
    selection_execution_order: int

    @property
    def balancing_first(self) -> bool:
        return self.balancing_execution_order <= self.selection_execution_order

    @property
    def row_count(self) -> int:
        return len(self.data)


class DataConditioningPipeline:
    """
    Orchestrates balancing and feature selection.

    Workflow:
    1. Validate both configs (every violation reported at once)
    2. Drop the target from the candidates, assemble 'Features' if absent
    3. Balancing first iff its execution order <= selection's
    4. Run each stage that is not 'None', threading dataset and names
    5. Write to the sink when one is configured (failures are logged only)

    Attributes:
        sink: Optional destination for the conditioned rows
        output_table: Table name the sink writes to
        model_kind: Passed to the sink for target typing
    """

    def __init__(
        self,
        sink: Optional[SqliteSink] = None,
        output_table: Optional[str] = None,
        model_kind: ModelKind = ModelKind.BINARY_CLASSIFICATION,
    ):
        self.sink = sink
        self.output_table = output_table
        self.model_kind = model_kind

    @staticmethod
    def validate(
        balancing_config: BalancingConfig,
        selection_config: SelectionConfig,
    ) -> None:
        """Raise ConfigurationError listing every problem in both configs."""
        violations = (
            balancing_config.validate()
            + selection_config.validate()
            + registry_violations(balancing_config.method, selection_config.method)
        )
        if violations:
            raise ConfigurationError(violations)

    def condition(
        self,
        dataset: pd.DataFrame,
        candidate_feature_names: Sequence[str],
        target_field: str,
        balancing_config: BalancingConfig,
        selection_config: SelectionConfig,
    ) -> ProcessedDataset:
        """
        Condition a dataset for training.

        Args:
            dataset: Raw dataset (not modified)
            candidate_feature_names: Enabled fields; the target is dropped
            target_field: Label column
            balancing_config: Balancing settings
            selection_config: Selection settings

        Returns:
            ProcessedDataset
        """
        self.validate(balancing_config, selection_config)

        logger.info("=" * 60)
        logger.info("Processing Data")
        logger.info("=" * 60)

        features = list(dict.fromkeys(
            feature_names_without_target(candidate_feature_names, target_field)
        ))
        data = dataset
        original_count = len(dataset)
        balanced_count = original_count
        selection_report = ""

        if not has_feature_vector(data):
            data = assemble_features(data, features)

        balance_enabled = balancing_config.method != BalancingMethod.NONE
        select_enabled = selection_config.method != SelectionMethod.NONE
        balancing_first = balancing_config.execution_order <= selection_config.execution_order

        if balance_enabled and select_enabled:
            logger.info(
                "Processing order: " + (
                    "Data Balancing then Feature Selection" if balancing_first
                    else "Feature Selection then Data Balancing"
                )
            )

        stages = ['balancing', 'selection'] if balancing_first else ['selection', 'balancing']

        for stage in stages:
            if stage == 'balancing' and balance_enabled:
                data = self._run_balancing(data, features, balancing_config, target_field)
                balanced_count = len(data)
            elif stage == 'selection' and select_enabled:
                data, features, selection_report = self._run_selection(
                    data, features, selection_config, target_field
                )

        if self.sink is not None and self.output_table:
            try:
                self.sink.write(
                    self.output_table,
                    data,
                    features,
                    target_field,
                    self.model_kind,
                )
                logger.info(f"Processed data saved to: {self.output_table}")
            except Exception as e:
                logger.error(f"Error saving processed data: {e}")

        return ProcessedDataset(
            data=data,
            feature_names=tuple(features),
            original_row_count=original_count,
            balanced_row_count=balanced_count,
            selection_report=selection_report,
            balancing_method=balancing_config.method,
            selection_method=selection_config.method,
            balancing_execution_order=balancing_config.execution_order,
            selection_execution_order=selection_config.execution_order,
        )

    async def condition_async(
        self,
        dataset: pd.DataFrame,
        candidate_feature_names: Sequence[str],
        target_field: str,
        balancing_config: BalancingConfig,
        selection_config: SelectionConfig,
    ) -> ProcessedDataset:
        """Run ``condition`` in a worker thread so the event loop stays free."""
        return await asyncio.to_thread(
            self.condition,
            dataset,
            candidate_feature_names,
            target_field,
            balancing_config,
            selection_config,
        )

    def _run_balancing(
        self,
        data: pd.DataFrame,
        features: Sequence[str],
        config: BalancingConfig,
        target_field: str,
    ) -> pd.DataFrame:
        balancer = create_balancer(config.method)
        balanced = balancer.balance(data, features, config, target_field)
        logger.info(f"Data balanced. New count: {len(balanced):,}")
        return balanced

    def _run_selection(
        self,
        data: pd.DataFrame,
        features: Sequence[str],
        config: SelectionConfig,
        target_field: str,
    ):
        selector = create_selector(config.method)
        result = selector.select(data, features, target_field, config)
        logger.info(result.report)
        return result.data, list(result.feature_names), result.report
