"""
Data conditioning for predictive modeling.

Balances classes and selects features on a tabular dataset before it is
handed to model training.
"""

from .config import (
    BalancingConfig,
    BalancingMethod,
    ModelKind,
    SelectionConfig,
    SelectionMethod,
    load_config,
)
from .exceptions import (
    ColumnNotFoundError,
    ComputationError,
    ConditioningError,
    ConfigurationError,
    TableNotFoundError,
    UnsupportedTypeError,
)
from .pipeline import DataConditioningPipeline, ProcessedDataset
from .sink import SqliteSink

__version__ = '0.1.0'

__all__ = [
    'BalancingConfig',
    'BalancingMethod',
    'ModelKind',
    'SelectionConfig',
    'SelectionMethod',
    'load_config',
    'ColumnNotFoundError',
    'ComputationError',
    'ConditioningError',
    'ConfigurationError',
    'TableNotFoundError',
    'UnsupportedTypeError',
    'DataConditioningPipeline',
    'ProcessedDataset',
    'SqliteSink',
]
