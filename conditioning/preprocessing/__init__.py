"""
Preprocessing module for the conditioning pipeline.

Contains data loading, the feature-vector adapter, class balancing and
feature selection.
"""

from .base import BaseBalancer, BaseFeatureSelector, SelectionResult
from .data_loader import coerce_columns, count_rows, load_raw_data, load_sql_table, table_columns
from .feature_reduction import CorrelationFeatureSelector, NoOpSelector, PCAFeatureSelector
from .registry import (
    create_balancer,
    create_selector,
    list_balancers,
    list_selectors,
    register_balancer,
    register_selector,
)
from .resampling import NoOpBalancer, SmoteBalancer
from .vectors import assemble_features, from_vectors, has_feature_vector, to_vectors

__all__ = [
    'BaseBalancer',
    'BaseFeatureSelector',
    'SelectionResult',
    'coerce_columns',
    'count_rows',
    'load_raw_data',
    'load_sql_table',
    'table_columns',
    'CorrelationFeatureSelector',
    'NoOpSelector',
    'PCAFeatureSelector',
    'create_balancer',
    'create_selector',
    'list_balancers',
    'list_selectors',
    'register_balancer',
    'register_selector',
    'NoOpBalancer',
    'SmoteBalancer',
    'assemble_features',
    'from_vectors',
    'has_feature_vector',
    'to_vectors',
]
