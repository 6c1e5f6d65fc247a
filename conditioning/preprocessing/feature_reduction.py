"""
Feature Reduction Module.

Implements the feature-selection variants run by the conditioning pipeline:

- No selection: keep every candidate
- Correlation: rank by |Pearson r| with the target, greedily accept while
  pruning features too correlated with one already accepted
- PCA: min-max normalize, then project onto principal components
"""

import logging
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import MinMaxScaler

from ..config import (
    COMPONENT_PREFIX,
    DEFAULT_PCA_COMPONENTS,
    RANDOM_SEED,
    SelectionConfig,
    SelectionMethod,
    is_integer,
)
from ..exceptions import ComputationError, ConfigurationError
from . import reporting
from .base import BaseFeatureSelector, SelectionResult
from .vectors import (
    assemble_features,
    feature_matrix,
    from_vectors,
    has_feature_vector,
    numeric_column,
    require_columns,
)

logger = logging.getLogger(__name__)


class NoOpSelector(BaseFeatureSelector):
    """Keeps every candidate feature in its original order."""

    name = "None"

    def select(
        self,
        data: pd.DataFrame,
        candidate_features: Sequence[str],
        target_field: str,
        config: SelectionConfig,
    ) -> SelectionResult:
        features = tuple(candidate_features)

        lines = reporting.header("No")
        lines.append(f"Using all enabled features: {len(features)}")
        lines.extend(f"- {feature}" for feature in features)
        lines.extend(reporting.selection_summary(len(features), features))

        if not has_feature_vector(data):
            data = assemble_features(data, features)

        return SelectionResult(data, features, reporting.render(lines))


class CorrelationFeatureSelector(BaseFeatureSelector):
    """
    Correlation-based feature selection with multicollinearity pruning.

    Candidates are ranked by absolute Pearson correlation with the target
    (stable, so ties keep candidate order). Walking that ranking, a
    candidate is accepted unless its |r| with any accepted feature exceeds
    the multicollinearity threshold; the walk stops once max_features are
    accepted. The candidate-by-candidate matrix is computed once up front.
    """

    name = "Correlation"

    def select(
        self,
        data: pd.DataFrame,
        candidate_features: Sequence[str],
        target_field: str,
        config: SelectionConfig,
    ) -> SelectionResult:
        """
        Select features by target correlation.

        Args:
            data: Input dataset (not modified)
            candidate_features: Ordered candidate feature columns
            target_field: Label column (numeric or boolean)
            config: Selection settings (max_features, threshold)

        Returns:
            SelectionResult whose names follow acceptance order
        """
        violations = config.validate(SelectionMethod.CORRELATION)
        if violations:
            raise ConfigurationError(violations)

        candidates = [f for f in candidate_features if f != target_field]
        if not candidates:
            raise ComputationError("No candidate features to select from")

        target_corr, pairwise = self._correlations(data, candidates, target_field)

        lines = reporting.header("Correlation-based")

        # Stable sort keeps candidate order among equal correlations
        ranked = sorted(candidates, key=lambda f: -target_corr[f])

        lines.append("")
        lines.append("Features Ranked by Target Correlation:")
        lines.extend(reporting.ranking_line(f, target_corr[f]) for f in ranked)

        selected: List[str] = []
        pruned: Dict[str, str] = {}
        threshold = config.multicollinearity_threshold

        for feature in ranked:
            if len(selected) >= config.max_features:
                break

            conflict = next(
                (s for s in selected if pairwise.at[feature, s] > threshold),
                None,
            )
            if conflict is not None:
                pruned[feature] = conflict
                logger.debug(
                    f"Pruned {feature}: |r|={pairwise.at[feature, conflict]:.3f} "
                    f"with {conflict}"
                )
                continue

            selected.append(feature)

        if not selected:
            selected = [ranked[0]]
            logger.warning(f"No feature passed selection, falling back to {ranked[0]}")

        if pruned:
            lines.append("")
            lines.append("Removed for Multicollinearity:")
            for feature, conflict in pruned.items():
                lines.append(
                    f"- {feature} (|r| = {pairwise.at[feature, conflict]:.4f} with {conflict})"
                )

        lines.extend(reporting.selection_summary(
            len(candidates),
            selected,
            values=target_corr,
            settings=[f"Multicollinearity threshold: {threshold}"],
        ))

        logger.info(
            f"Correlation selection: {len(candidates)} → {len(selected)} features "
            f"({len(pruned)} pruned)"
        )

        output = data[selected + [target_field]]
        output = assemble_features(output, selected)
        return SelectionResult(output, tuple(selected), reporting.render(lines))

    def _correlations(
        self,
        data: pd.DataFrame,
        candidates: List[str],
        target_field: str,
    ):
        """
        Compute |r| of each candidate with the target and among candidates.

        Returns:
            Tuple of (target correlation Series, pairwise |r| DataFrame)
        """
        require_columns(data, candidates + [target_field])

        if len(data) < 2:
            raise ComputationError(
                f"Correlation needs at least two rows, got {len(data)}"
            )

        frame = pd.DataFrame(
            {name: numeric_column(data, name) for name in candidates}
        )
        target = numeric_column(data, target_field)
        if np.all(target == target[0]):
            raise ComputationError(
                f"Target '{target_field}' has zero variance; correlation is undefined"
            )
        frame[target_field] = target

        corr = frame.corr(method='pearson').abs()

        constant = [c for c in candidates if frame[c].nunique(dropna=False) <= 1]
        if constant:
            logger.warning(f"Constant features treated as uncorrelated: {constant}")

        target_corr = corr[target_field].loc[candidates].fillna(0.0)
        pairwise = corr.loc[candidates, candidates].fillna(0.0)
        return target_corr, pairwise


class PCAFeatureSelector(BaseFeatureSelector):
    """
    Principal component projection.

    Candidates are min-max normalized, then projected onto
    number_of_components components named Component_1..Component_n. An
    out-of-range component count is replaced with min(candidates, 3) and
    noted in the report.
    """

    name = "PCA"

    def select(
        self,
        data: pd.DataFrame,
        candidate_features: Sequence[str],
        target_field: str,
        config: SelectionConfig,
    ) -> SelectionResult:
        candidates = [f for f in candidate_features if f != target_field]
        if not candidates:
            raise ComputationError("No candidate features to project")

        lines = reporting.header("PCA")

        n_components = config.number_of_components
        if not is_integer(n_components) or not 0 < n_components <= len(candidates):
            clamped = min(len(candidates), DEFAULT_PCA_COMPONENTS)
            lines.append(
                f"Warning: Invalid number of components ({n_components}). "
                f"Using {clamped} instead."
            )
            logger.warning(
                f"Invalid number of components ({n_components}), using {clamped}"
            )
            n_components = clamped
        n_components = int(n_components)

        if len(data) < n_components:
            raise ComputationError(
                f"PCA with {n_components} components needs at least "
                f"{n_components} rows, got {len(data)}"
            )

        lines.append(f"Applying PCA with {n_components} components")
        lines.append(f"Original feature count: {len(candidates)}")

        require_columns(data, [target_field])
        X = feature_matrix(data, candidates).astype(np.float64)

        X_normalized = MinMaxScaler().fit_transform(X)
        pca = PCA(n_components=n_components, random_state=RANDOM_SEED)
        components = pca.fit_transform(X_normalized)

        names = tuple(f"{COMPONENT_PREFIX}{i}" for i in range(1, n_components + 1))

        lines.append("")
        lines.append("Explained Variance Ratio:")
        lines.extend(
            reporting.ranking_line(name, ratio)
            for name, ratio in zip(names, pca.explained_variance_ratio_)
        )
        lines.extend(reporting.selection_summary(len(candidates), names))

        logger.info(
            f"PCA: {len(candidates)} features → {n_components} components "
            f"({pca.explained_variance_ratio_.sum():.2%} variance explained)"
        )

        output = from_vectors(
            components, data[target_field].to_numpy(), names, target_field
        )
        return SelectionResult(output, names, reporting.render(lines))
