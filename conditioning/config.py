"""
Data Conditioning Configuration.

Global constants, logging setup and the balancing/selection configuration
objects consumed by the conditioning pipeline.

Configs are plain frozen dataclasses. Validation never raises on its own:
``validate()`` returns every violation found so callers can report them
together, and the stages turn a non-empty list into a ConfigurationError.
"""

import json
import numbers
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# =============================================================================
# RANDOM SEED (Global reproducibility)
# =============================================================================

RANDOM_SEED = 42


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger('conditioning')


# =============================================================================
# COLUMN CONFIGURATION
# =============================================================================

# Assembled feature-vector column
FEATURES_COLUMN = 'Features'

# Output names of projected components: Component_1, Component_2, ...
COMPONENT_PREFIX = 'Component_'

# Fallback component count when the configured one is out of range
DEFAULT_PCA_COMPONENTS = 3

# Rows per insert batch when writing to the sink
SINK_BATCH_SIZE = 1000


# =============================================================================
# METHOD TAGS
# =============================================================================

class BalancingMethod(str, Enum):
    NONE = 'None'
    SMOTE = 'SMOTE'


class SelectionMethod(str, Enum):
    NONE = 'None'
    CORRELATION = 'Correlation'
    PCA = 'PCA'


class ModelKind(str, Enum):
    BINARY_CLASSIFICATION = 'BinaryClassification'
    MULTICLASS_CLASSIFICATION = 'MultiClassClassification'
    REGRESSION = 'Regression'


# Labels given to synthetic SMOTE rows
SYNTHETIC_LABEL_POSITIVE = 'positive'
SYNTHETIC_LABEL_MINORITY = 'minority'


# =============================================================================
# DEFAULTS
# =============================================================================

CONFIG: Dict[str, Any] = {
    # Reproducibility
    'random_seed': RANDOM_SEED,

    # Data balancing
    'balancing_method': BalancingMethod.NONE,
    'undersampling_ratio': 1.0,
    'minority_to_majority_ratio': 1.0,
    'k_neighbors': 5,
    'synthetic_label': SYNTHETIC_LABEL_POSITIVE,
    'balancing_execution_order': 1,

    # Feature selection
    'selection_method': SelectionMethod.NONE,
    'max_features': 10,
    'multicollinearity_threshold': 0.8,
    'number_of_components': DEFAULT_PCA_COMPONENTS,
    'selection_execution_order': 2,

    # Model
    'model_kind': ModelKind.BINARY_CLASSIFICATION,
}


def is_integer(value: Any) -> bool:
    """True for int-like values (numpy integers included), never for bools."""
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _as_int(value: Any) -> Any:
    """Turn integral floats from JSON (e.g. 5.0) into ints; leave the rest as-is."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _pick(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in ``d`` (camelCase or snake_case)."""
    for key in keys:
        if key in d and d[key] is not None:
            return d[key]
    return default


# =============================================================================
# STAGE CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class BalancingConfig:
    """
    Settings for the class-balancing stage.

    Attributes:
        method: Balancing variant to run
        undersampling_ratio: Share of the majority group kept, in (0, 1]
        minority_to_majority_ratio: Target minority size relative to the
            undersampled majority, in (0, 1]
        k_neighbors: Neighbors considered per minority row (>= 1)
        execution_order: Runs before selection when <= its order
        random_seed: Seed for the shuffle and interpolation draws
        synthetic_label: 'positive' labels synthetic rows 1,
            'minority' labels them with the minority group's label
    """

    method: BalancingMethod = CONFIG['balancing_method']
    undersampling_ratio: float = CONFIG['undersampling_ratio']
    minority_to_majority_ratio: float = CONFIG['minority_to_majority_ratio']
    k_neighbors: int = CONFIG['k_neighbors']
    execution_order: int = CONFIG['balancing_execution_order']
    random_seed: int = RANDOM_SEED
    synthetic_label: str = CONFIG['synthetic_label']

    def validate(self, method: Optional[BalancingMethod] = None) -> List[str]:
        """
        Return every violation of this config (empty when valid).

        Args:
            method: Check the fields of this method instead of self.method
        """
        method = self.method if method is None else method
        violations = []

        if not isinstance(self.method, BalancingMethod):
            violations.append(f"Unsupported balancing method: {self.method!r}")
        if not is_integer(self.execution_order):
            violations.append(
                f"Balancing execution order must be an integer, got {self.execution_order!r}"
            )

        if method == BalancingMethod.SMOTE:
            if not 0 < self.undersampling_ratio <= 1:
                violations.append(
                    f"Undersampling ratio must be in (0, 1], got {self.undersampling_ratio}"
                )
            if not 0 < self.minority_to_majority_ratio <= 1:
                violations.append(
                    "Minority to majority ratio must be in (0, 1], "
                    f"got {self.minority_to_majority_ratio}"
                )
            if not is_integer(self.k_neighbors) or self.k_neighbors < 1:
                violations.append(
                    f"K neighbors must be an integer of at least 1, got {self.k_neighbors!r}"
                )
            if self.synthetic_label not in (SYNTHETIC_LABEL_POSITIVE, SYNTHETIC_LABEL_MINORITY):
                violations.append(
                    f"Synthetic label policy must be 'positive' or 'minority', "
                    f"got {self.synthetic_label!r}"
                )

        return violations

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> 'BalancingConfig':
        return BalancingConfig(
            method=_parse_enum(BalancingMethod, _pick(d, 'method', default=BalancingMethod.NONE)),
            undersampling_ratio=float(_pick(
                d, 'undersamplingRatio', 'undersampling_ratio',
                default=CONFIG['undersampling_ratio'],
            )),
            minority_to_majority_ratio=float(_pick(
                d, 'minorityToMajorityRatio', 'minority_to_majority_ratio',
                default=CONFIG['minority_to_majority_ratio'],
            )),
            k_neighbors=_as_int(
                _pick(d, 'kNeighbors', 'k_neighbors', default=CONFIG['k_neighbors'])
            ),
            execution_order=_as_int(_pick(
                d, 'executionOrder', 'execution_order',
                default=CONFIG['balancing_execution_order'],
            )),
            random_seed=_pick(d, 'randomSeed', 'random_seed', default=RANDOM_SEED),
            synthetic_label=_pick(
                d, 'syntheticLabel', 'synthetic_label', default=CONFIG['synthetic_label'],
            ),
        )


@dataclass(frozen=True)
class SelectionConfig:
    """
    Settings for the feature-selection stage.

    Attributes:
        method: Selection variant to run
        max_features: Upper bound on correlation-selected features
        multicollinearity_threshold: Pairwise |r| above which a candidate
            is pruned, in (0, 1)
        number_of_components: PCA output width (clamped when out of range)
        execution_order: Runs before balancing when < its order
    """

    method: SelectionMethod = CONFIG['selection_method']
    max_features: int = CONFIG['max_features']
    multicollinearity_threshold: float = CONFIG['multicollinearity_threshold']
    number_of_components: int = CONFIG['number_of_components']
    execution_order: int = CONFIG['selection_execution_order']

    def validate(self, method: Optional[SelectionMethod] = None) -> List[str]:
        """
        Return every violation of this config (empty when valid).

        Args:
            method: Check the fields of this method instead of self.method
        """
        method = self.method if method is None else method
        violations = []

        if not isinstance(self.method, SelectionMethod):
            violations.append(f"Unsupported selection method: {self.method!r}")
        if not is_integer(self.execution_order):
            violations.append(
                f"Selection execution order must be an integer, got {self.execution_order!r}"
            )

        if method == SelectionMethod.CORRELATION:
            if not 0 < self.multicollinearity_threshold < 1:
                violations.append(
                    "Multicollinearity threshold must be in (0, 1), "
                    f"got {self.multicollinearity_threshold}"
                )
            if not is_integer(self.max_features) or self.max_features <= 0:
                violations.append(
                    f"Max features must be a positive integer, got {self.max_features!r}"
                )

        return violations

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> 'SelectionConfig':
        return SelectionConfig(
            method=_parse_enum(SelectionMethod, _pick(d, 'method', default=SelectionMethod.NONE)),
            max_features=_as_int(
                _pick(d, 'maxFeatures', 'max_features', default=CONFIG['max_features'])
            ),
            multicollinearity_threshold=float(_pick(
                d, 'multicollinearityThreshold', 'multicollinearity_threshold',
                default=CONFIG['multicollinearity_threshold'],
            )),
            number_of_components=_as_int(_pick(
                d, 'numberOfComponents', 'number_of_components',
                default=CONFIG['number_of_components'],
            )),
            execution_order=_as_int(_pick(
                d, 'executionOrder', 'execution_order',
                default=CONFIG['selection_execution_order'],
            )),
        )


def _parse_enum(enum_cls, value):
    """Map a config string onto its enum member; unknown values pass through."""
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if str(value).lower() == member.value.lower():
            return member
    return value


# =============================================================================
# CONFIG FILES
# =============================================================================

@dataclass(frozen=True)
class ConditioningSettings:
    """Everything a config file contributes to one conditioning run."""

    balancing: BalancingConfig
    selection: SelectionConfig
    target_field: str
    model_kind: ModelKind = CONFIG['model_kind']
    output_table: Optional[str] = None


def load_config(
    path: Union[str, Path],
    target_field: Optional[str] = None,
) -> ConditioningSettings:
    """
    Load a JSON config file.

    Args:
        path: Path to a JSON object with 'targetField', 'dataBalancing'
              and 'featureEngineering' sections
        target_field: Overrides the file's 'targetField' when given

    Returns:
        ConditioningSettings (not yet validated)
    """
    p = Path(path)
    obj = json.loads(p.read_text(encoding='utf-8'))
    if not isinstance(obj, dict):
        raise ValueError("config JSON must be an object")

    target_field = target_field or _pick(obj, 'targetField', 'target_field')
    if not target_field:
        raise ValueError("config JSON must name a target field")

    model_kind = _parse_enum(
        ModelKind, _pick(obj, 'modelType', 'model_kind', default=CONFIG['model_kind'])
    )
    if not isinstance(model_kind, ModelKind):
        raise ValueError(f"unknown model type: {model_kind}")

    database = obj.get('database') or {}
    output_table = _pick(obj, 'outputTableName', 'output_table') or _pick(
        database, 'outputTableName', 'output_table'
    )

    settings = ConditioningSettings(
        balancing=BalancingConfig.from_dict(
            _pick(obj, 'dataBalancing', 'balancing', default={})
        ),
        selection=SelectionConfig.from_dict(
            _pick(obj, 'featureEngineering', 'selection', default={})
        ),
        target_field=str(target_field),
        model_kind=model_kind,
        output_table=output_table,
    )
    logger.info(f"Loaded configuration from {p}")
    return settings

