from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from conditioning.config import (
    BalancingConfig,
    BalancingMethod,
    ModelKind,
    SelectionConfig,
    SelectionMethod,
    load_config,
)


def test_default_configs_are_valid():
    assert BalancingConfig().validate() == []
    assert SelectionConfig().validate() == []


def test_smote_violations_are_collected():
    config = BalancingConfig(
        method=BalancingMethod.SMOTE,
        undersampling_ratio=1.2,
        minority_to_majority_ratio=0.0,
        k_neighbors=0,
    )
    violations = config.validate()
    assert len(violations) == 3


def test_unused_fields_are_not_checked():
    config = BalancingConfig(method=BalancingMethod.NONE, k_neighbors=0)
    assert config.validate() == []
    assert len(config.validate(BalancingMethod.SMOTE)) == 1


def test_correlation_violations():
    config = SelectionConfig(
        method=SelectionMethod.CORRELATION,
        max_features=0,
        multicollinearity_threshold=1.0,
    )
    assert len(config.validate()) == 2


def test_pca_components_never_invalid():
    config = SelectionConfig(method=SelectionMethod.PCA, number_of_components=-4)
    assert config.validate() == []


def test_execution_order_must_be_integer():
    assert BalancingConfig(execution_order=1.5).validate()
    assert SelectionConfig(execution_order="2").validate()


def test_unknown_method_is_a_violation():
    config = BalancingConfig.from_dict({"method": "ADASYN"})
    assert config.method == "ADASYN"
    assert any("Unsupported balancing method" in v for v in config.validate())


def test_from_dict_accepts_camel_and_snake_case():
    camel = BalancingConfig.from_dict({
        "method": "smote",
        "undersamplingRatio": 0.5,
        "minorityToMajorityRatio": 0.4,
        "kNeighbors": 3,
        "executionOrder": 2,
    })
    snake = BalancingConfig.from_dict({
        "method": "SMOTE",
        "undersampling_ratio": 0.5,
        "minority_to_majority_ratio": 0.4,
        "k_neighbors": 3,
        "execution_order": 2,
    })
    assert camel == snake
    assert camel.method is BalancingMethod.SMOTE


def test_load_config(tmp_path: Path):
    path = tmp_path / "conditioning.json"
    path.write_text(json.dumps({
        "targetField": "default",
        "modelType": "Regression",
        "database": {"outputTableName": "conditioned"},
        "dataBalancing": {"method": "None", "executionOrder": 3},
        "featureEngineering": {
            "method": "Correlation",
            "maxFeatures": 4,
            "multicollinearityThreshold": 0.7,
            "executionOrder": 1,
        },
    }), encoding="utf-8")

    settings = load_config(path)

    assert settings.target_field == "default"
    assert settings.model_kind is ModelKind.REGRESSION
    assert settings.output_table == "conditioned"
    assert settings.balancing.method is BalancingMethod.NONE
    assert settings.balancing.execution_order == 3
    assert settings.selection == SelectionConfig(
        method=SelectionMethod.CORRELATION,
        max_features=4,
        multicollinearity_threshold=0.7,
        execution_order=1,
    )


def test_load_config_requires_target(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"dataBalancing": {}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_load_config_target_override(tmp_path: Path):
    path = tmp_path / "no_target.json"
    path.write_text(json.dumps({"dataBalancing": {"method": "None"}}), encoding="utf-8")

    settings = load_config(path, target_field="y")
    assert settings.target_field == "y"


def test_target_override_wins_over_file(tmp_path: Path):
    path = tmp_path / "conditioning.json"
    path.write_text(json.dumps({"targetField": "label"}), encoding="utf-8")

    assert load_config(path, target_field="default").target_field == "default"


def test_integral_floats_from_json_are_ints():
    balancing = BalancingConfig.from_dict(
        {"method": "SMOTE", "kNeighbors": 5.0, "executionOrder": 1.0}
    )
    selection = SelectionConfig.from_dict(
        {"method": "Correlation", "maxFeatures": 4.0, "numberOfComponents": 2.0}
    )

    assert balancing.validate() == []
    assert selection.validate() == []
    assert balancing.k_neighbors == 5 and isinstance(balancing.k_neighbors, int)
    assert selection.max_features == 4 and isinstance(selection.max_features, int)


def test_fractional_neighbors_reported_as_non_integer():
    config = BalancingConfig.from_dict({"method": "SMOTE", "kNeighbors": 2.5})
    violations = config.validate()
    assert len(violations) == 1
    assert "must be an integer" in violations[0]


def test_numpy_integers_are_valid_counts():
    balancing = BalancingConfig(
        method=BalancingMethod.SMOTE, k_neighbors=np.int64(3), execution_order=np.int32(1)
    )
    selection = SelectionConfig(
        method=SelectionMethod.CORRELATION, max_features=np.int64(2)
    )
    assert balancing.validate() == []
    assert selection.validate() == []


def test_bool_is_not_a_count():
    config = BalancingConfig(method=BalancingMethod.SMOTE, k_neighbors=True)
    assert config.validate()
