from __future__ import annotations

import pytest

from conditioning.config import BalancingMethod, SelectionMethod
from conditioning.exceptions import ConfigurationError
from conditioning.preprocessing import registry
from conditioning.preprocessing.feature_reduction import (
    CorrelationFeatureSelector,
    NoOpSelector,
    PCAFeatureSelector,
)
from conditioning.preprocessing.resampling import NoOpBalancer, SmoteBalancer


def test_every_method_has_a_variant():
    assert isinstance(registry.create_balancer(BalancingMethod.NONE), NoOpBalancer)
    assert isinstance(registry.create_balancer(BalancingMethod.SMOTE), SmoteBalancer)
    assert isinstance(registry.create_selector(SelectionMethod.NONE), NoOpSelector)
    assert isinstance(registry.create_selector(SelectionMethod.CORRELATION), CorrelationFeatureSelector)
    assert isinstance(registry.create_selector(SelectionMethod.PCA), PCAFeatureSelector)
    assert registry.registry_violations(BalancingMethod.SMOTE, SelectionMethod.PCA) == []


def test_unknown_method_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        registry.create_balancer("ADASYN")
    with pytest.raises(ConfigurationError):
        registry.create_selector("Lasso")


def test_register_refuses_silent_overwrite():
    with pytest.raises(ValueError):
        registry.register_balancer(BalancingMethod.SMOTE, SmoteBalancer)


def test_register_with_overwrite(monkeypatch):
    monkeypatch.setitem(registry._SELECTORS, SelectionMethod.PCA, PCAFeatureSelector)

    class CustomPCA(PCAFeatureSelector):
        pass

    registry.register_selector(SelectionMethod.PCA, CustomPCA, overwrite=True)
    assert isinstance(registry.create_selector(SelectionMethod.PCA), CustomPCA)


def test_missing_variant_is_reported(monkeypatch):
    monkeypatch.delitem(registry._SELECTORS, SelectionMethod.PCA)

    violations = registry.registry_violations(BalancingMethod.NONE, SelectionMethod.PCA)
    assert len(violations) == 1
    assert "PCA" in violations[0]
