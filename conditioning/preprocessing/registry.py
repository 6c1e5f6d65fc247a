"""
Stage registry.

Maps each method tag to the constructor of its balancer or selector. The
pipeline resolves variants here, and config validation checks membership
so an unsupported method is reported before any data is read.
"""

from typing import Callable, Dict, List

from ..config import BalancingMethod, SelectionMethod
from ..exceptions import ConfigurationError
from .base import BaseBalancer, BaseFeatureSelector
from .feature_reduction import CorrelationFeatureSelector, NoOpSelector, PCAFeatureSelector
from .resampling import NoOpBalancer, SmoteBalancer

BalancerFactory = Callable[[], BaseBalancer]
SelectorFactory = Callable[[], BaseFeatureSelector]


_BALANCERS: Dict[BalancingMethod, BalancerFactory] = {
    BalancingMethod.NONE: NoOpBalancer,
    BalancingMethod.SMOTE: SmoteBalancer,
}

_SELECTORS: Dict[SelectionMethod, SelectorFactory] = {
    SelectionMethod.NONE: NoOpSelector,
    SelectionMethod.CORRELATION: CorrelationFeatureSelector,
    SelectionMethod.PCA: PCAFeatureSelector,
}


def register_balancer(
    method: BalancingMethod,
    factory: BalancerFactory,
    *,
    overwrite: bool = False,
) -> None:
    if method in _BALANCERS and not overwrite:
        raise ValueError(f"balancer already registered: {method.value}")
    _BALANCERS[method] = factory


def register_selector(
    method: SelectionMethod,
    factory: SelectorFactory,
    *,
    overwrite: bool = False,
) -> None:
    if method in _SELECTORS and not overwrite:
        raise ValueError(f"selector already registered: {method.value}")
    _SELECTORS[method] = factory


def list_balancers() -> List[str]:
    return sorted(m.value for m in _BALANCERS)


def list_selectors() -> List[str]:
    return sorted(m.value for m in _SELECTORS)


def registry_violations(
    balancing_method: BalancingMethod,
    selection_method: SelectionMethod,
) -> List[str]:
    """
    Methods that are valid tags but have no registered variant.

    Values that are not method tags at all are reported by the configs.
    """
    violations = []
    if isinstance(balancing_method, BalancingMethod) and balancing_method not in _BALANCERS:
        violations.append(
            f"Unsupported balancing method: {balancing_method!r} "
            f"(known: {', '.join(list_balancers())})"
        )
    if isinstance(selection_method, SelectionMethod) and selection_method not in _SELECTORS:
        violations.append(
            f"Unsupported selection method: {selection_method!r} "
            f"(known: {', '.join(list_selectors())})"
        )
    return violations


def create_balancer(method: BalancingMethod) -> BaseBalancer:
    try:
        factory = _BALANCERS[method]
    except (KeyError, TypeError):
        raise ConfigurationError([
            f"Unsupported balancing method: {method!r} (known: {', '.join(list_balancers())})"
        ]) from None
    return factory()


def create_selector(method: SelectionMethod) -> BaseFeatureSelector:
    try:
        factory = _SELECTORS[method]
    except (KeyError, TypeError):
        raise ConfigurationError([
            f"Unsupported selection method: {method!r} (known: {', '.join(list_selectors())})"
        ]) from None
    return factory()
