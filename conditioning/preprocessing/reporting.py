"""
Selection report text.

Pure helpers: each returns lines for the caller to collect, so every stage
call owns its own report and nothing is shared between invocations.
"""

from typing import List, Mapping, Optional, Sequence


SEPARATOR = "-" * 46


def header(method_name: str) -> List[str]:
    """Opening lines for a method's report."""
    return [
        "",
        f"{method_name} Feature Selection Results:",
        SEPARATOR,
    ]


def ranking_line(feature: str, value: float) -> str:
    """One row of a name | value ranking table."""
    return f"{feature:<40} | {value:.4f}"


def selection_summary(
    original_count: int,
    selected_features: Sequence[str],
    values: Optional[Mapping[str, float]] = None,
    value_label: str = "correlation with target",
    settings: Sequence[str] = (),
) -> List[str]:
    """
    Closing summary listing the selected features.

    Args:
        original_count: Number of candidate features
        selected_features: Final features, in output order
        values: Optional per-feature value shown beside each name
        value_label: Description of ``values``
        settings: Extra lines shown after the counts
    """
    lines = [
        "",
        "Selection Summary:",
        f"Original features: {original_count}",
        f"Selected features: {len(selected_features)}",
        *settings,
        "",
        "Selected Features:",
    ]
    for feature in selected_features:
        if values is not None and feature in values:
            lines.append(f"- {feature} ({value_label}: {values[feature]:.4f})")
        else:
            lines.append(f"- {feature}")
    return lines


def render(lines: Sequence[str]) -> str:
    return "\n".join(lines) + "\n"
