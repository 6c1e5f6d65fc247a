"""
Conditioning Errors.

Every failure raised by the balancing and selection stages derives from
ConditioningError so callers can catch the whole family at once.
"""

from typing import Iterable, List, Optional


class ConditioningError(Exception):
    """Base class for data conditioning failures."""


class ConfigurationError(ConditioningError):
    """
    One or more config values are out of range.

    Attributes:
        violations: Every problem found, in the order they were checked
    """

    def __init__(self, violations: Iterable[str]):
        self.violations: List[str] = list(violations)
        super().__init__("; ".join(self.violations) or "Invalid configuration")


class ColumnNotFoundError(ConditioningError):
    """A feature or target column is absent from the dataset."""

    def __init__(self, column: str, available: Optional[Iterable[str]] = None):
        self.column = column
        message = f"Column '{column}' not found in dataset"
        if available is not None:
            message += f" (available: {', '.join(map(str, available))})"
        super().__init__(message)


class UnsupportedTypeError(ConditioningError):
    """A column cannot be coerced to the numeric form a stage requires."""

    def __init__(self, column: str, dtype: object):
        self.column = column
        self.dtype = dtype
        super().__init__(
            f"Column '{column}' has unsupported type {dtype}; expected numeric or boolean"
        )


class ComputationError(ConditioningError):
    """Numeric failure, e.g. a zero-variance target in a correlation."""


class TableNotFoundError(ConditioningError):
    """The source table does not exist in the database."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' not found in database")
