"""Input validation utilities and error types."""

from __future__ import annotations

import math
from typing import Iterable, Optional

import numpy as np


class ValidationError(Exception):
    """Custom error for validation related issues."""


class UnknownDistributionFamily(ValidationError):
    """Raised when a distribution family name cannot be resolved."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown distribution family: {name!r}")
        self.name = name


class InsufficientSampleSize(ValidationError):
    """Raised when too few observations are supplied to a computation."""

    def __init__(self, required: int, actual: int, *, what: str = "computation") -> None:
        super().__init__(
            f"Insufficient data for {what}: need at least {required} observations, got {actual}"
        )
        self.required = required
        self.actual = actual


class OutOfRangeForTest(ValidationError):
    """Raised when a normality test cannot be applied to the given sample size."""

    def __init__(self, test_name: str, size: int, lower: int, upper: Optional[int]) -> None:
        bounds = f"[{lower}, {upper}]" if upper is not None else f">= {lower}"
        super().__init__(f"{test_name} requires a sample size {bounds}; got {size}")
        self.test_name = test_name
        self.size = size


def validate_count(name: str, value: int, *, minimum: int = 1) -> int:
    """Ensure a size/count style argument is an integer no smaller than ``minimum``."""
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    try:
        converted = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{name} must be an integer, got {value!r}") from exc
    if converted != value:
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    value = converted
    if value < minimum:
        raise ValidationError(f"{name} must be >= {minimum}, got {value}")
    return value


def as_finite_array(values: Iterable[float], *, name: str = "values") -> np.ndarray:
    """Return ``values`` as a 1-D float array, rejecting NaN and infinities."""
    arr = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=float)
    if arr.ndim != 1:
        arr = arr.ravel()
    if arr.size and not np.all(np.isfinite(arr)):
        raise ValidationError(f"{name} contains NaN or infinite entries")
    return arr


def validate_threshold(name: str, value: float) -> float:
    """Ensure a convergence threshold is a positive finite number."""
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive number, got {value}")
    return value


__all__ = [
    "ValidationError",
    "UnknownDistributionFamily",
    "InsufficientSampleSize",
    "OutOfRangeForTest",
    "validate_count",
    "as_finite_array",
    "validate_threshold",
]
