"""Descriptive statistics and normality testing for numeric series."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import exp
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from scipy import stats

from ..models.results import NormalitySummary, NormalityTestResult
from .validator import InsufficientSampleSize, OutOfRangeForTest, ValidationError, as_finite_array

LOGGER = logging.getLogger(__name__)

SHAPIRO_WILK = "shapiro_wilk"
ANDERSON_DARLING = "anderson_darling"
DEFAULT_TESTS: Tuple[str, ...] = (SHAPIRO_WILK, ANDERSON_DARLING)


def sample_mean(values: Iterable[float]) -> float:
    arr = as_finite_array(values)
    if arr.size == 0:
        raise InsufficientSampleSize(1, 0, what="mean")
    return float(arr.mean())


def sample_standard_deviation(values: Iterable[float]) -> float:
    """Standard deviation with the n - 1 divisor; needs at least two observations."""
    arr = as_finite_array(values)
    if arr.size < 2:
        raise InsufficientSampleSize(2, int(arr.size), what="standard deviation")
    return float(arr.std(ddof=1))


def _has_spread(arr: np.ndarray) -> bool:
    """False for constant series and for spreads lost in floating-point cancellation."""
    if arr.size < 2:
        return False
    variance = float(np.mean((arr - arr.mean()) ** 2))
    floor = np.finfo(float).resolution * float(np.abs(arr).max())
    return variance > floor**2


def skewness(values: Iterable[float]) -> Optional[float]:
    """Moment estimator g1 = m3 / m2**1.5; ``None`` when the series has no spread."""
    arr = as_finite_array(values)
    if not _has_spread(arr):
        return None
    return float(stats.skew(arr, bias=True))


def kurtosis(values: Iterable[float]) -> Optional[float]:
    """Moment estimator b2 = m4 / m2**2 (normal = 3); ``None`` when the series has no spread."""
    arr = as_finite_array(values)
    if not _has_spread(arr):
        return None
    return float(stats.kurtosis(arr, fisher=False, bias=True))


# --------------------------------------------------------------- Normality tests
@dataclass(frozen=True)
class NormalityTest:
    """A normality test and the sample sizes it is valid for."""

    name: str
    min_size: int
    max_size: Optional[int]
    run: Callable[[np.ndarray], Tuple[float, float]]

    def accepts(self, size: int) -> bool:
        if size < self.min_size:
            return False
        return self.max_size is None or size <= self.max_size


def _shapiro_wilk(arr: np.ndarray) -> Tuple[float, float]:
    result = stats.shapiro(arr)
    return float(result.statistic), float(result.pvalue)


def anderson_darling_p_value(statistic: float, size: int) -> float:
    """
    Approximate p-value for the Anderson-Darling normality statistic.

    Uses the small-sample adjustment ``A*2 = A2 (1 + 0.75/n + 2.25/n^2)`` and the
    piecewise approximation of D'Agostino & Stephens (1986), case 3 (mean and
    variance estimated from the data).
    """
    adjusted = statistic * (1.0 + 0.75 / size + 2.25 / size**2)
    if adjusted < 0.2:
        p_value = 1.0 - exp(-13.436 + 101.14 * adjusted - 223.73 * adjusted**2)
    elif adjusted < 0.34:
        p_value = 1.0 - exp(-8.318 + 42.796 * adjusted - 59.938 * adjusted**2)
    elif adjusted < 0.6:
        p_value = exp(0.9177 - 4.279 * adjusted - 1.38 * adjusted**2)
    elif adjusted < 10:
        p_value = exp(1.2937 - 5.709 * adjusted + 0.0186 * adjusted**2)
    else:
        p_value = 3.7e-24
    return float(min(max(p_value, 0.0), 1.0))


def _anderson_darling(arr: np.ndarray) -> Tuple[float, float]:
    statistic = float(stats.anderson(arr, dist="norm").statistic)
    return statistic, anderson_darling_p_value(statistic, arr.size)


NORMALITY_TESTS: Dict[str, NormalityTest] = {
    SHAPIRO_WILK: NormalityTest(SHAPIRO_WILK, min_size=3, max_size=5000, run=_shapiro_wilk),
    ANDERSON_DARLING: NormalityTest(ANDERSON_DARLING, min_size=8, max_size=None, run=_anderson_darling),
}


def run_normality_test(name: str, values: Iterable[float]) -> NormalityTestResult:
    """Run one named test; raises :class:`OutOfRangeForTest` outside its valid sizes."""
    try:
        test = NORMALITY_TESTS[name]
    except KeyError as exc:
        raise ValidationError(
            f"Unknown normality test {name!r}; choose from {', '.join(NORMALITY_TESTS)}"
        ) from exc
    arr = as_finite_array(values)
    if not test.accepts(arr.size):
        raise OutOfRangeForTest(name, int(arr.size), test.min_size, test.max_size)
    if not _has_spread(arr):
        raise OutOfRangeForTest(name, int(arr.size), test.min_size, test.max_size)
    statistic, p_value = test.run(arr)
    return NormalityTestResult(name=name, statistic=statistic, p_value=p_value)


def summarize(
    values: Iterable[float],
    *,
    tests: Sequence[str] = DEFAULT_TESTS,
) -> NormalitySummary:
    """
    Compute a :class:`NormalitySummary` for ``values``.

    ``tests`` is a preference order: the first test whose valid sample-size range
    contains ``len(values)`` fills the test fields. Tests that do not apply are
    listed in ``skipped_tests``; when none applies the test fields stay ``None``.
    """
    arr = as_finite_array(values)
    std = sample_standard_deviation(arr)

    reported: Optional[NormalityTestResult] = None
    skipped: List[str] = []
    for name in tests:
        try:
            reported = run_normality_test(name, arr)
        except OutOfRangeForTest as exc:
            LOGGER.debug("Skipping normality test: %s", exc)
            skipped.append(name)
            continue
        break

    return NormalitySummary(
        n=int(arr.size),
        mean=float(arr.mean()),
        standard_deviation=std,
        skewness=skewness(arr),
        kurtosis=kurtosis(arr),
        normality_test=reported.name if reported else None,
        normality_test_statistic=reported.statistic if reported else None,
        normality_p_value=reported.p_value if reported else None,
        skipped_tests=skipped,
    )


__all__ = [
    "SHAPIRO_WILK",
    "ANDERSON_DARLING",
    "DEFAULT_TESTS",
    "NORMALITY_TESTS",
    "NormalityTest",
    "sample_mean",
    "sample_standard_deviation",
    "skewness",
    "kurtosis",
    "anderson_darling_p_value",
    "run_normality_test",
    "summarize",
]
