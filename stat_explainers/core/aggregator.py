"""Sums of increasing numbers of i.i.d. variables and their approach to normality."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import sqrt
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..models.results import ConvergencePoints, NormalitySummary
from .distributions import DistributionSpec
from .sampler import RandomSource, ensure_rng
from .statistics import DEFAULT_TESTS, summarize
from .validator import validate_count, validate_threshold

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SumSeries:
    """Row sums of a (repetitions x count) matrix of base-distribution draws."""

    count: int
    values: np.ndarray

    def __post_init__(self) -> None:
        self.values.setflags(write=False)

    @property
    def repetitions(self) -> int:
        return int(self.values.size)


def build_sum_series(
    spec: DistributionSpec,
    count: int,
    repetitions: int,
    rng: RandomSource = None,
) -> SumSeries:
    """Draw a fresh (repetitions x count) matrix from ``spec`` and sum each row."""
    count = validate_count("count", count)
    repetitions = validate_count("repetitions", repetitions)
    draws = spec.draw(ensure_rng(rng), (repetitions, count))
    return SumSeries(count=count, values=draws.sum(axis=1))


@dataclass
class AggregatorConfig:
    """Configuration bundle for the variable-sum demonstration."""

    family: str = "exponential"
    parameters: Dict[str, float] = field(default_factory=lambda: {"rate": 0.5})
    max_variables: int = 30
    repetitions: int = 10000
    random_seed: Optional[int] = 123
    skewness_threshold: float = 0.5
    kurtosis_threshold: float = 0.5
    combined_threshold: float = 1.0
    normality_tests: Tuple[str, ...] = DEFAULT_TESTS

    def spec(self) -> DistributionSpec:
        return DistributionSpec.from_name(self.family, self.parameters)

    def to_metadata(self) -> Dict[str, object]:
        """Serialise into result metadata."""
        return {
            "family": self.family,
            "parameters": dict(self.parameters),
            "max_variables": int(self.max_variables),
            "repetitions": int(self.repetitions),
            "random_seed": self.random_seed,
            "skewness_threshold": float(self.skewness_threshold),
            "kurtosis_threshold": float(self.kurtosis_threshold),
            "combined_threshold": float(self.combined_threshold),
            "normality_tests": list(self.normality_tests),
        }

    @classmethod
    def from_metadata(cls, metadata: Dict[str, object]) -> "AggregatorConfig":
        """Rehydrate a configuration from result metadata."""
        return AggregatorConfig(
            family=str(metadata.get("family", "exponential")),
            parameters={
                str(key): float(value)
                for key, value in dict(metadata.get("parameters", {"rate": 0.5})).items()
            },
            max_variables=int(metadata.get("max_variables", 30)),
            repetitions=int(metadata.get("repetitions", 10000)),
            random_seed=metadata.get("random_seed", 123),
            skewness_threshold=float(metadata.get("skewness_threshold", 0.5)),
            kurtosis_threshold=float(metadata.get("kurtosis_threshold", 0.5)),
            combined_threshold=float(metadata.get("combined_threshold", 1.0)),
            normality_tests=tuple(metadata.get("normality_tests", DEFAULT_TESTS)),
        )


@dataclass
class AggregationRun:
    """All sum series of one demonstration with their summaries."""

    spec: DistributionSpec
    series: List[SumSeries]
    summaries: Dict[int, NormalitySummary]
    convergence: ConvergencePoints

    def summary_frame(self) -> pd.DataFrame:
        """One row per variable count with observed and theoretical moments."""
        base_mean = self.spec.mean
        base_sd = self.spec.sd
        rows = []
        for item in self.series:
            summary = self.summaries[item.count]
            row = {
                "variables": item.count,
                "theoretical_mean": item.count * base_mean,
                "theoretical_sd": sqrt(item.count) * base_sd,
                **summary.to_row(),
                "abs_skewness": abs(summary.skewness) if summary.skewness is not None else None,
                "abs_excess_kurtosis": (
                    abs(summary.excess_kurtosis) if summary.excess_kurtosis is not None else None
                ),
            }
            rows.append(row)
        return pd.DataFrame(rows)

    def long_frame(self, counts: Optional[Sequence[int]] = None) -> pd.DataFrame:
        """Long-form table (variables, repetition, value) for the selected counts."""
        wanted = set(counts) if counts is not None else None
        frames = [
            pd.DataFrame(
                {
                    "variables": item.count,
                    "repetition": np.arange(1, item.repetitions + 1),
                    "value": item.values,
                }
            )
            for item in self.series
            if wanted is None or item.count in wanted
        ]
        if not frames:
            return pd.DataFrame(columns=["variables", "repetition", "value"])
        return pd.concat(frames, ignore_index=True)


def find_convergence(
    summaries: Dict[int, NormalitySummary],
    *,
    skewness_threshold: float = 0.5,
    kurtosis_threshold: float = 0.5,
    combined_threshold: float = 1.0,
) -> ConvergencePoints:
    """
    Return the smallest count meeting each criterion.

    Counts whose skewness or kurtosis is undefined never meet a criterion;
    criteria not met within the supplied counts are left as ``None``.
    """
    skewness_threshold = validate_threshold("skewness_threshold", skewness_threshold)
    kurtosis_threshold = validate_threshold("kurtosis_threshold", kurtosis_threshold)
    combined_threshold = validate_threshold("combined_threshold", combined_threshold)

    skew_at: Optional[int] = None
    kurt_at: Optional[int] = None
    combined_at: Optional[int] = None
    for count in sorted(summaries):
        summary = summaries[count]
        if summary.skewness is None or summary.kurtosis is None:
            continue
        abs_skew = abs(summary.skewness)
        abs_excess = abs(summary.kurtosis - 3.0)
        if skew_at is None and abs_skew < skewness_threshold:
            skew_at = count
        if kurt_at is None and abs_excess < kurtosis_threshold:
            kurt_at = count
        if combined_at is None and abs_skew + abs_excess < combined_threshold:
            combined_at = count
    return ConvergencePoints(skewness=skew_at, kurtosis=kurt_at, combined=combined_at)


def aggregate(config: AggregatorConfig) -> AggregationRun:
    """Build a fresh sum series for every count 1..max_variables and summarise each."""
    max_variables = validate_count("max_variables", config.max_variables)
    repetitions = validate_count("repetitions", config.repetitions, minimum=2)
    spec = config.spec()
    rng = np.random.default_rng(config.random_seed)

    series: List[SumSeries] = []
    summaries: Dict[int, NormalitySummary] = {}
    for count in range(1, max_variables + 1):
        item = build_sum_series(spec, count, repetitions, rng)
        series.append(item)
        summaries[count] = summarize(item.values, tests=config.normality_tests)

    convergence = find_convergence(
        summaries,
        skewness_threshold=config.skewness_threshold,
        kurtosis_threshold=config.kurtosis_threshold,
        combined_threshold=config.combined_threshold,
    )
    LOGGER.info(
        "Aggregated %d sum series of %s (%d repetitions); convergence %s",
        max_variables,
        spec.describe(),
        repetitions,
        convergence.describe(),
    )
    return AggregationRun(spec=spec, series=series, summaries=summaries, convergence=convergence)


__all__ = [
    "SumSeries",
    "build_sum_series",
    "AggregatorConfig",
    "AggregationRun",
    "find_convergence",
    "aggregate",
]
