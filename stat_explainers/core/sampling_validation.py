"""Checks of simulated sampling distributions against theoretical values."""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import Dict, Sequence

import numpy as np

from .aggregator import AggregationRun
from .distributions import DistributionSpec
from .sampler import SamplingRun


@dataclass
class ValidationResult:
    """Basic container for validation outcomes."""

    status: str
    failed_checks: Sequence[str]
    warnings: Sequence[str]

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status,
            "failed_checks": list(self.failed_checks),
            "warnings": list(self.warnings),
        }


def validate_sampling_run(
    run: SamplingRun,
    spec: DistributionSpec,
    *,
    relative_tolerance: float = 0.10,
) -> ValidationResult:
    """Compare the mean and spread of the sample means with CLT predictions."""
    failed: list[str] = []
    warnings: list[str] = []

    means = run.sample_means
    if np.any(~np.isfinite(means)):
        failed.append("nan_or_inf_means")
        return ValidationResult(status="FAIL", failed_checks=failed, warnings=warnings)
    if means.size != run.repetitions:
        failed.append("sample_mean_count")

    expected_mean = spec.mean
    expected_se = spec.sd / sqrt(run.sample_size)
    observed_mean = float(means.mean())
    observed_se = float(means.std(ddof=1)) if means.size > 1 else 0.0

    mean_scale = max(abs(expected_mean), expected_se, 1e-12)
    if abs(observed_mean - expected_mean) > relative_tolerance * mean_scale:
        warnings.append("mean_off_target")
    if expected_se > 0 and abs(observed_se - expected_se) > relative_tolerance * expected_se:
        warnings.append("standard_error_off_target")
    if run.repetitions < 1000:
        warnings.append("few_repetitions")

    status = "PASS" if not failed else "FAIL"
    return ValidationResult(status=status, failed_checks=failed, warnings=warnings)


def validate_aggregation(
    run: AggregationRun,
    *,
    relative_tolerance: float = 0.10,
) -> ValidationResult:
    """Check each sum series against k * mean and sqrt(k) * sd of the base distribution."""
    failed: list[str] = []
    warnings: list[str] = []

    for item in run.series:
        if np.any(~np.isfinite(item.values)):
            failed.append(f"nan_or_inf_sums_k{item.count}")
            continue
        summary = run.summaries[item.count]
        expected_mean = item.count * run.spec.mean
        expected_sd = sqrt(item.count) * run.spec.sd
        scale = max(abs(expected_mean), expected_sd, 1e-12)
        if abs(summary.mean - expected_mean) > relative_tolerance * scale:
            warnings.append(f"mean_off_target_k{item.count}")
        if expected_sd > 0 and abs(summary.standard_deviation - expected_sd) > relative_tolerance * expected_sd:
            warnings.append(f"sd_off_target_k{item.count}")

    status = "PASS" if not failed else "FAIL"
    return ValidationResult(status=status, failed_checks=failed, warnings=warnings)


__all__ = ["ValidationResult", "validate_sampling_run", "validate_aggregation"]
