"""Degrees of freedom: why the sample variance divides by n - 1."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from .distributions import DistributionSpec
from .sampler import RandomSource, ensure_rng
from .validator import ValidationError, validate_count


def degrees_of_freedom(n: int, constraints: int = 1) -> int:
    """Number of values free to vary once ``constraints`` quantities are fixed."""
    n = validate_count("n", n)
    constraints = validate_count("constraints", constraints, minimum=0)
    remaining = n - constraints
    if remaining < 1:
        raise ValidationError(
            f"{constraints} constraint(s) leave no free values among {n} observations"
        )
    return remaining


def compare_variance_estimators(
    spec: DistributionSpec,
    sample_size: int,
    repetitions: int,
    rng: RandomSource = None,
) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """
    Draw ``repetitions`` samples and compute the variance with both divisors.

    Returns the per-sample table and a summary comparing the average of each
    estimator with the population variance. On average the n divisor
    underestimates by a factor of (n - 1) / n.
    """
    sample_size = validate_count("sample_size", sample_size, minimum=2)
    repetitions = validate_count("repetitions", repetitions)
    draws = spec.draw(ensure_rng(rng), (repetitions, sample_size))

    biased = draws.var(axis=1, ddof=0)
    unbiased = draws.var(axis=1, ddof=1)
    table = pd.DataFrame(
        {
            "repetition": np.arange(1, repetitions + 1),
            "sample_mean": draws.mean(axis=1),
            "variance_n": biased,
            "variance_n_minus_1": unbiased,
        }
    )
    summary = {
        "sample_size": float(sample_size),
        "degrees_of_freedom": float(degrees_of_freedom(sample_size)),
        "true_variance": float(spec.sd**2),
        "mean_variance_n": float(biased.mean()),
        "mean_variance_n_minus_1": float(unbiased.mean()),
        "expected_ratio_n": (sample_size - 1) / sample_size,
    }
    return table, summary


@dataclass
class DegreesOfFreedomConfig:
    """Configuration bundle for the degrees-of-freedom demonstration."""

    family: str = "normal"
    parameters: Dict[str, float] = field(default_factory=lambda: {"mean": 0.0, "sd": 1.0})
    sample_size: int = 5
    repetitions: int = 10000
    random_seed: Optional[int] = 123

    def spec(self) -> DistributionSpec:
        return DistributionSpec.from_name(self.family, self.parameters)

    def to_metadata(self) -> Dict[str, object]:
        return {
            "family": self.family,
            "parameters": dict(self.parameters),
            "sample_size": int(self.sample_size),
            "repetitions": int(self.repetitions),
            "random_seed": self.random_seed,
        }


__all__ = ["degrees_of_freedom", "compare_variance_estimators", "DegreesOfFreedomConfig"]
