"""Population draws and resampling for the sampling-distribution demonstration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import sqrt
from typing import Dict, Iterator, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .distributions import DistributionSpec
from .statistics import sample_standard_deviation
from .validator import validate_count

LOGGER = logging.getLogger(__name__)

RandomSource = Union[None, int, np.random.Generator]


def ensure_rng(source: RandomSource) -> np.random.Generator:
    """Return ``source`` if it already is a generator, otherwise seed a new one."""
    if isinstance(source, np.random.Generator):
        return source
    return np.random.default_rng(source)


class SampleSet:
    """Read-only, fixed-length sequence of observations."""

    __slots__ = ("_values",)

    def __init__(self, values: np.ndarray) -> None:
        arr = np.array(values, dtype=float, copy=True).ravel()
        arr.setflags(write=False)
        self._values = arr

    @property
    def values(self) -> np.ndarray:
        return self._values

    def __len__(self) -> int:
        return int(self._values.size)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values.tolist())

    def __getitem__(self, index):
        return self._values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleSet):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    def __repr__(self) -> str:
        return f"SampleSet(n={len(self)})"

    def mean(self) -> float:
        return float(self._values.mean())

    def std(self) -> float:
        return sample_standard_deviation(self._values)

    def to_frame(self, column: str = "value") -> pd.DataFrame:
        return pd.DataFrame({column: self._values})


@dataclass(frozen=True)
class SamplingRun:
    """Repeated resamples of equal size drawn with replacement from one population."""

    sample_size: int
    samples: np.ndarray  # shape (repetitions, sample_size)

    def __post_init__(self) -> None:
        self.samples.setflags(write=False)

    @property
    def repetitions(self) -> int:
        return int(self.samples.shape[0])

    @property
    def sample_means(self) -> np.ndarray:
        return self.samples.mean(axis=1)

    @property
    def sample_sds(self) -> np.ndarray:
        return self.samples.std(axis=1, ddof=1)

    def sample_sets(self) -> Iterator[SampleSet]:
        for row in self.samples:
            yield SampleSet(row)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "repetition": np.arange(1, self.repetitions + 1),
                "sample_mean": self.sample_means,
                "sample_sd": self.sample_sds,
            }
        )


def draw_population(
    spec: DistributionSpec,
    population_size: int,
    rng: RandomSource = None,
) -> SampleSet:
    """Draw ``population_size`` i.i.d. values from ``spec``."""
    population_size = validate_count("population_size", population_size)
    values = spec.draw(ensure_rng(rng), population_size)
    return SampleSet(values)


def resample(
    population: SampleSet,
    sample_size: int,
    repetitions: int,
    rng: RandomSource = None,
) -> SamplingRun:
    """
    Draw ``repetitions`` samples of ``sample_size`` with replacement from ``population``.

    Every element of every resample is an independent uniform pick from the
    population, so resamples are independent of one another.
    """
    sample_size = validate_count("sample_size", sample_size, minimum=2)
    repetitions = validate_count("repetitions", repetitions)
    if len(population) == 0:
        raise ValueError("Cannot resample from an empty population")
    generator = ensure_rng(rng)
    indices = generator.integers(0, len(population), size=(repetitions, sample_size))
    return SamplingRun(sample_size=sample_size, samples=population.values[indices])


def theoretical_standard_error(spec: DistributionSpec, sample_size: int) -> float:
    """Standard deviation of the sample mean for i.i.d. draws from ``spec``."""
    sample_size = validate_count("sample_size", sample_size)
    return spec.sd / sqrt(sample_size)


@dataclass
class SamplerConfig:
    """Configuration bundle for the sampling-distribution demonstration."""

    family: str = "exponential"
    parameters: Dict[str, float] = field(default_factory=lambda: {"rate": 0.5})
    population_size: int = 10000
    sample_size: int = 30
    repetitions: int = 10000
    random_seed: Optional[int] = 123

    def spec(self) -> DistributionSpec:
        return DistributionSpec.from_name(self.family, self.parameters)

    def to_metadata(self) -> Dict[str, object]:
        """Serialise into result metadata."""
        return {
            "family": self.family,
            "parameters": dict(self.parameters),
            "population_size": int(self.population_size),
            "sample_size": int(self.sample_size),
            "repetitions": int(self.repetitions),
            "random_seed": self.random_seed,
        }

    @classmethod
    def from_metadata(cls, metadata: Dict[str, object]) -> "SamplerConfig":
        """Rehydrate a configuration from result metadata."""
        return SamplerConfig(
            family=str(metadata.get("family", "exponential")),
            parameters={
                str(key): float(value)
                for key, value in dict(metadata.get("parameters", {"rate": 0.5})).items()
            },
            population_size=int(metadata.get("population_size", 10000)),
            sample_size=int(metadata.get("sample_size", 30)),
            repetitions=int(metadata.get("repetitions", 10000)),
            random_seed=metadata.get("random_seed", 123),
        )


def run_sampler(config: SamplerConfig) -> Tuple[DistributionSpec, SampleSet, SamplingRun]:
    """Draw the population and the resamples from one generator seeded by ``config``."""
    spec = config.spec()
    rng = np.random.default_rng(config.random_seed)
    population = draw_population(spec, config.population_size, rng)
    run = resample(population, config.sample_size, config.repetitions, rng)
    LOGGER.info(
        "Sampled %d resamples of size %d from %s (population %d)",
        run.repetitions,
        run.sample_size,
        spec.describe(),
        len(population),
    )
    return spec, population, run


__all__ = [
    "RandomSource",
    "ensure_rng",
    "SampleSet",
    "SamplingRun",
    "draw_population",
    "resample",
    "theoretical_standard_error",
    "SamplerConfig",
    "run_sampler",
]
