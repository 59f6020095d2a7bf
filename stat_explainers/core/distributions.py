"""Parametric distribution families used by the sampling demonstrations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from math import exp
from typing import Dict, Mapping, Optional, Tuple, Type, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator
from scipy import stats

from .validator import UnknownDistributionFamily

LOGGER = logging.getLogger(__name__)

Size = Union[int, Tuple[int, ...]]


class DistributionFamily(str, Enum):
    """Supported distribution families."""

    EXPONENTIAL = "exponential"
    NORMAL = "normal"
    UNIFORM = "uniform"
    GAMMA = "gamma"
    BETA = "beta"
    LOGNORMAL = "lognormal"
    CHI_SQUARED = "chi_squared"
    WEIBULL = "weibull"


DEFAULT_FAMILY = DistributionFamily.NORMAL

_ALIASES: Dict[str, DistributionFamily] = {
    "exp": DistributionFamily.EXPONENTIAL,
    "gaussian": DistributionFamily.NORMAL,
    "norm": DistributionFamily.NORMAL,
    "unif": DistributionFamily.UNIFORM,
    "lnorm": DistributionFamily.LOGNORMAL,
    "log_normal": DistributionFamily.LOGNORMAL,
    "chisq": DistributionFamily.CHI_SQUARED,
    "chi2": DistributionFamily.CHI_SQUARED,
    "chi_square": DistributionFamily.CHI_SQUARED,
    "chisquared": DistributionFamily.CHI_SQUARED,
}


class DistributionParameters(BaseModel):
    """Base record for family parameters; subclasses declare the fields and defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        raise NotImplementedError

    def frozen(self):
        """Return the equivalent frozen ``scipy.stats`` distribution."""
        raise NotImplementedError

    @property
    def population_mean(self) -> float:
        return float(self.frozen().mean())

    @property
    def population_sd(self) -> float:
        return float(self.frozen().std())

    def pdf(self, x: np.ndarray) -> np.ndarray:
        return self.frozen().pdf(np.asarray(x, dtype=float))


class ExponentialParams(DistributionParameters):
    rate: float = Field(1.0, gt=0, description="Rate (lambda); mean is 1 / rate.")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return rng.exponential(scale=1.0 / self.rate, size=size)

    def frozen(self):
        return stats.expon(scale=1.0 / self.rate)


class NormalParams(DistributionParameters):
    mean: float = Field(0.0, description="Location.")
    sd: float = Field(1.0, gt=0, description="Standard deviation.")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return rng.normal(loc=self.mean, scale=self.sd, size=size)

    def frozen(self):
        return stats.norm(loc=self.mean, scale=self.sd)


class UniformParams(DistributionParameters):
    low: float = Field(0.0, description="Lower bound of the support.")
    high: float = Field(1.0, description="Upper bound of the support.")

    @model_validator(mode="after")
    def _check_bounds(self) -> "UniformParams":
        if self.high <= self.low:
            raise ValueError("uniform 'high' must be greater than 'low'")
        return self

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return rng.uniform(low=self.low, high=self.high, size=size)

    def frozen(self):
        return stats.uniform(loc=self.low, scale=self.high - self.low)


class GammaParams(DistributionParameters):
    shape: float = Field(2.0, gt=0, description="Shape (k).")
    rate: float = Field(1.0, gt=0, description="Rate; scale is 1 / rate.")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return rng.gamma(shape=self.shape, scale=1.0 / self.rate, size=size)

    def frozen(self):
        return stats.gamma(a=self.shape, scale=1.0 / self.rate)


class BetaParams(DistributionParameters):
    alpha: float = Field(2.0, gt=0, description="First shape parameter.")
    beta: float = Field(5.0, gt=0, description="Second shape parameter.")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return rng.beta(a=self.alpha, b=self.beta, size=size)

    def frozen(self):
        return stats.beta(a=self.alpha, b=self.beta)


class LognormalParams(DistributionParameters):
    meanlog: float = Field(0.0, description="Mean of the underlying normal.")
    sdlog: float = Field(1.0, gt=0, description="SD of the underlying normal.")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return rng.lognormal(mean=self.meanlog, sigma=self.sdlog, size=size)

    def frozen(self):
        return stats.lognorm(s=self.sdlog, scale=exp(self.meanlog))


class ChiSquaredParams(DistributionParameters):
    df: float = Field(3.0, gt=0, description="Degrees of freedom.")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return rng.chisquare(df=self.df, size=size)

    def frozen(self):
        return stats.chi2(df=self.df)


class WeibullParams(DistributionParameters):
    shape: float = Field(2.0, gt=0, description="Shape (k).")
    scale: float = Field(1.0, gt=0, description="Scale (lambda).")

    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        return self.scale * rng.weibull(a=self.shape, size=size)

    def frozen(self):
        return stats.weibull_min(c=self.shape, scale=self.scale)


PARAMETER_MODELS: Dict[DistributionFamily, Type[DistributionParameters]] = {
    DistributionFamily.EXPONENTIAL: ExponentialParams,
    DistributionFamily.NORMAL: NormalParams,
    DistributionFamily.UNIFORM: UniformParams,
    DistributionFamily.GAMMA: GammaParams,
    DistributionFamily.BETA: BetaParams,
    DistributionFamily.LOGNORMAL: LognormalParams,
    DistributionFamily.CHI_SQUARED: ChiSquaredParams,
    DistributionFamily.WEIBULL: WeibullParams,
}


def resolve_family(name: Union[str, DistributionFamily]) -> DistributionFamily:
    """Map a user-facing family name onto :class:`DistributionFamily`."""
    if isinstance(name, DistributionFamily):
        return name
    key = str(name).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return DistributionFamily(key)
    except ValueError:
        pass
    if key in _ALIASES:
        return _ALIASES[key]
    raise UnknownDistributionFamily(str(name))


@dataclass(frozen=True)
class DistributionSpec:
    """A distribution family together with its validated parameter record."""

    family: DistributionFamily
    parameters: DistributionParameters
    fallback_from: Optional[str] = None

    def __post_init__(self) -> None:
        expected = PARAMETER_MODELS[self.family]
        if not isinstance(self.parameters, expected):
            raise TypeError(
                f"{self.family.value} expects {expected.__name__}, "
                f"got {type(self.parameters).__name__}"
            )

    @classmethod
    def build(cls, family: Union[str, DistributionFamily], **overrides: float) -> "DistributionSpec":
        """Construct a spec for a known family; unknown families raise."""
        resolved = resolve_family(family)
        return cls(family=resolved, parameters=PARAMETER_MODELS[resolved](**overrides))

    @classmethod
    def from_name(
        cls,
        name: Union[str, DistributionFamily],
        overrides: Optional[Mapping[str, float]] = None,
    ) -> "DistributionSpec":
        """
        Construct a spec from a free-form family name.

        Unrecognised names fall back to :data:`DEFAULT_FAMILY` with its default
        parameters; the overrides belonged to the unknown family and are dropped.
        """
        overrides = dict(overrides or {})
        try:
            family = resolve_family(name)
        except UnknownDistributionFamily as exc:
            LOGGER.warning(
                "%s; falling back to %s with default parameters", exc, DEFAULT_FAMILY.value
            )
            return cls(
                family=DEFAULT_FAMILY,
                parameters=PARAMETER_MODELS[DEFAULT_FAMILY](),
                fallback_from=exc.name,
            )
        return cls(family=family, parameters=PARAMETER_MODELS[family](**overrides))

    # ---------------------------------------------------------------- Sampling
    def draw(self, rng: np.random.Generator, size: Size) -> np.ndarray:
        """Draw i.i.d. values with the given shape."""
        return np.asarray(self.parameters.draw(rng, size), dtype=float)

    @property
    def mean(self) -> float:
        return self.parameters.population_mean

    @property
    def sd(self) -> float:
        return self.parameters.population_sd

    def pdf(self, x: np.ndarray) -> np.ndarray:
        return self.parameters.pdf(x)

    def describe(self) -> str:
        params = ", ".join(
            f"{key}={value:g}" for key, value in self.parameters.model_dump().items()
        )
        return f"{self.family.value}({params})"

    def to_metadata(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "family": self.family.value,
            "parameters": self.parameters.model_dump(),
        }
        if self.fallback_from is not None:
            payload["fallback_from"] = self.fallback_from
        return payload


__all__ = [
    "DistributionFamily",
    "DEFAULT_FAMILY",
    "DistributionParameters",
    "ExponentialParams",
    "NormalParams",
    "UniformParams",
    "GammaParams",
    "BetaParams",
    "LognormalParams",
    "ChiSquaredParams",
    "WeibullParams",
    "PARAMETER_MODELS",
    "resolve_family",
    "DistributionSpec",
]
