"""Statistical explainer demonstrations: sampling distributions, the CLT and degrees of freedom."""

from .core.distributions import DistributionFamily, DistributionSpec
from .core.statistics import summarize
from .engine import DemoEngine
from .models.results import EngineResults, NormalitySummary

__version__ = "0.1.0"

__all__ = [
    "DistributionFamily",
    "DistributionSpec",
    "summarize",
    "DemoEngine",
    "EngineResults",
    "NormalitySummary",
]
