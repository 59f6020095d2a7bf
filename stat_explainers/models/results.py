"""Result data models for summaries and demonstration runs."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

NOT_REACHED = "not reached"


class NormalityTestResult(BaseModel):
    """Outcome of a single goodness-of-fit test against the normal distribution."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Test identifier, e.g. 'shapiro_wilk'")
    statistic: float = Field(..., description="Test statistic")
    p_value: float = Field(..., ge=0.0, le=1.0, description="Test p-value")


class NormalitySummary(BaseModel):
    """Descriptive statistics and (optionally) a normality test for one numeric series."""

    model_config = ConfigDict(frozen=True)

    n: int = Field(..., ge=2, description="Number of observations")
    mean: float = Field(..., description="Arithmetic mean")
    standard_deviation: float = Field(
        ..., ge=0.0, description="Sample standard deviation (n - 1 divisor)"
    )
    skewness: Optional[float] = Field(
        None, description="Third standardized moment; absent for zero-variance data"
    )
    kurtosis: Optional[float] = Field(
        None,
        description="Fourth standardized moment (normal = 3); absent for zero-variance data",
    )
    normality_test: Optional[str] = Field(
        None, description="Name of the test that produced the test fields"
    )
    normality_test_statistic: Optional[float] = Field(
        None, description="Statistic of the reported test; absent when no test applied"
    )
    normality_p_value: Optional[float] = Field(
        None, description="p-value of the reported test; absent when no test applied"
    )
    skipped_tests: List[str] = Field(
        default_factory=list,
        description="Requested tests skipped because the sample size was out of range",
    )

    @property
    def excess_kurtosis(self) -> Optional[float]:
        if self.kurtosis is None:
            return None
        return self.kurtosis - 3.0

    @property
    def tested(self) -> bool:
        return self.normality_p_value is not None

    def to_row(self) -> Dict[str, Any]:
        """Flatten into a single table row."""
        return {
            "n": self.n,
            "mean": self.mean,
            "standard_deviation": self.standard_deviation,
            "skewness": self.skewness,
            "kurtosis": self.kurtosis,
            "normality_test": self.normality_test,
            "normality_test_statistic": self.normality_test_statistic,
            "normality_p_value": self.normality_p_value,
        }


class ConvergencePoints(BaseModel):
    """Smallest variable count at which each normality criterion is met."""

    model_config = ConfigDict(frozen=True)

    skewness: Optional[int] = Field(None, description="First k with |skewness| below threshold")
    kurtosis: Optional[int] = Field(None, description="First k with |kurtosis - 3| below threshold")
    combined: Optional[int] = Field(
        None, description="First k with |skewness| + |kurtosis - 3| below threshold"
    )

    def describe(self) -> Dict[str, str]:
        """Human-readable form with explicit 'not reached' markers."""
        return {
            name: (str(value) if value is not None else NOT_REACHED)
            for name, value in (
                ("skewness", self.skewness),
                ("kurtosis", self.kurtosis),
                ("combined", self.combined),
            )
        }


class DemoResult(BaseModel):
    """Holds the tables, summaries and metadata produced by one demonstration."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    demo_id: str = Field(..., description="Demonstration identifier")
    status: str = Field(default="ok", description="'ok' or 'error'")
    error: Optional[str] = Field(default=None, description="Failure message when status is 'error'")
    summaries: Dict[str, NormalitySummary] = Field(
        default_factory=dict, description="Normality summaries keyed by series label"
    )
    tables: Dict[str, pd.DataFrame] = Field(
        default_factory=dict, description="Tabular outputs keyed by table name"
    )
    metadata: Dict[str, Any] = Field(default_factory=dict)
    validation: Optional[Dict[str, Any]] = Field(
        default=None, description="Outcome of checks against theoretical values"
    )

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def failed(cls, demo_id: str, exc: BaseException) -> "DemoResult":
        return cls(demo_id=demo_id, status="error", error=str(exc))


class EngineResults(BaseModel):
    """Aggregates all demonstration results."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    demo_results: Dict[str, DemoResult] = Field(
        default_factory=dict, description="Results keyed by demo id"
    )

    def add_result(self, result: DemoResult) -> None:
        """Store a demonstration result."""
        self.demo_results[result.demo_id] = result

    def summary_frame(self) -> pd.DataFrame:
        """Return one row per (demo, series) summary, plus a row for each failed demo."""
        rows = []
        for demo_id, result in self.demo_results.items():
            if not result.ok:
                rows.append({"demo_id": demo_id, "series": None, "status": result.status, "error": result.error})
                continue
            for label, summary in result.summaries.items():
                rows.append(
                    {
                        "demo_id": demo_id,
                        "series": label,
                        "status": result.status,
                        "error": None,
                        **summary.to_row(),
                    }
                )
        return pd.DataFrame(rows)


__all__ = [
    "NOT_REACHED",
    "NormalityTestResult",
    "NormalitySummary",
    "ConvergencePoints",
    "DemoResult",
    "EngineResults",
]
