"""High-level orchestration for the statistics demonstrations."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from .config import DEFAULT_RANDOM_SEED
from .core.aggregator import AggregatorConfig, aggregate
from .core.degrees_of_freedom import DegreesOfFreedomConfig, compare_variance_estimators
from .core.sampler import SamplerConfig, run_sampler
from .core.sampling_validation import validate_aggregation, validate_sampling_run
from .core.statistics import summarize
from .core.validator import ValidationError
from .models.results import DemoResult, EngineResults

LOGGER = logging.getLogger(__name__)

SAMPLING_DEMO = "sampling_distribution"
AGGREGATION_DEMO = "variable_sum"
DEGREES_OF_FREEDOM_DEMO = "degrees_of_freedom"
ALL_DEMOS = (SAMPLING_DEMO, AGGREGATION_DEMO, DEGREES_OF_FREEDOM_DEMO)

# Counts whose full sum series are kept as a table for plotting.
SHOWCASE_COUNTS = (1, 2, 5, 10, 30)

ProgressCallback = Callable[[int, int, str], None]


class DemoEngine:
    """Entry point for configuring and running the demonstrations."""

    def __init__(self, random_seed: Optional[int] = DEFAULT_RANDOM_SEED) -> None:
        self.random_seed = random_seed
        self._sampler_config: Optional[SamplerConfig] = None
        self._aggregator_config: Optional[AggregatorConfig] = None
        self._dof_config: Optional[DegreesOfFreedomConfig] = None

    # ----------------------------------------------------------- Configuration
    def configure_sampling(self, config: SamplerConfig) -> None:
        self._sampler_config = config

    def configure_aggregation(self, config: AggregatorConfig) -> None:
        self._aggregator_config = config

    def configure_degrees_of_freedom(self, config: DegreesOfFreedomConfig) -> None:
        self._dof_config = config

    def sampler_config(self) -> SamplerConfig:
        return self._sampler_config or SamplerConfig(random_seed=self.random_seed)

    def aggregator_config(self) -> AggregatorConfig:
        return self._aggregator_config or AggregatorConfig(random_seed=self.random_seed)

    def degrees_of_freedom_config(self) -> DegreesOfFreedomConfig:
        return self._dof_config or DegreesOfFreedomConfig(random_seed=self.random_seed)

    # ------------------------------------------------------------ Demonstrations
    def run_sampling_demo(self, config: Optional[SamplerConfig] = None) -> DemoResult:
        """Population, resampled means and their summaries."""
        config = config or self.sampler_config()
        spec, population, run = run_sampler(config)

        population_summary = summarize(population.values)
        means_summary = summarize(run.sample_means)
        expected_se = spec.sd / run.sample_size**0.5
        validation = validate_sampling_run(run, spec)
        if validation.warnings:
            LOGGER.warning("Sampling run deviates from theory: %s", ", ".join(validation.warnings))

        summary_table = pd.DataFrame(
            [
                {"series": "population", **population_summary.to_row()},
                {"series": "sample_means", **means_summary.to_row()},
            ]
        )
        return DemoResult(
            demo_id=SAMPLING_DEMO,
            summaries={"population": population_summary, "sample_means": means_summary},
            tables={
                "population": population.to_frame(),
                "sample_means": run.to_frame(),
                "summary": summary_table,
            },
            metadata={
                "config": config.to_metadata(),
                "distribution": spec.to_metadata(),
                "theoretical_mean": spec.mean,
                "theoretical_sd": spec.sd,
                "theoretical_standard_error": expected_se,
                "observed_mean_of_means": means_summary.mean,
                "observed_standard_error": means_summary.standard_deviation,
            },
            validation=validation.to_dict(),
        )

    def run_aggregation_demo(self, config: Optional[AggregatorConfig] = None) -> DemoResult:
        """Sums of 1..K variables, their summaries and convergence points."""
        config = config or self.aggregator_config()
        run = aggregate(config)
        validation = validate_aggregation(run)
        if validation.warnings:
            LOGGER.warning("Sum series deviate from theory: %s", ", ".join(validation.warnings))

        showcase = [count for count in SHOWCASE_COUNTS if count <= config.max_variables]
        if config.max_variables not in showcase:
            showcase.append(config.max_variables)
        return DemoResult(
            demo_id=AGGREGATION_DEMO,
            summaries={f"k={count}": summary for count, summary in run.summaries.items()},
            tables={
                "summary": run.summary_frame(),
                "sum_series": run.long_frame(showcase),
            },
            metadata={
                "config": config.to_metadata(),
                "distribution": run.spec.to_metadata(),
                "convergence": run.convergence.model_dump(),
                "convergence_display": run.convergence.describe(),
                "thresholds": {
                    "skewness": config.skewness_threshold,
                    "kurtosis": config.kurtosis_threshold,
                    "combined": config.combined_threshold,
                },
                "showcase_counts": showcase,
            },
            validation=validation.to_dict(),
        )

    def run_degrees_of_freedom_demo(
        self, config: Optional[DegreesOfFreedomConfig] = None
    ) -> DemoResult:
        """Compare the n and n - 1 variance estimators over repeated samples."""
        config = config or self.degrees_of_freedom_config()
        spec = config.spec()
        table, summary = compare_variance_estimators(
            spec, config.sample_size, config.repetitions, config.random_seed
        )
        return DemoResult(
            demo_id=DEGREES_OF_FREEDOM_DEMO,
            summaries={
                "variance_n": summarize(table["variance_n"]),
                "variance_n_minus_1": summarize(table["variance_n_minus_1"]),
            },
            tables={"variance_estimates": table, "summary": pd.DataFrame([summary])},
            metadata={
                "config": config.to_metadata(),
                "distribution": spec.to_metadata(),
                **summary,
            },
        )

    # ---------------------------------------------------------------- Execution
    def run_all(
        self,
        demos: Sequence[str] = ALL_DEMOS,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> EngineResults:
        """
        Run the selected demonstrations in order.

        A demonstration that fails validation is recorded with status ``error``
        and the remaining demonstrations still run.
        """
        runners: Dict[str, Callable[[], DemoResult]] = {
            SAMPLING_DEMO: self.run_sampling_demo,
            AGGREGATION_DEMO: self.run_aggregation_demo,
            DEGREES_OF_FREEDOM_DEMO: self.run_degrees_of_freedom_demo,
        }
        unknown: List[str] = [demo for demo in demos if demo not in runners]
        if unknown:
            raise ValidationError(f"Unknown demonstration(s): {', '.join(unknown)}")

        total = len(demos)

        def emit_progress(step: int, message: str) -> None:
            if progress_callback:
                try:
                    progress_callback(step, total, message)
                except Exception:  # pragma: no cover - guard rail
                    LOGGER.debug("Progress callback raised", exc_info=True)

        results = EngineResults()
        for index, demo_id in enumerate(demos, start=1):
            emit_progress(index - 1, f"Demonstration {index}/{total}: {demo_id}")
            try:
                result = runners[demo_id]()
            except (ValidationError, ValueError) as exc:
                LOGGER.warning("Demonstration %s failed: %s", demo_id, exc)
                result = DemoResult.failed(demo_id, exc)
            results.add_result(result)
        emit_progress(total, "Demonstrations complete")
        return results


__all__ = [
    "SAMPLING_DEMO",
    "AGGREGATION_DEMO",
    "DEGREES_OF_FREEDOM_DEMO",
    "ALL_DEMOS",
    "DemoEngine",
]
