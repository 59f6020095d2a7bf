import unittest

from stat_explainers.core.aggregator import AggregatorConfig
from stat_explainers.core.degrees_of_freedom import DegreesOfFreedomConfig
from stat_explainers.core.sampler import SamplerConfig
from stat_explainers.core.validator import ValidationError
from stat_explainers.engine import (
    AGGREGATION_DEMO,
    ALL_DEMOS,
    DEGREES_OF_FREEDOM_DEMO,
    SAMPLING_DEMO,
    DemoEngine,
)


def _small_engine() -> DemoEngine:
    engine = DemoEngine(random_seed=7)
    engine.configure_sampling(SamplerConfig(population_size=5000, sample_size=30, repetitions=4000, random_seed=7))
    engine.configure_aggregation(AggregatorConfig(max_variables=6, repetitions=3000, random_seed=7))
    engine.configure_degrees_of_freedom(DegreesOfFreedomConfig(repetitions=2000, random_seed=7))
    return engine


class DemoEngineTests(unittest.TestCase):
    def test_default_configs_use_engine_seed(self) -> None:
        engine = DemoEngine(random_seed=42)
        self.assertEqual(engine.sampler_config().random_seed, 42)
        self.assertEqual(engine.aggregator_config().random_seed, 42)
        self.assertEqual(engine.degrees_of_freedom_config().random_seed, 42)

    def test_sampling_demo(self) -> None:
        result = _small_engine().run_sampling_demo()
        self.assertTrue(result.ok)
        self.assertEqual(set(result.tables), {"population", "sample_means", "summary"})
        self.assertEqual(len(result.tables["population"]), 5000)
        self.assertEqual(len(result.tables["sample_means"]), 4000)
        self.assertEqual(set(result.summaries), {"population", "sample_means"})
        self.assertAlmostEqual(result.metadata["theoretical_standard_error"], 2.0 / 30**0.5)
        self.assertAlmostEqual(
            result.metadata["observed_standard_error"],
            result.metadata["theoretical_standard_error"],
            delta=0.04,
        )
        self.assertEqual(result.validation["status"], "PASS")

    def test_aggregation_demo(self) -> None:
        result = _small_engine().run_aggregation_demo()
        self.assertTrue(result.ok)
        self.assertEqual(list(result.summaries), [f"k={k}" for k in range(1, 7)])
        self.assertEqual(sorted(result.tables["sum_series"]["variables"].unique()), [1, 2, 5, 6])
        self.assertEqual(result.metadata["showcase_counts"], [1, 2, 5, 6])
        self.assertEqual(set(result.metadata["convergence"]), {"skewness", "kurtosis", "combined"})
        self.assertEqual(result.metadata["convergence_display"]["skewness"], "not reached")

    def test_degrees_of_freedom_demo(self) -> None:
        result = _small_engine().run_degrees_of_freedom_demo()
        self.assertTrue(result.ok)
        self.assertEqual(set(result.summaries), {"variance_n", "variance_n_minus_1"})
        self.assertEqual(result.metadata["degrees_of_freedom"], 4)
        self.assertLess(result.metadata["mean_variance_n"], result.metadata["mean_variance_n_minus_1"])

    def test_run_all_reports_progress(self) -> None:
        calls = []
        results = _small_engine().run_all(progress_callback=lambda step, total, msg: calls.append((step, total)))
        self.assertEqual(list(results.demo_results), list(ALL_DEMOS))
        self.assertEqual(calls[-1], (3, 3))
        self.assertEqual(len(calls), 4)
        frame = results.summary_frame()
        self.assertEqual(set(frame["demo_id"]), set(ALL_DEMOS))

    def test_failed_demo_does_not_stop_others(self) -> None:
        engine = _small_engine()
        engine.configure_aggregation(AggregatorConfig(max_variables=0))
        with self.assertLogs("stat_explainers.engine", level="WARNING"):
            results = engine.run_all()
        self.assertFalse(results.demo_results[AGGREGATION_DEMO].ok)
        self.assertIn("max_variables", results.demo_results[AGGREGATION_DEMO].error)
        self.assertTrue(results.demo_results[SAMPLING_DEMO].ok)
        self.assertTrue(results.demo_results[DEGREES_OF_FREEDOM_DEMO].ok)

    def test_missing_size_does_not_stop_others(self) -> None:
        engine = _small_engine()
        engine.configure_sampling(SamplerConfig(sample_size=None, population_size=100, repetitions=10))
        results = engine.run_all(ALL_DEMOS)
        self.assertEqual(results.demo_results[SAMPLING_DEMO].status, "error")
        self.assertIn("sample_size", results.demo_results[SAMPLING_DEMO].error)
        self.assertTrue(results.demo_results[AGGREGATION_DEMO].ok)
        self.assertTrue(results.demo_results[DEGREES_OF_FREEDOM_DEMO].ok)

    def test_invalid_parameters_reported_as_failure(self) -> None:
        engine = _small_engine()
        engine.configure_sampling(SamplerConfig(parameters={"rate": -1.0}, population_size=100, repetitions=10))
        results = engine.run_all([SAMPLING_DEMO])
        self.assertEqual(results.demo_results[SAMPLING_DEMO].status, "error")

    def test_unknown_family_falls_back(self) -> None:
        engine = _small_engine()
        engine.configure_sampling(SamplerConfig(family="cauchy", population_size=2000, repetitions=1000))
        result = engine.run_sampling_demo()
        self.assertTrue(result.ok)
        self.assertEqual(result.metadata["distribution"]["family"], "normal")
        self.assertEqual(result.metadata["distribution"]["fallback_from"], "cauchy")
        self.assertAlmostEqual(result.metadata["theoretical_mean"], 0.0)

    def test_unknown_demo_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            DemoEngine().run_all(["bootstrap"])


if __name__ == "__main__":
    unittest.main()
