import unittest

import numpy as np

from stat_explainers.core.statistics import (
    ANDERSON_DARLING,
    SHAPIRO_WILK,
    anderson_darling_p_value,
    kurtosis,
    run_normality_test,
    sample_mean,
    sample_standard_deviation,
    skewness,
    summarize,
)
from stat_explainers.core.validator import (
    InsufficientSampleSize,
    OutOfRangeForTest,
    ValidationError,
)


class DescriptiveStatisticsTests(unittest.TestCase):
    def test_standard_deviation_uses_n_minus_one(self) -> None:
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        self.assertAlmostEqual(sample_standard_deviation(values), np.sqrt(32 / 7))

    def test_dispersion_of_single_value_raises(self) -> None:
        with self.assertRaises(InsufficientSampleSize):
            sample_standard_deviation([3.0])
        with self.assertRaises(InsufficientSampleSize):
            sample_standard_deviation([])
        with self.assertRaises(InsufficientSampleSize):
            summarize([3.0])

    def test_mean_of_empty_sequence_raises(self) -> None:
        with self.assertRaises(InsufficientSampleSize):
            sample_mean([])

    def test_moment_estimators(self) -> None:
        values = [1.0, 2.0, 3.0, 4.0, 5.0]
        self.assertAlmostEqual(skewness(values), 0.0)
        # m2 = 2, m4 = 6.8
        self.assertAlmostEqual(kurtosis(values), 1.7)

    def test_right_skewed_data_has_positive_skewness(self) -> None:
        values = np.random.default_rng(5).exponential(size=5000)
        self.assertGreater(skewness(values), 1.0)
        self.assertGreater(kurtosis(values), 3.0)

    def test_constant_series_has_no_shape_statistics(self) -> None:
        summary = summarize([3.0, 3.0, 3.0])
        self.assertEqual(summary.standard_deviation, 0.0)
        self.assertIsNone(summary.skewness)
        self.assertIsNone(summary.kurtosis)
        self.assertIsNone(summary.normality_p_value)

    def test_nearly_constant_series_treated_as_constant(self) -> None:
        values = [1e6, 1e6, 1e6 + 1e-9, 1e6, 1e6]
        self.assertIsNone(skewness(values))
        self.assertIsNone(kurtosis(values))
        summary = summarize(values)
        self.assertIsNone(summary.skewness)
        self.assertIsNone(summary.normality_test)
        self.assertEqual(summary.skipped_tests, [SHAPIRO_WILK, ANDERSON_DARLING])

    def test_small_spread_on_large_offset_is_kept(self) -> None:
        values = [1e6 + 1e-3 * i for i in range(5)]
        self.assertAlmostEqual(skewness(values), 0.0, delta=1e-3)

    def test_non_finite_values_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            summarize([1.0, float("nan"), 2.0])


class NormalityTestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(2024)

    def test_shapiro_wilk_in_range(self) -> None:
        result = run_normality_test(SHAPIRO_WILK, self.rng.normal(size=100))
        self.assertEqual(result.name, SHAPIRO_WILK)
        self.assertGreaterEqual(result.p_value, 0.0)
        self.assertLessEqual(result.p_value, 1.0)

    def test_out_of_range_tests_raise(self) -> None:
        with self.assertRaises(OutOfRangeForTest):
            run_normality_test(SHAPIRO_WILK, self.rng.normal(size=6000))
        with self.assertRaises(OutOfRangeForTest):
            run_normality_test(SHAPIRO_WILK, [1.0, 2.0])
        with self.assertRaises(OutOfRangeForTest):
            run_normality_test(ANDERSON_DARLING, self.rng.normal(size=5))

    def test_unknown_test_name(self) -> None:
        with self.assertRaises(ValidationError):
            run_normality_test("kolmogorov", [1.0, 2.0, 3.0])

    def test_anderson_darling_rejects_exponential_data(self) -> None:
        result = run_normality_test(ANDERSON_DARLING, self.rng.exponential(size=500))
        self.assertLess(result.p_value, 0.001)

    def test_anderson_darling_p_value_decreases_with_statistic(self) -> None:
        p_values = [anderson_darling_p_value(stat, 100) for stat in (0.1, 0.3, 0.5, 1.0, 5.0)]
        self.assertEqual(p_values, sorted(p_values, reverse=True))
        self.assertAlmostEqual(anderson_darling_p_value(50.0, 100), 3.7e-24)

    def test_summary_fields_absent_when_test_out_of_range(self) -> None:
        summary = summarize(self.rng.normal(size=10000), tests=(SHAPIRO_WILK,))
        self.assertIsNone(summary.normality_test)
        self.assertIsNone(summary.normality_test_statistic)
        self.assertIsNone(summary.normality_p_value)
        self.assertEqual(summary.skipped_tests, [SHAPIRO_WILK])
        self.assertFalse(summary.tested)

    def test_summary_uses_first_applicable_test(self) -> None:
        large = summarize(self.rng.normal(size=10000))
        self.assertEqual(large.normality_test, ANDERSON_DARLING)
        self.assertEqual(large.skipped_tests, [SHAPIRO_WILK])
        small = summarize(self.rng.normal(size=200))
        self.assertEqual(small.normality_test, SHAPIRO_WILK)
        self.assertEqual(small.skipped_tests, [])

    def test_summary_without_tests(self) -> None:
        summary = summarize([1.0, 2.0, 4.0], tests=())
        self.assertEqual(summary.n, 3)
        self.assertAlmostEqual(summary.mean, 7 / 3)
        self.assertIsNone(summary.normality_p_value)
        self.assertEqual(summary.skipped_tests, [])


if __name__ == "__main__":
    unittest.main()
