import unittest

import numpy as np

from stat_explainers.core.degrees_of_freedom import (
    DegreesOfFreedomConfig,
    compare_variance_estimators,
    degrees_of_freedom,
)
from stat_explainers.core.distributions import DistributionSpec
from stat_explainers.core.validator import ValidationError


class DegreesOfFreedomTests(unittest.TestCase):
    def test_one_constraint_per_estimated_mean(self) -> None:
        self.assertEqual(degrees_of_freedom(10), 9)
        self.assertEqual(degrees_of_freedom(10, constraints=2), 8)
        self.assertEqual(degrees_of_freedom(4, constraints=0), 4)

    def test_no_free_values_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            degrees_of_freedom(1)
        with self.assertRaises(ValidationError):
            degrees_of_freedom(3, constraints=3)


class VarianceEstimatorTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        spec = DistributionSpec.build("normal", mean=0.0, sd=1.0)
        cls.table, cls.summary = compare_variance_estimators(spec, 5, 20000, 123)

    def test_n_minus_one_divisor_is_unbiased(self) -> None:
        self.assertAlmostEqual(self.summary["true_variance"], 1.0)
        self.assertAlmostEqual(self.summary["mean_variance_n_minus_1"], 1.0, delta=0.05)

    def test_n_divisor_underestimates(self) -> None:
        self.assertAlmostEqual(self.summary["mean_variance_n"], 0.8, delta=0.05)
        self.assertAlmostEqual(self.summary["expected_ratio_n"], 0.8)
        self.assertEqual(self.summary["degrees_of_freedom"], 4)

    def test_estimators_differ_by_constant_factor(self) -> None:
        np.testing.assert_allclose(
            self.table["variance_n"], self.table["variance_n_minus_1"] * 4 / 5
        )
        self.assertEqual(
            list(self.table.columns),
            ["repetition", "sample_mean", "variance_n", "variance_n_minus_1"],
        )
        self.assertEqual(len(self.table), 20000)

    def test_sample_size_of_one_rejected(self) -> None:
        spec = DistributionSpec.build("normal")
        with self.assertRaises(ValidationError):
            compare_variance_estimators(spec, 1, 10, 0)

    def test_config_defaults(self) -> None:
        config = DegreesOfFreedomConfig()
        self.assertEqual(config.spec().describe(), "normal(mean=0, sd=1)")
        self.assertEqual(config.to_metadata()["sample_size"], 5)


if __name__ == "__main__":
    unittest.main()
