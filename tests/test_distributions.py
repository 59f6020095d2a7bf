import dataclasses
import unittest

import numpy as np

from stat_explainers.core.distributions import (
    DEFAULT_FAMILY,
    DistributionFamily,
    DistributionSpec,
    ExponentialParams,
    NormalParams,
    resolve_family,
)
from stat_explainers.core.validator import UnknownDistributionFamily


class ResolveFamilyTests(unittest.TestCase):
    def test_canonical_names(self) -> None:
        for family in DistributionFamily:
            self.assertIs(resolve_family(family.value), family)

    def test_names_are_normalised(self) -> None:
        self.assertIs(resolve_family("Chi-Squared"), DistributionFamily.CHI_SQUARED)
        self.assertIs(resolve_family("  LogNormal "), DistributionFamily.LOGNORMAL)
        self.assertIs(resolve_family("chisq"), DistributionFamily.CHI_SQUARED)
        self.assertIs(resolve_family("Gaussian"), DistributionFamily.NORMAL)

    def test_unknown_name_raises(self) -> None:
        with self.assertRaises(UnknownDistributionFamily):
            resolve_family("cauchy")


class DistributionSpecTests(unittest.TestCase):
    def test_defaults_applied_once_at_construction(self) -> None:
        spec = DistributionSpec.build("exponential")
        self.assertEqual(spec.parameters, ExponentialParams(rate=1.0))
        self.assertEqual(DistributionSpec.build("normal").parameters, NormalParams(mean=0.0, sd=1.0))

    def test_theoretical_moments(self) -> None:
        spec = DistributionSpec.build("exponential", rate=0.5)
        self.assertAlmostEqual(spec.mean, 2.0)
        self.assertAlmostEqual(spec.sd, 2.0)
        uniform = DistributionSpec.build("uniform", low=0.0, high=12.0)
        self.assertAlmostEqual(uniform.mean, 6.0)
        self.assertAlmostEqual(uniform.sd, 12.0 / np.sqrt(12.0))
        chi = DistributionSpec.build("chi_squared", df=4)
        self.assertAlmostEqual(chi.mean, 4.0)
        self.assertAlmostEqual(chi.sd, np.sqrt(8.0))

    def test_invalid_parameters_rejected(self) -> None:
        with self.assertRaises(ValueError):
            DistributionSpec.build("exponential", rate=0.0)
        with self.assertRaises(ValueError):
            DistributionSpec.build("uniform", low=2.0, high=1.0)
        with self.assertRaises(ValueError):
            DistributionSpec.build("normal", rate=1.0)

    def test_spec_is_immutable(self) -> None:
        spec = DistributionSpec.build("gamma", shape=3.0)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            spec.family = DistributionFamily.BETA  # type: ignore[misc]
        with self.assertRaises(ValueError):
            spec.parameters.shape = 4.0  # type: ignore[misc]

    def test_mismatched_parameter_record_rejected(self) -> None:
        with self.assertRaises(TypeError):
            DistributionSpec(family=DistributionFamily.BETA, parameters=NormalParams())

    def test_unknown_family_falls_back_with_warning(self) -> None:
        with self.assertLogs("stat_explainers.core.distributions", level="WARNING") as logs:
            spec = DistributionSpec.from_name("cauchy", {"scale": 2.0})
        self.assertIs(spec.family, DEFAULT_FAMILY)
        self.assertEqual(spec.parameters, NormalParams())
        self.assertEqual(spec.fallback_from, "cauchy")
        self.assertEqual(spec.to_metadata()["fallback_from"], "cauchy")
        self.assertIn("cauchy", logs.output[0])

    def test_known_family_keeps_overrides(self) -> None:
        spec = DistributionSpec.from_name("weibull", {"shape": 1.5, "scale": 3.0})
        self.assertIs(spec.family, DistributionFamily.WEIBULL)
        self.assertIsNone(spec.fallback_from)
        self.assertEqual(spec.to_metadata()["parameters"], {"shape": 1.5, "scale": 3.0})

    def test_every_family_draws_near_its_mean(self) -> None:
        size = 20000
        for family in DistributionFamily:
            with self.subTest(family=family.value):
                spec = DistributionSpec.build(family)
                values = spec.draw(np.random.default_rng(11), size)
                self.assertEqual(values.shape, (size,))
                self.assertTrue(np.all(np.isfinite(values)))
                tolerance = 6 * spec.sd / np.sqrt(size)
                self.assertAlmostEqual(values.mean(), spec.mean, delta=tolerance)

    def test_draw_supports_matrix_shape(self) -> None:
        spec = DistributionSpec.build("beta")
        values = spec.draw(np.random.default_rng(1), (50, 4))
        self.assertEqual(values.shape, (50, 4))
        self.assertTrue(np.all((values > 0) & (values < 1)))

    def test_describe(self) -> None:
        self.assertEqual(DistributionSpec.build("exponential", rate=0.5).describe(), "exponential(rate=0.5)")


if __name__ == "__main__":
    unittest.main()
