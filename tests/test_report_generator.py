import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from stat_explainers.core.aggregator import AggregatorConfig  # noqa: E402
from stat_explainers.core.degrees_of_freedom import DegreesOfFreedomConfig  # noqa: E402
from stat_explainers.core.sampler import SamplerConfig  # noqa: E402
from stat_explainers.engine import (  # noqa: E402
    AGGREGATION_DEMO,
    DEGREES_OF_FREEDOM_DEMO,
    SAMPLING_DEMO,
    DemoEngine,
)
from stat_explainers.models.results import DemoResult  # noqa: E402
from stat_explainers.reporting import ReportGenerator, build_demo_figures  # noqa: E402


class ReportGeneratorTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        engine = DemoEngine(random_seed=11)
        engine.configure_sampling(SamplerConfig(population_size=2000, sample_size=10, repetitions=500, random_seed=11))
        engine.configure_aggregation(AggregatorConfig(max_variables=5, repetitions=500, random_seed=11))
        engine.configure_degrees_of_freedom(DegreesOfFreedomConfig(repetitions=500, random_seed=11))
        cls.results = engine.run_all()

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.output_dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_figures_built_for_each_demo(self) -> None:
        figures = build_demo_figures(self.results.demo_results[SAMPLING_DEMO])
        self.assertEqual(
            set(figures),
            {"population_histogram", "sample_means_density", "sample_means_qq", "mean_vs_sd_scatter"},
        )
        figures = build_demo_figures(self.results.demo_results[AGGREGATION_DEMO])
        self.assertEqual(set(figures), {"shape_convergence", "sum_histograms", "largest_sum_qq"})
        figures = build_demo_figures(self.results.demo_results[DEGREES_OF_FREEDOM_DEMO])
        self.assertEqual(set(figures), {"variance_estimators"})

    def test_failed_demo_has_no_figures(self) -> None:
        failed = DemoResult.failed(SAMPLING_DEMO, ValueError("boom"))
        self.assertEqual(build_demo_figures(failed), {})

    def test_export_with_plotly(self) -> None:
        manifest = ReportGenerator(self.output_dir).export(self.results)
        summary_path = Path(manifest["manifest_path"])
        self.assertTrue(summary_path.exists())
        payload = json.loads(summary_path.read_text(encoding="utf-8"))
        self.assertEqual(set(payload["demos"]), {SAMPLING_DEMO, AGGREGATION_DEMO, DEGREES_OF_FREEDOM_DEMO})
        self.assertEqual(payload["demos"][SAMPLING_DEMO]["status"], "ok")
        self.assertIn("sample_means", payload["demos"][SAMPLING_DEMO]["summaries"])

        tables = self.output_dir / SAMPLING_DEMO / "tables"
        self.assertTrue((tables / "sample_means.csv").exists())
        self.assertTrue((tables / "summary.csv").exists())
        self.assertTrue((self.output_dir / AGGREGATION_DEMO / "figures" / "shape_convergence.html").exists())

    def test_export_with_matplotlib(self) -> None:
        ReportGenerator(self.output_dir).export(self.results, backend="matplotlib")
        figures = self.output_dir / DEGREES_OF_FREEDOM_DEMO / "figures"
        self.assertTrue((figures / "variance_estimators.png").exists())

    def test_export_without_figures(self) -> None:
        ReportGenerator(self.output_dir).export(self.results, include_figures=False)
        self.assertFalse((self.output_dir / SAMPLING_DEMO / "figures").exists())
        self.assertTrue((self.output_dir / SAMPLING_DEMO / "tables" / "population.csv").exists())

    def test_timestamped_run_directory(self) -> None:
        generator = ReportGenerator(self.output_dir, timestamped=True, run_label="first")
        self.assertEqual(generator.output_dir, self.output_dir / "first")
        self.assertEqual(generator.run_label, "first")

    def test_unsaved_figure_is_closed(self) -> None:
        figure, _ = plt.subplots()
        generator = ReportGenerator(self.output_dir)
        with mock.patch.object(figure, "savefig", side_effect=OSError("disk full")):
            with self.assertLogs("stat_explainers.reporting.report_generator", level="WARNING"):
                saved = generator._export_figures({"broken": figure}, self.output_dir / "figures")
        self.assertEqual(saved, {})
        self.assertFalse(plt.fignum_exists(figure.number))

    def test_failed_demo_exported_without_tables(self) -> None:
        engine = DemoEngine()
        engine.configure_aggregation(AggregatorConfig(max_variables=0))
        results = engine.run_all([AGGREGATION_DEMO])
        manifest = ReportGenerator(self.output_dir).export(results)
        entry = manifest["demos"][AGGREGATION_DEMO]
        self.assertEqual(entry["status"], "error")
        self.assertNotIn("tables", entry)


if __name__ == "__main__":
    unittest.main()
