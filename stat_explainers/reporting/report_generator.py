"""Persist demonstration outputs (tables, summaries, charts) for the document layer."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from ..config import OUTPUT_ROOT
from ..engine import AGGREGATION_DEMO, DEGREES_OF_FREEDOM_DEMO, SAMPLING_DEMO
from ..models.results import DemoResult, EngineResults
from ..visualization import Backend, ChartKind, render_chart, save_figure
from ..visualization.chart_renderer import Figure

LOGGER = logging.getLogger(__name__)

FigureRecipe = Tuple[str, Callable[[], Figure]]


def _json_default(obj: object) -> object:
    """JSON serializer that handles numpy/path objects gracefully."""
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _sampling_recipes(result: DemoResult, backend: Backend) -> List[FigureRecipe]:
    tables = result.tables
    meta = result.metadata
    reference = (meta["theoretical_mean"], meta["theoretical_standard_error"])
    return [
        (
            "population_histogram",
            lambda: render_chart(
                tables["population"],
                ChartKind.HISTOGRAM,
                backend=backend,
                title="Population",
                reference_lines={"Population mean": meta["theoretical_mean"]},
            ),
        ),
        (
            "sample_means_density",
            lambda: render_chart(
                tables["sample_means"],
                ChartKind.DENSITY_OVERLAY,
                backend=backend,
                column="sample_mean",
                reference=reference,
                title="Sampling Distribution of the Mean",
            ),
        ),
        (
            "sample_means_qq",
            lambda: render_chart(
                tables["sample_means"],
                ChartKind.QQ,
                backend=backend,
                column="sample_mean",
                title="Sample Means vs Normal",
            ),
        ),
        (
            "mean_vs_sd_scatter",
            lambda: render_chart(
                tables["sample_means"],
                ChartKind.SCATTER,
                backend=backend,
                x="sample_mean",
                y="sample_sd",
                title="Sample Mean vs Sample SD",
            ),
        ),
    ]


def _aggregation_recipes(result: DemoResult, backend: Backend) -> List[FigureRecipe]:
    tables = result.tables
    thresholds = result.metadata.get("thresholds", {})
    recipes: List[FigureRecipe] = [
        (
            "shape_convergence",
            lambda: render_chart(
                tables["summary"],
                ChartKind.LINE,
                backend=backend,
                x="variables",
                columns=["abs_skewness", "abs_excess_kurtosis"],
                title="Skewness and Excess Kurtosis by Number of Variables",
                reference_lines={
                    f"threshold {value:g}": value
                    for value in sorted({thresholds.get("skewness", 0.5), thresholds.get("kurtosis", 0.5)})
                },
            ),
        )
    ]
    long_table = tables["sum_series"]
    wide = {
        f"k={count}": group["value"].to_numpy()
        for count, group in long_table.groupby("variables")
    }
    if wide:
        recipes.append(
            (
                "sum_histograms",
                lambda: render_chart(
                    pd.DataFrame({label: pd.Series(values) for label, values in wide.items()}),
                    ChartKind.HISTOGRAM,
                    backend=backend,
                    title="Sums of Independent Variables",
                ),
            )
        )
        largest = list(wide)[-1]
        recipes.append(
            (
                "largest_sum_qq",
                lambda: render_chart(
                    pd.DataFrame({largest: wide[largest]}),
                    ChartKind.QQ,
                    backend=backend,
                    title=f"Sum of {largest.split('=')[1]} Variables vs Normal",
                ),
            )
        )
    return recipes


def _dof_recipes(result: DemoResult, backend: Backend) -> List[FigureRecipe]:
    table = result.tables["variance_estimates"]
    return [
        (
            "variance_estimators",
            lambda: render_chart(
                table,
                ChartKind.HISTOGRAM,
                backend=backend,
                columns=["variance_n", "variance_n_minus_1"],
                title="Variance Estimates: n vs n - 1 Divisor",
                reference_lines={"True variance": result.metadata["true_variance"]},
            ),
        )
    ]


_RECIPES: Dict[str, Callable[[DemoResult, Backend], List[FigureRecipe]]] = {
    SAMPLING_DEMO: _sampling_recipes,
    AGGREGATION_DEMO: _aggregation_recipes,
    DEGREES_OF_FREEDOM_DEMO: _dof_recipes,
}


def build_demo_figures(
    result: DemoResult,
    backend: Union[str, Backend] = Backend.PLOTLY,
) -> Dict[str, Figure]:
    """Render the standard figures of one demonstration; failures are logged and skipped."""
    backend = Backend(backend)
    if not result.ok or result.demo_id not in _RECIPES:
        return {}
    figures: Dict[str, Figure] = {}
    for name, build in _RECIPES[result.demo_id](result, backend):
        try:
            figures[name] = build()
        except (KeyError, ValueError) as exc:
            LOGGER.warning("Failed to build figure %s for %s: %s", name, result.demo_id, exc)
    return figures


class ReportGenerator:
    """Persist demonstration outputs to disk (tables, summaries, charts)."""

    def __init__(
        self,
        output_dir: Union[str, Path, None] = None,
        *,
        timestamped: bool = False,
        run_label: Optional[str] = None,
    ) -> None:
        base_dir = Path(output_dir) if output_dir is not None else OUTPUT_ROOT
        base_dir.mkdir(parents=True, exist_ok=True)
        if timestamped:
            run_label = run_label or datetime.now(timezone.utc).strftime("run_%Y%m%d_%H%M%S")
            self.output_dir = base_dir / run_label
        else:
            self.output_dir = base_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.base_dir = base_dir
        self.run_label = self.output_dir.name

    # ------------------------------------------------------------------ helpers
    def _write_json(self, payload: Dict[str, object], filename: str) -> Path:
        path = self.output_dir / filename
        with path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, default=_json_default)
        return path

    def _export_tables(self, tables: Optional[Dict[str, pd.DataFrame]], directory: Path) -> Dict[str, Path]:
        output: Dict[str, Path] = {}
        if not tables:
            return output
        directory.mkdir(parents=True, exist_ok=True)
        for key, table in tables.items():
            if table is None or not isinstance(table, pd.DataFrame) or table.empty:
                continue
            path = directory / f"{key}.csv"
            table.to_csv(path, index=False)
            output[key] = path
        return output

    def _export_figures(self, figures: Dict[str, Figure], directory: Path) -> Dict[str, Path]:
        output: Dict[str, Path] = {}
        if not figures:
            return output
        directory.mkdir(parents=True, exist_ok=True)
        for name, figure in figures.items():
            try:
                if isinstance(figure, go.Figure):
                    path = directory / f"{name}.html"
                    figure.write_html(str(path), include_plotlyjs="cdn")
                else:
                    path = save_figure(figure, directory / f"{name}.png")
            except (OSError, ValueError) as exc:
                LOGGER.warning("Unable to save figure %s: %s", name, exc)
                continue
            output[name] = path
        return output

    # ------------------------------------------------------------------- export
    def export(
        self,
        results: EngineResults,
        *,
        backend: Union[str, Backend] = Backend.PLOTLY,
        include_figures: bool = True,
    ) -> Dict[str, object]:
        """Write every demonstration's tables and figures plus a ``summary.json`` manifest."""
        manifest: Dict[str, object] = {
            "run_label": self.run_label,
            "generated_at": datetime.now(timezone.utc),
            "demos": {},
        }
        for demo_id, result in results.demo_results.items():
            demo_dir = self.output_dir / demo_id
            entry: Dict[str, object] = {
                "status": result.status,
                "error": result.error,
                "metadata": result.metadata,
                "validation": result.validation,
                "summaries": {label: summary.model_dump() for label, summary in result.summaries.items()},
            }
            if result.ok:
                entry["tables"] = self._export_tables(result.tables, demo_dir / "tables")
                if include_figures:
                    figures = build_demo_figures(result, backend)
                    entry["figures"] = self._export_figures(figures, demo_dir / "figures")
            manifest["demos"][demo_id] = entry  # type: ignore[index]
            LOGGER.info("Exported %s (%s) to %s", demo_id, result.status, demo_dir)

        path = self._write_json(manifest, "summary.json")
        manifest["manifest_path"] = path
        return manifest


__all__ = ["ReportGenerator", "build_demo_figures"]
