"""Dispatch a table and a chart kind to the Plotly or matplotlib builders."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Union

import matplotlib.pyplot as plt
import pandas as pd
import plotly.graph_objects as go

from . import static_plots
from .chart_components import (
    build_density_overlay,
    build_histogram_figure,
    build_line_chart,
    build_qq_plot,
    build_scatter_plot,
)

Figure = Union[go.Figure, plt.Figure]


class ChartKind(str, Enum):
    """Supported chart kinds."""

    HISTOGRAM = "histogram"
    DENSITY_OVERLAY = "density_overlay"
    SCATTER = "scatter"
    QQ = "qq"
    LINE = "line"


class Backend(str, Enum):
    PLOTLY = "plotly"
    MATPLOTLIB = "matplotlib"


_BUILDERS: Dict[Backend, Dict[ChartKind, Callable[..., Any]]] = {
    Backend.PLOTLY: {
        ChartKind.HISTOGRAM: build_histogram_figure,
        ChartKind.DENSITY_OVERLAY: build_density_overlay,
        ChartKind.SCATTER: build_scatter_plot,
        ChartKind.QQ: build_qq_plot,
        ChartKind.LINE: build_line_chart,
    },
    Backend.MATPLOTLIB: {
        ChartKind.HISTOGRAM: static_plots.plot_histogram,
        ChartKind.DENSITY_OVERLAY: static_plots.plot_density_overlay,
        ChartKind.SCATTER: static_plots.plot_scatter,
        ChartKind.QQ: static_plots.plot_qq,
        ChartKind.LINE: static_plots.plot_lines,
    },
}


def render_chart(
    table: pd.DataFrame,
    kind: Union[str, ChartKind],
    *,
    backend: Union[str, Backend] = Backend.PLOTLY,
    **options: Any,
) -> Figure:
    """
    Render ``table`` as a chart of the given kind.

    Keyword options are forwarded to the builder: ``columns``/``title``/``nbins``/
    ``reference_lines`` for histograms, ``column``/``reference`` for density
    overlays and Q-Q plots, ``x``/``y`` for scatter plots and
    ``x``/``columns``/``reference_lines`` for line charts.
    """
    try:
        kind = ChartKind(kind)
        backend = Backend(backend)
    except ValueError as exc:
        raise ValueError(f"Unsupported chart request: {exc}") from exc
    if not isinstance(table, pd.DataFrame):
        table = pd.DataFrame(table)
    return _BUILDERS[backend][kind](table, **options)


__all__ = ["ChartKind", "Backend", "Figure", "render_chart"]
