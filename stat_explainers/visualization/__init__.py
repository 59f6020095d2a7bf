"""Visualization utilities for the statistics demonstrations."""

from __future__ import annotations

from .chart_renderer import Backend, ChartKind, render_chart
from .static_plots import save_figure

__all__ = ["Backend", "ChartKind", "render_chart", "save_figure"]
