"""Reusable Plotly chart components for the demonstrations."""

from .distribution_histogram import build_histogram_figure
from .density_overlay import build_density_overlay
from .qq_plot import build_qq_plot
from .scatter_plot import build_scatter_plot
from .convergence_plot import build_line_chart

__all__ = [
    "build_histogram_figure",
    "build_density_overlay",
    "build_qq_plot",
    "build_scatter_plot",
    "build_line_chart",
]
