"""Static matplotlib renditions of the demonstration charts."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.ticker import MaxNLocator

from .chart_components.density_overlay import normal_curve
from .chart_components.qq_plot import normal_quantile_pairs
from .themes import DEFAULT_THEME, series_color
from .utils.data_reduction import finite_values, histogram_bins, numeric_columns, thin_rows


def _setup_figure(figsize=(10, 6)):
    plt.style.use("seaborn-v0_8")
    fig, ax = plt.subplots(figsize=figsize)
    return fig, ax


def _finish_axes(ax, *, title: str, xlabel: str, ylabel: str) -> None:
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.25, linestyle="--")
    ax.xaxis.set_major_locator(MaxNLocator(8))
    for spine in ("top", "right"):
        if spine in ax.spines:
            ax.spines[spine].set_visible(False)


def plot_histogram(
    table: pd.DataFrame,
    *,
    columns: Optional[Sequence[str]] = None,
    title: str = "Histogram",
    nbins: Optional[int] = None,
    reference_lines: Optional[Dict[str, float]] = None,
) -> plt.Figure:
    """Overlay a histogram for each selected column."""
    selected = numeric_columns(table, columns)
    fig, ax = _setup_figure()
    for index, column in enumerate(selected):
        values = finite_values(table[column])
        ax.hist(
            values,
            bins=nbins or histogram_bins(values.size),
            color=series_color(index),
            alpha=0.75 if len(selected) == 1 else 0.5,
            edgecolor="black",
            label=str(column),
        )
    for label, value in (reference_lines or {}).items():
        ax.axvline(value, color=DEFAULT_THEME["palette"]["reference"], linestyle="--", linewidth=2)
        ax.text(value, ax.get_ylim()[1] * 0.95, label, rotation=90, ha="right", va="top")
    if len(selected) > 1:
        ax.legend()
    _finish_axes(ax, title=title, xlabel=selected[0] if len(selected) == 1 else "Value", ylabel="Frequency")
    fig.tight_layout()
    return fig


def plot_density_overlay(
    table: pd.DataFrame,
    *,
    column: Optional[str] = None,
    reference: Optional[Tuple[float, float]] = None,
    title: str = "Distribution with Normal Overlay",
) -> plt.Figure:
    """Density histogram with the fitted (and optionally theoretical) normal curve."""
    palette = DEFAULT_THEME["palette"]
    column = column or numeric_columns(table)[0]
    numeric_columns(table, [column])
    values = finite_values(table[column])
    if values.size < 2:
        raise ValueError("Density overlay requires at least two finite values")

    fig, ax = _setup_figure()
    ax.hist(values, bins=histogram_bins(values.size), density=True, color=palette["sample"], alpha=0.6, edgecolor="black")
    mean = float(values.mean())
    sd = float(values.std(ddof=1))
    if sd > 0:
        xs, ys = normal_curve(values, mean, sd)
        ax.plot(xs, ys, color=palette["theory"], linewidth=2.5, label=f"Normal fit (mean={mean:.3g}, sd={sd:.3g})")
    if reference is not None:
        xs, ys = normal_curve(values, reference[0], reference[1])
        ax.plot(
            xs,
            ys,
            color=palette["reference"],
            linestyle="--",
            linewidth=2,
            label=f"Theoretical normal (mean={reference[0]:.3g}, sd={reference[1]:.3g})",
        )
    ax.legend()
    _finish_axes(ax, title=title, xlabel=str(column), ylabel="Density")
    fig.tight_layout()
    return fig


def plot_qq(
    table: pd.DataFrame,
    *,
    column: Optional[str] = None,
    title: str = "Normal Q-Q Plot",
    max_points: int = 5000,
) -> plt.Figure:
    palette = DEFAULT_THEME["palette"]
    column = column or numeric_columns(table)[0]
    numeric_columns(table, [column])
    values = finite_values(table[column])
    if values.size < 3:
        raise ValueError("Q-Q plot requires at least three finite values")

    theoretical, ordered, slope, intercept = normal_quantile_pairs(values)
    if theoretical.size > max_points:
        keep = np.linspace(0, theoretical.size - 1, max_points).astype(int)
        theoretical, ordered = theoretical[keep], ordered[keep]

    fig, ax = _setup_figure(figsize=(7, 7))
    ax.scatter(theoretical, ordered, s=8, alpha=0.6, color=palette["sample"], label="Sample quantiles")
    line_x = np.array([theoretical.min(), theoretical.max()])
    ax.plot(line_x, intercept + slope * line_x, color=palette["reference"], linestyle="--", label="Reference line")
    ax.legend()
    _finish_axes(ax, title=title, xlabel="Theoretical quantiles (standard normal)", ylabel=f"Sample quantiles ({column})")
    fig.tight_layout()
    return fig


def plot_scatter(
    table: pd.DataFrame,
    *,
    x: Optional[str] = None,
    y: Optional[str] = None,
    title: str = "Scatter Plot",
    max_points: int = 5000,
) -> plt.Figure:
    if x is None or y is None:
        available = numeric_columns(table)
        if len(available) < 2:
            raise ValueError("Scatter plot requires two numeric columns")
        x = x or available[0]
        y = y or next(col for col in available if col != x)
    numeric_columns(table, [x, y])
    data = thin_rows(table[[x, y]].dropna(), max_points)

    fig, ax = _setup_figure()
    ax.scatter(data[x], data[y], s=10, alpha=0.6, color=DEFAULT_THEME["palette"]["sample"])
    _finish_axes(ax, title=title, xlabel=str(x), ylabel=str(y))
    fig.tight_layout()
    return fig


def plot_lines(
    table: pd.DataFrame,
    *,
    x: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
    title: str = "Convergence",
    reference_lines: Optional[Dict[str, float]] = None,
) -> plt.Figure:
    available = numeric_columns(table)
    x = x or available[0]
    selected = numeric_columns(table, columns) if columns else [col for col in available if col != x]
    if not selected:
        raise ValueError("Line chart requires at least one y column")
    df = table.sort_values(x)

    fig, ax = _setup_figure()
    for index, column in enumerate(selected):
        ax.plot(df[x], df[column], marker="o", markersize=3, linewidth=2, color=series_color(index), label=str(column))
    for label, value in (reference_lines or {}).items():
        ax.axhline(value, color=DEFAULT_THEME["palette"]["reference"], linestyle=":", linewidth=1.5)
        ax.text(ax.get_xlim()[1], value, label, ha="right", va="bottom", fontsize=9)
    ax.legend()
    _finish_axes(ax, title=title, xlabel=str(x), ylabel="Value")
    fig.tight_layout()
    return fig


def save_figure(fig: plt.Figure, output_path: Path) -> Path:
    """Persist matplotlib figure to disk."""

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
    finally:
        plt.close(fig)
    return output_path


__all__ = [
    "plot_histogram",
    "plot_density_overlay",
    "plot_qq",
    "plot_scatter",
    "plot_lines",
    "save_figure",
]
