"""Density-normalised histogram with normal curves overlaid."""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from scipy import stats

from ..themes import DEFAULT_THEME
from ..utils.data_reduction import finite_values, histogram_bins, numeric_columns


def normal_curve(values: np.ndarray, mean: float, sd: float, points: int = 200) -> Tuple[np.ndarray, np.ndarray]:
    """Normal density evaluated across the range of ``values`` padded by 10%."""
    low, high = float(values.min()), float(values.max())
    pad = 0.1 * max(high - low, sd, 1e-12)
    xs = np.linspace(low - pad, high + pad, points)
    return xs, stats.norm.pdf(xs, loc=mean, scale=sd)


def build_density_overlay(
    table: pd.DataFrame,
    *,
    column: Optional[str] = None,
    reference: Optional[Tuple[float, float]] = None,
    title: str = "Distribution with Normal Overlay",
    theme: Optional[dict] = None,
) -> go.Figure:
    """
    Plot ``column`` as a probability-density histogram with the normal curve fitted
    to its mean and standard deviation. ``reference`` adds a second, theoretical
    normal curve given as ``(mean, sd)``.
    """
    theme = theme or DEFAULT_THEME
    palette = theme["palette"]
    column = column or numeric_columns(table)[0]
    numeric_columns(table, [column])
    values = finite_values(table[column])
    if values.size < 2:
        raise ValueError("Density overlay requires at least two finite values")

    figure = go.Figure()
    figure.add_trace(
        go.Histogram(
            x=values,
            histnorm="probability density",
            nbinsx=histogram_bins(values.size),
            opacity=0.6,
            marker=dict(color=palette["sample"], line=dict(color="#424242", width=0.5)),
            name=str(column),
        )
    )

    mean = float(values.mean())
    sd = float(values.std(ddof=1))
    if sd > 0:
        xs, ys = normal_curve(values, mean, sd)
        figure.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                line=dict(color=palette["theory"], width=3),
                name=f"Normal fit (mean={mean:.3g}, sd={sd:.3g})",
            )
        )
    if reference is not None:
        ref_mean, ref_sd = reference
        xs, ys = normal_curve(values, ref_mean, ref_sd)
        figure.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                line=dict(color=palette["reference"], width=2, dash="dash"),
                name=f"Theoretical normal (mean={ref_mean:.3g}, sd={ref_sd:.3g})",
            )
        )

    figure.update_layout(
        template=theme["plotly_template"],
        title=title,
        margin=dict(l=60, r=30, t=60, b=50),
        xaxis=dict(title=str(column)),
        yaxis=dict(title="Density"),
        legend=dict(orientation="h", y=-0.2),
    )
    return figure
