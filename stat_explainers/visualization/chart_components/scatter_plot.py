"""Scatter plot of two numeric columns."""

from __future__ import annotations

from typing import Optional

import pandas as pd
import plotly.graph_objects as go

from ..themes import DEFAULT_THEME
from ..utils.data_reduction import numeric_columns, thin_rows


def build_scatter_plot(
    table: pd.DataFrame,
    *,
    x: Optional[str] = None,
    y: Optional[str] = None,
    title: str = "Scatter Plot",
    max_points: int = 5000,
    theme: Optional[dict] = None,
) -> go.Figure:
    theme = theme or DEFAULT_THEME
    palette = theme["palette"]
    if x is None or y is None:
        available = numeric_columns(table)
        if len(available) < 2:
            raise ValueError("Scatter plot requires two numeric columns")
        x = x or available[0]
        y = y or next(col for col in available if col != x)
    numeric_columns(table, [x, y])
    data = thin_rows(table[[x, y]].dropna(), max_points)

    figure = go.Figure(
        go.Scatter(
            x=data[x],
            y=data[y],
            mode="markers",
            marker=dict(color=palette["sample"], size=5, opacity=0.6),
            name=f"{y} vs {x}",
            hovertemplate=f"{x} %{{x:.3g}}<br>{y} %{{y:.3g}}<extra></extra>",
        )
    )
    figure.update_layout(
        template=theme["plotly_template"],
        title=title,
        margin=dict(l=60, r=30, t=60, b=50),
        xaxis=dict(title=str(x)),
        yaxis=dict(title=str(y)),
    )
    return figure
