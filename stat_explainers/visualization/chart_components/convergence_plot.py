"""Multi-series line chart, used for convergence of shape statistics."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from ..themes import DEFAULT_THEME, series_color
from ..utils.data_reduction import numeric_columns


def build_line_chart(
    table: pd.DataFrame,
    *,
    x: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
    title: str = "Convergence",
    reference_lines: Optional[Dict[str, float]] = None,
    theme: Optional[dict] = None,
) -> go.Figure:
    """
    Plot each of ``columns`` against ``x``; ``reference_lines`` adds labelled
    horizontal thresholds.
    """
    theme = theme or DEFAULT_THEME
    palette = theme["palette"]
    available = numeric_columns(table)
    x = x or available[0]
    selected = numeric_columns(table, columns) if columns else [col for col in available if col != x]
    if not selected:
        raise ValueError("Line chart requires at least one y column")
    df = table.sort_values(x)

    figure = go.Figure()
    for index, column in enumerate(selected):
        figure.add_trace(
            go.Scatter(
                x=df[x],
                y=df[column],
                mode="lines+markers",
                line=dict(color=series_color(index, theme), width=2),
                marker=dict(size=5),
                name=str(column),
                hovertemplate=f"{x} %{{x}}<br>{column} %{{y:.3g}}<extra></extra>",
            )
        )
    for label, value in (reference_lines or {}).items():
        figure.add_hline(
            y=value,
            line=dict(color=palette["reference"], width=1, dash="dot"),
            annotation_text=label,
            annotation_position="top right",
        )

    figure.update_layout(
        template=theme["plotly_template"],
        title=title,
        margin=dict(l=60, r=30, t=60, b=40),
        xaxis=dict(title=str(x)),
        yaxis=dict(title="Value"),
        hovermode="x unified",
    )
    return figure
