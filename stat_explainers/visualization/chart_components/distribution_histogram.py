"""Histogram of one or more numeric columns."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from ..themes import DEFAULT_THEME, series_color
from ..utils.data_reduction import finite_values, histogram_bins, numeric_columns


def vertical_reference_shapes(
    reference_lines: Optional[Dict[str, float]],
    color: str,
) -> tuple[list, list]:
    """Dotted vertical lines with labels above the plot area."""
    shapes = []
    annotations = []
    for offset, (label, value) in enumerate((reference_lines or {}).items()):
        shapes.append(
            dict(
                type="line",
                x0=value,
                x1=value,
                y0=0,
                y1=1,
                xref="x",
                yref="paper",
                line=dict(color=color, width=2, dash="dot"),
            )
        )
        annotations.append(
            dict(
                x=value,
                y=1.02 + 0.04 * offset,
                xref="x",
                yref="paper",
                text=label,
                showarrow=False,
                font=dict(color=color, size=11),
            )
        )
    return shapes, annotations


def build_histogram_figure(
    table: pd.DataFrame,
    *,
    columns: Optional[Sequence[str]] = None,
    title: str = "Histogram",
    nbins: Optional[int] = None,
    reference_lines: Optional[Dict[str, float]] = None,
    theme: Optional[dict] = None,
) -> go.Figure:
    """
    Overlay a histogram for every selected column.
    """
    theme = theme or DEFAULT_THEME
    palette = theme["palette"]
    selected = numeric_columns(table, columns)

    figure = go.Figure()
    for index, column in enumerate(selected):
        values = finite_values(table[column])
        figure.add_trace(
            go.Histogram(
                x=values,
                nbinsx=nbins or histogram_bins(values.size),
                opacity=0.85 if len(selected) == 1 else 0.55,
                marker=dict(color=series_color(index, theme), line=dict(color="#424242", width=0.5)),
                name=str(column),
                hovertemplate="%{x:.3g}<br>Count %{y}<extra>" + str(column) + "</extra>",
            )
        )

    shapes, annotations = vertical_reference_shapes(reference_lines, palette["reference"])
    figure.update_layout(
        template=theme["plotly_template"],
        title=title,
        barmode="overlay",
        bargap=0.02,
        margin=dict(l=60, r=30, t=70, b=50),
        xaxis=dict(title=selected[0] if len(selected) == 1 else "Value"),
        yaxis=dict(title="Count"),
        shapes=shapes,
        annotations=annotations,
        showlegend=len(selected) > 1,
    )
    return figure
