"""Normal quantile-quantile plot."""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from scipy import stats

from ..themes import DEFAULT_THEME
from ..utils.data_reduction import finite_values, numeric_columns


def normal_quantile_pairs(values: np.ndarray) -> tuple[np.ndarray, np.ndarray, float, float]:
    """Theoretical and ordered sample quantiles plus the least-squares reference line."""
    (theoretical, ordered), (slope, intercept, _r) = stats.probplot(values, dist="norm")
    return np.asarray(theoretical), np.asarray(ordered), float(slope), float(intercept)


def build_qq_plot(
    table: pd.DataFrame,
    *,
    column: Optional[str] = None,
    title: str = "Normal Q-Q Plot",
    max_points: int = 5000,
    theme: Optional[dict] = None,
) -> go.Figure:
    theme = theme or DEFAULT_THEME
    palette = theme["palette"]
    column = column or numeric_columns(table)[0]
    numeric_columns(table, [column])
    values = finite_values(table[column])
    if values.size < 3:
        raise ValueError("Q-Q plot requires at least three finite values")

    theoretical, ordered, slope, intercept = normal_quantile_pairs(values)
    if theoretical.size > max_points:
        keep = np.linspace(0, theoretical.size - 1, max_points).astype(int)
        theoretical, ordered = theoretical[keep], ordered[keep]

    figure = go.Figure()
    figure.add_trace(
        go.Scatter(
            x=theoretical,
            y=ordered,
            mode="markers",
            marker=dict(color=palette["sample"], size=4, opacity=0.7),
            name="Sample quantiles",
        )
    )
    line_x = np.array([theoretical.min(), theoretical.max()])
    figure.add_trace(
        go.Scatter(
            x=line_x,
            y=intercept + slope * line_x,
            mode="lines",
            line=dict(color=palette["reference"], width=2, dash="dash"),
            name="Reference line",
        )
    )
    figure.update_layout(
        template=theme["plotly_template"],
        title=title,
        margin=dict(l=60, r=30, t=60, b=50),
        xaxis=dict(title="Theoretical quantiles (standard normal)"),
        yaxis=dict(title=f"Sample quantiles ({column})"),
    )
    return figure
