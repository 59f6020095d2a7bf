"""Palette and Plotly template shared by the chart builders."""

from __future__ import annotations

from typing import Dict, List

SAMPLE_BLUE = "#2E86AB"
THEORY_NAVY = "#1F4788"
ACCENT_TEAL = "#06A77D"
ACCENT_ORANGE = "#FF6F00"
REFERENCE_RED = "#C0504D"
NEUTRAL_GRAY = "#757575"
BACKGROUND = "#FAFAFA"
CARD_BACKGROUND = "#FFFFFF"
TEXT_COLOR = "#1E1E1E"
GRID_COLOR = "#E0E0E0"

SERIES_COLORS: List[str] = [
    SAMPLE_BLUE,
    ACCENT_ORANGE,
    ACCENT_TEAL,
    THEORY_NAVY,
    "#8E44AD",
    "#B7950B",
    REFERENCE_RED,
    NEUTRAL_GRAY,
]

DEFAULT_THEME: Dict[str, object] = {
    "name": "light",
    "palette": {
        "sample": SAMPLE_BLUE,
        "theory": THEORY_NAVY,
        "reference": REFERENCE_RED,
        "neutral": NEUTRAL_GRAY,
        "series": SERIES_COLORS,
    },
    "plotly_template": {
        "layout": {
            "font": {"family": "Roboto, Open Sans, sans-serif", "color": TEXT_COLOR},
            "paper_bgcolor": BACKGROUND,
            "plot_bgcolor": CARD_BACKGROUND,
            "title": {"font": {"size": 20, "color": TEXT_COLOR}},
            "legend": {"bgcolor": CARD_BACKGROUND, "bordercolor": GRID_COLOR},
            "xaxis": {"gridcolor": GRID_COLOR, "zerolinecolor": GRID_COLOR},
            "yaxis": {"gridcolor": GRID_COLOR, "zerolinecolor": GRID_COLOR},
        }
    },
}


def series_color(index: int, theme: Dict[str, object] = DEFAULT_THEME) -> str:
    colors = theme["palette"]["series"]  # type: ignore[index]
    return colors[index % len(colors)]


__all__ = ["DEFAULT_THEME", "SERIES_COLORS", "series_color"]
