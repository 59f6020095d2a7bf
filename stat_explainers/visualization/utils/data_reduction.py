"""Utilities for preparing dense simulation tables for plotting."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd


def thin_rows(table: pd.DataFrame, target_rows: int = 5000) -> pd.DataFrame:
    """
    Keep at most ``target_rows`` evenly spaced rows of ``table``.

    Parameters
    ----------
    table:
        Table with one observation per row.
    target_rows:
        Maximum number of rows to retain for plotting.
    """
    if len(table) <= target_rows:
        return table
    indices = np.linspace(0, len(table) - 1, target_rows).astype(int)
    return table.iloc[indices]


def numeric_columns(table: pd.DataFrame, columns: Optional[Sequence[str]] = None) -> List[str]:
    """Return the requested columns (or every numeric column), checking they exist and are numeric."""
    if table is None or table.empty:
        raise ValueError("A non-empty table is required")
    if columns is None:
        selected = [col for col in table.columns if pd.api.types.is_numeric_dtype(table[col])]
    else:
        missing = [col for col in columns if col not in table.columns]
        if missing:
            raise ValueError(f"Table is missing column(s): {', '.join(map(str, missing))}")
        selected = list(columns)
        non_numeric = [col for col in selected if not pd.api.types.is_numeric_dtype(table[col])]
        if non_numeric:
            raise ValueError(f"Column(s) are not numeric: {', '.join(map(str, non_numeric))}")
    if not selected:
        raise ValueError("Table does not contain numeric columns")
    return selected


def finite_values(series: pd.Series) -> np.ndarray:
    """Return the finite entries of ``series`` as a float array."""
    values = pd.to_numeric(series, errors="coerce").to_numpy(dtype=float)
    return values[np.isfinite(values)]


def histogram_bins(size: int) -> int:
    """Square-root rule bounded to a readable range."""
    return min(60, max(20, int(np.sqrt(max(size, 1)))))


__all__ = ["thin_rows", "numeric_columns", "finite_values", "histogram_bins"]
