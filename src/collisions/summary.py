"""
Descriptive tables over the cleaned collision frame.
"""

import pandas as pd

from src.collisions.core import SEVERITY_ORDER


def casualty_rate_by(frame: pd.DataFrame, column: str) -> pd.DataFrame:
    """Collisions, casualty collisions and casualty rate per level of `column`."""
    if column not in frame.columns:
        raise KeyError(f"Missing column for summary: {column}")

    grouped = frame.groupby(column, observed=True)["has_casualty"]
    table = grouped.agg(collisions="size", casualties="sum").reset_index()
    table["casualties"] = table["casualties"].astype(int)
    table["casualty_rate"] = table["casualties"] / table["collisions"]
    return table


def severity_breakdown(frame: pd.DataFrame) -> pd.DataFrame:
    levels = [s.value for s in SEVERITY_ORDER]
    counts = frame["severity"].astype(str).value_counts().reindex(levels, fill_value=0)
    total = counts.sum()
    return pd.DataFrame(
        {
            "severity": levels,
            "count": counts.values,
            "share": counts.values / total if total else 0.0,
        }
    )
