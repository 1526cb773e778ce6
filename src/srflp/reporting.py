"""Reporting helpers: layout tables, HTML reports and experiment summaries."""

from __future__ import annotations

import html
from pathlib import Path
from typing import Sequence, Union

import numpy as np
import pandas as pd

from .instance import Instance
from .solve import SolveResult


def layout_frame(instance: Instance, order: Sequence[int]) -> pd.DataFrame:
    """Return one row per position of *order* with the department coordinates.

    Columns are ``position``, ``department``, ``length``, ``start``, ``end``
    and ``center``.
    """

    order = [int(d) for d in order]
    lengths = instance.lengths[order] if order else np.zeros(0, dtype=np.int64)
    ends = np.cumsum(lengths)
    starts = ends - lengths
    return pd.DataFrame(
        {
            "position": np.arange(len(order), dtype=np.int64),
            "department": np.asarray(order, dtype=np.int64),
            "length": lengths,
            "start": starts,
            "end": ends,
            "center": starts + lengths / 2.0,
        }
    )


def write_html_report(instance: Instance, result: SolveResult, path: Union[str, Path]) -> Path:
    """Write a standalone HTML page describing *result* and return its path."""

    path = Path(path)
    summary = pd.DataFrame(
        {
            "metric": ["departments", "best value", "is exact", "elapsed (s)", "placement"],
            "value": [
                instance.n,
                result.best_value,
                result.is_exact,
                round(result.elapsed, 3),
                " ".join(str(d) for d in result.solution),
            ],
        }
    )
    layout = layout_frame(instance, result.solution)
    page = "\n".join(
        [
            "<!DOCTYPE html>",
            "<html>",
            "<head><meta charset=\"utf-8\"><title>SRFLP layout</title></head>",
            "<body>",
            f"<h1>SRFLP layout ({html.escape(str(instance.n))} departments)</h1>",
            "<h2>Summary</h2>",
            summary.to_html(index=False),
            "<h2>Row placement</h2>",
            layout.to_html(index=False),
            "</body>",
            "</html>",
        ]
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(page)
    return path


def summarise_runs(df: pd.DataFrame) -> pd.DataFrame:
    """Compute summary statistics grouped by width and instance."""

    required = {"instance", "width", "best_value", "elapsed", "is_exact"}
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(sorted(missing))}")
    data = df.copy()
    data["best_value"] = pd.to_numeric(data["best_value"], errors="coerce")
    data["is_exact"] = data["is_exact"].astype(float)
    grouped = data.groupby(["width", "instance"], as_index=False).agg(
        {
            "best_value": ["mean", "min", "std"],
            "elapsed": "mean",
            "is_exact": "mean",
        }
    )
    # Flatten MultiIndex columns produced by aggregation
    grouped.columns = [
        "_".join(filter(None, map(str, col))).rstrip("_") for col in grouped.columns.values
    ]
    return grouped.rename(columns={"is_exact_mean": "exact_share"})


__all__ = ["layout_frame", "summarise_runs", "write_html_report"]
