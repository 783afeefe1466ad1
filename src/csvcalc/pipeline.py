"""Ingestion pipeline — parsed grid -> numeric cells -> :class:`CellStore`."""

from __future__ import annotations

import math

import pandas as pd

from csvcalc.models import CellAddress, Grid, LoadReport
from csvcalc.store import CellStore
from csvcalc.utils import COLUMN_LETTERS, column_letter

_LEADING_NUMBER_RE = (
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)

# ── Frame conversion ────────────────────────────────────────────


def grid_to_frame(grid: Grid) -> pd.DataFrame:
    """Return the addressable part of *grid* as a string DataFrame.

    Columns are labelled ``A``..``Z``; anything past ``Z`` is dropped and the
    index is the 1-based row number.
    """
    width = min(grid.width, len(COLUMN_LETTERS))
    rows = [row[:width] for row in grid.rows]
    df = pd.DataFrame(rows, columns=[column_letter(i) for i in range(width)], dtype=object)
    df.index = pd.RangeIndex(start=1, stop=grid.height + 1)
    return df


def _coerce_numeric(s: pd.Series) -> pd.Series:
    """Parse the leading number of each cell (``"12 kg"`` -> 12.0).

    Cells that do not start with a number come back as NaN.
    """
    lead = s.astype(str).str.extract(_LEADING_NUMBER_RE, expand=False)
    infinite = lead.str.lstrip("+-").eq("Infinity")
    negative = lead.str.startswith("-", na=False)
    parsed = pd.to_numeric(lead.mask(infinite), errors="coerce").astype("float64")
    parsed = parsed.mask(infinite & negative, -math.inf)
    return parsed.mask(infinite & ~negative, math.inf)


def coerce_frame(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """Return ``(numeric_df, non_numeric_count)`` with failures replaced by 0."""
    if df.empty:
        return df.astype("float64"), 0
    parsed = df.apply(_coerce_numeric)
    non_numeric = int(parsed.isna().sum().sum())
    return parsed.fillna(0.0), non_numeric


# ── Main ingestion function ─────────────────────────────────────


def ingest_grid(store: CellStore, grid: Grid) -> LoadReport:
    """Write every addressable cell of *grid* into *store*.

    Cell (r, c), 0-based, lands at column letter ``c`` and row ``r + 1``.
    Text that does not parse as a number is stored as 0.
    """
    report = LoadReport(rows=grid.height, columns=grid.width)
    if grid.height == 0 or grid.width == 0:
        return report

    numeric, non_numeric = coerce_frame(grid_to_frame(grid))
    for column in numeric.columns:
        for row, value in numeric[column].items():
            store.set(CellAddress(column, int(row)), float(value))

    report.cells_stored = numeric.size
    report.non_numeric_cells = non_numeric
    report.ignored_columns = grid.width - len(numeric.columns)
    if report.ignored_columns:
        suffix = "" if report.ignored_columns == 1 else "s"
        report.warnings.append(
            f"Only columns A-Z are addressable; ignored {report.ignored_columns} "
            f"column{suffix} past Z"
        )
    return report
