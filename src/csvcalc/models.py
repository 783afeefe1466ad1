"""Data models used across the package."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from numbers import Integral
from typing import Any, Optional

from csvcalc.utils import COLUMN_LETTERS

CellValue = Optional[float]
"""A stored number, or ``None`` for an address that was never set."""

_ADDRESS_RE = re.compile(r"^\s*([A-Za-z])(\d+)\s*$")


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_string_list(values: Sequence[Any] | None, field_name: str) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        raise TypeError(f"{field_name} must be a sequence of strings")
    normalized: list[str] = []
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} items must be strings")
        normalized.append(item)
    return normalized


@dataclass(frozen=True, order=True)
class CellAddress:
    """A single-letter column plus a 1-based row, e.g. ``B12``.

    Ordering compares ``column`` first, then ``row``.
    """

    column: str
    row: int

    def __post_init__(self) -> None:
        if not isinstance(self.column, str) or len(self.column) != 1:
            raise ValueError(f"column must be a single letter A-Z, got {self.column!r}")
        if self.column not in COLUMN_LETTERS:
            raise ValueError(f"column must be an uppercase letter A-Z, got {self.column!r}")
        if _to_non_negative_int(self.row, "row") < 1:
            raise ValueError("row must be >= 1")

    @classmethod
    def parse(cls, text: str) -> CellAddress:
        """Parse ``"b12"`` / ``"B12"`` into ``CellAddress("B", 12)``."""
        match = _ADDRESS_RE.match(text) if isinstance(text, str) else None
        if match is None:
            raise ValueError(f"Invalid cell address: {text!r} (expected e.g. A1)")
        return cls(match.group(1).upper(), int(match.group(2)))

    @classmethod
    def coerce(cls, value: CellAddress | str) -> CellAddress:
        if isinstance(value, CellAddress):
            return value
        return cls.parse(value)

    def __str__(self) -> str:
        return f"{self.column}{self.row}"


@dataclass
class Grid:
    """Rectangular table of string cells.

    Contract invariant: every row has ``width`` fields.
    """

    rows: list[list[str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        rows: list[list[str]] = []
        for row in self.rows:
            if isinstance(row, str):
                raise TypeError("Grid rows must be sequences of strings")
            rows.append(_to_string_list(row, "Grid cells"))
        self.rows = rows
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise ValueError(
                f"Grid rows must all have the same length, got {sorted(widths)}"
            )

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[list[str]]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> list[str]:
        return self.rows[index]


@dataclass
class LoadReport:
    """Summary of one grid ingestion pass."""

    rows: int = 0
    columns: int = 0
    cells_stored: int = 0
    non_numeric_cells: int = 0
    ignored_columns: int = 0
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.rows = _to_non_negative_int(self.rows, "rows")
        self.columns = _to_non_negative_int(self.columns, "columns")
        self.cells_stored = _to_non_negative_int(self.cells_stored, "cells_stored")
        self.non_numeric_cells = _to_non_negative_int(
            self.non_numeric_cells, "non_numeric_cells"
        )
        self.ignored_columns = _to_non_negative_int(self.ignored_columns, "ignored_columns")
        self.warnings = _to_string_list(self.warnings, "warnings")
        if self.non_numeric_cells > self.cells_stored:
            raise ValueError("non_numeric_cells must be <= cells_stored")
        if self.ignored_columns > self.columns:
            raise ValueError("ignored_columns must be <= columns")

    def summary(self) -> str:
        """One-line description shown after a file is loaded."""
        suffix = "" if self.non_numeric_cells == 1 else "s"
        return (
            f"{self.rows} rows x {self.columns} columns, {self.cells_stored} cells stored "
            f"({self.non_numeric_cells} non-numeric cell{suffix} stored as 0)"
        )
