"""Sparse cell store — address -> number, with rectangular range lookup."""

from __future__ import annotations

import math
from numbers import Real

from csvcalc.models import CellAddress, CellValue


def is_numeric(value: CellValue) -> bool:
    """True for a stored number that is not NaN."""
    return value is not None and not math.isnan(value)


class CellStore:
    """Numbers keyed by :class:`CellAddress`.

    One store lives for a whole session; entries are added or overwritten but
    never removed. Addresses can be given as ``CellAddress`` or ``"B12"``.
    """

    def __init__(self) -> None:
        self._cells: dict[CellAddress, float] = {}

    def set(self, address: CellAddress | str, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise TypeError(f"cell value must be a number, got {type(value).__name__}")
        self._cells[CellAddress.coerce(address)] = float(value)

    def get(self, address: CellAddress | str) -> CellValue:
        return self._cells.get(CellAddress.coerce(address))

    def get_range(
        self, start: CellAddress | str, end: CellAddress | str
    ) -> list[CellValue]:
        """Return the values in the rectangle *start*..*end*, column by column.

        Columns run from ``start.column`` to ``end.column`` and, within each
        column, rows from ``start.row`` to ``end.row``, both inclusive. A start
        past the end on either axis gives an empty list.
        """
        start = CellAddress.coerce(start)
        end = CellAddress.coerce(end)
        values: list[CellValue] = []
        for col in range(ord(start.column), ord(end.column) + 1):
            for row in range(start.row, end.row + 1):
                values.append(self._cells.get(CellAddress(chr(col), row)))
        return values

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, (CellAddress, str)):
            return False
        try:
            return CellAddress.coerce(address) in self._cells
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"CellStore({len(self._cells)} cells)"
