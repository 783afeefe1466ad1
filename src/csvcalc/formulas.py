"""Range formulas — ``=SUM(A1:B3)`` and friends.

Grammar::

    formula := "=" NAME "(" ADDRESS ":" ADDRESS ")"

NAME and ADDRESS are case-insensitive and whitespace around tokens is ignored.
Aggregates return ``None`` when the result is not applicable (no usable
numbers, or a missing/NaN cell poisoning SUM or AVG).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from csvcalc import MAX_RANGE_CELLS, NOT_APPLICABLE
from csvcalc.models import CellAddress, CellValue
from csvcalc.store import CellStore, is_numeric
from csvcalc.utils import format_number

_FORMULA_RE = re.compile(
    r"^=\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*\((?P<args>[^()]*)\)\s*$"
)
_NAME_RE = re.compile(r"^=\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)")


class FormulaError(ValueError):
    """Base class for formulas that cannot be evaluated."""


class FormulaSyntaxError(FormulaError):
    """Formula text does not match ``=NAME(A1:B2)``."""


class UnsupportedFormulaError(FormulaError):
    """Formula names a function outside the dispatch table."""


# ── Aggregates ───────────────────────────────────────────────────


def sum_values(values: Sequence[CellValue]) -> Optional[float]:
    """Sum *values*; any missing or NaN value makes the whole sum ``None``."""
    if not values:
        return None
    total: Optional[float] = 0.0
    for value in values:
        if total is None or not is_numeric(value):
            total = None
        else:
            total += value
    return total


def average_values(values: Sequence[CellValue]) -> Optional[float]:
    total = sum_values(values)
    if total is None:
        return None
    count = sum(1 for value in values if is_numeric(value))
    if count == 0:
        return None
    return total / count


def min_values(values: Sequence[CellValue]) -> Optional[float]:
    """Smallest numeric value; missing and NaN cells are skipped."""
    numbers = [value for value in values if is_numeric(value)]
    return min(numbers) if numbers else None


def max_values(values: Sequence[CellValue]) -> Optional[float]:
    """Largest numeric value; missing and NaN cells are skipped."""
    numbers = [value for value in values if is_numeric(value)]
    return max(numbers) if numbers else None


FUNCTIONS: dict[str, Callable[[Sequence[CellValue]], Optional[float]]] = {
    "SUM": sum_values,
    "AVG": average_values,
    "AVERAGE": average_values,
    "MIN": min_values,
    "MAX": max_values,
}


# ── Parsing ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Formula:
    name: str
    start: CellAddress
    end: CellAddress

    @property
    def cell_count(self) -> int:
        """Number of cells in the range, 0 when start is past end."""
        columns = ord(self.end.column) - ord(self.start.column) + 1
        rows = self.end.row - self.start.row + 1
        return max(columns, 0) * max(rows, 0)

    def __str__(self) -> str:
        return f"={self.name}({self.start}:{self.end})"


def _unsupported(name: str | None) -> UnsupportedFormulaError:
    if name:
        return UnsupportedFormulaError(
            f"Unsupported formula: {name} (use {', '.join(FUNCTIONS)})"
        )
    return UnsupportedFormulaError(
        "Unsupported formula: formulas start with '=' (e.g. =SUM(A1:A3))"
    )


def parse_formula(text: str) -> Formula:
    """Parse *text* into a :class:`Formula`.

    Raises
    ------
    UnsupportedFormulaError
        If *text* does not start with ``=`` or names an unknown function.
    FormulaSyntaxError
        If the range part is malformed or spans more than
        ``MAX_RANGE_CELLS`` cells.
    """
    text = text.strip()
    if not text.startswith("="):
        raise _unsupported(None)

    head = _NAME_RE.match(text)
    if head is None:
        raise FormulaSyntaxError(f"Invalid formula: {text!r} (expected e.g. =SUM(A1:A3))")
    name = head.group("name").upper()
    if name not in FUNCTIONS:
        raise _unsupported(name)

    match = _FORMULA_RE.match(text)
    if match is None:
        raise FormulaSyntaxError(f"Invalid formula: {text!r} (expected ={name}(A1:A3))")
    bounds = match.group("args").split(":")
    if len(bounds) != 2:
        raise FormulaSyntaxError(
            f"Invalid range: {match.group('args').strip()!r} (expected START:END, e.g. A1:A3)"
        )
    try:
        start, end = (CellAddress.parse(bound) for bound in bounds)
    except ValueError as exc:
        raise FormulaSyntaxError(str(exc)) from exc

    formula = Formula(name=name, start=start, end=end)
    if formula.cell_count > MAX_RANGE_CELLS:
        raise FormulaSyntaxError(
            f"Range too large: {start}:{end} covers {formula.cell_count:,} cells "
            f"(limit {MAX_RANGE_CELLS:,})"
        )
    return formula


# ── Evaluation ───────────────────────────────────────────────────


class ResultStatus(str, Enum):
    ok = "ok"
    not_applicable = "not_applicable"
    error = "error"


@dataclass(frozen=True)
class FormulaResult:
    """Outcome of :func:`evaluate`: a number, Not Applicable, or an error."""

    status: ResultStatus
    value: Optional[float] = None
    error: str = ""

    @property
    def is_error(self) -> bool:
        return self.status is ResultStatus.error

    @property
    def is_not_applicable(self) -> bool:
        return self.status is ResultStatus.not_applicable

    def display(self) -> str:
        if self.status is ResultStatus.ok and self.value is not None:
            return format_number(self.value)
        if self.status is ResultStatus.not_applicable:
            return NOT_APPLICABLE
        return self.error


def apply_formula(store: CellStore, formula: Formula) -> Optional[float]:
    """Run an already-parsed *formula*; ``None`` means not applicable."""
    values = store.get_range(formula.start, formula.end)
    return FUNCTIONS[formula.name](values)


def evaluate(store: CellStore, text: str) -> FormulaResult:
    """Parse and evaluate *text* against *store* without raising."""
    try:
        formula = parse_formula(text)
    except FormulaError as exc:
        return FormulaResult(ResultStatus.error, error=str(exc))

    value = apply_formula(store, formula)
    if value is None:
        return FormulaResult(ResultStatus.not_applicable)
    return FormulaResult(ResultStatus.ok, value=value)
