"""Console table rendering — bordered, column-aligned ASCII."""

from __future__ import annotations

from rich.console import Console

from csvcalc import MAX_TABLE_WIDTH
from csvcalc.models import Grid

TOO_WIDE_WARNING = "Warning: CSV file may be too long for proper display!"

_BORDER_CHARS = 2
_CELL_PADDING = 2
_SEPARATOR_WIDTH = len(" | ")


def row_width(row: list[str]) -> int:
    """Printed width of *row* with its own cell lengths."""
    if not row:
        return _BORDER_CHARS
    cells = sum(len(cell) + _CELL_PADDING for cell in row)
    return _BORDER_CHARS + cells + (len(row) - 1) * _SEPARATOR_WIDTH


def table_width(grid: Grid) -> int:
    """Width of the widest row of *grid*, 0 for an empty grid."""
    return max((row_width(row) for row in grid), default=0)


def column_widths(grid: Grid) -> list[int]:
    widths = [0] * grid.width
    for row in grid:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))
    return widths


def render_table(grid: Grid) -> list[str]:
    """Return the table as lines; the first row is set off as a header."""
    if grid.height == 0:
        return []
    widths = column_widths(grid)
    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    lines = [border]
    for idx, row in enumerate(grid):
        padded = [cell.ljust(widths[col]) for col, cell in enumerate(row)]
        lines.append("| " + " | ".join(padded) + " |")
        if idx == 0:
            lines.append(border)
    lines.append(border)
    return lines


def print_table(grid: Grid, console: Console, max_width: int = MAX_TABLE_WIDTH) -> bool:
    """Print *grid* to *console*; returns False when it was too wide to show."""
    if grid.height == 0:
        return True
    if table_width(grid) > max_width:
        console.print(f"[yellow]![/yellow] {TOO_WIDE_WARNING}")
        return False
    for line in render_table(grid):
        console.print(line, markup=False, highlight=False, emoji=False)
    return True
