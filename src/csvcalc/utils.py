"""Shared helpers — column letters, number display."""

from __future__ import annotations

import math
import re
import string

COLUMN_LETTERS = string.ascii_uppercase

_INTEGER_FORM_LIMIT = 1e21
# repr() pads exponents to two digits ("1e-07"); results show "1e-7"
_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")


def column_letter(index: int) -> str:
    """Return the column letter for a 0-based column *index* (``0 -> "A"``)."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError("column index must be an integer")
    if not 0 <= index < len(COLUMN_LETTERS):
        raise ValueError(f"column index out of range: {index} (only A-Z are addressable)")
    return COLUMN_LETTERS[index]


def format_number(value: float) -> str:
    """Render *value* the way the prompt shows results.

    Whole numbers below ``1e21`` print without a fraction (``60``), larger
    ones in exponent form (``1e+21``); infinities print as ``Infinity``.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-Infinity" if value < 0 else "Infinity"
    if value.is_integer() and abs(value) < _INTEGER_FORM_LIMIT:
        return str(int(value))
    return _EXPONENT_RE.sub(r"e\1\2", repr(value))
