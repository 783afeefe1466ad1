"""CSV tokenizer — raw text in, rectangular :class:`Grid` out.

The scanner is deliberately lenient: an unterminated quote never raises, the
rest of the input is simply read as still being inside the quoted field.
"""

from __future__ import annotations

import csv

from csvcalc import CANDIDATE_DELIMITERS, DEFAULT_DELIMITER
from csvcalc.models import Grid

_QUOTE = '"'
_CR = "\r"
_SNIFF_SAMPLE_SIZE = 64 * 1024


def _check_separator(value: str, field_name: str) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{field_name} must be a single character, got {value!r}")
    if value in (_QUOTE, _CR):
        raise ValueError(f"{field_name} cannot be {value!r}")
    return value


def pad_rows(rows: list[list[str]]) -> list[list[str]]:
    """Right-pad every row with ``""`` up to the longest row's length."""
    if not rows:
        return []
    width = max(len(row) for row in rows)
    return [row + [""] * (width - len(row)) for row in rows]


def tokenize(text: str, delimiter: str, record_separator: str) -> list[list[str]]:
    """Split *text* into ragged rows of fields (no padding)."""
    output: list[list[str]] = []
    row: list[str] = []
    buf: list[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if char == _QUOTE:
            if in_quotes and nxt == _QUOTE:
                # "" inside a quoted field is one literal quote
                buf.append(_QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif not in_quotes and char == delimiter:
            row.append("".join(buf))
            buf = []
        elif not in_quotes and (
            char == record_separator or (char == _CR and nxt == record_separator)
        ):
            row.append("".join(buf))
            output.append(row)
            row = []
            buf = []
            if char == _CR:
                i += 2
                continue
        elif in_quotes and char in (record_separator, _CR):
            buf.append(" ")
        else:
            buf.append(char)
        i += 1

    if buf or row:
        row.append("".join(buf))
        output.append(row)
    return output


def parse_csv(
    text: str,
    delimiter: str = DEFAULT_DELIMITER,
    record_separator: str = "\n",
) -> Grid:
    """Parse CSV *text* into a :class:`Grid`.

    Quoted fields may contain the delimiter, escaped quotes (``""``) and line
    breaks; line breaks inside quotes are flattened to a single space. Both LF
    and CRLF end a record.
    """
    delimiter = _check_separator(delimiter, "delimiter")
    record_separator = _check_separator(record_separator, "record_separator")
    if delimiter == record_separator:
        raise ValueError("delimiter and record_separator must differ")
    return Grid(pad_rows(tokenize(text, delimiter, record_separator)))


def detect_delimiter(text: str, candidates: tuple[str, ...] = CANDIDATE_DELIMITERS) -> str:
    """Guess the field delimiter of *text*, falling back to ``","``."""
    sample = text[:_SNIFF_SAMPLE_SIZE]
    if not sample.strip():
        return DEFAULT_DELIMITER
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters="".join(candidates))
    except csv.Error:
        return DEFAULT_DELIMITER
    return dialect.delimiter if dialect.delimiter in candidates else DEFAULT_DELIMITER
