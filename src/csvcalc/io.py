"""I/O helpers — validate and read CSV files from disk."""

from __future__ import annotations

from pathlib import Path

from csvcalc import CSV_EXTENSION
from csvcalc.models import Grid
from csvcalc.parser import detect_delimiter, parse_csv

_ENCODINGS: tuple[str, ...] = ("utf-8-sig", "latin-1")

# ── Loading ──────────────────────────────────────────────────────


def check_csv_path(path: str | Path) -> Path:
    """Return *path* as a :class:`Path` if it names a ``.csv`` file.

    The check is on the name only; nothing is read.
    """
    path = Path(path)
    if not str(path).lower().endswith(CSV_EXTENSION):
        raise ValueError(f"Not a '{CSV_EXTENSION}' file: {path}")
    return path


def read_csv_text(path: str | Path) -> str:
    """Read a ``.csv`` file and return its decoded text.

    Raises
    ------
    ValueError
        If the extension is not ``.csv`` or *path* is a directory.
    FileNotFoundError
        If *path* does not exist.
    OSError
        If the file exists but cannot be read.
    """
    path = check_csv_path(path)
    if not path.exists():
        raise FileNotFoundError(f"Error reading file {path}: no such file")
    if path.is_dir():
        raise ValueError(f"Error reading file {path}: path is a directory, not a file")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise OSError(f"Error reading file {path}: {reason}") from exc

    last_exc: Exception | None = None
    for encoding in _ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError as exc:
            last_exc = exc
    raise ValueError(f"Error reading file {path}: could not decode text") from last_exc


def load_grid(path: str | Path, delimiter: str | None = None) -> Grid:
    """Read and parse a CSV file; the delimiter is sniffed unless given."""
    text = read_csv_text(path)
    sep = delimiter if delimiter else detect_delimiter(text)
    return parse_csv(text, delimiter=sep)
