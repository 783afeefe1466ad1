"""csvcalc — Load a CSV file, print it as a table, and run range formulas on it."""

__version__ = "0.1.0"

CSV_EXTENSION = ".csv"
DEFAULT_DELIMITER = ","
CANDIDATE_DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|")
MAX_TABLE_WIDTH = 130
NOT_APPLICABLE = "Not Applicable"
MAX_RANGE_CELLS = 1_000_000
