"""Interactive CLI tests driven through typer's CliRunner."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import csvcalc.cli as cli_mod
from csvcalc import __version__
from csvcalc.cli import app
from csvcalc.render import TOO_WIDE_WARNING

runner = CliRunner()


def _write_csv(tmp_path: Path, name: str, rows: str) -> Path:
    path = tmp_path / name
    path.write_text(rows)
    return path


def _feed(*lines: str) -> str:
    return "".join(f"{line}\n" for line in lines)


def test_exit_at_path_prompt_ends_program() -> None:
    result = runner.invoke(app, [], input=_feed("EXIT"))

    assert result.exit_code == 0
    assert "Enter CSV file path:" in result.stdout
    assert "Exiting program." in result.stdout


def test_end_of_input_behaves_like_exit() -> None:
    result = runner.invoke(app, [], input="")

    assert result.exit_code == 0
    assert "Exiting program." in result.stdout


def test_load_prints_table_and_evaluates_formulas(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "fruit.csv", "item,qty\napple,3\npear,5\n")

    result = runner.invoke(
        app, [], input=_feed(str(csv_path), "=SUM(B2:B3)", "=avg(b2:b3)", "=MAX(B1:B3)", "exit")
    )

    assert result.exit_code == 0
    assert "| item  | qty |" in result.stdout
    assert "| apple | 3   |" in result.stdout
    assert "3 rows x 2 columns, 6 cells stored (4 non-numeric cells stored as 0)" in result.stdout
    assert "Enter Spreadsheet Formula (or 'back' to load a new CSV):" in result.stdout
    assert "Result: 8" in result.stdout
    assert "Result: 4" in result.stdout
    assert "Result: 5" in result.stdout
    assert "Exiting program." in result.stdout


def test_missing_cells_show_not_applicable(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "nums.csv", "10\n20\n")

    result = runner.invoke(app, [], input=_feed(str(csv_path), "=SUM(A1:A3)", "exit"))

    assert result.exit_code == 0
    assert "Result: Not Applicable" in result.stdout


def test_unsupported_formula_reports_error_and_keeps_prompting(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "nums.csv", "10\n20\n")

    result = runner.invoke(
        app, [], input=_feed(str(csv_path), "=FOO(A1:A2)", "=SUM(A1:A2)", "exit")
    )

    assert result.exit_code == 0
    assert "Error: Unsupported formula: FOO" in result.stdout
    assert "Result: 30" in result.stdout


def test_oversized_range_reports_error_and_keeps_prompting(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "nums.csv", "1\n2\n")

    result = runner.invoke(
        app, [], input=_feed(str(csv_path), "=SUM(A1:Z999999999)", "=SUM(A1:A2)", "exit")
    )

    assert result.exit_code == 0
    assert "Error: Range too large" in result.stdout
    assert "Result: 3" in result.stdout


def test_invalid_extension_reprompts_for_path(tmp_path: Path) -> None:
    txt_path = _write_csv(tmp_path, "notes.txt", "a,b\n")

    result = runner.invoke(app, [], input=_feed(str(txt_path), "exit"))

    assert result.exit_code == 0
    assert "Not a '.csv' file" in result.stdout
    assert result.stdout.count("Enter CSV file path:") == 2
    assert "Enter Spreadsheet Formula" not in result.stdout


def test_missing_file_reports_path_and_reason(tmp_path: Path) -> None:
    missing = tmp_path / "missing.csv"

    result = runner.invoke(app, [], input=_feed(str(missing), "exit"))

    assert result.exit_code == 0
    assert "Error reading file" in result.stdout
    assert "missing.csv" in result.stdout
    assert "no such file" in result.stdout


def test_back_returns_to_path_prompt_and_store_persists(tmp_path: Path) -> None:
    first = _write_csv(tmp_path, "first.csv", "1,2\n3,4\n")
    second = _write_csv(tmp_path, "second.csv", "9\n")

    result = runner.invoke(
        app,
        [],
        input=_feed(str(first), "back", str(second), "=SUM(A1:B2)", "exit"),
    )

    assert result.exit_code == 0
    assert result.stdout.count("Enter CSV file path:") == 2
    assert "Result: 18" in result.stdout


def test_exit_at_formula_prompt_ends_program(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "nums.csv", "1\n")

    result = runner.invoke(app, [], input=_feed(str(csv_path), "Exit", "never-read.csv"))

    assert result.exit_code == 0
    assert "Exiting program." in result.stdout
    assert "never-read.csv" not in result.stdout
    assert result.stdout.count("Enter CSV file path:") == 1


def test_wide_file_prints_warning_but_still_loads(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "wide.csv", f"{'x' * 70},{'y' * 70}\n1,2\n")

    result = runner.invoke(app, [], input=_feed(str(csv_path), "=SUM(A2:B2)", "exit"))

    assert result.exit_code == 0
    assert TOO_WIDE_WARNING in result.stdout
    assert f"| {'x' * 70}" not in result.stdout
    assert "Result: 3" in result.stdout


def test_input_argument_loads_file_before_prompting(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "nums.csv", "5\n6\n")

    result = runner.invoke(app, [str(csv_path)], input=_feed("=MIN(A1:A2)", "exit"))

    assert result.exit_code == 0
    assert "Result: 5" in result.stdout
    assert "Enter CSV file path:" not in result.stdout


def test_sessions_do_not_share_a_store(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "nums.csv", "5\n")
    runner.invoke(app, [str(csv_path)], input=_feed("exit"))

    empty = _write_csv(tmp_path, "empty.csv", "")
    result = runner.invoke(app, [str(empty)], input=_feed("=SUM(A1:A1)", "exit"))

    assert "Result: Not Applicable" in result.stdout


def test_load_errors_are_caught(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "locked.csv", "1\n")

    def _fake_load_grid(path: str) -> None:
        raise OSError(f"Error reading file {path}: Permission denied")

    monkeypatch.setattr(cli_mod, "load_grid", _fake_load_grid)

    result = runner.invoke(app, [], input=_feed(str(csv_path), "exit"))

    assert result.exit_code == 0
    assert "Permission denied" in result.stdout


def test_version_flag_prints_and_exits() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"csvcalc v{__version__}" in result.stdout
    assert "Enter CSV file path:" not in result.stdout
