"""CLI entry point for csvcalc."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from csvcalc import __version__
from csvcalc.formulas import FUNCTIONS, evaluate
from csvcalc.io import load_grid
from csvcalc.models import Grid
from csvcalc.pipeline import ingest_grid
from csvcalc.render import print_table
from csvcalc.store import CellStore

app = typer.Typer(
    name="csvcalc",
    help="csvcalc — Print a CSV file as a table and run SUM/AVG/MIN/MAX range formulas on it.",
    add_completion=False,
)
console = Console(soft_wrap=True)

PATH_PROMPT = "Enter CSV file path: "
FORMULA_PROMPT = "Enter Spreadsheet Formula (or 'back' to load a new CSV): "
EXIT_COMMAND = "exit"
BACK_COMMAND = "back"


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {escape(msg)}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"csvcalc v{__version__}")
        raise typer.Exit()


def _ask(question: str) -> str:
    """Prompt once and return the trimmed answer; end of input means exit."""
    try:
        return console.input(question, markup=False).strip()
    except EOFError:
        console.print()
        return EXIT_COMMAND


def _load(path_text: str, store: CellStore) -> Grid | None:
    """Load *path_text* into *store* and print it; None if loading failed."""
    try:
        grid = load_grid(path_text)
    except (FileNotFoundError, ValueError, OSError) as exc:
        _err(str(exc))
        return None

    report = ingest_grid(store, grid)
    print_table(grid, console)
    console.print(f"  {report.summary()}", highlight=False)
    for w in report.warnings:
        console.print(f"  [yellow]![/yellow] {escape(w)}")
    return grid


def _formula_loop(store: CellStore) -> bool:
    """Evaluate formulas until ``back`` (False) or ``exit`` (True)."""
    while True:
        text = _ask(FORMULA_PROMPT)
        command = text.lower()
        if command == BACK_COMMAND:
            return False
        if command == EXIT_COMMAND:
            return True

        result = evaluate(store, text)
        if result.is_error:
            console.print(f"[red]Error:[/red] {escape(result.error)}")
        else:
            console.print(f"Result: {result.display()}", highlight=False)


# ── Command ──────────────────────────────────────────────────────


@app.command()
def main(
    input_file: Path | None = typer.Argument(
        None,
        help="CSV file to load before the first prompt.",
        show_default=False,
    ),
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Load CSV files interactively and evaluate range formulas against them.

    Type 'back' at the formula prompt to load another file, 'exit' at either
    prompt to quit.
    """
    store = CellStore()
    console.print(Panel(
        f"[bold]csvcalc[/bold] v{__version__}\n"
        f"Formulas: {', '.join(FUNCTIONS)}  e.g. =SUM(A1:A3)",
        title="CSV Calculator", border_style="blue",
    ))

    pending = str(input_file) if input_file is not None else None
    while True:
        path_text = pending if pending is not None else _ask(PATH_PROMPT)
        pending = None
        if path_text.lower() == EXIT_COMMAND:
            break

        if _load(path_text, store) is None:
            continue
        console.print()

        if _formula_loop(store):
            break

    console.print("Exiting program.")
