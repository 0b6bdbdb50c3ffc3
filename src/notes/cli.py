"""Command-line front end using Typer and Rich."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn, Optional

import duckdb
import polars as pl
import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from notes.commands import CommandResult, list_notes, query_notes, run_command, tag_summary
from notes.config import NotesConfig, load_config
from notes.editor import MemoryEditor
from notes.errors import MissingConfiguration

app = typer.Typer(
    name="notes",
    help="Find, link, search, retitle and tag timestamped Markdown notes.",
    no_args_is_help=True,
)

console = Console()

_LEVEL_STYLES = {
    "ok": "green",
    "info": "dim",
    "warning": "yellow",
    "error": "red",
}


class RichChooser:
    """Numbered-list picker; typing anything but a number is free text.

    A number outside the list is rejected and the prompt is repeated.
    """

    def __init__(self, console: Console) -> None:
        self.console = console

    def select(
        self, items: list[Any], prompt: str, format_item: Callable[[Any], str] = str
    ) -> Any:
        if items:
            table = Table(title=prompt, show_header=True, header_style="bold cyan")
            table.add_column("#", style="dim")
            table.add_column("Item")
            for i, item in enumerate(items, 1):
                table.add_row(str(i), escape(format_item(item)))
            self.console.print(table)

        while True:
            answer = self._prompt(f"{prompt} (number or text, empty to cancel)")
            if answer is None or not answer.isdigit():
                return answer
            if 1 <= int(answer) <= len(items):
                return items[int(answer) - 1]
            self.console.print(f"[yellow]No item numbered {answer}[/yellow]")

    def ask(self, prompt: str) -> str | None:
        return self._prompt(prompt)

    def _prompt(self, prompt: str) -> str | None:
        answer = Prompt.ask(prompt, default="", show_default=False, console=self.console)
        return answer.strip() or None


def _config(ctx: typer.Context) -> NotesConfig:
    return ctx.obj["config"]


def _report(result: CommandResult) -> None:
    style = _LEVEL_STYLES.get(result.level, "")
    console.print(f"[{style}]{escape(result.message)}[/{style}]")

    if result.hits:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Note", style="green")
        table.add_column("Line", style="dim", justify="right")
        table.add_column("Text")
        for hit in result.hits:
            table.add_row(hit.filename, str(hit.line_no), escape(hit.line))
        console.print(table)

    if not result.ok:
        raise typer.Exit(1)


def _run(ctx: typer.Context, name: str, note: Path | None = None, save: bool = False) -> None:
    config = _config(ctx)
    editor = MemoryEditor()
    result = run_command(name, config, RichChooser(console), editor, note)

    if save and result.ok and editor.current is not None and editor.current.modified:
        editor.current.write()
    _report(result)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def find(ctx: typer.Context):
    """Open a note, or create one by typing "Title, tag, tag"."""
    _run(ctx, "find")


@app.command("link-to-note")
def link_to_note(
    ctx: typer.Context,
    note: Optional[Path] = typer.Argument(
        None,
        help="Note to append the link to (prints the link only when omitted)",
    ),
):
    """Insert a Markdown link to a chosen note."""
    _run(ctx, "link_to_note", note, save=True)


@app.command()
def search(ctx: typer.Context):
    """Full-text search across all notes."""
    _run(ctx, "search")


@app.command()
def retitle(
    ctx: typer.Context,
    note: Path = typer.Argument(..., help="Note file to retitle"),
):
    """Change a note's title, keeping its id and tags."""
    _run(ctx, "retitle", note)


@app.command("toggle-tag")
def toggle_tag(
    ctx: typer.Context,
    note: Path = typer.Argument(..., help="Note file whose tag to toggle"),
):
    """Add or remove one tag on a note."""
    _run(ctx, "toggle_tag", note)


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _cell(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def _print_frame(df: pl.DataFrame) -> None:
    table = Table(show_header=True, header_style="bold cyan")
    for column in df.columns:
        table.add_column(column)
    for row in df.iter_rows():
        table.add_row(*(escape(_cell(value)) for value in row))
    console.print(table)


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    match: str = typer.Argument("", help="Text to look for in titles and tags"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only notes with this tag"),
):
    """Print note filenames, newest first."""
    try:
        filenames = list_notes(_config(ctx), match, tag)
    except MissingConfiguration as exc:
        _fail(str(exc))
    for filename in filenames:
        typer.echo(filename)


@app.command()
def tags(ctx: typer.Context):
    """Show every tag with the number of notes carrying it."""
    try:
        counts = tag_summary(_config(ctx))
    except MissingConfiguration as exc:
        _fail(str(exc))
    _print_frame(counts)


@app.command()
def query(
    ctx: typer.Context,
    sql: str = typer.Argument(..., help="SQL over notes(filename, id, title, tags)"),
):
    """Run a SQL query against the notes table."""
    try:
        result = query_notes(_config(ctx), sql)
    except MissingConfiguration as exc:
        _fail(str(exc))
    except duckdb.Error as exc:
        _fail(f"Query failed: {exc}")
    _print_frame(result)


@app.callback()
def main(
    ctx: typer.Context,
    notes_dir: Optional[Path] = typer.Option(
        None,
        "--dir",
        "-d",
        help="Notes directory (default: $NOTES_DIR or the config file)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging",
    ),
):
    """Timestamped Markdown notes."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    ctx.obj = {"config": load_config(notes_dir=notes_dir)}


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
