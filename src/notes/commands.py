"""Command surface: find, link_to_note, retitle, search and toggle_tag.

Each command is a synchronous request/response over two injected
collaborators: a :class:`Chooser` that asks the user for a pick or a line
of text, and an :class:`~notes.editor.Editor` holding the open buffers.
:func:`run_command` turns the error taxonomy into a :class:`CommandResult`
so a front end only has to display it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, TypeVar, runtime_checkable

import polars as pl

from notes.config import NotesConfig, require_notes_dir
from notes.db import NoteDB
from notes.editor import Editor
from notes.errors import (
    InvalidTag,
    InvalidTitle,
    MissingConfiguration,
    NoSelection,
    NotANote,
    NoteCollision,
)
from notes.filename import decode, make_link, parse_new_note_input
from notes.index import NoteIndex, SearchHit
from notes.slug import normalize_tag
from notes.store import TagChoice, create_note, require_note, retitle, tag_choices, toggle_tag

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class Chooser(Protocol):
    """Interactive picker supplied by the front end.

    ``select`` returns one of *items*, a ``str`` typed instead of picking
    (free text), or ``None`` when the user cancels.  ``ask`` returns a line
    of text or ``None`` on cancel.
    """

    def select(
        self, items: list[T], prompt: str, format_item: Callable[[T], str] = str
    ) -> T | str | None: ...

    def ask(self, prompt: str) -> str | None: ...


@dataclass
class CommandResult:
    level: str  # "ok", "info", "warning" or "error"
    message: str
    path: Path | None = None
    hits: list[SearchHit] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.level in {"ok", "info"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def note_label(filename: str) -> str:
    """Picker label for a note filename: ``<id>  <title>  [tags]``."""
    descriptor = decode(filename)
    if descriptor is None:
        return filename
    tags = f"  [{', '.join(descriptor.tags)}]" if descriptor.tags else ""
    return f"{descriptor.id}  {descriptor.title}{tags}"


def _note_filenames(notes_dir: Path) -> list[str]:
    with NoteDB(NoteIndex(notes_dir)) as db:
        return db.table_view()["filename"].to_list()


def _current_path(editor: Editor) -> Path:
    if editor.current is None:
        raise NotANote("(no file open)")
    return editor.current.path


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def find_note(config: NotesConfig, chooser: Chooser, editor: Editor) -> CommandResult:
    """Open an existing note, or create one from ``"Title, tag, tag"`` free text."""
    notes_dir = require_notes_dir(config)
    filenames = _note_filenames(notes_dir)

    choice = chooser.select(filenames, "Find note", format_item=note_label)
    if choice is None:
        raise NoSelection("No note selected")

    if choice in filenames:
        path = notes_dir / choice
        editor.open(path)
        return CommandResult("ok", f"Opened {path.name}", path=path)

    title, tags = parse_new_note_input(choice)
    if not title:
        raise NoSelection("No title given")
    path = create_note(notes_dir, title, tags)
    editor.open(path)
    return CommandResult("ok", f"Created {path.name}", path=path)


def link_to_note(config: NotesConfig, chooser: Chooser, editor: Editor) -> CommandResult:
    """Insert a ``[title](<id>.id)`` link to a chosen note into the current buffer."""
    notes_dir = require_notes_dir(config)
    filenames = _note_filenames(notes_dir)

    choice = chooser.select(filenames, "Link to note", format_item=note_label)
    if choice is None or choice not in filenames:
        raise NoSelection("No file selected")

    link = make_link(choice)
    if link is None:
        raise NotANote(choice)
    if editor.current is not None:
        editor.insert(link)
    return CommandResult("ok", link, path=notes_dir / choice)


def search_notes(config: NotesConfig, chooser: Chooser, editor: Editor) -> CommandResult:
    """Full-text search across the notes directory."""
    notes_dir = require_notes_dir(config)
    query = chooser.ask("Search notes")
    if not query:
        raise NoSelection("No search query given")

    hits = NoteIndex(notes_dir).search(query)
    return CommandResult("ok", f"{len(hits)} match(es) for {query!r}", hits=hits)


def retitle_note(config: NotesConfig, chooser: Chooser, editor: Editor) -> CommandResult:
    """Rename the current note to a new title, keeping its id and tags."""
    notes_dir = require_notes_dir(config)
    current = _current_path(editor)
    require_note(notes_dir, current)

    new_title = chooser.ask("Enter a new title")
    if not new_title:
        raise NoSelection("Title unchanged")

    path = retitle(notes_dir, current, new_title, editor)
    return CommandResult("ok", f"Renamed to {path.name}", path=path)


def toggle_note_tag(config: NotesConfig, chooser: Chooser, editor: Editor) -> CommandResult:
    """Toggle one tag on the current note; free text adds a brand-new tag."""
    notes_dir = require_notes_dir(config)
    current = _current_path(editor)
    choices = tag_choices(notes_dir, current)

    choice: Any = chooser.select(choices, "Select a tag to toggle", format_item=lambda c: c.label)
    if choice is None:
        raise NoSelection("No tag selected")
    tag = choice.tag if isinstance(choice, TagChoice) else choice

    path = toggle_tag(notes_dir, current, tag, editor)
    return CommandResult("ok", f"Renamed to {path.name}", path=path)


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


def list_notes(config: NotesConfig, match: str = "", tag: str | None = None) -> list[str]:
    """Note filenames, newest first, whose title or tags contain *match*.

    With *tag*, only notes carrying that (normalized) tag are kept.
    """
    index = NoteIndex(require_notes_dir(config))
    filenames = index.find(match)
    if tag is not None:
        tagged = index.notes_with_tag(normalize_tag(tag))
        filenames = [f for f in filenames if index.notes[f] in tagged]
    return filenames


def tag_summary(config: NotesConfig) -> pl.DataFrame:
    """Every tag in use with the number of notes carrying it."""
    with NoteDB(NoteIndex(require_notes_dir(config))) as db:
        return db.tag_counts()


def query_notes(config: NotesConfig, sql: str) -> pl.DataFrame:
    """Run *sql* against the ``notes(filename, id, title, tags)`` table."""
    with NoteDB(NoteIndex(require_notes_dir(config))) as db:
        return db.query(sql)


CommandFn = Callable[[NotesConfig, Chooser, Editor], CommandResult]

COMMANDS: dict[str, CommandFn] = {
    "find": find_note,
    "link_to_note": link_to_note,
    "retitle": retitle_note,
    "search": search_notes,
    "toggle_tag": toggle_note_tag,
}


def run_command(
    name: str,
    config: NotesConfig,
    chooser: Chooser,
    editor: Editor,
    note: Path | None = None,
) -> CommandResult:
    """Run command *name*, mapping expected failures to a :class:`CommandResult`.

    *note*, when given, is opened in *editor* before the command runs, but
    only once the notes directory is known to be configured.  A bare
    filename is looked up in that directory.

    Unknown names raise :class:`KeyError`.  Nothing is retried.
    """
    command = COMMANDS[name]
    try:
        if note is not None:
            notes_dir = require_notes_dir(config)
            editor.open(notes_dir / note if note.parent == Path(".") else note)
        return command(config, chooser, editor)
    except MissingConfiguration as exc:
        logger.error("%s", exc)
        return CommandResult("error", str(exc))
    except NoSelection as exc:
        return CommandResult("info", str(exc))
    except (NotANote, InvalidTitle, InvalidTag, NoteCollision) as exc:
        logger.warning("%s: %s", name, exc)
        return CommandResult("warning", str(exc))
    except UnicodeDecodeError as exc:
        logger.error("%s failed: %s", name, exc)
        return CommandResult("error", f"Cannot read note as UTF-8 text: {exc.reason}")
    except OSError as exc:
        logger.error("%s failed: %s", name, exc)
        return CommandResult("error", str(exc))
