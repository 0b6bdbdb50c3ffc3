"""Note store: the flat notes directory and the rename-based update protocol.

Every function takes the notes directory explicitly.  Metadata lives only
in filenames, so changing a title or a tag *is* a rename:

1. capture unsaved edits of the open buffer (if any),
2. rename the file (one atomic step on a single volume),
3. re-open the new path and re-apply the captured edits,
4. discard the buffer of the old path.
"""

from __future__ import annotations

import errno
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from notes.editor import Editor
from notes.errors import InvalidTag, NotANote, NoteCollision
from notes.filename import decode, encode
from notes.note import NoteDescriptor, format_timestamp
from notes.slug import normalize_tag

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


def list_note_files(notes_dir: Path) -> list[Path]:
    """Return every ``*.md`` file directly inside *notes_dir* (no recursion).

    Non-note Markdown files are included; decode them to filter.  Callers
    must not rely on the order.
    """
    return sorted(p for p in Path(notes_dir).glob("*.md") if p.is_file())


def collect_tags(notes_dir: Path) -> set[str]:
    """Union of the tags of every note in *notes_dir*."""
    tags: set[str] = set()
    for path in list_note_files(notes_dir):
        descriptor = decode(path)
        if descriptor is None:
            logger.debug("Skipping non-note file %s", path.name)
            continue
        tags.update(descriptor.tags)
    return tags


def require_note(notes_dir: Path, filename: str | Path) -> NoteDescriptor:
    """Decode *filename*, raising :class:`NotANote` unless it is a managed note.

    A path pointing outside *notes_dir* is never a managed note, even when
    its name matches the grammar.
    """
    path = Path(filename)
    if path.parent != Path("."):
        if path.resolve().parent != Path(notes_dir).resolve():
            raise NotANote(filename)
    descriptor = decode(path.name)
    if descriptor is None:
        raise NotANote(filename)
    return descriptor


# ---------------------------------------------------------------------------
# Creating
# ---------------------------------------------------------------------------


def note_path(
    notes_dir: Path,
    title: str,
    tags: Iterable[str] = (),
    *,
    moment: datetime | None = None,
) -> Path:
    """Path a new note titled *title* would get if created at *moment* (default: now)."""
    descriptor = NoteDescriptor(timestamp=format_timestamp(moment), title=title, tags=list(tags))
    return Path(notes_dir) / encode(descriptor)


def create_note(
    notes_dir: Path,
    title: str,
    tags: Iterable[str] = (),
    *,
    moment: datetime | None = None,
    body: str = "",
) -> Path:
    """Create a new note file and return its path.

    Raises :class:`NoteCollision` if the exact filename already exists
    (same second, same title, same tags).
    """
    path = note_path(notes_dir, title, tags, moment=moment)
    try:
        with path.open("x", encoding="utf-8") as fh:
            fh.write(body)
    except FileExistsError as exc:
        raise NoteCollision(f"Note already exists: {path.name}") from exc
    logger.info("Created note %s", path.name)
    return path


# ---------------------------------------------------------------------------
# Rename protocol
# ---------------------------------------------------------------------------


def rename_note(
    notes_dir: Path,
    old_filename: str | Path,
    new_filename: str | Path,
    editor: Editor | None = None,
) -> Path:
    """Rename a note inside *notes_dir*, carrying unsaved edits along.

    Returns the new path.  Renaming to the same name is a no-op.  An
    existing destination is only overwritten when its content is
    byte-identical to the source; otherwise :class:`NoteCollision` is raised
    and nothing changes.  Other filesystem errors propagate unchanged.
    """
    notes_dir = Path(notes_dir)
    old_path = notes_dir / Path(old_filename).name
    new_path = notes_dir / Path(new_filename).name

    if not old_path.exists():
        raise FileNotFoundError(errno.ENOENT, "No such note", str(old_path))
    if new_path == old_path:
        return new_path
    if new_path.exists() and new_path.read_bytes() != old_path.read_bytes():
        raise NoteCollision(f"Cannot rename {old_path.name}: {new_path.name} already exists")

    buffer = editor.buffer_for(old_path) if editor is not None else None
    unsaved = buffer.text if buffer is not None and buffer.modified else None

    old_path.replace(new_path)
    logger.info("Renamed %s -> %s", old_path.name, new_path.name)

    if editor is not None and buffer is not None:
        previous = editor.current
        new_buffer = editor.open(new_path)
        if unsaved is not None:
            new_buffer.set_text(unsaved)
        editor.close(buffer)
        # Keep focus where it was unless the renamed note itself had it.
        editor.current = new_buffer if previous is buffer else previous

    return new_path


# ---------------------------------------------------------------------------
# Metadata updates
# ---------------------------------------------------------------------------


@dataclass
class TagChoice:
    """One entry of the toggle-tag picker."""

    tag: str
    #: True when the current note already carries the tag
    enabled: bool

    @property
    def label(self) -> str:
        return f"{'☑' if self.enabled else '☐'} {self.tag}"


def tag_choices(notes_dir: Path, current_filename: str | Path) -> list[TagChoice]:
    """Tags offered for toggling on *current_filename*, sorted descending.

    Includes every tag used anywhere in the corpus plus the note's own tags,
    so a tag on this note is always offered even if the scan missed it.
    """
    current = require_note(notes_dir, current_filename)
    enabled = set(current.tags)
    tags = collect_tags(notes_dir) | enabled
    return [TagChoice(tag, tag in enabled) for tag in sorted(tags, reverse=True)]


def toggle_tag(
    notes_dir: Path,
    current_filename: str | Path,
    tag: str,
    editor: Editor | None = None,
) -> Path:
    """Add *tag* to the note if absent, remove it if present; returns the new path."""
    descriptor = require_note(notes_dir, current_filename)
    if not normalize_tag(tag):
        raise InvalidTag(f"Tag {tag!r} is empty after normalization")
    new_filename = encode(descriptor.toggled(tag))
    return rename_note(notes_dir, current_filename, new_filename, editor)


def retitle(
    notes_dir: Path,
    current_filename: str | Path,
    new_title: str,
    editor: Editor | None = None,
) -> Path:
    """Give the note a new title, keeping its timestamp and tags."""
    descriptor = require_note(notes_dir, current_filename)
    new_filename = encode(descriptor.with_title(new_title))
    return rename_note(notes_dir, current_filename, new_filename, editor)
