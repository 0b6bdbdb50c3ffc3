"""Filename codec: NoteDescriptor <-> ``<timestamp>--<title>__<tags>.md``.

Grammar::

    <timestamp>--<title-slug>(__<tag>(_<tag>)*)?.md

    timestamp   [0-9]{8}T[0-9]{6}   (UTC, second precision)
    title-slug  [-0-9a-zæøå]+       (hyphen-joined words)
    tag         [0-9a-zæøå]+

Title slugs never contain ``_``, so the first underscore always starts the
tag block and decoding is unambiguous.
"""

from __future__ import annotations

import re
from pathlib import Path

from notes.errors import InvalidTitle
from notes.note import NoteDescriptor
from notes.slug import normalize_tags, normalize_title

FILENAME_RE = re.compile(r"^([0-9]{8}T[0-9]{6})([-0-9a-zæøå]+)([_0-9a-zæøå]*)\.md$")
# Separator between title and tags on the find-or-create prompt.
_NEW_NOTE_SPLIT_RE = re.compile(r"\s*,\s*")

EXTENSION = ".md"


def encode(descriptor: NoteDescriptor) -> str:
    """Return the canonical filename for *descriptor*.

    Tags are normalized, de-duplicated and sorted so the result only depends
    on the tag *set*.  Raises :class:`InvalidTitle` for an empty title slug.
    """
    title = normalize_title(descriptor.title)
    if not title:
        raise InvalidTitle(f"Title {descriptor.title!r} is empty after normalization")

    filename = f"{descriptor.timestamp}--{title}"
    tags = normalize_tags(descriptor.tags)
    if tags:
        filename += "_" + "".join(f"_{tag}" for tag in tags)
    return filename + EXTENSION


def decode(filename: str | Path) -> NoteDescriptor | None:
    """Parse a note filename; ``None`` means "not a note".

    Only the last path component is considered, so full paths are accepted.
    """
    match = FILENAME_RE.match(Path(filename).name)
    if match is None:
        return None

    timestamp, title_part, tags_part = match.groups()
    title = " ".join(word for word in title_part.split("-") if word)
    tags = [tag for tag in tags_part.split("_") if tag]
    return NoteDescriptor(timestamp=timestamp, title=title, tags=tags)


def is_note_filename(filename: str | Path) -> bool:
    return decode(filename) is not None


def make_link(filename: str | Path) -> str | None:
    """Markdown link to a note, ``[title](<timestamp>.id)``; ``None`` for non-notes."""
    descriptor = decode(filename)
    if descriptor is None:
        return None
    return f"[{descriptor.title}]({descriptor.id}.id)"


def parse_new_note_input(line: str) -> tuple[str, list[str]]:
    """Split ``"Title words, tag, other tag"`` into ``(title, [tags])``."""
    parts = _NEW_NOTE_SPLIT_RE.split(line.strip())
    title, tags = parts[0], [p for p in parts[1:] if p]
    return title, tags
