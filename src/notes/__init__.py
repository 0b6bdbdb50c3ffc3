"""Timestamped Markdown notes in a flat directory."""

from notes.filename import decode, encode, make_link
from notes.index import NoteIndex
from notes.note import NoteDescriptor, format_timestamp
from notes.slug import normalize_tag, normalize_title
from notes.store import collect_tags, list_note_files, rename_note, retitle, toggle_tag

__all__ = [
    "NoteDescriptor",
    "NoteIndex",
    "collect_tags",
    "decode",
    "encode",
    "format_timestamp",
    "list_note_files",
    "make_link",
    "normalize_tag",
    "normalize_title",
    "rename_note",
    "retitle",
    "toggle_tag",
]
