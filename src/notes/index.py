"""NoteIndex: rebuildable in-memory view of the decoded notes directory.

The filenames stay the single source of truth; anything that renames a
note must call :meth:`NoteIndex.invalidate` (or :meth:`NoteIndex.build`)
afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from notes.filename import decode
from notes.note import NoteDescriptor
from notes.store import list_note_files

logger = logging.getLogger(__name__)


@dataclass
class SearchHit:
    filename: str  # note filename (no directory)
    line_no: int   # 1-based line number
    line: str      # matching line, trailing newline stripped

    def to_dict(self) -> dict:
        return {"filename": self.filename, "line_no": self.line_no, "line": self.line}


class NoteIndex:
    """Decodes every note filename in a directory and indexes tags."""

    def __init__(self, notes_dir: Path) -> None:
        self.notes_dir = Path(notes_dir)
        self.notes: dict[str, NoteDescriptor] = {}
        self.tags: dict[str, list[str]] = {}
        self._built = False

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def build(self) -> None:
        """(Re-)scan the directory and rebuild all indexes."""
        self.notes = {}
        for path in list_note_files(self.notes_dir):
            descriptor = decode(path)
            if descriptor is not None:
                self.notes[path.name] = descriptor
        self._build_tags()
        self._built = True
        logger.debug("Indexed %d notes in %s", len(self.notes), self.notes_dir)

    def _build_tags(self) -> None:
        self.tags = {}
        for filename, descriptor in self.notes.items():
            for tag in descriptor.tags:
                self.tags.setdefault(tag, []).append(filename)

    def invalidate(self) -> None:
        """Drop the cached view; the next query rebuilds it."""
        self.notes = {}
        self.tags = {}
        self._built = False

    def _ensure_built(self) -> None:
        if not self._built:
            self.build()

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def notes_with_tag(self, tag: str) -> list[NoteDescriptor]:
        self._ensure_built()
        return [self.notes[f] for f in self.tags.get(tag, []) if f in self.notes]

    def newest_first(self) -> list[str]:
        """Note filenames ordered by id, most recent first."""
        self._ensure_built()
        return sorted(self.notes, key=lambda f: self.notes[f].timestamp, reverse=True)

    def find(self, query: str) -> list[str]:
        """Filenames whose title or tags contain *query* (case-insensitive)."""
        self._ensure_built()
        q = query.lower().strip()
        return [
            filename
            for filename in self.newest_first()
            if q in self.notes[filename].title or any(q in t for t in self.notes[filename].tags)
        ]

    def search(self, query: str) -> list[SearchHit]:
        """Case-insensitive full-text search over the contents of every note."""
        self._ensure_built()
        q = query.lower()
        if not q:
            return []
        hits: list[SearchHit] = []
        for filename in sorted(self.notes):
            path = self.notes_dir / filename
            try:
                text = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                # Renamed or deleted since the last build.
                logger.debug("Note vanished during search: %s", filename)
                continue
            except UnicodeDecodeError:
                logger.debug("Skipping note that is not UTF-8: %s", filename)
                continue
            for line_no, line in enumerate(text.splitlines(), start=1):
                if q in line.lower():
                    hits.append(SearchHit(filename, line_no, line))
        return hits
