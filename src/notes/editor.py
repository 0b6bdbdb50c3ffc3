"""Buffer accessor used to keep unsaved edits alive across a rename.

The host editor is an external collaborator.  The store only needs the
small :class:`Editor` protocol below; :class:`MemoryEditor` implements it
in-process for the CLI and for tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass
class NoteBuffer:
    """In-memory contents of an open file."""

    path: Path
    text: str = ""
    #: True when ``text`` differs from what was last read or written
    modified: bool = False

    @classmethod
    def load(cls, path: Path) -> "NoteBuffer":
        """Open *path*; a file that does not exist yet gives an empty buffer."""
        path = Path(path)
        text = path.read_text(encoding="utf-8") if path.exists() else ""
        return cls(path=path, text=text)

    def set_text(self, text: str) -> None:
        self.text = text
        self.modified = True

    def write(self) -> None:
        self.path.write_text(self.text, encoding="utf-8")
        self.modified = False


@runtime_checkable
class Editor(Protocol):
    current: NoteBuffer | None

    def buffer_for(self, path: Path) -> NoteBuffer | None: ...
    def open(self, path: Path) -> NoteBuffer: ...
    def close(self, buffer: NoteBuffer) -> None: ...
    def insert(self, text: str) -> None: ...


class MemoryEditor:
    """Keeps one :class:`NoteBuffer` per resolved path."""

    def __init__(self) -> None:
        self.buffers: dict[Path, NoteBuffer] = {}
        self.current: NoteBuffer | None = None

    def buffer_for(self, path: Path) -> NoteBuffer | None:
        return self.buffers.get(Path(path).resolve())

    def open(self, path: Path) -> NoteBuffer:
        """Return the buffer for *path*, loading it from disk on first use."""
        key = Path(path).resolve()
        buffer = self.buffers.get(key)
        if buffer is None:
            buffer = NoteBuffer.load(key)
            self.buffers[key] = buffer
            logger.debug("Opened buffer for %s", key.name)
        self.current = buffer
        return buffer

    def close(self, buffer: NoteBuffer) -> None:
        """Discard *buffer* without saving."""
        self.buffers.pop(buffer.path.resolve(), None)
        if self.current is buffer:
            self.current = None

    def insert(self, text: str) -> None:
        if self.current is None:
            raise RuntimeError("No buffer is open.")
        self.current.set_text(self.current.text + text)
