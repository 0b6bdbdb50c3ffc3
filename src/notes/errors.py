"""Exception types shared by the store and the command surface.

Filesystem failures are not wrapped: they surface as the plain
:class:`OSError` subclasses raised by :mod:`pathlib`.
"""

from __future__ import annotations

from pathlib import Path


class NotesError(Exception):
    """Base class for every error raised by the notes package."""


class NotANote(NotesError):
    """A file that was expected to be a managed note does not match the grammar."""

    def __init__(self, filename: str | Path) -> None:
        self.filename = str(filename)
        super().__init__(f"Not in a note file: {self.filename}")


class MissingConfiguration(NotesError):
    """The notes directory has not been configured (or does not exist)."""


class NoSelection(NotesError):
    """The user cancelled an interactive pick or prompt."""


class InvalidTitle(NotesError, ValueError):
    """A title normalized to an empty slug."""


class NoteCollision(NotesError, FileExistsError):
    """A rename or create would clobber a different, existing note."""


class InvalidTag(NotesError, ValueError):
    """A tag normalized to an empty token."""
