"""Core NoteDescriptor dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from notes.slug import normalize_tag

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"


def format_timestamp(moment: datetime | None = None) -> str:
    """Format *moment* (default: now) as a UTC ``YYYYMMDDThhmmss`` identifier.

    Naive datetimes are taken to be UTC already.  Sub-second precision is
    dropped by the format itself.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


@dataclass
class NoteDescriptor:
    """The metadata a note filename carries: id timestamp, title and tags."""

    timestamp: str
    title: str
    tags: list[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        """Stable identifier; never changes across renames."""
        return self.timestamp

    def has_tag(self, tag: str) -> bool:
        return normalize_tag(tag) in self.tags

    def with_title(self, title: str) -> "NoteDescriptor":
        return replace(self, title=title)

    def with_tags(self, tags: list[str]) -> "NoteDescriptor":
        return replace(self, tags=list(tags))

    def toggled(self, tag: str) -> "NoteDescriptor":
        """Return a copy with *tag* added if absent, removed if present."""
        slug = normalize_tag(tag)
        if slug in self.tags:
            return self.with_tags([t for t in self.tags if t != slug])
        return self.with_tags([*self.tags, slug])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "title": self.title,
            "tags": list(self.tags),
        }
