"""Title and tag normalization for note filenames."""

from __future__ import annotations

import re
from collections.abc import Iterable

_HYPHEN_RUN_RE = re.compile(r"-+")
_UNDERSCORE_RUN_RE = re.compile(r"_+")
# Titles keep hyphens as word separators; tags keep nothing but letters/digits.
_TITLE_STRIP_RE = re.compile(r"[^-0-9a-zæøå]")
_TAG_STRIP_RE = re.compile(r"[^0-9a-zæøå]")


def normalize_title(text: str) -> str:
    """Return the filename slug for a free-form *text* title.

    Lowercases, turns every space into ``-``, collapses runs of ``-`` and
    drops anything outside ``[-0-9a-zæøå]``.  Runs of ``-`` left behind by
    the removal are collapsed again and hyphens at either end are trimmed,
    so ``"Q & A"`` becomes ``"q-a"``.  The result may be empty, which
    callers must reject as a title.
    """
    slug = text.lower()
    slug = slug.replace(" ", "-")
    slug = _HYPHEN_RUN_RE.sub("-", slug)
    slug = _TITLE_STRIP_RE.sub("", slug)
    return _HYPHEN_RUN_RE.sub("-", slug).strip("-")


def normalize_tag(text: str) -> str:
    """Return the filename token for a single tag.

    The steps run in a fixed order (space to hyphen, collapse underscores,
    strip), so the hyphens produced for multi-word input are removed again:
    ``"Editor Tools"`` becomes ``"editortools"``.
    """
    slug = text.lower()
    slug = slug.replace(" ", "-")
    slug = _UNDERSCORE_RUN_RE.sub("_", slug)
    return _TAG_STRIP_RE.sub("", slug)


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Normalize *tags*, dropping empties and duplicates, sorted ascending."""
    return sorted({slug for slug in (normalize_tag(t) for t in tags) if slug})
