"""Notes-directory configuration.

The directory is resolved once per command and passed explicitly into every
store function.  Sources, highest precedence first:

1. an explicit ``notes_dir`` argument (e.g. the CLI ``--dir`` option),
2. the ``NOTES_DIR`` environment variable,
3. a TOML file::

       [notes]
       dir = "~/notes"

   read from ``$NOTES_CONFIG`` or ``$XDG_CONFIG_HOME/notes/config.toml``
   (``~/.config/notes/config.toml`` when ``XDG_CONFIG_HOME`` is unset).
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from notes.errors import MissingConfiguration

logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    explicit = os.getenv("NOTES_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    base = os.getenv("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(base) / "notes" / "config.toml"


@dataclass
class NotesConfig:
    notes_dir: Path | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "NotesConfig":
        section = data.get("notes", data)
        raw = section.get("dir")
        return cls(notes_dir=Path(raw).expanduser() if raw else None)


def load_config(path: Path | None = None, *, notes_dir: str | Path | None = None) -> NotesConfig:
    """Resolve the notes configuration from argument, environment and file."""
    if notes_dir:
        return NotesConfig(notes_dir=Path(notes_dir).expanduser())

    env_dir = os.getenv("NOTES_DIR")
    if env_dir:
        return NotesConfig(notes_dir=Path(env_dir).expanduser())

    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        logger.debug("No config file at %s", config_path)
        return NotesConfig()

    with open(config_path, "rb") as fh:
        data = tomllib.load(fh)
    return NotesConfig.from_dict(data)


def require_notes_dir(config: NotesConfig) -> Path:
    """Return the configured directory or raise :class:`MissingConfiguration`."""
    if config.notes_dir is None:
        raise MissingConfiguration(
            "No notes directory configured: pass --dir, set NOTES_DIR or add "
            f"[notes] dir = ... to {default_config_path()}"
        )
    if not config.notes_dir.is_dir():
        raise MissingConfiguration(f"Notes directory does not exist: {config.notes_dir}")
    return config.notes_dir
