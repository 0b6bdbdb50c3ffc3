"""NoteDB: SQL view over the decoded note filenames.

Uses DuckDB (in-memory) as a query engine over the descriptors held by a
:class:`~notes.index.NoteIndex` and returns :mod:`polars` DataFrames.  The
table is derived data: call :meth:`NoteDB.refresh` after every rename.

Usage::

    db = NoteDB(index)

    df = db.query("SELECT filename FROM notes WHERE 'editor' = ANY(tags)")
    latest = db.table_view(filter_tag="editor", order_by="id DESC")
    counts = db.tag_counts()
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import duckdb
import polars as pl

if TYPE_CHECKING:
    from notes.index import NoteIndex

_COLUMNS = ("filename", "id", "title", "tags")
# "<column>" or "<column> ASC|DESC"
_ORDER_BY_RE = re.compile(r"^\s*(\w+)(?:\s+(ASC|DESC))?\s*$", re.IGNORECASE)


class NoteDB:
    """In-memory DuckDB table of note descriptors."""

    def __init__(self, index: "NoteIndex") -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(index)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, index: "NoteIndex") -> None:
        """(Re-)populate the table from *index*, rebuilding the index first."""
        index.build()
        self._index = index
        self._create_schema()
        self._load_notes()

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE notes (
                filename  VARCHAR PRIMARY KEY,
                id        VARCHAR,
                title     VARCHAR,
                tags      VARCHAR[]
            )
        """)

    def _load_notes(self) -> None:
        rows = [
            (filename, d.timestamp, d.title, d.tags)
            for filename, d in self._index.notes.items()
        ]
        if rows:
            self.conn.executemany("INSERT INTO notes VALUES (?,?,?,?)", rows)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql).pl()

    def table_view(
        self,
        *,
        filter_tag: str | None = None,
        search: str | None = None,
        order_by: str = "id DESC",
    ) -> pl.DataFrame:
        """Return notes as a Polars DataFrame, optionally filtered.

        Parameters
        ----------
        filter_tag:
            Only include notes that carry this tag.
        search:
            Case-insensitive substring filter on title or tags.
        order_by:
            ``"<column>"`` or ``"<column> ASC|DESC"``; defaults to newest first.
        """
        where_clauses: list[str] = []
        params: list[str] = []

        if filter_tag:
            where_clauses.append("list_contains(tags, ?)")
            params.append(filter_tag)
        if search:
            where_clauses.append(
                "(title ILIKE ? OR list_aggr(tags, 'string_agg', ' ') ILIKE ?)"
            )
            pattern = f"%{search}%"
            params.extend([pattern, pattern])

        where = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""
        sql = f"SELECT {', '.join(_COLUMNS)} FROM notes {where} ORDER BY {_safe_order(order_by)}"
        return self.conn.execute(sql, params).pl()

    def tag_counts(self) -> pl.DataFrame:
        """Return a tag → note_count table sorted by frequency."""
        return self.conn.execute(
            """
            SELECT tag, COUNT(*) AS note_count
            FROM (SELECT unnest(tags) AS tag FROM notes)
            GROUP BY tag
            ORDER BY note_count DESC, tag
            """
        ).pl()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "NoteDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


def _safe_order(order_by: str) -> str:
    match = _ORDER_BY_RE.match(order_by)
    if match is None or match.group(1) not in _COLUMNS:
        raise ValueError(f"Cannot order notes by {order_by!r}")
    column, direction = match.groups()
    return f"{column} {(direction or 'ASC').upper()}"
