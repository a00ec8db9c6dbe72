"""
SQLite note store implementation.

Clean, efficient implementation using aiosqlite, with an FTS5 index
for relevance-ranked search.
"""

import asyncio
import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from src.core.note_store.base import NoteStore
from src.models.note import Note
from src.utils.exceptions import NotFoundError, StoreError
from src.utils.id_generator import generate_note_id
from src.utils.logger import get_logger

logger = get_logger(__name__)

MEMORY_DB = ":memory:"

NOTE_COLUMNS = (
    "id, title, content, insights, summary, tags, links, confidence, "
    "last_accessed_at, created_at, updated_at, decayed_at"
)

_TERM_RE = re.compile(r"\w+", re.UNICODE)


def _to_text(value: datetime | None) -> str | None:
    # Fixed width so that lexical order matches chronological order
    return value.isoformat(timespec="microseconds") if value else None


def _from_text(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _casefold(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_match_expression(query: str) -> str:
    """
    Turn a free-text question into an FTS5 MATCH expression.

    Every word becomes a quoted term and terms are OR-ed, so a note
    matching any word is a candidate and bm25 decides the order.

    Raises:
        StoreError: If the query contains no searchable words
    """
    terms = _TERM_RE.findall(query.lower())
    if not terms:
        raise StoreError("Query has no searchable terms", context={"query": query})
    unique = list(dict.fromkeys(terms))
    return " OR ".join(f'"{term}"' for term in unique)


class SQLiteNoteStore(NoteStore):
    """
    SQLite-based note store.

    Features:
    - One lazily opened connection per process
    - JSON columns for list fields
    - FTS5 full-text index ranked with bm25
    - Transactional writes (document and index change together)
    """

    def __init__(self, db_path: str = "data/notes.db"):
        """
        Initialize SQLite note store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None
        self.fts_enabled = False
        self._connect_lock = asyncio.Lock()
        # One connection: statements and their commit/rollback must not interleave
        self._lock = asyncio.Lock()

        # Ensure directory exists
        if db_path != MEMORY_DB:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite (single-flight)."""
        if self.connection is not None:
            return

        async with self._connect_lock:
            if self.connection is not None:
                return
            try:
                connection = await aiosqlite.connect(self.db_path)
                connection.row_factory = aiosqlite.Row
                await connection.create_function("casefold", 1, _casefold, deterministic=True)
                if self.db_path != MEMORY_DB:
                    await connection.execute("PRAGMA journal_mode = WAL")
                await connection.commit()
            except Exception as e:
                raise StoreError(
                    f"Failed to connect to note store: {e}", context={"db_path": self.db_path}
                ) from e
            self.connection = connection
            logger.info(f"Connected to note store at {self.db_path}")

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS notes (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                insights TEXT NOT NULL DEFAULT '[]',
                summary TEXT NOT NULL DEFAULT '',
                tags TEXT NOT NULL DEFAULT '[]',
                links TEXT NOT NULL DEFAULT '[]',
                confidence REAL NOT NULL DEFAULT 0.9,
                last_accessed_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                decayed_at TEXT
            )
        """
        )
        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_notes_updated ON notes(updated_at)"
        )

        try:
            await self.connection.execute(
                """
                CREATE VIRTUAL TABLE IF NOT EXISTS notes_fts USING fts5(
                    note_id UNINDEXED,
                    title,
                    body,
                    insights,
                    tags,
                    summary,
                    tokenize = 'porter unicode61'
                )
            """
            )
            self.fts_enabled = True
        except aiosqlite.OperationalError as e:
            # SQLite builds without FTS5 still work through substring search
            self.fts_enabled = False
            logger.warning(f"FTS5 unavailable, ranked search disabled: {e}")

        await self.connection.commit()

    # ═══════════════════════════════════════════════════════════
    # ROW MAPPING
    # ═══════════════════════════════════════════════════════════

    def _row_to_note(self, row: aiosqlite.Row) -> Note:
        return Note(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            insights=json.loads(row["insights"] or "[]"),
            summary=row["summary"] or "",
            tags=json.loads(row["tags"] or "[]"),
            links=json.loads(row["links"] or "[]"),
            confidence=row["confidence"],
            last_accessed_at=_from_text(row["last_accessed_at"]),
            created_at=_from_text(row["created_at"]),
            updated_at=_from_text(row["updated_at"]),
            decayed_at=_from_text(row["decayed_at"]),
        )

    def _note_params(self, note: Note) -> tuple[Any, ...]:
        return (
            note.title,
            note.content,
            json.dumps(note.insights),
            note.summary or "",
            json.dumps(note.tags),
            json.dumps([link.model_dump() for link in note.links]),
            note.confidence,
            _to_text(note.last_accessed_at),
            _to_text(note.created_at),
            _to_text(note.updated_at),
            _to_text(note.decayed_at),
        )

    async def _index_note(self, note: Note) -> None:
        if not self.fts_enabled:
            return
        await self.connection.execute("DELETE FROM notes_fts WHERE note_id = ?", (note.id,))
        await self.connection.execute(
            """
            INSERT INTO notes_fts (note_id, title, body, insights, tags, summary)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                note.id,
                note.title,
                note.content,
                "\n".join(note.insights),
                " ".join(note.tags),
                note.summary or "",
            ),
        )

    # ═══════════════════════════════════════════════════════════
    # DOCUMENT OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def create_note(self, note: Note) -> Note:
        """Insert a new note and index it."""
        await self.connect()

        now = datetime.now()
        stored = note.model_copy(update={"id": generate_note_id(), "created_at": now, "updated_at": now})

        async with self._lock:
            try:
                await self.connection.execute(
                    f"INSERT INTO notes ({NOTE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (stored.id, *self._note_params(stored)),
                )
                await self._index_note(stored)
                await self.connection.commit()
            except Exception as e:
                await self.connection.rollback()
                raise StoreError(f"Failed to create note: {e}") from e

        return stored

    async def get_note(self, note_id: str) -> Note | None:
        """Retrieve a note by ID."""
        await self.connect()

        async with self._lock:
            cursor = await self.connection.execute(
                f"SELECT {NOTE_COLUMNS} FROM notes WHERE id = ?", (note_id,)
            )
            row = await cursor.fetchone()

        if not row:
            return None

        return self._row_to_note(row)

    async def save_note(self, note: Note) -> Note:
        """Replace a note's fields and refresh its index entry."""
        await self.connect()

        if not note.id:
            raise StoreError("Cannot save a note without an id")

        stored = note.model_copy(update={"updated_at": datetime.now()})

        async with self._lock:
            try:
                cursor = await self.connection.execute(
                    """
                    UPDATE notes SET
                        title = ?, content = ?, insights = ?, summary = ?, tags = ?, links = ?,
                        confidence = ?, last_accessed_at = ?, created_at = ?, updated_at = ?,
                        decayed_at = ?
                    WHERE id = ?
                    """,
                    (*self._note_params(stored), stored.id),
                )
                if cursor.rowcount == 0:
                    await self.connection.rollback()
                    raise NotFoundError(
                        f"Note not found: {note.id}", context={"note_id": note.id}
                    )
                await self._index_note(stored)
                await self.connection.commit()
            except NotFoundError:
                raise
            except Exception as e:
                await self.connection.rollback()
                raise StoreError(f"Failed to save note {note.id}: {e}") from e

        return stored

    async def touch_note(self, note_id: str, accessed_at: datetime) -> None:
        """Update last_accessed_at only."""
        await self.connect()

        async with self._lock:
            await self.connection.execute(
                "UPDATE notes SET last_accessed_at = ? WHERE id = ?",
                (_to_text(accessed_at), note_id),
            )
            await self.connection.commit()

    async def delete_note(self, note_id: str) -> bool:
        """Delete a note and its index entry."""
        await self.connect()

        async with self._lock:
            try:
                cursor = await self.connection.execute("DELETE FROM notes WHERE id = ?", (note_id,))
                deleted = cursor.rowcount > 0
                if self.fts_enabled:
                    await self.connection.execute(
                        "DELETE FROM notes_fts WHERE note_id = ?", (note_id,)
                    )
                await self.connection.commit()
            except Exception as e:
                await self.connection.rollback()
                raise StoreError(f"Failed to delete note {note_id}: {e}") from e

        return deleted

    # ═══════════════════════════════════════════════════════════
    # QUERIES
    # ═══════════════════════════════════════════════════════════

    async def _fetch_notes(self, sql: str, params: tuple[Any, ...] = ()) -> list[Note]:
        async with self._lock:
            cursor = await self.connection.execute(sql, params)
            rows = await cursor.fetchall()
        return [self._row_to_note(row) for row in rows]

    async def list_notes(self, limit: int = 50) -> list[Note]:
        """List notes, newest update first."""
        await self.connect()

        return await self._fetch_notes(
            f"SELECT {NOTE_COLUMNS} FROM notes ORDER BY updated_at DESC LIMIT ?", (limit,)
        )

    async def all_notes(self) -> list[Note]:
        """Return every note."""
        await self.connect()

        return await self._fetch_notes(f"SELECT {NOTE_COLUMNS} FROM notes")

    async def count_notes(self) -> int:
        """Count stored notes."""
        await self.connect()

        async with self._lock:
            cursor = await self.connection.execute("SELECT COUNT(*) FROM notes")
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def text_search(self, query: str, limit: int = 8) -> list[Note]:
        """Rank notes with FTS5 bm25 (lower score is better)."""
        await self.connect()

        if not self.fts_enabled:
            raise StoreError("Full-text search is not available")

        match = build_match_expression(query)
        columns = ", ".join(f"n.{column.strip()}" for column in NOTE_COLUMNS.split(","))

        try:
            return await self._fetch_notes(
                f"""
                SELECT {columns}
                FROM notes_fts
                JOIN notes n ON n.id = notes_fts.note_id
                WHERE notes_fts MATCH ?
                ORDER BY bm25(notes_fts)
                LIMIT ?
                """,
                (match, limit),
            )
        except aiosqlite.Error as e:
            raise StoreError(f"Text search failed: {e}", context={"query": query}) from e

    async def substring_search(self, query: str, limit: int = 8) -> list[Note]:
        """Case-insensitive (Unicode casefold) substring match, newest update first."""
        await self.connect()

        pattern = f"%{_escape_like(_casefold(query))}%"
        return await self._fetch_notes(
            f"""
            SELECT {NOTE_COLUMNS} FROM notes
            WHERE casefold(title) LIKE ? ESCAPE '\\'
               OR casefold(content) LIKE ? ESCAPE '\\'
               OR casefold(summary) LIKE ? ESCAPE '\\'
            ORDER BY updated_at DESC
            LIMIT ?
            """,
            (pattern, pattern, pattern, limit),
        )

    # ═══════════════════════════════════════════════════════════
    # BATCH OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def bulk_update_confidence(self, updates: dict[str, tuple[float, datetime]]) -> int:
        """Apply all confidence updates in one transaction."""
        if not updates:
            return 0

        await self.connect()

        async with self._lock:
            try:
                await self.connection.executemany(
                    "UPDATE notes SET confidence = ?, decayed_at = ? WHERE id = ?",
                    [
                        (confidence, _to_text(decayed_at), note_id)
                        for note_id, (confidence, decayed_at) in updates.items()
                    ],
                )
                await self.connection.commit()
            except Exception as e:
                await self.connection.rollback()
                raise StoreError(f"Bulk confidence update failed: {e}") from e

        return len(updates)

    async def close(self) -> None:
        """Close connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None
