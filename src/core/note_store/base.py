"""
Base interface for note storage.

The store is the only place notes are persisted. Implementations own
ID assignment and the created/updated timestamps.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from src.models.note import Note


class NoteStore(ABC):
    """Abstract base class for note storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the store (create tables, indexes). Idempotent."""
        pass

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the process-wide connection on first use.

        Concurrent first callers must share a single connection attempt.
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # DOCUMENT OPERATIONS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def create_note(self, note: Note) -> Note:
        """
        Persist a new note.

        Args:
            note: Note without id/timestamps

        Returns:
            Stored note with id, created_at and updated_at assigned
        """
        pass

    @abstractmethod
    async def get_note(self, note_id: str) -> Note | None:
        """
        Retrieve a note by ID.

        Args:
            note_id: Note identifier

        Returns:
            Note or None if not found
        """
        pass

    @abstractmethod
    async def save_note(self, note: Note) -> Note:
        """
        Replace an existing note as a single all-or-nothing write.

        Args:
            note: Note carrying its id

        Returns:
            Stored note with updated_at refreshed

        Raises:
            NotFoundError: If the note no longer exists
        """
        pass

    @abstractmethod
    async def touch_note(self, note_id: str, accessed_at: datetime) -> None:
        """
        Set last_accessed_at without counting as a content update.

        Args:
            note_id: Note identifier
            accessed_at: Access timestamp
        """
        pass

    @abstractmethod
    async def delete_note(self, note_id: str) -> bool:
        """
        Delete a note.

        Args:
            note_id: Note identifier

        Returns:
            True if a note was removed, False if it did not exist
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # QUERIES
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def list_notes(self, limit: int = 50) -> list[Note]:
        """List notes, most recently updated first."""
        pass

    @abstractmethod
    async def all_notes(self) -> list[Note]:
        """Return every note (used by batch jobs)."""
        pass

    @abstractmethod
    async def count_notes(self) -> int:
        """Total number of stored notes."""
        pass

    @abstractmethod
    async def text_search(self, query: str, limit: int = 8) -> list[Note]:
        """
        Relevance-ranked full-text search.

        Searches title, content, insights, tags and summary; best match first.

        Raises:
            StoreError: If text search is unavailable or the query is unusable
        """
        pass

    @abstractmethod
    async def substring_search(self, query: str, limit: int = 8) -> list[Note]:
        """
        Case-insensitive substring match on title, content and summary.

        Ordered by most recently updated first.
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # BATCH OPERATIONS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def bulk_update_confidence(self, updates: dict[str, tuple[float, datetime]]) -> int:
        """
        Write new confidence values in one batch.

        Args:
            updates: note_id -> (confidence, decayed_at)

        Returns:
            Number of notes written
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection."""
        pass
