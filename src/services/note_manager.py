"""
Note Lifecycle Manager - create, read, update, delete and list notes.

Summaries and tags are (re)derived through the Summarization Service
whenever a note's text changes; reads stamp last_accessed_at.
"""

from datetime import datetime
from typing import Any

from src.core.note_store.base import NoteStore
from src.models.note import (
    DEFAULT_CONFIDENCE,
    Note,
    NoteCreate,
    NoteUpdate,
    clean_insights,
    clean_tags,
    merge_tags,
)
from src.services.summarizer import SummarizationService
from src.utils.exceptions import NotFoundError
from src.utils.logger import get_logger
from src.utils.validation import validate_payload

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200

# Fields whose change invalidates the summary
TEXT_FIELDS = ("title", "content", "insights")


def clamp_limit(limit: int | None) -> int:
    """Keep list limits within [1, 200], defaulting to 50."""
    if limit is None:
        return DEFAULT_LIST_LIMIT
    return max(1, min(int(limit), MAX_LIST_LIMIT))


class NoteManager:
    """
    Orchestrates the note lifecycle on top of a NoteStore.

    Features:
    - Summarize + tag on create
    - Re-summarize only when title/content/insights change
    - Read-triggers-write access stamping
    """

    def __init__(self, store: NoteStore, summarizer: SummarizationService):
        """
        Initialize note manager.

        Args:
            store: Note store
            summarizer: Summarization service (with or without a model)
        """
        self.store = store
        self.summarizer = summarizer

    async def create_note(self, payload: NoteCreate | dict[str, Any]) -> Note:
        """
        Create a note.

        Args:
            payload: NoteCreate or raw dict

        Returns:
            Stored note

        Raises:
            ValidationError: If required fields are missing or malformed
        """
        data = validate_payload(NoteCreate, payload)

        summary = await self.summarizer.summarize(data.title, data.content, data.insights)

        note = Note(
            title=data.title,
            content=data.content,
            insights=data.insights,
            summary=summary.summary,
            tags=merge_tags(data.tags, summary.tags),
            links=data.links,
            confidence=DEFAULT_CONFIDENCE,
            last_accessed_at=datetime.now(),
        )
        stored = await self.store.create_note(note)

        logger.info(
            f"Created note {stored.id} ({len(stored.tags)} tags, "
            f"summary={'fallback' if summary.from_fallback else 'model'})"
        )
        return stored

    async def get_note(self, note_id: str) -> Note:
        """
        Fetch a note and stamp its access time.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        note = await self.store.get_note(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})

        accessed_at = datetime.now()
        await self.store.touch_note(note_id, accessed_at)
        return note.model_copy(update={"last_accessed_at": accessed_at})

    async def update_note(self, note_id: str, payload: NoteUpdate | dict[str, Any]) -> Note:
        """
        Apply a partial update.

        Only provided fields are written. Provided tags are trimmed and
        empty-filtered; when title, content or insights change, the
        summary is re-derived from the post-update values and suggested
        tags are merged in.

        Raises:
            ValidationError: If the payload is malformed
            NotFoundError: If the note doesn't exist
        """
        data = validate_payload(NoteUpdate, payload)

        note = await self.store.get_note(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})

        changes = data.provided()
        if "tags" in changes:
            changes["tags"] = clean_tags(changes["tags"])
        if "insights" in changes:
            changes["insights"] = clean_insights(changes["insights"])

        text_changed = any(
            field in changes and changes[field] != getattr(note, field) for field in TEXT_FIELDS
        )

        updated = note.model_copy(update=changes)
        # Re-validate so list cleaning applies to the merged note
        updated = Note.model_validate(updated.model_dump())

        if text_changed:
            summary = await self.summarizer.summarize(
                updated.title, updated.content, updated.insights
            )
            updated = updated.model_copy(
                update={
                    "summary": summary.summary,
                    "tags": merge_tags(updated.tags, summary.tags),
                }
            )

        stored = await self.store.save_note(updated)
        logger.info(
            f"Updated note {note_id} fields={sorted(changes)} resummarized={text_changed}"
        )
        return stored

    async def delete_note(self, note_id: str) -> None:
        """
        Delete a note.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        deleted = await self.store.delete_note(note_id)
        if not deleted:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        logger.info(f"Deleted note {note_id}")

    async def list_notes(self, limit: int | None = DEFAULT_LIST_LIMIT) -> list[Note]:
        """List notes, most recently updated first."""
        return await self.store.list_notes(limit=clamp_limit(limit))

    async def list_public(self, limit: int | None = DEFAULT_LIST_LIMIT) -> list[dict[str, Any]]:
        """Public projection of the most recently updated notes."""
        notes = await self.list_notes(limit)
        return [note.to_public() for note in notes]
