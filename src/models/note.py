"""
Note model and request schemas.

A Note is the only persistent entity: free-form text with insights,
tags and links, plus a confidence score that decays while the note
goes unread.
"""

from datetime import datetime
from typing import Annotated, Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, StringConstraints, field_validator

DEFAULT_CONFIDENCE = 0.9
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0

NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def clean_tags(tags: list[str] | None) -> list[str]:
    """
    Trim tags, drop empties and duplicates.

    Order of first appearance is kept; comparison is case-sensitive.
    """
    seen: set[str] = set()
    cleaned: list[str] = []
    for tag in tags or []:
        if not isinstance(tag, str):
            continue
        value = tag.strip()
        if value and value not in seen:
            seen.add(value)
            cleaned.append(value)
    return cleaned


def merge_tags(*groups: list[str] | None) -> list[str]:
    """Union several tag lists into one clean list."""
    merged: list[str] = []
    for group in groups:
        merged.extend(group or [])
    return clean_tags(merged)


def clean_insights(insights: list[str] | None) -> list[str]:
    """Trim insights and drop blank ones, keeping order."""
    return [item.strip() for item in insights or [] if item and item.strip()]


def _drop_incomplete_links(value: Any) -> Any:
    """Drop link pairs whose label or url is missing or blank."""
    if not isinstance(value, list):
        return value

    kept = []
    for item in value:
        if isinstance(item, NoteLink):
            kept.append(item)
            continue
        if isinstance(item, dict):
            label = item.get("label")
            url = item.get("url")
            if not isinstance(label, str) or not label.strip():
                continue
            if not isinstance(url, str) or not url.strip():
                continue
        kept.append(item)
    return kept


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat(timespec="microseconds") if value else None


class NoteLink(BaseModel):
    """A labelled reference attached to a note."""

    label: NonEmptyText
    url: NonEmptyText

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid URL: {value}")
        return value


class Note(BaseModel):
    """
    Knowledge unit stored in the note store.

    Timestamps are managed by the store; decayed_at is an internal
    watermark of the last confidence decay and never leaves the service.
    """

    id: str | None = Field(default=None, description="Store-assigned ID (note_xxx)")

    # Content
    title: NonEmptyText
    content: NonEmptyText
    insights: list[str] = Field(default_factory=list, description="Key points, display order")
    summary: str = Field(default="", description="Model or fallback summary")
    tags: list[str] = Field(default_factory=list)
    links: list[NoteLink] = Field(default_factory=list)

    # Retention
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=MIN_CONFIDENCE, le=MAX_CONFIDENCE)

    # Timestamps
    last_accessed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    decayed_at: datetime | None = None

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: list[str]) -> list[str]:
        return clean_tags(value)

    @field_validator("insights")
    @classmethod
    def _clean_insights(cls, value: list[str]) -> list[str]:
        return clean_insights(value)

    @field_validator("links", mode="before")
    @classmethod
    def _drop_links(cls, value: Any) -> Any:
        return _drop_incomplete_links(value)

    def last_touched(self) -> datetime | None:
        """Most recent read, falling back to update then creation time."""
        return self.last_accessed_at or self.updated_at or self.created_at

    def to_response(self) -> dict[str, Any]:
        """Full client JSON shape."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "insights": list(self.insights),
            "summary": self.summary or "",
            "tags": list(self.tags),
            "links": [link.model_dump() for link in self.links],
            "confidence": self.confidence,
            "lastAccessedAt": _format_time(self.last_accessed_at),
            "createdAt": _format_time(self.created_at),
            "updatedAt": _format_time(self.updated_at),
        }

    def to_public(self) -> dict[str, Any]:
        """Reduced projection for unauthenticated listing."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary or "",
            "tags": list(self.tags),
            "confidence": self.confidence,
            "updatedAt": _format_time(self.updated_at),
        }


class NoteCreate(BaseModel):
    """Payload for creating a note."""

    title: NonEmptyText
    content: NonEmptyText
    insights: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    links: list[NoteLink] = Field(default_factory=list)

    @field_validator("insights", mode="before")
    @classmethod
    def _insights_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("links", mode="before")
    @classmethod
    def _drop_links(cls, value: Any) -> Any:
        return [] if value is None else _drop_incomplete_links(value)


class NoteUpdate(BaseModel):
    """Partial update; only fields that are provided and non-null apply."""

    title: NonEmptyText | None = None
    content: NonEmptyText | None = None
    insights: list[str] | None = None
    tags: list[str] | None = None
    links: list[NoteLink] | None = None

    @field_validator("links", mode="before")
    @classmethod
    def _drop_links(cls, value: Any) -> Any:
        return _drop_incomplete_links(value)

    def provided(self) -> dict[str, Any]:
        """Fields explicitly set by the caller, excluding nulls."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }
