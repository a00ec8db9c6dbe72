"""
Data models for MnemoNotes.

Core models:
- Note, NoteLink: The persisted knowledge unit
- NoteCreate, NoteUpdate: Validated request payloads
- SummaryResult, AnswerContext, AnswerResult, SourceRef, LLMResult: Model-service exchange
- QueryRequest, QueryResponse, NoteMatch: Question answering
- DecayReport: Confidence decay job output
"""

from src.models.ai import AnswerContext, AnswerResult, LLMResult, SourceRef, SummaryResult
from src.models.decay import DecayReport
from src.models.note import (
    DEFAULT_CONFIDENCE,
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    Note,
    NoteCreate,
    NoteLink,
    NoteUpdate,
    clean_tags,
    merge_tags,
)
from src.models.query import NoteMatch, QueryRequest, QueryResponse

__all__ = [
    # Note models
    "Note",
    "NoteLink",
    "NoteCreate",
    "NoteUpdate",
    "DEFAULT_CONFIDENCE",
    "MIN_CONFIDENCE",
    "MAX_CONFIDENCE",
    "clean_tags",
    "merge_tags",
    # Model-service exchange
    "LLMResult",
    "SummaryResult",
    "AnswerContext",
    "AnswerResult",
    "SourceRef",
    # Query models
    "QueryRequest",
    "QueryResponse",
    "NoteMatch",
    # Decay
    "DecayReport",
]
