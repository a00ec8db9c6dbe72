"""
Question answering request/response models.
"""

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from src.models.ai import SourceRef


class QueryRequest(BaseModel):
    """Natural-language question about the knowledge base."""

    question: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class NoteMatch(BaseModel):
    """Candidate note returned alongside an answer."""

    id: str
    title: str
    summary: str = ""
    confidence: float = 0.0


class QueryResponse(BaseModel):
    """Answer, cited sources and the full candidate set."""

    answer: str
    sources: list[SourceRef] = Field(default_factory=list)
    matches: list[NoteMatch] = Field(default_factory=list)
