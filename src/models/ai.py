"""
Models exchanged with the language-model backed services.
"""

from pydantic import BaseModel, Field


class LLMResult(BaseModel):
    """Outcome of a single model call: payload on success, error marker otherwise."""

    ok: bool
    text: str | None = None
    error: str | None = None


class SummaryResult(BaseModel):
    """Summary and suggested tags for a note."""

    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    from_fallback: bool = Field(default=False, description="Produced locally without the model")


class AnswerContext(BaseModel):
    """
    The slice of a note handed to the Answer Service.

    Insights, tags and links are deliberately withheld.
    """

    id: str
    title: str
    content: str
    summary: str = ""


class SourceRef(BaseModel):
    """A note cited by an answer."""

    id: str
    title: str


class AnswerResult(BaseModel):
    """Synthesized answer and the notes it drew from."""

    answer: str
    sources: list[SourceRef] = Field(default_factory=list)
    from_fallback: bool = False
