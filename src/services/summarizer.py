"""
Summarization Service - summary and tag suggestions for notes.

Uses the configured language model when available and always pairs it
with a deterministic local fallback of the same inputs.
"""

import json
import re

from src.core.llm.base import LLMProvider, try_complete
from src.models.ai import SummaryResult
from src.utils.json_extract import extract_json_object
from src.utils.logger import get_logger

logger = get_logger(__name__)

FALLBACK_SUMMARY_CHARS = 180
FALLBACK_TAG_COUNT = 5

_NON_WORD_RE = re.compile(r"\W+")

SUMMARY_PROMPT = """Summarize the note and suggest tags.
Respond with JSON only: {{"summary": "...", "tags": ["tag"]}}

Note: {note}"""


def fallback_summary(content: str, insights: list[str] | None = None) -> str:
    """Content and insights joined by newlines, truncated to 180 characters."""
    return "\n".join([content, *(insights or [])])[:FALLBACK_SUMMARY_CHARS]


def fallback_tags(title: str) -> list[str]:
    """Up to five lowercased words of the title."""
    words = [word for word in _NON_WORD_RE.split(title.lower()) if word]
    return words[:FALLBACK_TAG_COUNT]


def local_summary(title: str, content: str, insights: list[str] | None = None) -> SummaryResult:
    """Deterministic summary used whenever the model is unavailable."""
    return SummaryResult(
        summary=fallback_summary(content, insights),
        tags=fallback_tags(title),
        from_fallback=True,
    )


class SummarizationService:
    """
    Produces a short summary and suggested tags for a note.

    Never raises on model failure: any error, missing configuration or
    unusable response falls back to local_summary().
    """

    def __init__(self, llm: LLMProvider | None = None, temperature: float = 0.2):
        """
        Initialize summarization service.

        Args:
            llm: Optional LLM provider (None = always use the fallback)
            temperature: Sampling temperature for summaries
        """
        self.llm = llm
        self.temperature = temperature

    @property
    def is_configured(self) -> bool:
        return self.llm is not None

    async def summarize(
        self,
        title: str,
        content: str,
        insights: list[str] | None = None,
    ) -> SummaryResult:
        """
        Summarize a note and suggest tags.

        Args:
            title: Note title
            content: Note body
            insights: Optional key points

        Returns:
            SummaryResult (from_fallback=True when produced locally)
        """
        insights = insights or []

        if self.llm is None:
            return local_summary(title, content, insights)

        prompt = SUMMARY_PROMPT.format(
            note=json.dumps(
                {"title": title, "content": content, "insights": insights}, ensure_ascii=False
            )
        )
        result = await try_complete(
            self.llm, prompt, json_mode=True, temperature=self.temperature
        )
        if not result.ok:
            return local_summary(title, content, insights)

        payload = extract_json_object(result.text)
        if payload is None:
            logger.warning("Summary response was not JSON, using fallback")
            return local_summary(title, content, insights)

        summary = payload.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            summary = fallback_summary(content, insights)

        raw_tags = payload.get("tags")
        tags = (
            [tag.strip() for tag in raw_tags if isinstance(tag, str) and tag.strip()]
            if isinstance(raw_tags, list)
            else []
        )

        return SummaryResult(summary=summary.strip(), tags=tags)
