"""
Answer Service - synthesizes answers from candidate notes.

The model is asked for JSON {"answer", "sources"}. When the model is not
configured, fails, or returns no usable answer text, a local answer is
stitched together from the top candidates instead.
"""

import re

from src.core.llm.base import LLMProvider, try_complete
from src.models.ai import AnswerContext, AnswerResult, SourceRef
from src.utils.json_extract import extract_json_object
from src.utils.logger import get_logger

logger = get_logger(__name__)

TOP_SOURCES = 3
FALLBACK_ANSWER_CHARS = 1200

NOT_CONFIGURED_ANSWER = (
    "The language model is not configured. "
    "Set MNEMO_LLM_API_KEY (or MNEMO_LLM_PROVIDER=ollama) to enable answers."
)

_BULLET_RE = re.compile(r"^[-•*]+\s*")
_TERMINAL_PUNCTUATION = (".", "!", "?", ":", ";")

ANSWER_SYSTEM_PROMPT = """You are a knowledgeable assistant answering questions from the user's personal notes.

When answering:
1. Give a thorough explanation in full sentences, at least two paragraphs when the topic allows.
2. Use the user's notes as anchors and expand on them with definitions, reasoning and examples.
3. If the notes are insufficient or unrelated, answer from general knowledge instead of saying "not found".
4. Cite only the notes you actually used."""

ANSWER_PROMPT = """Respond with JSON only: {{"answer": "...", "sources": [{{"id": "...", "title": "..."}}]}}

Question: {question}

User's notes (use when relevant, but do not limit the answer to them):
{notes}"""


def top_sources(notes: list[AnswerContext]) -> list[SourceRef]:
    """Default citations: the first three candidates."""
    return [SourceRef(id=note.id, title=note.title) for note in notes[:TOP_SOURCES]]


def _as_sentence(line: str) -> str:
    cleaned = _BULLET_RE.sub("", line).strip()
    if not cleaned:
        return ""
    return cleaned if cleaned.endswith(_TERMINAL_PUNCTUATION) else f"{cleaned}."


def _note_passage(note: AnswerContext) -> str:
    text = note.summary.strip() if note.summary and note.summary.strip() else note.content
    sentences = [_as_sentence(line) for line in (text or "").splitlines()]
    sentences = [sentence for sentence in sentences if sentence]
    if not sentences:
        return ""
    return f'From your note "{note.title}": ' + " ".join(sentences)


def compose_fallback_answer(question: str, notes: list[AnswerContext]) -> AnswerResult:
    """
    Build an answer locally from the top three candidates.

    Each candidate contributes its summary (or content when the summary
    is blank) as attributed prose; the stitched text is capped at 1200
    characters.
    """
    passages = [_note_passage(note) for note in notes[:TOP_SOURCES]]
    stitched = "\n\n".join(passage for passage in passages if passage)[:FALLBACK_ANSWER_CHARS]

    if stitched:
        answer = f'Based on your notes, here\'s what I found about "{question}":\n\n{stitched}'
    else:
        answer = f'I couldn\'t find an answer to "{question}" in your notes. Try adding more context.'

    return AnswerResult(answer=answer, sources=top_sources(notes), from_fallback=True)


def _parse_sources(raw: object) -> list[SourceRef]:
    if not isinstance(raw, list):
        return []
    sources = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        source_id = item.get("id")
        title = item.get("title")
        if isinstance(source_id, str) and source_id and isinstance(title, str):
            sources.append(SourceRef(id=source_id, title=title))
    return sources


class AnswerService:
    """Answers a question from a bounded set of candidate notes."""

    def __init__(
        self,
        llm: LLMProvider | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ):
        """
        Initialize answer service.

        Args:
            llm: Optional LLM provider (None = "not configured" answers)
            temperature: Sampling temperature for answers
            max_tokens: Output token limit
        """
        self.llm = llm
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def is_configured(self) -> bool:
        return self.llm is not None

    def _build_prompt(self, question: str, notes: list[AnswerContext]) -> str:
        blocks = [
            f"Note {index}:\nID: {note.id}\nTitle: {note.title}\n"
            f"Summary: {note.summary or '-'}\nContent: {note.content}"
            for index, note in enumerate(notes, start=1)
        ]
        return ANSWER_PROMPT.format(question=question, notes="\n\n".join(blocks) or "(none)")

    async def answer(self, question: str, notes: list[AnswerContext]) -> AnswerResult:
        """
        Answer a question using the candidate notes.

        Args:
            question: The user's question
            notes: Candidate notes, most relevant first

        Returns:
            AnswerResult with answer text and cited sources
        """
        if self.llm is None:
            return AnswerResult(
                answer=NOT_CONFIGURED_ANSWER, sources=top_sources(notes), from_fallback=True
            )

        result = await try_complete(
            self.llm,
            self._build_prompt(question, notes),
            system=ANSWER_SYSTEM_PROMPT,
            json_mode=True,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not result.ok:
            return compose_fallback_answer(question, notes)

        payload = extract_json_object(result.text) or {}
        answer = payload.get("answer")
        if not isinstance(answer, str) or not answer.strip():
            logger.warning("Answer response had no usable answer text, composing locally")
            return compose_fallback_answer(question, notes)

        sources = _parse_sources(payload.get("sources")) or top_sources(notes)
        return AnswerResult(answer=answer.strip(), sources=sources)
