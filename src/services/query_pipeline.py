"""
Query Answering Pipeline - retrieve candidate notes, then answer.

Retrieval degrades from ranked full-text search to a plain substring
match; answering degrades from the model to a locally composed answer.
"""

from typing import Any

from src.core.note_store.base import NoteStore
from src.models.ai import AnswerContext
from src.models.note import Note
from src.models.query import NoteMatch, QueryRequest, QueryResponse
from src.services.answer_service import AnswerService
from src.utils.logger import get_logger
from src.utils.validation import validate_payload

logger = get_logger(__name__)

MAX_CANDIDATES = 8


class QueryPipeline:
    """Answers natural-language questions over the note store."""

    def __init__(self, store: NoteStore, answer_service: AnswerService, max_candidates: int = MAX_CANDIDATES):
        """
        Initialize query pipeline.

        Args:
            store: Note store
            answer_service: Answer service (with or without a model)
            max_candidates: Upper bound on notes handed to the answer service
        """
        self.store = store
        self.answer_service = answer_service
        self.max_candidates = max_candidates

    async def find_relevant_notes(self, question: str) -> list[Note]:
        """
        Select at most max_candidates notes relevant to the question.

        Ranked text search first; on any search failure, a case-insensitive
        substring match of the raw question, newest update first.
        """
        try:
            notes = await self.store.text_search(question, limit=self.max_candidates)
        except Exception as e:
            logger.warning(f"Ranked search failed, falling back to substring match: {e}")
            notes = await self.store.substring_search(question, limit=self.max_candidates)

        return notes[: self.max_candidates]

    async def answer(self, payload: QueryRequest | dict[str, Any] | str) -> QueryResponse:
        """
        Answer a question from the knowledge base.

        Args:
            payload: QueryRequest, raw dict, or the question text

        Returns:
            QueryResponse with answer, sources and matches

        Raises:
            ValidationError: If the question is missing or blank
        """
        if isinstance(payload, str):
            payload = {"question": payload}
        request = validate_payload(QueryRequest, payload)
        question = request.question

        notes = await self.find_relevant_notes(question)

        contexts = [
            AnswerContext(id=note.id, title=note.title, content=note.content, summary=note.summary)
            for note in notes
        ]
        result = await self.answer_service.answer(question, contexts)

        logger.info(
            f"Answered query with {len(notes)} candidates "
            f"({'fallback' if result.from_fallback else 'model'}, {len(result.sources)} sources)"
        )

        return QueryResponse(
            answer=result.answer,
            sources=result.sources,
            matches=[
                NoteMatch(
                    id=note.id,
                    title=note.title,
                    summary=note.summary or "",
                    confidence=note.confidence,
                )
                for note in notes
            ],
        )
