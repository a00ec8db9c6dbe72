"""
Services for MnemoNotes.

High-level business logic services:
- NoteEngine: Unified interface wiring store, model and services
- NoteManager: Note lifecycle (create/read/update/delete/list)
- SummarizationService: Summary and tag suggestions with local fallback
- AnswerService: Answer synthesis with local fallback
- QueryPipeline: Candidate retrieval and answering
- ConfidenceDecayJob: Periodic confidence decay
"""

from src.services.answer_service import AnswerService
from src.services.decay_job import ConfidenceDecayJob
from src.services.note_engine import NoteEngine
from src.services.note_manager import NoteManager
from src.services.query_pipeline import QueryPipeline
from src.services.summarizer import SummarizationService

__all__ = [
    "NoteEngine",
    "NoteManager",
    "SummarizationService",
    "AnswerService",
    "QueryPipeline",
    "ConfidenceDecayJob",
]
