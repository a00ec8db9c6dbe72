"""
Note Engine - wires the store, the optional language model and services.

One engine per process: it owns the single store connection and the
provider client, created at startup and closed at shutdown.
"""

from src.config import Config
from src.core.factory import LLMFactory, NoteStoreFactory
from src.core.llm.base import LLMProvider
from src.core.note_store.base import NoteStore
from src.services.answer_service import AnswerService
from src.services.decay_job import ConfidenceDecayJob
from src.services.note_manager import NoteManager
from src.services.query_pipeline import QueryPipeline
from src.services.summarizer import SummarizationService
from src.utils.logger import get_logger

logger = get_logger(__name__)


class NoteEngine:
    """
    Unified entry point for all note operations.

    Components:
    - notes: NoteManager (CRUD + listing)
    - query: QueryPipeline (retrieval + answering)
    - decay: ConfidenceDecayJob
    """

    def __init__(self, store: NoteStore, llm: LLMProvider | None, config: Config):
        """
        Initialize Note Engine.

        Args:
            store: Note store
            llm: LLM provider, or None to run on local fallbacks only
            config: Configuration object
        """
        self.store = store
        self.llm = llm
        self.config = config

        self.summarizer = SummarizationService(llm=llm)
        self.answer_service = AnswerService(llm=llm)

        self.notes = NoteManager(store=store, summarizer=self.summarizer)
        self.query = QueryPipeline(store=store, answer_service=self.answer_service)
        self.decay = ConfidenceDecayJob(
            store=store,
            rate_per_day=config.decay.rate_per_day,
            secret=config.decay.secret,
        )

    @classmethod
    def from_config(cls, config: Config) -> "NoteEngine":
        """
        Build an engine from configuration.

        Raises:
            ConfigurationError: If the store connection string is missing or unsupported
        """
        store = NoteStoreFactory.create(config)
        llm = LLMFactory.create_optional(config.llm)
        return cls(store=store, llm=llm, config=config)

    @property
    def llm_description(self) -> str:
        if self.llm is None:
            return "none"
        return f"{self.config.llm.provider}/{self.llm.model}"

    async def initialize(self) -> None:
        """Connect and prepare the store."""
        logger.info("Initializing Note Engine")

        await self.store.initialize()
        logger.info("Note store initialized")

        if not self.config.decay.secret:
            logger.warning("No decay secret configured; /decay accepts unauthenticated calls")

        logger.info(f"Note Engine ready (llm={self.llm_description})")

    async def get_statistics(self) -> dict:
        """Basic counts for health and monitoring."""
        return {
            "notes": await self.store.count_notes(),
            "llm": self.llm_description,
            "decay_rate_per_day": self.config.decay.rate_per_day,
        }

    async def close(self) -> None:
        """Close the store and provider."""
        logger.info("Shutting down Note Engine")

        await self.store.close()

        if self.llm is not None:
            await self.llm.close()

        logger.info("Note Engine closed")
