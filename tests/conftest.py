"""
Shared test fixtures for all test modules.

Store fixtures use a throwaway SQLite file per test; the language model
is replaced by FakeLLM so no provider is contacted.
"""

from collections.abc import AsyncGenerator
from datetime import datetime

import pytest

from src.core.llm.base import LLMProvider
from src.core.note_store.sqlite_store import SQLiteNoteStore
from src.models.note import Note

MNEMO_ENV_VARS = (
    "MNEMO_DATABASE_URL",
    "MNEMO_LLM_PROVIDER",
    "MNEMO_LLM_MODEL",
    "MNEMO_LLM_BASE_URL",
    "MNEMO_LLM_API_KEY",
    "MNEMO_LLM_TIMEOUT",
    "MNEMO_DECAY_RATE_PER_DAY",
    "MNEMO_DECAY_SECRET",
    "CRON_SECRET",
    "MNEMO_LOG_LEVEL",
    "MNEMO_LOG_TO_FILE",
    "MNEMO_LOG_DIR",
    "MNEMO_LOG_SERIALIZE",
)


class FakeLLM(LLMProvider):
    """Scripted LLM provider: replays canned responses or raises."""

    def __init__(self, responses: list[str] | None = None, error: Exception | None = None):
        self.model = "fake-model"
        self.responses = list(responses or [])
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        json_mode: bool = False,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        **kwargs,
    ) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "system": system,
                "json_mode": json_mode,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0] if self.responses else ""

    async def close(self):
        self.closed = True


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every MnemoNotes variable from the environment."""
    for name in MNEMO_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
async def store(tmp_path) -> AsyncGenerator[SQLiteNoteStore, None]:
    """Initialized SQLite note store in a temporary directory."""
    note_store = SQLiteNoteStore(db_path=str(tmp_path / "notes.db"))
    await note_store.initialize()
    yield note_store
    await note_store.close()


def make_note(
    title: str = "Rust Ownership",
    content: str = "Each value has a single owner.",
    **fields,
) -> Note:
    """Build an unsaved note with sensible defaults."""
    fields.setdefault("last_accessed_at", datetime.now())
    return Note(title=title, content=content, **fields)
