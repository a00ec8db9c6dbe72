"""
Factory modules for creating MnemoNotes components.

Provides modular factories for the LLM provider and the note store.
"""

from src.core.factory.llm_factory import LLMFactory
from src.core.factory.store_factory import NoteStoreFactory

__all__ = [
    "LLMFactory",
    "NoteStoreFactory",
]
