"""
Note store implementations for MnemoNotes.

Provides abstract base and concrete implementations for note storage.

Available backends:
- SQLiteNoteStore: Local SQLite database with FTS5 ranked search
"""

from src.core.note_store.base import NoteStore
from src.core.note_store.sqlite_store import SQLiteNoteStore

__all__ = [
    "NoteStore",
    "SQLiteNoteStore",
]
