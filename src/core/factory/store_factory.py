"""
Factory for creating note store backends.
"""

from src.config import Config
from src.core.note_store.base import NoteStore
from src.core.note_store.sqlite_store import MEMORY_DB, SQLiteNoteStore
from src.utils.exceptions import ConfigurationError

SQLITE_PREFIXES = ("sqlite+aiosqlite:///", "sqlite:///")


def sqlite_path_from_url(url: str) -> str:
    """
    Resolve a connection string to a SQLite database path.

    Accepts "sqlite:///relative.db", "sqlite:////abs/path.db",
    "sqlite:///:memory:" and bare filesystem paths.

    Raises:
        ConfigurationError: If the URL names another backend
    """
    url = url.strip()
    for prefix in SQLITE_PREFIXES:
        if url.startswith(prefix):
            path = url[len(prefix) :]
            if not path:
                raise ConfigurationError(f"Missing database path in {url!r}")
            return path
    if url in ("sqlite://", "sqlite:"):
        return MEMORY_DB
    if "://" in url:
        scheme = url.split("://", 1)[0]
        raise ConfigurationError(
            f"Unsupported note store backend: {scheme}", context={"url": url}
        )
    return url


class NoteStoreFactory:
    """Factory for creating note stores from configuration."""

    @staticmethod
    def create(config: Config) -> NoteStore:
        """
        Create note store from configuration.

        Args:
            config: Main configuration object

        Returns:
            Note store instance

        Raises:
            ConfigurationError: If the connection string is missing or unsupported
        """
        url = config.require_database_url()
        return SQLiteNoteStore(db_path=sqlite_path_from_url(url))
