"""Utility modules for MnemoNotes."""

from src.utils.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    LLMError,
    MnemoNotesError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from src.utils.id_generator import generate_note_id
from src.utils.json_extract import extract_json_object
from src.utils.logger import get_logger, setup_logging
from src.utils.validation import validate_payload

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_note_id",
    # Parsing
    "extract_json_object",
    "validate_payload",
    # Exceptions
    "MnemoNotesError",
    "StoreError",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ConfigurationError",
    "ExternalServiceError",
    "LLMError",
]
