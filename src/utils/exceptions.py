"""
Custom exception hierarchy for MnemoNotes.

Provides structured error types for better error handling and debugging.
All exceptions inherit from MnemoNotesError for easy catching.
"""


class MnemoNotesError(Exception):
    """
    Base exception for all MnemoNotes errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize MnemoNotes error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(MnemoNotesError):
    """
    Note store operation errors.
    Raised when the document store fails or rejects an operation
    (including an unusable text-search query).
    """

    pass


class ValidationError(MnemoNotesError):
    """
    Validation errors.
    Raised when a request payload is malformed or missing required fields.
    """

    pass


class NotFoundError(MnemoNotesError):
    """
    Resource not found errors.
    Raised when a requested note doesn't exist.
    """

    pass


class UnauthorizedError(MnemoNotesError):
    """
    Authorization errors.
    Raised when the decay trigger is called without the configured secret.
    """

    pass


class ConfigurationError(MnemoNotesError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class ExternalServiceError(MnemoNotesError):
    """
    External dependency errors (summarization / answering).
    Never surfaced to HTTP callers; absorbed into local fallbacks.
    """

    pass


class LLMError(ExternalServiceError):
    """
    LLM operation errors.
    Raised when LLM operations fail (API errors, timeouts, etc.).
    """

    pass
