"""Custom exceptions for trip-split."""


class TripSplitError(Exception):
    """Base exception for all trip-split errors."""

    pass


class ConfigurationError(TripSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class LedgerError(TripSplitError):
    """Raised when a ledger operation refers to an unknown or invalid record."""

    pass


class TripFileError(TripSplitError):
    """Raised when a trip document cannot be read or parsed."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Could not read trip file {path}")


class APIError(TripSplitError):
    """Base class for API-related errors."""

    pass


class TranslationError(APIError):
    """Base class for translation failures."""

    pass


class MissingCredentialError(TranslationError):
    """Raised when the translation API key is missing or rejected."""

    pass


class TranslationServiceError(TranslationError):
    """Raised when the translation service fails for any other reason."""

    pass
