class StorageError(Exception):
    """Base exception for result storage errors."""


class ResultNotFoundError(StorageError):
    """Raised when a result artifact is missing or its identifier is invalid."""
