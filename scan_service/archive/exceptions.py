class ArchiveError(Exception):
    """Base exception for archive intake errors."""


class ExtractionError(ArchiveError):
    """Raised when an uploaded archive cannot be opened or unpacked."""


class LocatorNotFoundError(ArchiveError):
    """Raised when no bytecode module directory exists in the extracted tree."""
