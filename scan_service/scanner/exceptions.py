class ScannerError(Exception):
    """Base exception for external scanner errors."""


class ScanExecutionError(ScannerError):
    """Raised when the scanner cannot be started or exits with a failure status."""


class ScanTimeoutError(ScanExecutionError):
    """Raised when the scanner does not finish within the configured timeout."""
