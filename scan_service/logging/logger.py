import logging
import sys


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("scan_service")
    _format = "%(asctime)s [%(levelname)s] %(message)s"

    @classmethod
    def configure(cls, log_level: str, log_file: str = "") -> None:
        """Configure the logger level, a stdout handler and an optional append-mode file."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(cls._format))
            cls._logger.addHandler(handler)
        if log_file and not any(
            isinstance(h, logging.FileHandler) for h in cls._logger.handlers
        ):
            try:
                file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            except OSError as exc:
                cls._logger.warning(f"Failed to log to file {log_file}, using stdout only: {exc}")
                return
            file_handler.setFormatter(logging.Formatter(cls._format))
            cls._logger.addHandler(file_handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)
