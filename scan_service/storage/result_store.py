from pathlib import Path

from scan_service.logging.logger import Log
from scan_service.scanner.identifiers import is_valid_identifier
from scan_service.scanner.movescanner_adapter import RESULT_SUFFIX
from scan_service.storage.exceptions import ResultNotFoundError


class ResultStore:
    """Reads scanner result artifacts back from the result pool as opaque bytes."""

    def __init__(self, results_root: Path) -> None:
        self._results_root = results_root

    def path_for(self, result_id: str) -> Path:
        """Build path to an artifact: {results_root}/{result_id}.json

        Raises:
            ResultNotFoundError: if result_id is not a plain alphanumeric identifier.
        """
        if not is_valid_identifier(result_id):
            raise ResultNotFoundError(f"Invalid result identifier: {result_id!r}")
        return self._results_root / f"{result_id}{RESULT_SUFFIX}"

    def read(self, result_id: str) -> bytes:
        """Return the raw artifact bytes.

        Raises:
            ResultNotFoundError: if the identifier is invalid or the file is absent
                (never produced, or already removed by a retention sweep).
        """
        path = self.path_for(result_id)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as exc:
            Log.error(f"Failed to read {path}")
            raise ResultNotFoundError(f"Result not found: {result_id}") from exc
