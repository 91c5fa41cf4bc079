from abc import ABC, abstractmethod
from pathlib import Path


class BaseScanner(ABC):
    """Contract for all vulnerability scanner adapters."""

    @abstractmethod
    def scan(self, modules_dir: Path) -> str:
        """Scan a bytecode module directory and store the report in the result pool.

        Args:
            modules_dir: Directory holding the compiled bytecode modules.

        Returns:
            Identifier of the freshly written result artifact.

        Raises:
            ScanExecutionError: if the scanner fails to start or exits non-zero.
            ScanTimeoutError: if the scanner exceeds its time budget.
        """
