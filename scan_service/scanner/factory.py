import sys
from pathlib import Path
from typing import ClassVar

from scan_service.config.settings import Settings
from scan_service.scanner.base import BaseScanner
from scan_service.scanner.movescanner_adapter import MoveScannerAdapter


class ScannerFactory:
    """Creates the scanner adapter with the executable suited to the host platform."""

    PLATFORM_BINARIES: ClassVar[dict[str, str]] = {
        "linux": "./MoveScanner",
        "darwin": "./MoveScanner_m1",
    }
    DEFAULT_BINARY = "./MoveScanner"

    @classmethod
    def create(cls, settings: Settings) -> BaseScanner:
        return MoveScannerAdapter(
            binary=cls.resolve_binary(settings),
            results_root=Path(settings.results_root),
            timeout_seconds=settings.scanner_timeout_seconds,
            id_length=settings.result_id_length,
        )

    @classmethod
    def resolve_binary(cls, settings: Settings, platform: str | None = None) -> str:
        """Explicit SCANNER_BINARY wins; otherwise pick by platform."""
        configured = settings.scanner_binary.strip()
        if configured:
            return configured
        platform = platform if platform is not None else sys.platform
        return cls.PLATFORM_BINARIES.get(platform, cls.DEFAULT_BINARY)
