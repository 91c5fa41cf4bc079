from dataclasses import dataclass
from pathlib import Path

from scan_service.config.settings import Settings


@dataclass(frozen=True)
class StorageRoots:
    """The two shared pools: per-upload working areas and scanner results."""

    temp_root: Path
    results_root: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageRoots":
        return cls(
            temp_root=Path(settings.temp_root),
            results_root=Path(settings.results_root),
        )

    def ensure(self) -> None:
        """Create both pool directories if they do not exist yet."""
        self.temp_root.mkdir(parents=True, exist_ok=True)
        self.results_root.mkdir(parents=True, exist_ok=True)

    def pools(self) -> list[Path]:
        return [self.temp_root, self.results_root]
