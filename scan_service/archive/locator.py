import os
from pathlib import Path

from scan_service.logging.logger import Log

DEFAULT_MARKER = "bytecode_modules"


class ModuleLocator:
    """Finds the bytecode module directory inside an extracted working area."""

    def __init__(self, marker: str = DEFAULT_MARKER) -> None:
        self._marker = marker

    def locate(self, root: Path) -> Path | None:
        """Return the first directory named after the marker, depth-first.

        Entries are visited in name order; each directory is checked before
        descending into it. Symlinked directories are not followed.
        Returns None when nothing matches or the tree cannot be read.
        """
        return self._search(root)

    def _search(self, directory: Path) -> Path | None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            Log.error(f"Error reading directory {directory}: {exc}")
            return None
        for entry in entries:
            if not entry.is_dir(follow_symlinks=False):
                continue
            if entry.name == self._marker:
                return directory / entry.name
            found = self._search(directory / entry.name)
            if found is not None:
                return found
        return None
