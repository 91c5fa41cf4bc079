import shutil
import zipfile
import zlib
from pathlib import Path

from scan_service.archive.exceptions import ExtractionError
from scan_service.logging.logger import Log

DIRECTORY_MODE = 0o777


class ArchiveExtractor:
    """Unpacks a zip archive into a working area, rejecting entries that escape it."""

    def extract(self, archive_path: Path, destination: Path) -> None:
        """Expand every entry of the archive under destination.

        Relative paths are preserved and parent directories created as needed.

        Raises:
            ExtractionError: if the archive cannot be opened, an entry resolves
                outside destination, or any entry cannot be written.
        """
        root = destination.resolve()
        try:
            with zipfile.ZipFile(archive_path) as archive:
                members = archive.infolist()
                for member in members:
                    self._extract_member(archive, member, root)
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            NotImplementedError,
            RuntimeError,
            ValueError,
        ) as exc:
            raise ExtractionError(f"Invalid zip archive {archive_path.name}: {exc}") from exc
        except OSError as exc:
            raise ExtractionError(f"Failed to unpack {archive_path.name}: {exc}") from exc
        Log.info(f"Extracted {len(members)} entries from {archive_path.name} into {destination}")

    def _extract_member(
        self,
        archive: zipfile.ZipFile,
        member: zipfile.ZipInfo,
        root: Path,
    ) -> None:
        target = self._safe_target(root, member.filename)
        if member.is_dir():
            target.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
            return
        target.parent.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
        with archive.open(member) as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)

    def _safe_target(self, root: Path, name: str) -> Path:
        target = (root / name).resolve()
        if not target.is_relative_to(root):
            raise ExtractionError(f"Blocked path traversal attempt: {name}")
        return target
