from dataclasses import dataclass
from pathlib import PurePath


@dataclass(frozen=True)
class Upload:
    """An archive received from a client."""

    filename: str
    content: bytes

    @property
    def basename(self) -> str:
        """Final path component of the client filename, with any directories dropped."""
        return PurePath(self.filename.replace("\\", "/")).name

    @property
    def stem(self) -> str:
        """Archive name minus its last extension: project.zip -> project."""
        return PurePath(self.basename).stem


@dataclass(frozen=True)
class ScanOutcome:
    """Identifier and raw bytes of the result artifact produced for an upload."""

    result_id: str
    payload: bytes
