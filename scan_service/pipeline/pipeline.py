from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from scan_service.pipeline.models import Upload


@dataclass(slots=True)
class PipelineContext:
    upload: Upload
    upload_id: str
    working_area: Path | None = None
    archive_path: Path | None = None
    modules_dir: Path | None = None
    result_id: str = ""
    payload: bytes = b""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
