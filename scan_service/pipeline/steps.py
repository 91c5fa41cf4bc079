from scan_service.archive.exceptions import ExtractionError, LocatorNotFoundError
from scan_service.archive.extractor import ArchiveExtractor
from scan_service.archive.locator import ModuleLocator
from scan_service.logging.logger import Log
from scan_service.pipeline.pipeline import PipelineContext, PipelineStep
from scan_service.scanner.base import BaseScanner
from scan_service.storage.result_store import ResultStore
from scan_service.storage.roots import StorageRoots


class PrepareWorkingAreaStep(PipelineStep):
    """Ensure both pools exist and pick the directory this upload unpacks into."""

    def __init__(self, roots: StorageRoots, isolate: bool = True) -> None:
        self._roots = roots
        self._isolate = isolate

    def run(self, context: PipelineContext) -> PipelineContext:
        area = self._roots.temp_root
        if self._isolate:
            area = area / context.upload_id
        try:
            self._roots.ensure()
            area.mkdir(exist_ok=not self._isolate)
        except OSError as exc:
            raise ExtractionError(f"Failed to prepare working area {area}: {exc}") from exc
        context.working_area = area
        Log.info(f"Upload {context.upload_id} uses working area {area}")
        return context


class PersistUploadStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.working_area is None:
            raise ValueError("PipelineContext.working_area must be set before persisting")
        basename = context.upload.basename
        if basename in ("", ".."):
            raise ExtractionError("Upload has no usable filename")
        archive_path = context.working_area / basename
        try:
            archive_path.write_bytes(context.upload.content)
        except OSError as exc:
            raise ExtractionError(f"Failed to store upload {basename}: {exc}") from exc
        context.archive_path = archive_path
        Log.info(f"Stored {len(context.upload.content)} bytes as {archive_path}")
        return context


class ExtractArchiveStep(PipelineStep):
    def __init__(self, extractor: ArchiveExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.archive_path is None or context.working_area is None:
            raise ValueError("PipelineContext.archive_path must be set before extraction")
        self._extractor.extract(context.archive_path, context.working_area)
        return context


class LocateModulesStep(PipelineStep):
    """Search the extracted tree for the bytecode module directory.

    An isolated working area is searched whole; the shared one is narrowed
    to the folder named after the archive (project.zip -> temp/project).
    """

    def __init__(self, locator: ModuleLocator, isolate: bool = True) -> None:
        self._locator = locator
        self._isolate = isolate

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.working_area is None:
            raise ValueError("PipelineContext.working_area must be set before locating")
        search_root = context.working_area
        if not self._isolate:
            search_root = search_root / context.upload.stem
        modules_dir = self._locator.locate(search_root)
        if modules_dir is None:
            raise LocatorNotFoundError(
                f"No bytecode module directory found under {search_root}"
            )
        context.modules_dir = modules_dir
        Log.info(f"Located bytecode modules at {modules_dir}")
        return context


class RunScannerStep(PipelineStep):
    def __init__(self, scanner: BaseScanner) -> None:
        self._scanner = scanner

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.modules_dir is None:
            raise ValueError("PipelineContext.modules_dir must be set before scanning")
        context.result_id = self._scanner.scan(context.modules_dir)
        return context


class LoadResultStep(PipelineStep):
    def __init__(self, result_store: ResultStore) -> None:
        self._result_store = result_store

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.result_id:
            raise ValueError("PipelineContext.result_id must be set before loading")
        context.payload = self._result_store.read(context.result_id)
        Log.info(f"Loaded {len(context.payload)} bytes for result {context.result_id}")
        return context
