from scan_service.archive.extractor import ArchiveExtractor
from scan_service.archive.locator import ModuleLocator
from scan_service.config.settings import Settings
from scan_service.logging.logger import Log
from scan_service.pipeline.models import ScanOutcome, Upload
from scan_service.pipeline.pipeline import PipelineContext, PipelineStep
from scan_service.pipeline.steps import (
    ExtractArchiveStep,
    LoadResultStep,
    LocateModulesStep,
    PersistUploadStep,
    PrepareWorkingAreaStep,
    RunScannerStep,
)
from scan_service.scanner.factory import ScannerFactory
from scan_service.scanner.identifiers import generate_identifier
from scan_service.storage.result_store import ResultStore
from scan_service.storage.roots import StorageRoots


class ScanOrchestrator:
    """Runs one upload through the scan pipeline.

    Pipeline: prepare area -> persist upload -> extract -> locate -> scan -> read result.
    Strictly sequential, no retries: the first failing step aborts the run and
    its exception reaches the caller unchanged.
    """

    def __init__(self, steps: list[PipelineStep], id_length: int = 10) -> None:
        self._steps = steps
        self._id_length = id_length

    def submit(self, filename: str, content: bytes) -> ScanOutcome:
        """Scan an uploaded archive and return the scanner's report bytes."""
        context = PipelineContext(
            upload=Upload(filename=filename, content=content),
            upload_id=generate_identifier(self._id_length),
        )
        Log.info(f"Processing upload {context.upload_id} ({filename}, {len(content)} bytes)")
        for step in self._steps:
            try:
                context = step.run(context)
            except Exception as exc:
                Log.error(
                    f"Upload {context.upload_id} failed at {type(step).__name__}: {exc}"
                )
                raise
        Log.info(f"Upload {context.upload_id} produced result {context.result_id}")
        return ScanOutcome(result_id=context.result_id, payload=context.payload)


def build_orchestrator(settings: Settings) -> ScanOrchestrator:
    """Build a ScanOrchestrator with all required adapters."""
    roots = StorageRoots.from_settings(settings)
    isolate = settings.isolate_working_areas
    steps: list[PipelineStep] = [
        PrepareWorkingAreaStep(roots, isolate=isolate),
        PersistUploadStep(),
        ExtractArchiveStep(ArchiveExtractor()),
        LocateModulesStep(ModuleLocator(settings.bytecode_dir_name), isolate=isolate),
        RunScannerStep(ScannerFactory.create(settings)),
        LoadResultStep(ResultStore(roots.results_root)),
    ]
    return ScanOrchestrator(steps, id_length=settings.result_id_length)
