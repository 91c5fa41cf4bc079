from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, Response

from scan_service.archive.exceptions import (
    ArchiveError,
    ExtractionError,
    LocatorNotFoundError,
)
from scan_service.config.settings import Settings
from scan_service.logging.logger import Log
from scan_service.pipeline.orchestrator import ScanOrchestrator, build_orchestrator
from scan_service.retention.scheduler import RetentionScheduler
from scan_service.scanner.exceptions import (
    ScanExecutionError,
    ScannerError,
    ScanTimeoutError,
)
from scan_service.storage.exceptions import ResultNotFoundError, StorageError
from scan_service.storage.result_store import ResultStore
from scan_service.storage.roots import StorageRoots
from scan_service.web.rendering import (
    list_sample_files,
    render_index_page,
    render_result_page,
)

ERROR_STATUS: list[tuple[type[Exception], int, str]] = [
    (ExtractionError, 400, "Failed to extract archive"),
    (LocatorNotFoundError, 422, "No bytecode_modules directory found in archive"),
    (ScanTimeoutError, 504, "Scanner timed out"),
    (ScanExecutionError, 500, "Command execution error"),
    (ResultNotFoundError, 404, "Result not found"),
]


def _to_http_error(exc: Exception) -> HTTPException:
    """Map a pipeline error to its status and fixed message; the cause only goes to the log."""
    for exc_type, status, detail in ERROR_STATUS:
        if isinstance(exc, exc_type):
            Log.error(f"{detail}: {exc}")
            return HTTPException(status_code=status, detail=detail)
    Log.error(f"Internal error: {exc}")
    return HTTPException(status_code=500, detail="Internal error")


def _attachment(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/octet-stream",
        headers={
            "Content-Description": "File Transfer",
            "Content-Transfer-Encoding": "binary",
            "Content-Disposition": f"attachment; filename={filename}",
        },
    )


def create_app(
    settings: Settings,
    orchestrator: ScanOrchestrator | None = None,
    scheduler: RetentionScheduler | None = None,
) -> FastAPI:
    """Wire the HTTP routes onto the scan pipeline and the retention scheduler."""
    roots = StorageRoots.from_settings(settings)
    pipeline = orchestrator if orchestrator is not None else build_orchestrator(settings)
    retention = scheduler if scheduler is not None else RetentionScheduler(
        roots, interval_seconds=settings.retention_interval_seconds
    )
    result_store = ResultStore(roots.results_root)
    samples_root = Path(settings.samples_root)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        retention.start()
        try:
            yield
        finally:
            retention.stop()

    app = FastAPI(title="Bytecode Scan Service", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        try:
            samples = list_sample_files(samples_root)
        except OSError as exc:
            Log.error(f"Failed to read {samples_root}: {exc}")
            raise HTTPException(status_code=500, detail="Failed to read directory") from exc
        return HTMLResponse(render_index_page(samples))

    @app.post("/upload", response_class=HTMLResponse)
    def upload(file: UploadFile = File(...)) -> HTMLResponse:
        content = file.file.read()
        try:
            outcome = pipeline.submit(file.filename or "", content)
        except (ArchiveError, ScannerError, StorageError) as exc:
            raise _to_http_error(exc) from exc
        return HTMLResponse(
            render_result_page(outcome.payload),
            headers={"X-Result-Id": outcome.result_id},
        )

    @app.get("/results/{result_id}", response_class=HTMLResponse)
    def view_result(result_id: str) -> HTMLResponse:
        try:
            payload = result_store.read(result_id)
        except ResultNotFoundError as exc:
            raise _to_http_error(exc) from exc
        return HTMLResponse(render_result_page(payload))

    @app.get("/download/{result_id}")
    def download_result(result_id: str) -> Response:
        Log.info(f"Download result {result_id}")
        try:
            payload = result_store.read(result_id)
        except ResultNotFoundError as exc:
            raise _to_http_error(exc) from exc
        return _attachment(payload, result_store.path_for(result_id).name)

    @app.get("/samples/{filename}")
    def download_sample(filename: str) -> Response:
        path = samples_root / Path(filename).name
        Log.info(f"Download {path}")
        if not path.is_file():
            raise HTTPException(status_code=404, detail="Failed to find file")
        return _attachment(path.read_bytes(), path.name)

    return app
