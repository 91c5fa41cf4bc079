import uvicorn

from scan_service.config.settings import Settings
from scan_service.logging.logger import Log
from scan_service.pipeline.orchestrator import build_orchestrator
from scan_service.retention.scheduler import RetentionScheduler
from scan_service.storage.roots import StorageRoots
from scan_service.web.app import create_app


def main() -> None:
    """Entry point: configure logging -> build pipeline and scheduler -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level, settings.log_file)

    roots = StorageRoots.from_settings(settings)
    roots.ensure()
    orchestrator = build_orchestrator(settings)
    scheduler = RetentionScheduler(
        roots, interval_seconds=settings.retention_interval_seconds
    )
    app = create_app(settings, orchestrator=orchestrator, scheduler=scheduler)

    Log.info(f"Serving on {settings.http_host}:{settings.http_port} ({settings.app_env})")
    uvicorn.run(app, host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    main()
