"""Piano Cover Service - FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cover_service.api.errors import register_error_handlers
from cover_service.api.v1.health import router as health_root_router
from cover_service.api.v1.router import api_router
from cover_service.config import Settings, settings as default_settings
from cover_service.generation.materializer import ArtifactMaterializer
from cover_service.generation.orchestrator import CoverOrchestrator
from cover_service.generation.poller import StatusPoller
from cover_service.generation.submitter import JobSubmitter
from cover_service.reachability.availability import Availability
from cover_service.remote.backend import RemoteBackend
from cover_service.remote.profiles import get_profile
from cover_service.remote.suno_client import SunoClient
from cover_service.storage.uploads import UploadStore

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads"


def configure_logging(level: str = "INFO") -> None:
    """Route cover_service logs to stderr at ``level``.

    basicConfig is a no-op when the root logger already has handlers (for
    example under uvicorn), so the package logger level is set explicitly.
    """
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("cover_service").setLevel(level.upper())


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[RemoteBackend] = None,
) -> FastAPI:
    """Build the app. ``backend`` overrides the remote API client (tests)."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown logic."""
        configure_logging(settings.log_level)
        profile = get_profile(settings.remote_profile)
        store = UploadStore(settings.upload_dir, url_prefix=UPLOADS_PREFIX)
        remote = backend or SunoClient(
            base_url=settings.suno_base_url,
            api_key=settings.suno_api_key,
            profile=profile,
            timeout_seconds=settings.http_timeout_seconds,
        )

        logger.info("Starting Piano Cover Service on port %d", settings.port)
        logger.info("Remote API: %s (profile %s)", settings.suno_base_url, profile.name)
        logger.info("Upload dir: %s", store.base_dir)
        if not settings.suno_api_key and backend is None:
            logger.warning("SUNO_API_KEY is not set; remote calls will be rejected")

        app.state.settings = settings
        app.state.store = store
        app.state.availability = Availability(settings.public_base_url)
        app.state.orchestrator = CoverOrchestrator(
            settings=settings,
            profile=profile,
            submitter=JobSubmitter(remote, profile),
            poller=StatusPoller(remote, profile),
            materializer=ArtifactMaterializer(remote, store),
            store=store,
        )
        if not app.state.availability.is_ready and not settings.use_request_host:
            logger.warning(
                "No public URL configured; /api/generate-cover answers 503 "
                "until one becomes available"
            )

        yield

        logger.info("Shutting down Piano Cover Service")
        remote.close()

    app = FastAPI(
        title="Piano Cover Service",
        description="Generates piano covers of uploaded audio through a remote generation API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Mount routers
    app.include_router(health_root_router, tags=["health"])  # GET /health at root
    app.include_router(api_router)  # All /api/* endpoints
    app.mount(
        UPLOADS_PREFIX,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=default_settings.port)
