"""FastAPI application factory."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lumiere.api.routes import characters, session, videos
from lumiere.core.config import Settings, configure_logging
from lumiere.services.credentials import KeyGate, SettingsCredentialProvider
from lumiere.services.video_generation.veo_client import VeoVideoGenerator
from lumiere.studio import Studio

logger = structlog.get_logger()


def build_studio(settings: Settings) -> Studio:
    """Wire a Studio from settings.

    Args:
        settings: Application settings (API key, Veo model, poll interval)

    Returns:
        Studio with empty stores and an unchecked key gate
    """
    provider = SettingsCredentialProvider(settings.api_key)
    generator = VeoVideoGenerator(
        credentials=provider,
        model=settings.veo_model,
        poll_interval_seconds=settings.poll_interval_seconds,
        poll_timeout_seconds=settings.poll_timeout_seconds,
    )
    return Studio(key_gate=KeyGate(provider), generator=generator)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    - Startup: Configure logging, build the Studio, check for a selected key once
    - Shutdown: Abandon in-flight generations (nothing is persisted)
    """
    settings = Settings()  # type: ignore[call-arg]

    configure_logging(settings)

    studio = build_studio(settings)
    app.state.studio = studio

    await studio.key_gate.check()

    logger.info(
        "application.startup",
        veo_model=settings.veo_model,
        key_state=studio.key_gate.state.value,
    )

    yield

    logger.info("application.shutdown")
    await studio.shutdown()


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = Settings()  # type: ignore[call-arg]

    app = FastAPI(
        title="Lumiere Studio API",
        description="Character-consistent video generation with Veo",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(session.router)
    app.include_router(characters.router)
    app.include_router(videos.router)

    @app.get("/health")
    async def health_check():
        """Liveness probe.

        Returns:
            200: {"status": "healthy"}
        """
        return {"status": "healthy"}

    return app


# Create app instance for uvicorn
app = create_app()
