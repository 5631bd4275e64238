"""FastAPI application factory."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request

from campusgate import __version__
from campusgate.auth.tokens import TokenVerifier
from campusgate.config.logging import setup_logging
from campusgate.config.settings import Settings, get_settings
from campusgate.routing.engine import Collaborators
from campusgate.web.dependencies import build_collaborators
from campusgate.web.middleware import BootstrapMiddleware, RequestIDMiddleware
from campusgate.web.routes.session import router as session_router

logger = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    collaborators: Collaborators | None = None,
    token_verifier: TokenVerifier | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Campusgate",
        description="Multi-tenant session bootstrap and routing decisions",
        version=__version__,
    )
    app.state.settings = settings
    app.state.collaborators = collaborators or build_collaborators(settings)
    app.state.token_verifier = token_verifier or TokenVerifier(settings)

    # Last added runs first: request ids are bound before the bootstrap runs
    app.add_middleware(BootstrapMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(session_router)

    @app.get("/api/health")
    async def health_check(request: Request) -> dict[str, object]:
        from campusgate.web.health import check_health

        return await check_health(request.app.state.settings)

    logger.info(
        "app_created",
        deployment_mode=settings.deployment_mode.value,
        environment=settings.environment,
    )
    return app
