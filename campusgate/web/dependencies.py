"""Collaborator wiring for the FastAPI adapter."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

import structlog
from fastapi import Request

from campusgate.auth.tokens import TokenAuthSession, TokenVerifier
from campusgate.models.domain import RequestContext
from campusgate.routing.engine import Collaborators
from campusgate.storage.repositories.memory import (
    InMemoryMembershipRepository,
    InMemoryOrganizationRepository,
    InMemoryProfileRepository,
    InMemoryStore,
)

if TYPE_CHECKING:
    from campusgate.config.settings import Settings

logger = structlog.get_logger(__name__)


class _AnonymousSession:
    async def get_current_session(self) -> None:
        return None


def build_collaborators(settings: Settings, store: InMemoryStore | None = None) -> Collaborators:
    """Create the repositories once per process, based on settings."""
    if settings.use_database:
        from campusgate.storage.database import get_engine
        from campusgate.storage.repositories.memberships import DatabaseMembershipRepository
        from campusgate.storage.repositories.organizations import DatabaseOrganizationRepository
        from campusgate.storage.repositories.profiles import DatabaseProfileRepository

        engine = get_engine()
        logger.info("collaborators_built", backend="database")
        return Collaborators(
            auth=_AnonymousSession(),
            profiles=DatabaseProfileRepository(engine),
            memberships=DatabaseMembershipRepository(engine),
            organizations=DatabaseOrganizationRepository(engine),
        )

    store = store or InMemoryStore()
    logger.info("collaborators_built", backend="memory")
    return Collaborators(
        auth=_AnonymousSession(),
        profiles=InMemoryProfileRepository(store),
        memberships=InMemoryMembershipRepository(store),
        organizations=InMemoryOrganizationRepository(store),
    )


def extract_token(request: Request, cookie_name: str) -> str | None:
    """Bearer token from the Authorization header, else the auth cookie."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:]
    return request.cookies.get(cookie_name)


def request_collaborators(request: Request) -> Collaborators:
    """Process-wide collaborators with an auth session bound to this request."""
    settings: Settings = request.app.state.settings
    verifier: TokenVerifier = request.app.state.token_verifier
    token = extract_token(request, settings.auth_cookie_name)
    return replace(request.app.state.collaborators, auth=TokenAuthSession(verifier, token))


def request_context(request: Request, pathname: str | None = None) -> RequestContext:
    settings: Settings = request.app.state.settings
    host = request.headers.get("host") or ""
    scheme = request.url.scheme
    if settings.trust_forwarded_headers:
        host = request.headers.get("x-forwarded-host") or host
        scheme = request.headers.get("x-forwarded-proto") or scheme
    return RequestContext(
        host=host,
        pathname=pathname or request.url.path,
        query_params=tuple(request.query_params.multi_items()),
        is_dev=settings.is_dev,
        scheme=scheme,
    )
