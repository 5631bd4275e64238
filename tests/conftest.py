"""Shared test fixtures."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from campusgate.config.settings import Settings
from campusgate.models.domain import Session
from campusgate.routing.engine import Collaborators
from campusgate.storage.database import init_db
from campusgate.storage.repositories.memory import (
    InMemoryMembershipRepository,
    InMemoryOrganizationRepository,
    InMemoryProfileRepository,
    InMemoryStore,
)
from helpers import ACME, GLOBEX, StaticAuthSession


@pytest.fixture()
def settings() -> Settings:
    """Production settings for the hosted platform, isolated from .env files."""
    return Settings(
        _env_file=None,
        environment="production",
        deployment_mode="custom_domain",
        app_host="classroomio.com",
        jwt_secret="test-secret-test-secret-test-secret",
    )


@pytest.fixture()
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_organization(ACME)
    store.add_organization(GLOBEX)
    return store


@pytest.fixture()
def collaborators_for(store: InMemoryStore):
    """Factory building collaborators around the shared store for a given session."""

    def _build(session: Session | None = None, auth: object | None = None) -> Collaborators:
        return Collaborators(
            auth=auth or StaticAuthSession(session),  # type: ignore[arg-type]
            profiles=InMemoryProfileRepository(store),
            memberships=InMemoryMembershipRepository(store),
            organizations=InMemoryOrganizationRepository(store),
        )

    return _build


@pytest.fixture()
async def async_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield engine
    await engine.dispose()
