"""Test doubles and builders shared across test modules."""

from __future__ import annotations

from campusgate.exceptions import TransientAuthError
from campusgate.models.domain import RequestContext, Session, Tenant

ACME = Tenant(id="org-acme", site_name="acme", name="Acme", theme="blue")
GLOBEX = Tenant(
    id="org-globex",
    site_name="globex",
    name="Globex",
    theme="green",
    is_custom_domain=True,
    custom_domain="learn.globex.com",
)


class StaticAuthSession:
    """Auth collaborator returning a fixed session (or None)."""

    def __init__(self, session: Session | None) -> None:
        self._session = session

    async def get_current_session(self) -> Session | None:
        return self._session


class FailingAuthSession:
    async def get_current_session(self) -> Session | None:
        msg = "auth provider unreachable"
        raise TransientAuthError(msg)


def make_request(
    host: str = "app.classroomio.com",
    path: str = "/",
    query: tuple[tuple[str, str], ...] = (),
    is_dev: bool = False,
) -> RequestContext:
    return RequestContext(host=host, pathname=path, query_params=query, is_dev=is_dev)


def make_session(
    identity_id: str = "user-1", email: str = "jane@example.com", *providers: str
) -> Session:
    return Session(
        identity_id=identity_id,
        email=email,
        auth_providers=frozenset(providers or ("email",)),
    )
