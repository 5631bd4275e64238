"""Session validation: any auth failure degrades to an anonymous visitor."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from campusgate.exceptions import TransientAuthError

if TYPE_CHECKING:
    from campusgate.models.domain import Session
    from campusgate.storage.repositories.protocols import AuthSession

logger = structlog.get_logger(__name__)


class SessionValidator:
    def __init__(self, auth: AuthSession) -> None:
        self._auth = auth

    async def current(self) -> Session | None:
        """Return the current session, or None. Never raises; no retries."""
        try:
            session = await self._auth.get_current_session()
        except TransientAuthError as exc:
            logger.warning("session_lookup_failed", error=str(exc))
            return None
        except Exception as exc:
            logger.warning("session_lookup_error", error=str(exc), exc_type=type(exc).__name__)
            return None

        if session is not None:
            logger.debug("session_resolved", identity_id=session.identity_id)
        return session
