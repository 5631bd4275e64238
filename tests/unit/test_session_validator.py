"""Unit tests for SessionValidator."""

from __future__ import annotations

import pytest

from campusgate.auth.session import SessionValidator
from helpers import FailingAuthSession, StaticAuthSession, make_session


class _ExplodingAuthSession:
    async def get_current_session(self):
        raise RuntimeError("unexpected provider response")


@pytest.mark.unit
class TestSessionValidator:
    async def test_returns_session(self) -> None:
        session = make_session()
        assert await SessionValidator(StaticAuthSession(session)).current() == session

    async def test_anonymous(self) -> None:
        assert await SessionValidator(StaticAuthSession(None)).current() is None

    async def test_transient_failure_is_anonymous(self) -> None:
        assert await SessionValidator(FailingAuthSession()).current() is None

    async def test_unexpected_failure_is_anonymous(self) -> None:
        assert await SessionValidator(_ExplodingAuthSession()).current() is None
