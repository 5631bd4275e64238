"""FastAPI middleware: request ID injection and per-request bootstrap."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse

from campusgate.routing.engine import bootstrap_request
from campusgate.web.dependencies import request_collaborators, request_context

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

logger = structlog.get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Adds a unique X-Request-ID header to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response


class BootstrapMiddleware(BaseHTTPMiddleware):
    """Runs the bootstrap decision for page requests and executes redirects.

    API and static paths pass through untouched. When no redirect is due the
    result is exposed on ``request.state.bootstrap`` and the selected locale
    and theme are written as cookies.
    """

    def __init__(self, app: object, skip_prefixes: tuple[str, ...] = ("/api/", "/static/")) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._skip_prefixes = skip_prefixes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method not in ("GET", "HEAD") or request.url.path.startswith(self._skip_prefixes):
            return await call_next(request)

        result = await bootstrap_request(
            request_context(request),
            request_collaborators(request),
            request.app.state.settings,
            requested_locale=request.headers.get("accept-language"),
        )

        if result.decision.is_redirect and result.decision.target:
            return RedirectResponse(url=result.decision.target, status_code=307)

        request.state.bootstrap = result
        response = await call_next(request)
        if result.side_effects.locale:
            response.set_cookie("locale", result.side_effects.locale, samesite="lax")
        if result.side_effects.theme:
            response.set_cookie("theme", result.side_effects.theme, samesite="lax")
        return response
