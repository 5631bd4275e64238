"""Bootstrap decision endpoint for client-side routing."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlsplit

from fastapi import APIRouter, Query, Request

from campusgate.models.domain import RequestContext
from campusgate.routing.engine import BootstrapResult, bootstrap_request
from campusgate.web.dependencies import request_collaborators, request_context

router = APIRouter(prefix="/api/session", tags=["session"])


@router.get("/bootstrap", response_model=BootstrapResult)
async def session_bootstrap(
    request: Request,
    path: str = Query("/", description="Location being navigated to, with its query string"),
) -> BootstrapResult:
    """Evaluate the bootstrap decision for ``path`` on the calling host."""
    location = urlsplit(path)
    base: RequestContext = request_context(request)
    context = base.model_copy(
        update={
            "pathname": location.path or "/",
            "query_params": tuple(parse_qsl(location.query, keep_blank_values=True)),
        }
    )
    return await bootstrap_request(
        context,
        request_collaborators(request),
        request.app.state.settings,
        requested_locale=request.headers.get("accept-language"),
    )
