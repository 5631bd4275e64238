"""Named routes and route classification."""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlsplit

LOGIN = "/login"
ONBOARDING = "/onboarding"
LMS = "/lms"
NOT_FOUND = "/404"

PUBLIC_ROUTES = frozenset({"/", "/login", "/signup", "/forgot", "/reset", "/logout", "/404"})
PUBLIC_PREFIXES = ("/course/", "/invite/", "/blog/", "/api/")

# Entry routes a signed-in visitor should be moved away from
REDIRECT_ON_AUTH_ROUTES = frozenset({"/", "/login", "/signup"})


def _normalize(pathname: str) -> str:
    if len(pathname) > 1:
        pathname = pathname.rstrip("/")
    return pathname or "/"


def is_public_route(pathname: str) -> bool:
    path = _normalize(pathname)
    return path in PUBLIC_ROUTES or (path + "/").startswith(PUBLIC_PREFIXES)


def should_redirect_on_auth(pathname: str) -> bool:
    return _normalize(pathname) in REDIRECT_ON_AUTH_ROUTES


def is_invite_path(pathname: str) -> bool:
    return "invite" in pathname


def org_route(site_name: str) -> str:
    return f"/org/{site_name}"


def login_route(pathname: str, query_string: str = "") -> str:
    """Login URL carrying an encoded ``redirect`` back to the original location."""
    back = f"{pathname}?{query_string}" if query_string else pathname
    return f"{LOGIN}?redirect={quote(back, safe='/')}"


def safe_redirect_target(target: str | None) -> str | None:
    """Return ``target`` when it is a same-origin path, else None.

    Absolute URLs, protocol-relative ``//host`` and backslash variants that
    browsers treat as ``//`` are refused.
    """
    if not target or not target.startswith("/") or target.startswith(("//", "/\\")):
        return None
    if urlsplit(target).netloc:
        return None
    return target


def is_current_location(target: str, pathname: str, query_string: str = "") -> bool:
    """True when ``target`` names the path and query already being served."""
    location = urlsplit(target)
    if location.scheme or location.netloc:
        return False
    same_path = _normalize(location.path or "/") == _normalize(pathname)
    return same_path and sorted(parse_qsl(location.query, keep_blank_values=True)) == sorted(
        parse_qsl(query_string, keep_blank_values=True)
    )
