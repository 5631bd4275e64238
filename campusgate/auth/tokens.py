"""Access-token validation and JWKS key management."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx
import jwt
import structlog

from campusgate.exceptions import TransientAuthError
from campusgate.models.domain import Session

if TYPE_CHECKING:
    from campusgate.config.settings import Settings

logger = structlog.get_logger(__name__)

# JWKS cache TTL in seconds (1 hour)
_JWKS_CACHE_TTL = 3600


@dataclass
class _JWKSCache:
    """In-memory cache for the provider's JWKS keys."""

    keys: list[dict[str, Any]] = field(default_factory=list)
    fetched_at: float = 0.0

    @property
    def is_stale(self) -> bool:
        return time.monotonic() - self.fetched_at > _JWKS_CACHE_TTL


def session_from_claims(payload: dict[str, Any]) -> Session:
    """Map access-token claims onto a :class:`Session`."""
    app_metadata = payload.get("app_metadata") or {}
    providers = set(app_metadata.get("providers") or [])
    if app_metadata.get("provider"):
        providers.add(app_metadata["provider"])
    return Session(
        identity_id=payload["sub"],
        email=payload.get("email", ""),
        auth_providers=frozenset(providers),
    )


class TokenVerifier:
    """Verify access tokens with a shared secret (HS256) or a JWKS endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._secret = settings.jwt_secret
        self._jwks_url = settings.jwks_url
        self._audience = settings.jwt_audience
        self._issuer = settings.jwt_issuer
        self._http_client = http_client
        self._cache = _JWKSCache()

    @property
    def is_configured(self) -> bool:
        return bool(self._secret or self._jwks_url)

    async def verify(self, token: str) -> Session:
        """Verify a token and return its session.

        Raises jwt.PyJWTError on invalid/expired tokens and TransientAuthError
        when the signing keys cannot be fetched.
        """
        decode_options: dict[str, Any] = {"audience": self._audience}
        if self._issuer:
            decode_options["issuer"] = self._issuer

        if self._secret:
            payload = jwt.decode(token, self._secret, algorithms=["HS256"], **decode_options)
            return session_from_claims(payload)

        keys = await self._get_signing_keys()
        jwk_set = jwt.PyJWKSet.from_dict({"keys": keys})

        # Try each key until one works
        last_error: Exception | None = None
        for jwk in jwk_set.keys:
            try:
                payload = jwt.decode(
                    token, jwk.key, algorithms=["RS256", "ES256"], **decode_options
                )
                return session_from_claims(payload)
            except jwt.PyJWTError as exc:
                last_error = exc
                continue

        if last_error:
            raise last_error
        msg = "No valid signing key found"
        raise jwt.InvalidTokenError(msg)

    async def _get_signing_keys(self) -> list[dict[str, Any]]:
        if not self._jwks_url:
            msg = "JWKS_URL is not configured"
            raise TransientAuthError(msg)
        if not self._cache.is_stale and self._cache.keys:
            return self._cache.keys
        return await self._fetch_jwks(self._jwks_url)

    async def _fetch_jwks(self, jwks_url: str) -> list[dict[str, Any]]:
        try:
            if self._http_client is not None:
                resp = await self._http_client.get(jwks_url)
            else:
                async with httpx.AsyncClient(timeout=10.0) as client:
                    resp = await client.get(jwks_url)
            resp.raise_for_status()
            keys: list[dict[str, Any]] = resp.json().get("keys", [])
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.warning("jwks_fetch_failed", error=str(exc))
            if self._cache.keys:
                logger.info("jwks_using_stale_cache")
                return self._cache.keys
            raise TransientAuthError("could not fetch signing keys") from exc

        self._cache = _JWKSCache(keys=keys, fetched_at=time.monotonic())
        logger.debug("jwks_fetched", key_count=len(keys))
        return keys


class TokenAuthSession:
    """Request-scoped auth collaborator wrapping one bearer/cookie token."""

    def __init__(self, verifier: TokenVerifier, token: str | None) -> None:
        self._verifier = verifier
        self._token = token

    async def get_current_session(self) -> Session | None:
        if not self._token or not self._verifier.is_configured:
            return None
        try:
            return await self._verifier.verify(self._token)
        except jwt.PyJWTError as exc:
            logger.info("access_token_rejected", error=str(exc))
            return None
