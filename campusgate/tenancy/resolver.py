"""Tenant resolution from the request host.

Three situations are recognised:

* self-hosted deployments, where a subdomain of the configured host may name
  the single tenant and a miss simply means "no tenant site";
* custom domains, bought by one organization, where a miss is fatal;
* platform subdomains (``acme.classroomio.com``), where reserved and app
  subdomains never resolve to a tenant and a miss is fatal in production.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from campusgate.exceptions import FatalTenantError, StorageError
from campusgate.types import DeploymentMode

if TYPE_CHECKING:
    from campusgate.config.settings import Settings
    from campusgate.models.domain import RequestContext, Tenant
    from campusgate.storage.repositories.protocols import OrganizationRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TenantContext:
    """Immutable tenant classification carried through each request."""

    tenant: Tenant | None = None
    is_org_site: bool = False
    org_site_name: str = ""
    skip_auth: bool = False


def is_custom_domain(host: str, base_hosts: list[str]) -> bool:
    """True when ``host`` is not served under any first-party base host."""
    if "localhost" in host:
        return False
    return not any(host.endswith(base) for base in base_hosts if base)


def get_subdomain(host: str, base_host: str) -> str | None:
    """Return the leftmost label of ``host`` when it sits under ``base_host``."""
    if host.startswith("www."):
        host = host[len("www.") :]
    if not base_host or host == base_host or not host.endswith(base_host):
        return None
    parts = host.split(".")
    return parts[0] if len(parts) >= 3 else None


class TenantResolver:
    """Resolve a request host into a :class:`TenantContext`."""

    def __init__(self, settings: Settings, organizations: OrganizationRepository) -> None:
        self._settings = settings
        self._organizations = organizations

    async def resolve(self, request: RequestContext) -> TenantContext:
        host = request.host.lower().partition(":")[0]
        if self._settings.deployment_mode is DeploymentMode.SELF_HOSTED:
            return await self._resolve_self_hosted(host)
        return await self._resolve_platform(host, is_dev=request.is_dev)

    async def _resolve_self_hosted(self, host: str) -> TenantContext:
        subdomain = get_subdomain(host, self._settings.app_host)
        if not subdomain:
            return TenantContext()
        if subdomain == self._settings.sandbox_subdomain:
            return TenantContext(skip_auth=True)

        tenant = await self._lookup(subdomain)
        if tenant is None:
            logger.info("self_hosted_org_not_found", subdomain=subdomain)
            return TenantContext()
        return TenantContext(tenant=tenant, is_org_site=True, org_site_name=subdomain)

    async def _resolve_platform(self, host: str, *, is_dev: bool) -> TenantContext:
        settings = self._settings

        if is_custom_domain(host, settings.base_hosts):
            tenant = await self._lookup(host, must_be_custom_domain=True)
            if tenant is None:
                logger.warning("custom_domain_org_not_found", host=host)
                raise FatalTenantError(host, settings.tenant_not_found_url)
            return TenantContext(tenant=tenant, is_org_site=True, org_site_name=tenant.site_name)

        subdomain = get_subdomain(host, settings.app_host) or ""
        if subdomain == settings.sandbox_subdomain:
            return TenantContext(skip_auth=True)
        if not subdomain or subdomain in settings.reserved_subdomains:
            return TenantContext()
        if subdomain in settings.app_subdomains:
            logger.debug("app_subdomain_skipped", subdomain=subdomain)
            return TenantContext()

        tenant = await self._lookup(subdomain)
        if tenant is None:
            fatal = not (is_dev and settings.tolerate_missing_org_in_dev)
            logger.warning("subdomain_org_not_found", subdomain=subdomain, fatal=fatal)
            if fatal:
                raise FatalTenantError(subdomain, settings.tenant_not_found_url)
        return TenantContext(tenant=tenant, is_org_site=True, org_site_name=subdomain)

    async def _lookup(self, key: str, *, must_be_custom_domain: bool = False) -> Tenant | None:
        try:
            return await self._organizations.find_by_slug_or_host(
                key, must_be_custom_domain=must_be_custom_domain
            )
        except StorageError as exc:
            logger.warning("organization_lookup_error", key=key, error=str(exc))
            return None
