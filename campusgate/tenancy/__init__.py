"""Tenant resolution and organization selection."""

from campusgate.tenancy.organizations import organization_domain, select_current_organization
from campusgate.tenancy.resolver import TenantContext, TenantResolver, get_subdomain, is_custom_domain

__all__ = [
    "TenantContext",
    "TenantResolver",
    "get_subdomain",
    "is_custom_domain",
    "organization_domain",
    "select_current_organization",
]
