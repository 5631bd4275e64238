"""Pick the organization a session settles on."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from campusgate.models.domain import OrganizationSummary


def select_current_organization(
    orgs: list[OrganizationSummary], org_site_name: str = ""
) -> OrganizationSummary | None:
    """Return the org matching the site being visited, else the flagged one, else the first."""
    if not orgs:
        return None
    if org_site_name:
        for org in orgs:
            if org.site_name == org_site_name:
                return org
    for org in orgs:
        if org.is_current:
            return org
    return orgs[0]


def organization_domain(org: OrganizationSummary, app_host: str, scheme: str = "https") -> str:
    """Return the origin (scheme and host) an organization's learners are sent to."""
    if org.domain:
        return org.domain if "://" in org.domain else f"{scheme}://{org.domain}"
    return f"{scheme}://{org.site_name}.{app_host}"
