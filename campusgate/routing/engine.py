"""Per-request bootstrap: tenant -> session -> profile -> redirect -> presentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel

from campusgate.auth.session import SessionValidator
from campusgate.exceptions import FatalTenantError, StorageError
from campusgate.models.domain import (
    OrganizationSummary,
    Profile,
    RedirectDecision,
    RequestContext,
    SideEffects,
    Tenant,
)
from campusgate.presentation.locale import select_side_effects
from campusgate.presentation.meta import build_base_meta_tags
from campusgate.provisioning.provisioner import ProfileProvisioner
from campusgate.routing import routes
from campusgate.routing.rules import RedirectState, evaluate_rules
from campusgate.tenancy.organizations import organization_domain, select_current_organization
from campusgate.tenancy.resolver import TenantContext, TenantResolver
from campusgate.types import ProfileStatus, RedirectKind

if TYPE_CHECKING:
    from campusgate.config.settings import Settings
    from campusgate.storage.repositories.protocols import (
        AuthSession,
        MembershipRepository,
        OrganizationRepository,
        ProfileRepository,
    )

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Collaborators:
    """Store and auth collaborators injected into each evaluation."""

    auth: AuthSession
    profiles: ProfileRepository
    memberships: MembershipRepository
    organizations: OrganizationRepository


class BootstrapResult(BaseModel):
    decision: RedirectDecision
    side_effects: SideEffects
    rule: str
    profile_status: ProfileStatus = ProfileStatus.ANONYMOUS
    profile: Profile | None = None
    current_org: OrganizationSummary | None = None
    tenant: Tenant | None = None
    is_org_site: bool = False
    org_site_name: str = ""
    skip_auth: bool = False
    meta_tags: dict[str, Any] = {}


async def evaluate(
    request: RequestContext,
    tenant_context: TenantContext,
    collaborators: Collaborators,
    settings: Settings,
    requested_locale: str | None = None,
) -> BootstrapResult:
    """Decide where the visitor goes next, given an already resolved tenant."""
    tenant = tenant_context.tenant
    base = {
        "tenant": tenant,
        "is_org_site": tenant_context.is_org_site,
        "org_site_name": tenant_context.org_site_name,
        "skip_auth": tenant_context.skip_auth,
    }
    side_effects = select_side_effects(settings, None, requested_locale)
    meta_tags = build_base_meta_tags(request, settings, side_effects.locale)

    if tenant_context.skip_auth:
        return BootstrapResult(
            decision=RedirectDecision.none(),
            side_effects=side_effects,
            rule="sandbox",
            meta_tags=meta_tags,
            **base,
        )

    session = await SessionValidator(collaborators.auth).current()

    profile: Profile | None = None
    status = ProfileStatus.ANONYMOUS
    if session is not None:
        provisioner = ProfileProvisioner(
            collaborators.profiles,
            collaborators.memberships,
            verified_providers=settings.verified_email_providers,
            default_role_id=settings.default_member_role_id,
        )
        provisioned = await provisioner.ensure_profile(session, tenant_context)
        profile = provisioned.profile
        if profile is None:
            status = ProfileStatus.UNRESOLVED
        elif provisioned.created:
            status = ProfileStatus.NEW
        else:
            status = ProfileStatus.EXISTING

    current_org: OrganizationSummary | None = None
    has_organizations = False
    if status is ProfileStatus.EXISTING and profile is not None:
        try:
            orgs = await collaborators.organizations.list_for_profile(profile.id)
        except StorageError as exc:
            logger.warning("organization_list_failed", profile_id=profile.id, error=str(exc))
            # Unknown memberships must not send the visitor to onboarding
            has_organizations = True
        else:
            has_organizations = bool(orgs)
            current_org = select_current_organization(orgs, tenant_context.org_site_name)

    state = RedirectState(
        profile_status=status,
        is_org_site=tenant_context.is_org_site,
        pathname=request.pathname,
        query_string=request.query_string,
        redirect_param=routes.safe_redirect_target(request.get_param("redirect")),
        role_id=current_org.role_id if current_org else None,
        has_organizations=has_organizations,
        is_dev=request.is_dev,
        org_domain=organization_domain(current_org, settings.app_host) if current_org else None,
        org_site_name=current_org.site_name if current_org else None,
    )
    rule, decision = evaluate_rules(state)
    if decision.kind is RedirectKind.GOTO and routes.is_current_location(
        decision.target or "", request.pathname, request.query_string
    ):
        # Already there; a redirect would loop
        decision = RedirectDecision.none()

    # Only a settled organization themes the session
    if current_org is not None:
        side_effects = side_effects.model_copy(update={"theme": current_org.theme})

    logger.info(
        "bootstrap_decision",
        host=request.host,
        path=request.pathname,
        rule=rule,
        kind=decision.kind.value,
        target=decision.target,
        profile_status=status.value,
        is_org_site=tenant_context.is_org_site,
    )
    return BootstrapResult(
        decision=decision,
        side_effects=side_effects,
        rule=rule,
        profile_status=status,
        profile=profile,
        current_org=current_org,
        meta_tags=meta_tags,
        **base,
    )


async def bootstrap_request(
    request: RequestContext,
    collaborators: Collaborators,
    settings: Settings,
    requested_locale: str | None = None,
) -> BootstrapResult:
    """Resolve the tenant, then evaluate. Unknown tenants redirect to the central 404."""
    resolver = TenantResolver(settings, collaborators.organizations)
    try:
        tenant_context = await resolver.resolve(request)
    except FatalTenantError as exc:
        logger.warning("tenant_not_found", key=exc.key, redirect_url=exc.redirect_url)
        return BootstrapResult(
            decision=RedirectDecision.goto(exc.redirect_url),
            side_effects=select_side_effects(settings, None, requested_locale),
            rule="tenant_not_found",
        )
    return await evaluate(request, tenant_context, collaborators, settings, requested_locale)
