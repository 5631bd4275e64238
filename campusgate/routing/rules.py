"""Ordered redirect rules.

Every rule is a pure function of :class:`RedirectState`. A rule returns a
:class:`RedirectDecision` when it applies (``RedirectDecision.none()`` means
"applies, stay on the page") and ``None`` when the next rule should be tried.
The last rule always applies, so evaluation is total.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from campusgate.models.domain import RedirectDecision
from campusgate.routing import routes
from campusgate.types import ProfileStatus, Role


@dataclass(frozen=True, slots=True)
class RedirectState:
    profile_status: ProfileStatus
    is_org_site: bool
    pathname: str
    query_string: str = ""
    redirect_param: str | None = None
    role_id: int | None = None  # role in the settled organization, None before any membership
    has_organizations: bool = False
    is_dev: bool = False
    org_domain: str | None = None
    org_site_name: str | None = None

    @property
    def is_public(self) -> bool:
        return routes.is_public_route(self.pathname)

    @property
    def is_invite(self) -> bool:
        return routes.is_invite_path(self.pathname)

    @property
    def is_entry_route(self) -> bool:
        return routes.should_redirect_on_auth(self.pathname)

    @property
    def is_student(self) -> bool:
        return self.role_id == Role.STUDENT

    @property
    def is_new(self) -> bool:
        return self.profile_status is ProfileStatus.NEW

    @property
    def is_existing(self) -> bool:
        return self.profile_status is ProfileStatus.EXISTING


Rule = Callable[[RedirectState], RedirectDecision | None]


def anonymous_private_route(state: RedirectState) -> RedirectDecision | None:
    if state.profile_status is ProfileStatus.ANONYMOUS and not state.is_public:
        return RedirectDecision.goto(routes.login_route(state.pathname, state.query_string))
    return None


def new_profile_on_org_site(state: RedirectState) -> RedirectDecision | None:
    if state.is_new and state.is_org_site:
        return RedirectDecision.goto(state.redirect_param or routes.LMS)
    return None


def new_profile_needs_onboarding(state: RedirectState) -> RedirectDecision | None:
    # Invitees skip onboarding; the invite already gives them an organization
    if state.is_new and not state.is_org_site and not state.is_invite:
        return RedirectDecision.goto(routes.ONBOARDING)
    return None


def existing_profile_on_org_site(state: RedirectState) -> RedirectDecision | None:
    if not (state.is_existing and state.is_org_site):
        return None
    if state.redirect_param:
        return RedirectDecision.goto(state.redirect_param)
    if state.is_entry_route:
        return RedirectDecision.goto(routes.LMS)
    return RedirectDecision.none()


def student_to_org_site(state: RedirectState) -> RedirectDecision | None:
    if not (state.is_existing and not state.is_org_site and state.is_student):
        return None
    if state.is_dev or not state.org_domain:
        return RedirectDecision.goto(routes.LMS)
    # Crosses onto the organization's own domain: full navigation, not a client route
    return RedirectDecision.replace_external(f"{state.org_domain}{routes.LMS}")


def no_organizations_needs_onboarding(state: RedirectState) -> RedirectDecision | None:
    if state.is_existing and not state.is_org_site:
        if not state.has_organizations and not state.is_invite:
            return RedirectDecision.goto(routes.ONBOARDING)
    return None


def existing_profile_redirect_param(state: RedirectState) -> RedirectDecision | None:
    if state.is_existing and not state.is_org_site and state.redirect_param:
        return RedirectDecision.goto(state.redirect_param)
    return None


def existing_profile_to_primary_org(state: RedirectState) -> RedirectDecision | None:
    if state.is_existing and not state.is_org_site and state.is_entry_route:
        if state.org_site_name:
            return RedirectDecision.goto(routes.org_route(state.org_site_name))
    return None


def unresolved_profile_private_route(state: RedirectState) -> RedirectDecision | None:
    if state.profile_status is ProfileStatus.UNRESOLVED and not state.is_public:
        return RedirectDecision.goto(routes.login_route(state.pathname))
    return None


def render_current_route(state: RedirectState) -> RedirectDecision | None:
    return RedirectDecision.none()


RULES: tuple[tuple[str, Rule], ...] = (
    ("anonymous_private_route", anonymous_private_route),
    ("new_profile_on_org_site", new_profile_on_org_site),
    ("new_profile_needs_onboarding", new_profile_needs_onboarding),
    ("existing_profile_on_org_site", existing_profile_on_org_site),
    ("student_to_org_site", student_to_org_site),
    ("no_organizations_needs_onboarding", no_organizations_needs_onboarding),
    ("existing_profile_redirect_param", existing_profile_redirect_param),
    ("existing_profile_to_primary_org", existing_profile_to_primary_org),
    ("unresolved_profile_private_route", unresolved_profile_private_route),
    ("render_current_route", render_current_route),
)


def evaluate_rules(
    state: RedirectState, rules: tuple[tuple[str, Rule], ...] = RULES
) -> tuple[str, RedirectDecision]:
    """Return the name of the first matching rule and its decision."""
    for name, rule in rules:
        decision = rule(state)
        if decision is not None:
            return name, decision
    msg = "redirect rule table has no catch-all rule"
    raise RuntimeError(msg)
