"""Redirect policy and the per-request bootstrap entry points."""

from campusgate.routing.engine import BootstrapResult, Collaborators, bootstrap_request, evaluate
from campusgate.routing.rules import RULES, RedirectState, evaluate_rules

__all__ = [
    "RULES",
    "BootstrapResult",
    "Collaborators",
    "RedirectState",
    "bootstrap_request",
    "evaluate",
    "evaluate_rules",
]
