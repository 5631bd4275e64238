"""Locale and theme selection for a settled request."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from campusgate.models.domain import SideEffects
from campusgate.types import LocalePolicy

if TYPE_CHECKING:
    from campusgate.config.settings import Settings

logger = structlog.get_logger(__name__)


def initial_locale(lang: str | None, supported: list[str], default: str) -> str:
    """Map a language tag such as ``en-GB`` onto a supported locale."""
    if not lang:
        return default
    tag = lang.split(",")[0].split(";")[0].strip().replace("_", "-")
    locale = tag.split("-")[0].lower()
    return locale if locale in supported else default


def select_locale(settings: Settings, requested: str | None = None) -> str:
    if settings.locale_policy is LocalePolicy.FIXED:
        return settings.default_locale
    return initial_locale(requested, settings.supported_locales, settings.default_locale)


def select_side_effects(
    settings: Settings, theme: str | None, requested_locale: str | None = None
) -> SideEffects:
    locale = select_locale(settings, requested_locale)
    logger.debug("presentation_selected", locale=locale, theme=theme)
    return SideEffects(theme=theme, locale=locale)
