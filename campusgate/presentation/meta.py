"""Base meta tags for server-rendered pages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from campusgate.config.settings import Settings
    from campusgate.models.domain import RequestContext

_OG_LOCALES = {"pt": "pt_BR", "en": "en_US", "es": "es_ES", "fr": "fr_FR", "de": "de_DE"}


def build_base_meta_tags(
    request: RequestContext, settings: Settings, locale: str | None = None
) -> dict[str, Any]:
    canonical = f"{request.origin}{request.pathname}"
    locale = locale or settings.default_locale
    return {
        "title": settings.site_title,
        "description": settings.site_description,
        "canonical": canonical,
        "openGraph": {
            "type": "website",
            "url": canonical,
            "locale": _OG_LOCALES.get(locale, locale),
            "title": settings.site_title,
            "description": settings.site_description,
            "siteName": settings.site_name,
            "images": [
                {
                    "url": settings.og_image_url,
                    "alt": f"{settings.site_name} OG Image",
                    "width": 1920,
                    "height": 1080,
                    "secureUrl": settings.og_image_url,
                    "type": "image/jpeg",
                }
            ],
        },
        "twitter": {
            "handle": settings.twitter_handle,
            "site": settings.twitter_handle,
            "cardType": "summary_large_image",
            "title": settings.site_title,
            "description": settings.site_description,
            "image": settings.og_image_url,
            "imageAlt": f"{settings.site_name} OG Image",
        },
    }
