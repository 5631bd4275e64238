"""Unit tests for locale selection and base meta tags."""

from __future__ import annotations

import pytest

from campusgate.config.settings import Settings
from campusgate.presentation.locale import initial_locale, select_locale, select_side_effects
from campusgate.presentation.meta import build_base_meta_tags
from helpers import make_request

SUPPORTED = ["pt", "en", "es"]


@pytest.mark.unit
class TestLocale:
    @pytest.mark.parametrize(
        ("lang", "expected"),
        [
            ("en-GB", "en"),
            ("es_MX", "es"),
            ("en-US,en;q=0.9,pt;q=0.8", "en"),
            ("ja-JP", "pt"),
            ("", "pt"),
            (None, "pt"),
        ],
    )
    def test_initial_locale(self, lang: str | None, expected: str) -> None:
        assert initial_locale(lang, SUPPORTED, "pt") == expected

    def test_fixed_policy_always_uses_default(self, settings: Settings) -> None:
        assert select_locale(settings, "en-US") == "pt"

    def test_negotiated_policy(self) -> None:
        settings = Settings(_env_file=None, locale_policy="negotiated")
        assert select_locale(settings, "en-US") == "en"
        assert select_locale(settings, "ja") == "pt"

    def test_side_effects_carry_theme(self, settings: Settings) -> None:
        effects = select_side_effects(settings, "blue")
        assert effects.theme == "blue"
        assert effects.locale == "pt"


@pytest.mark.unit
class TestMetaTags:
    def test_canonical_and_branding(self, settings: Settings) -> None:
        tags = build_base_meta_tags(make_request("acme.classroomio.com", "/courses"), settings)
        assert tags["canonical"] == "https://acme.classroomio.com/courses"
        assert tags["openGraph"]["url"] == tags["canonical"]
        assert tags["openGraph"]["siteName"] == "ClassroomIO"
        assert tags["openGraph"]["images"][0]["url"] == settings.og_image_url
        assert tags["twitter"]["cardType"] == "summary_large_image"
        assert tags["title"] == settings.site_title

    def test_og_locale_follows_locale(self, settings: Settings) -> None:
        tags = build_base_meta_tags(make_request(), settings, locale="en")
        assert tags["openGraph"]["locale"] == "en_US"
