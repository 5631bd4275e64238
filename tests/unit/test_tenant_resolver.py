"""Unit tests for tenant resolution by host."""

from __future__ import annotations

import pytest

from campusgate.config.settings import Settings
from campusgate.exceptions import FatalTenantError, StorageError
from campusgate.storage.repositories.memory import InMemoryOrganizationRepository, InMemoryStore
from campusgate.tenancy.resolver import TenantResolver, get_subdomain, is_custom_domain
from helpers import ACME, GLOBEX, make_request


class _BrokenOrganizations:
    async def find_by_slug_or_host(self, key: str, *, must_be_custom_domain: bool = False):
        raise StorageError("db down")

    async def list_for_profile(self, profile_id: str):
        raise StorageError("db down")


@pytest.mark.unit
class TestHostHelpers:
    def test_subdomain_of_base_host(self) -> None:
        assert get_subdomain("acme.classroomio.com", "classroomio.com") == "acme"

    def test_www_is_stripped(self) -> None:
        assert get_subdomain("www.acme.classroomio.com", "classroomio.com") == "acme"

    def test_apex_has_no_subdomain(self) -> None:
        assert get_subdomain("classroomio.com", "classroomio.com") is None
        assert get_subdomain("www.classroomio.com", "classroomio.com") is None

    def test_foreign_host_has_no_subdomain(self) -> None:
        assert get_subdomain("acme.example.com", "classroomio.com") is None

    @pytest.mark.parametrize(
        "host", ["learn.example.com", "academy.io", "courses.acme.co.uk"]
    )
    def test_foreign_hosts_are_custom_domains(self, host: str) -> None:
        assert is_custom_domain(host, ["classroomio.com", "vercel.app"]) is True

    @pytest.mark.parametrize(
        "host", ["acme.classroomio.com", "classroomio.com", "preview-1.vercel.app"]
    )
    def test_first_party_hosts_are_not_custom_domains(self, host: str) -> None:
        assert is_custom_domain(host, ["classroomio.com", "vercel.app"]) is False

    def test_localhost_is_never_a_custom_domain(self) -> None:
        assert is_custom_domain("acme.localhost:5173", ["classroomio.com"]) is False


@pytest.mark.unit
class TestPlatformResolution:
    async def test_org_subdomain(self, settings: Settings, store: InMemoryStore) -> None:
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        ctx = await resolver.resolve(make_request("acme.classroomio.com"))
        assert ctx.tenant == ACME
        assert ctx.is_org_site is True
        assert ctx.org_site_name == "acme"
        assert ctx.skip_auth is False

    async def test_port_is_ignored(self, settings: Settings, store: InMemoryStore) -> None:
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        ctx = await resolver.resolve(make_request("ACME.classroomio.com:8443"))
        assert ctx.tenant == ACME

    async def test_custom_domain(self, settings: Settings, store: InMemoryStore) -> None:
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        ctx = await resolver.resolve(make_request("learn.globex.com"))
        assert ctx.tenant == GLOBEX
        assert ctx.is_org_site is True
        assert ctx.org_site_name == "globex"

    async def test_unknown_custom_domain_is_fatal(
        self, settings: Settings, store: InMemoryStore
    ) -> None:
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        with pytest.raises(FatalTenantError) as exc_info:
            await resolver.resolve(make_request("learn.example.com"))
        assert exc_info.value.redirect_url == "https://app.classroomio.com/404?type=org"
        assert exc_info.value.key == "learn.example.com"

    async def test_custom_domain_lookup_ignores_slugs(
        self, settings: Settings, store: InMemoryStore
    ) -> None:
        # "acme" is a slug, not a verified custom domain
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        with pytest.raises(FatalTenantError):
            await resolver.resolve(make_request("acme"))

    async def test_unknown_subdomain_is_fatal_in_production(
        self, settings: Settings, store: InMemoryStore
    ) -> None:
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        with pytest.raises(FatalTenantError):
            await resolver.resolve(make_request("nobody.classroomio.com"))

    async def test_unknown_subdomain_is_tolerated_in_development(
        self, settings: Settings, store: InMemoryStore
    ) -> None:
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        ctx = await resolver.resolve(make_request("nobody.classroomio.com", is_dev=True))
        assert ctx.tenant is None
        assert ctx.org_site_name == "nobody"

    async def test_development_tolerance_is_configurable(self, store: InMemoryStore) -> None:
        strict = Settings(_env_file=None, tolerate_missing_org_in_dev=False)
        resolver = TenantResolver(strict, InMemoryOrganizationRepository(store))
        with pytest.raises(FatalTenantError):
            await resolver.resolve(make_request("nobody.classroomio.com", is_dev=True))

    @pytest.mark.parametrize("host", ["app.classroomio.com", "www.classroomio.com", "classroomio.com"])
    async def test_reserved_and_apex_hosts_resolve_no_tenant(
        self, settings: Settings, store: InMemoryStore, host: str
    ) -> None:
        resolver = TenantResolver(settings, InMemoryOrganizationRepository(store))
        ctx = await resolver.resolve(make_request(host))
        assert ctx.tenant is None
        assert ctx.is_org_site is False
        assert ctx.skip_auth is False

    async def test_app_subdomain_skips_lookup(self, settings: Settings) -> None:
        # A broken directory proves no lookup happens
        resolver = TenantResolver(settings, _BrokenOrganizations())
        ctx = await resolver.resolve(make_request("api.classroomio.com"))
        assert ctx.tenant is None
        assert ctx.is_org_site is False

    async def test_sandbox_subdomain_skips_auth(self, settings: Settings) -> None:
        resolver = TenantResolver(settings, _BrokenOrganizations())
        ctx = await resolver.resolve(make_request("play.classroomio.com"))
        assert ctx.skip_auth is True
        assert ctx.tenant is None

    async def test_store_failure_on_custom_domain_is_fatal(self, settings: Settings) -> None:
        resolver = TenantResolver(settings, _BrokenOrganizations())
        with pytest.raises(FatalTenantError):
            await resolver.resolve(make_request("learn.example.com"))


@pytest.mark.unit
class TestSelfHostedResolution:
    @pytest.fixture()
    def self_hosted(self) -> Settings:
        return Settings(_env_file=None, deployment_mode="self_hosted", app_host="lms.internal.io")

    async def test_subdomain_resolves(self, self_hosted: Settings, store: InMemoryStore) -> None:
        resolver = TenantResolver(self_hosted, InMemoryOrganizationRepository(store))
        ctx = await resolver.resolve(make_request("acme.lms.internal.io"))
        assert ctx.tenant == ACME
        assert ctx.is_org_site is True

    @pytest.mark.parametrize(
        "host",
        ["nobody.lms.internal.io", "learn.example.com", "lms.internal.io", "localhost:5173"],
    )
    async def test_never_fatal(self, self_hosted: Settings, store: InMemoryStore, host: str) -> None:
        resolver = TenantResolver(self_hosted, InMemoryOrganizationRepository(store))
        ctx = await resolver.resolve(make_request(host))
        assert ctx.tenant is None
        assert ctx.is_org_site is False

    async def test_store_failure_is_not_fatal(self, self_hosted: Settings) -> None:
        resolver = TenantResolver(self_hosted, _BrokenOrganizations())
        ctx = await resolver.resolve(make_request("acme.lms.internal.io"))
        assert ctx.tenant is None
