"""Tests for MavenRepositoryClient (mocked transport, no network)."""

from __future__ import annotations

import httpx
import pytest

from fakes import BASE, SHARED_ARTIFACT, SHARED_GROUP, build_metadata, build_pom

METADATA_URL = f"{BASE}/com/google/cloud/{SHARED_ARTIFACT}/maven-metadata.xml"
POM_URL = f"{BASE}/com/google/cloud/lib/1.0.0/lib-1.0.0.pom"


class TestFetchPom:
    @pytest.mark.anyio
    async def test_parses_pom(self, fake_repo):
        fake_repo.add(POM_URL, build_pom([(SHARED_GROUP, SHARED_ARTIFACT, "3.1.0")]))
        async with fake_repo.client() as client:
            doc = await client.fetch_pom(POM_URL)
        assert doc is not None
        assert doc.managed_version(SHARED_GROUP, SHARED_ARTIFACT) == "3.1.0"

    @pytest.mark.anyio
    async def test_404_is_absent(self, fake_repo):
        async with fake_repo.client() as client:
            assert await client.fetch_pom(POM_URL) is None

    @pytest.mark.anyio
    async def test_server_error_is_absent(self, fake_repo):
        fake_repo.add(POM_URL, "oops", status=503)
        async with fake_repo.client() as client:
            assert await client.fetch_pom(POM_URL) is None

    @pytest.mark.anyio
    async def test_timeout_is_absent(self, fake_repo):
        fake_repo.fail(POM_URL, httpx.ReadTimeout)
        async with fake_repo.client() as client:
            assert await client.fetch_pom(POM_URL) is None

    @pytest.mark.anyio
    async def test_connect_error_is_absent(self, fake_repo):
        fake_repo.fail(POM_URL, httpx.ConnectError)
        async with fake_repo.client() as client:
            assert await client.fetch_pom(POM_URL) is None

    @pytest.mark.anyio
    async def test_malformed_pom_is_absent(self, fake_repo):
        fake_repo.add(POM_URL, "<project><dependencyManagement>")
        async with fake_repo.client() as client:
            assert await client.fetch_pom(POM_URL) is None

    @pytest.mark.anyio
    @pytest.mark.parametrize("encoding", ["bogus", "EUC-JP"])
    async def test_unusable_encoding_is_absent(self, fake_repo, encoding):
        fake_repo.add(POM_URL, f'<?xml version="1.0" encoding="{encoding}"?><project/>')
        async with fake_repo.client() as client:
            assert await client.fetch_pom(POM_URL) is None

    @pytest.mark.anyio
    async def test_single_request_per_fetch(self, fake_repo):
        fake_repo.fail(POM_URL, httpx.ConnectTimeout)
        async with fake_repo.client() as client:
            await client.fetch_pom(POM_URL)
        assert fake_repo.requests == [POM_URL]


class TestLatestVersion:
    @pytest.mark.anyio
    async def test_reads_latest(self, fake_repo):
        fake_repo.add(METADATA_URL, build_metadata("3.1.0"))
        async with fake_repo.client() as client:
            assert await client.latest_version(SHARED_GROUP, SHARED_ARTIFACT) == "3.1.0"

    @pytest.mark.anyio
    async def test_missing_metadata(self, fake_repo):
        async with fake_repo.client() as client:
            assert await client.latest_version(SHARED_GROUP, SHARED_ARTIFACT) is None

    @pytest.mark.anyio
    async def test_no_marker(self, fake_repo):
        fake_repo.add(METADATA_URL, build_metadata(None))
        async with fake_repo.client() as client:
            assert await client.latest_version(SHARED_GROUP, SHARED_ARTIFACT) is None

    @pytest.mark.anyio
    async def test_malformed_metadata(self, fake_repo):
        fake_repo.add(METADATA_URL, "not xml at all")
        async with fake_repo.client() as client:
            assert await client.latest_version(SHARED_GROUP, SHARED_ARTIFACT) is None

    @pytest.mark.anyio
    async def test_unusable_encoding(self, fake_repo):
        fake_repo.add(METADATA_URL, '<?xml version="1.0" encoding="bogus"?><metadata/>')
        async with fake_repo.client() as client:
            assert await client.latest_version(SHARED_GROUP, SHARED_ARTIFACT) is None


class TestBoundUrls:
    @pytest.mark.anyio
    async def test_urls_use_client_base(self, fake_repo):
        async with fake_repo.client() as client:
            assert client.pom_url("com.google.cloud", "lib", "1.0.0") == POM_URL
            assert client.parent_pom_url("com.google.cloud", "lib", "1.0.0").startswith(
                f"{BASE}/com/google/cloud/lib-parent/"
            )
            assert client.deps_bom_url("com.google.cloud", "lib", "1.0.0").endswith(
                "/lib-deps-bom/1.0.0/lib-deps-bom-1.0.0.pom"
            )
