"""Async client for reading POMs and metadata from a Maven repository."""

from __future__ import annotations

import httpx
import structlog

from convergence_check.core.config import MAVEN_REPO_BASE
from convergence_check.exceptions import PomParseError
from convergence_check.models import PomDocument
from convergence_check.repository import urls
from convergence_check.repository.pom import parse_latest_version, parse_pom

log = structlog.get_logger("convergence_check.repository")

_USER_AGENT = "convergence-check"


class MavenRepositoryClient:
    """Thin async wrapper around a Maven-layout HTTP repository.

    Every read is a single GET with a short timeout. Failures of any kind
    (transport error, timeout, non-200 status, malformed XML) are logged
    and reported as ``None``; nothing is retried.
    """

    def __init__(
        self,
        base_url: str = MAVEN_REPO_BASE,
        timeout: float = 2.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": _USER_AGENT},
            follow_redirects=True,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> MavenRepositoryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def fetch_bytes(self, url: str) -> bytes | None:
        """GET *url*; return the body on HTTP 200, otherwise ``None``."""
        try:
            resp = await self._client.get(url)
        except httpx.TimeoutException:
            log.warning("repository.timeout", url=url)
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.warning("repository.fetch_failed", url=url, error=f"{type(exc).__name__}: {exc}")
            return None

        if resp.status_code == 404:
            log.debug("repository.not_found", url=url)
            return None
        if resp.status_code != 200:
            log.warning("repository.bad_status", url=url, status=resp.status_code)
            return None
        return resp.content

    async def fetch_pom(self, url: str) -> PomDocument | None:
        """Download and parse the POM at *url*; ``None`` if absent or malformed."""
        content = await self.fetch_bytes(url)
        if content is None:
            return None
        try:
            return parse_pom(content)
        except PomParseError as exc:
            log.warning("repository.malformed_pom", url=url, error=str(exc))
            return None

    async def latest_version(self, group_id: str, artifact_id: str) -> str | None:
        """Newest published version of ``group_id:artifact_id`` per repository metadata."""
        url = urls.metadata_url(group_id, artifact_id, base=self.base_url)
        content = await self.fetch_bytes(url)
        if content is None:
            return None
        try:
            version = parse_latest_version(content)
        except PomParseError as exc:
            log.warning("repository.malformed_metadata", url=url, error=str(exc))
            return None
        if version is None:
            log.warning("repository.no_latest_marker", url=url)
        return version

    # ── URL helpers bound to this repository ──────────────────────────────

    def pom_url(self, group_id: str, artifact_id: str, version: str) -> str:
        return urls.pom_url(group_id, artifact_id, version, base=self.base_url)

    def parent_pom_url(self, group_id: str, artifact_id: str, version: str) -> str:
        return urls.parent_pom_url(group_id, artifact_id, version, base=self.base_url)

    def deps_bom_url(self, group_id: str, artifact_id: str, version: str) -> str:
        return urls.deps_bom_url(group_id, artifact_id, version, base=self.base_url)
