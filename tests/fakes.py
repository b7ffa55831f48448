"""Fake Maven repository and document builders for tests."""

from __future__ import annotations

import httpx

from convergence_check.repository.client import MavenRepositoryClient

BASE = "https://repo.test/maven2"
SHARED_GROUP = "com.google.cloud"
SHARED_ARTIFACT = "google-cloud-shared-dependencies"


def build_pom(
    managed: list[tuple[str, str, str | None]] | None = None,
    *,
    scm_url: str | None = None,
    properties: dict[str, str] | None = None,
    namespaced: bool = True,
    group_id: str = "com.google.cloud",
    artifact_id: str = "lib",
    version: str = "1.0.0",
) -> str:
    """Render a minimal POM. ``managed=None`` omits <dependencyManagement>."""
    xmlns = ' xmlns="http://maven.apache.org/POM/4.0.0"' if namespaced else ""
    parts = [
        f'<?xml version="1.0" encoding="UTF-8"?>\n<project{xmlns}>',
        "<modelVersion>4.0.0</modelVersion>",
        f"<groupId>{group_id}</groupId>",
        f"<artifactId>{artifact_id}</artifactId>",
        f"<version>{version}</version>",
    ]
    if scm_url:
        parts.append(f"<scm><url>{scm_url}</url></scm>")
    if properties:
        parts.append("<properties>")
        parts.extend(f"<{k}>{v}</{k}>" for k, v in properties.items())
        parts.append("</properties>")
    if managed is not None:
        parts.append("<dependencyManagement><dependencies>")
        for g, a, v in managed:
            version_el = f"<version>{v}</version>" if v is not None else ""
            parts.append(
                f"<dependency><groupId>{g}</groupId><artifactId>{a}</artifactId>"
                f"{version_el}<type>pom</type><scope>import</scope></dependency>"
            )
        parts.append("</dependencies></dependencyManagement>")
    parts.append("</project>")
    return "\n".join(parts)


def build_metadata(latest: str | None, release: str | None = None) -> str:
    versioning = ""
    if latest:
        versioning += f"<latest>{latest}</latest>\n"
    if release:
        versioning += f"<release>{release}</release>\n"
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n<metadata>\n'
        "<groupId>com.google.cloud</groupId>\n"
        f"<versioning>\n{versioning}</versioning>\n</metadata>\n"
    )


class FakeRepository:
    """Canned responses keyed by absolute URL; unknown URLs return 404."""

    def __init__(self) -> None:
        self.responses: dict[str, tuple[int, str] | type[Exception]] = {}
        self.requests: list[str] = []

    def add(self, url: str, body: str, status: int = 200) -> None:
        self.responses[url] = (status, body)

    def fail(self, url: str, exc_type: type[Exception] = httpx.ConnectTimeout) -> None:
        self.responses[url] = exc_type

    def shared_pom(self, url: str, version: str | None, **kwargs) -> None:
        """Serve a POM managing the shared dependency at *version*."""
        self.add(url, build_pom([(SHARED_GROUP, SHARED_ARTIFACT, version)], **kwargs))

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        canned = self.responses.get(url)
        if canned is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(canned, type):
            raise canned("simulated failure", request=request)
        status, body = canned
        return httpx.Response(status, content=body.encode())

    def client(self, timeout: float = 2.0) -> MavenRepositoryClient:
        return MavenRepositoryClient(
            BASE, timeout, transport=httpx.MockTransport(self.handler)
        )
