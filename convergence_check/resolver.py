"""Shared-dependency resolver — ordered fallback over candidate POMs."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from convergence_check.models import (
    ArtifactCoordinate,
    CandidateAttempt,
    CandidateOutcome,
    ResolutionResult,
)
from convergence_check.repository.client import MavenRepositoryClient
from convergence_check.repository.urls import scm_pom_url

log = structlog.get_logger("convergence_check.resolver")


def fold_attempts(attempts: Iterable[CandidateAttempt]) -> ResolutionResult:
    """Reduce ordered candidate attempts to a single result.

    The first FOUND wins. Otherwise the shared dependency is NOT_DECLARED
    if any candidate could be read, and UNRESOLVABLE if none could.
    """
    reachable = False
    for attempt in attempts:
        if attempt.outcome is CandidateOutcome.FOUND:
            return ResolutionResult.found(attempt.version or "", attempt.url)
        if attempt.outcome is CandidateOutcome.NOT_DECLARED_HERE:
            reachable = True
    if reachable:
        return ResolutionResult.not_declared()
    return ResolutionResult.unresolvable()


class SharedDependencyResolver:
    """Find which version of the shared dependency an artifact declares.

    Candidates are tried in order (``-parent`` POM, the artifact's own POM,
    ``-deps-bom`` POM) and the first one declaring the shared dependency
    in ``<dependencyManagement>`` wins. Later candidates are only fetched
    when earlier ones were inconclusive.
    """

    def __init__(
        self,
        client: MavenRepositoryClient,
        shared_group_id: str,
        shared_artifact_id: str,
        *,
        use_latest_artifact_versions: bool = False,
        follow_scm: bool = False,
    ) -> None:
        self._client = client
        self._shared_group_id = shared_group_id
        self._shared_artifact_id = shared_artifact_id
        self._use_latest = use_latest_artifact_versions
        self._follow_scm = follow_scm

    def candidate_urls(self, group_id: str, artifact_id: str, version: str) -> list[str]:
        return [
            self._client.parent_pom_url(group_id, artifact_id, version),
            self._client.pom_url(group_id, artifact_id, version),
            self._client.deps_bom_url(group_id, artifact_id, version),
        ]

    async def attempt(self, url: str) -> CandidateAttempt:
        """Fetch one candidate POM and look for the shared dependency."""
        doc = await self._client.fetch_pom(url)
        if doc is None:
            return CandidateAttempt(url, CandidateOutcome.UNREACHABLE)
        version = doc.managed_version(self._shared_group_id, self._shared_artifact_id)
        if version:
            return CandidateAttempt(url, CandidateOutcome.FOUND, version, doc.scm_url)
        return CandidateAttempt(url, CandidateOutcome.NOT_DECLARED_HERE, scm_url=doc.scm_url)

    async def resolve(self, artifact: ArtifactCoordinate) -> ResolutionResult:
        result, _ = await self.resolve_with_attempts(artifact)
        return result

    async def resolve_with_attempts(
        self, artifact: ArtifactCoordinate
    ) -> tuple[ResolutionResult, list[CandidateAttempt]]:
        """Like :meth:`resolve` but also return every candidate attempt made."""
        version = await self._inspected_version(artifact)

        attempts: list[CandidateAttempt] = []
        for url in self.candidate_urls(artifact.group_id, artifact.artifact_id, version):
            attempt = await self.attempt(url)
            attempts.append(attempt)
            log.debug(
                "resolver.candidate",
                artifact=str(artifact),
                url=url,
                outcome=attempt.outcome.value,
            )
            if attempt.outcome is CandidateOutcome.FOUND:
                break
        else:
            if self._follow_scm:
                scm_attempt = await self._attempt_scm(attempts, version)
                if scm_attempt is not None:
                    attempts.append(scm_attempt)

        result = fold_attempts(attempts)
        log.info(
            "resolver.resolved",
            artifact=str(artifact),
            status=result.status.value,
            version=result.version,
            source=result.source_url,
        )
        return result, attempts

    # ── internal ───────────────────────────────────────────────────────────

    async def _inspected_version(self, artifact: ArtifactCoordinate) -> str:
        """Version whose POMs are inspected: BOM-pinned, or newest if configured."""
        if not self._use_latest:
            return artifact.version
        latest = await self._client.latest_version(artifact.group_id, artifact.artifact_id)
        if latest is None:
            log.warning("resolver.latest_unknown", artifact=str(artifact))
            return artifact.version
        return latest

    async def _attempt_scm(
        self, attempts: list[CandidateAttempt], version: str
    ) -> CandidateAttempt | None:
        scm_url = next((a.scm_url for a in attempts if a.scm_url), None)
        if scm_url is None:
            return None
        url = scm_pom_url(scm_url, version)
        if url is None:
            log.debug("resolver.scm_not_github", scm_url=scm_url)
            return None
        return await self.attempt(url)
