"""ConvergenceRunner — classify every managed dependency against the baseline."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from convergence_check.core.config import Settings
from convergence_check.exceptions import BaselineUnavailableError
from convergence_check.models import (
    ArtifactCoordinate,
    Bucket,
    Resolution,
    ResolutionResult,
    RunReport,
)
from convergence_check.repository.client import MavenRepositoryClient
from convergence_check.resolver import SharedDependencyResolver

log = structlog.get_logger("convergence_check.runner")


def classify(result: ResolutionResult, latest_version: str) -> Bucket:
    """Map a resolution onto its bucket. Versions compare by string equality."""
    if result.status is Resolution.UNRESOLVABLE:
        return Bucket.UNRESOLVABLE
    if result.status is Resolution.NOT_DECLARED:
        return Bucket.MISSING_SHARED_DEPENDENCY
    if result.version == latest_version:
        return Bucket.CONVERGED
    return Bucket.DIVERGED_VERSION


class ConvergenceRunner:
    """Resolve and bucket a list of artifacts against one baseline version."""

    def __init__(self, client: MavenRepositoryClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self.resolver = SharedDependencyResolver(
            client,
            settings.shared_group_id,
            settings.shared_artifact_id,
            use_latest_artifact_versions=settings.use_latest_artifact_versions,
            follow_scm=settings.follow_scm,
        )

    async def baseline(self) -> str:
        """Newest published shared-dependency version.

        Raises :class:`BaselineUnavailableError` if it cannot be established.
        """
        latest = await self._client.latest_version(
            self._settings.shared_group_id, self._settings.shared_artifact_id
        )
        if not latest:
            raise BaselineUnavailableError(
                self._settings.shared_group_id, self._settings.shared_artifact_id
            )
        log.info("runner.baseline", dependency=self._settings.shared_dependency, version=latest)
        return latest

    async def run(
        self,
        artifacts: Sequence[ArtifactCoordinate],
        latest_version: str,
    ) -> RunReport:
        """Resolve every artifact and aggregate the buckets in input order.

        At most ``settings.concurrency`` artifacts are resolved at once;
        each artifact's own candidate chain stays sequential.
        """
        sem = asyncio.Semaphore(self._settings.concurrency)

        async def _resolve(artifact: ArtifactCoordinate) -> ResolutionResult:
            async with sem:
                return await self.resolver.resolve(artifact)

        results = await asyncio.gather(*(_resolve(a) for a in artifacts))

        report = RunReport(latest_version=latest_version)
        for artifact, result in zip(artifacts, results, strict=True):
            bucket = classify(result, latest_version)
            report.add(artifact, bucket, result)
            log.debug("runner.classified", artifact=str(artifact), bucket=bucket.value)

        log.info(
            "runner.done",
            total=report.total,
            **{bucket.value: len(items) for bucket, items in report.buckets.items()},
        )
        return report
