"""Data models for the convergence checker."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ArtifactCoordinate:
    """A single published package: ``groupId:artifactId:version``."""

    group_id: str
    artifact_id: str
    version: str

    @classmethod
    def parse(cls, text: str) -> ArtifactCoordinate:
        """Parse ``group:artifact:version``. Raises ``ValueError`` otherwise."""
        parts = text.strip().split(":")
        if len(parts) != 3 or not all(parts):
            raise ValueError(f"expected groupId:artifactId:version, got {text!r}")
        return cls(*parts)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass(frozen=True)
class ManagedEntry:
    """One ``<dependencyManagement>`` entry. *version* may be absent."""

    group_id: str
    artifact_id: str
    version: str | None = None


@dataclass
class PomDocument:
    """The parts of a POM the checker cares about.

    ``managed_dependencies`` is ``None`` when the document has no
    ``<dependencyManagement>`` section at all.
    """

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    scm_url: str | None = None
    managed_dependencies: list[ManagedEntry] | None = None

    def managed_version(self, group_id: str, artifact_id: str) -> str | None:
        """Return the declared version of ``group_id:artifact_id``, if any."""
        for entry in self.managed_dependencies or []:
            if entry.group_id == group_id and entry.artifact_id == artifact_id:
                return entry.version
        return None


class CandidateOutcome(enum.Enum):
    FOUND = "found"
    NOT_DECLARED_HERE = "not_declared_here"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class CandidateAttempt:
    """Result of inspecting one candidate POM URL."""

    url: str
    outcome: CandidateOutcome
    version: str | None = None
    scm_url: str | None = None


class Resolution(enum.Enum):
    FOUND = "found"
    NOT_DECLARED = "not_declared"
    UNRESOLVABLE = "unresolvable"


@dataclass(frozen=True)
class ResolutionResult:
    """Tri-state outcome of resolving an artifact's shared-dependency version.

    ``NOT_DECLARED`` (some POM was readable, none declared it) and
    ``UNRESOLVABLE`` (no POM could be read at all) are kept apart on purpose.
    """

    status: Resolution
    version: str | None = None
    source_url: str | None = None

    @classmethod
    def found(cls, version: str, source_url: str | None = None) -> ResolutionResult:
        return cls(Resolution.FOUND, version, source_url)

    @classmethod
    def not_declared(cls) -> ResolutionResult:
        return cls(Resolution.NOT_DECLARED, "")

    @classmethod
    def unresolvable(cls) -> ResolutionResult:
        return cls(Resolution.UNRESOLVABLE)


class Bucket(enum.Enum):
    """Classification buckets, in report order."""

    CONVERGED = "converged"
    MISSING_SHARED_DEPENDENCY = "missing_shared_dependency"
    DIVERGED_VERSION = "diverged_version"
    UNRESOLVABLE = "unresolvable"


@dataclass
class RunReport:
    """Aggregated outcome of one convergence run.

    Owned by a single run; insertion order of every bucket is processing
    order.
    """

    latest_version: str
    buckets: dict[Bucket, list[ArtifactCoordinate]] = field(
        default_factory=lambda: {bucket: [] for bucket in Bucket}
    )
    found_versions: dict[ArtifactCoordinate, str] = field(default_factory=dict)
    sources: dict[ArtifactCoordinate, str] = field(default_factory=dict)
    total: int = 0

    def add(
        self,
        artifact: ArtifactCoordinate,
        bucket: Bucket,
        result: ResolutionResult,
    ) -> None:
        self.buckets[bucket].append(artifact)
        self.total += 1
        if result.version is not None:
            self.found_versions[artifact] = result.version
        if result.source_url:
            self.sources[artifact] = result.source_url

    @property
    def success(self) -> bool:
        return self.total == len(self.buckets[Bucket.CONVERGED])
