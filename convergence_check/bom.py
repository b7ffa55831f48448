"""BOM reader — load managed dependencies from a local BOM file."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog

from convergence_check.exceptions import InvalidBomError, PomParseError
from convergence_check.models import ArtifactCoordinate
from convergence_check.repository.pom import parse_pom

log = structlog.get_logger("convergence_check.bom")


def read_bom(path: Path | str) -> list[ArtifactCoordinate]:
    """Return the ``<dependencyManagement>`` entries of the BOM at *path*.

    Entries keep document order. Entries without a version are skipped.
    Raises :class:`InvalidBomError` if the file is missing, unreadable,
    malformed, or has no dependency-management section. Never touches
    the network.
    """
    path = Path(path)
    if not path.is_file():
        raise InvalidBomError(f"The input BOM {path} is not a regular file")
    if not os.access(path, os.R_OK):
        raise InvalidBomError(f"The input BOM {path} is not readable")

    try:
        doc = parse_pom(path.read_bytes())
    except OSError as exc:
        raise InvalidBomError(f"The input BOM {path} could not be read: {exc}") from exc
    except PomParseError as exc:
        raise InvalidBomError(f"The input BOM {path} is not valid XML: {exc}") from exc

    if doc.managed_dependencies is None:
        raise InvalidBomError(f"The input BOM {path} has no <dependencyManagement> section")

    artifacts: list[ArtifactCoordinate] = []
    for entry in doc.managed_dependencies:
        if not entry.version:
            log.warning(
                "bom.entry_without_version",
                group_id=entry.group_id,
                artifact_id=entry.artifact_id,
            )
            continue
        artifacts.append(ArtifactCoordinate(entry.group_id, entry.artifact_id, entry.version))

    log.info(
        "bom.loaded",
        path=str(path),
        bom=f"{doc.group_id}:{doc.artifact_id}:{doc.version}",
        entries=len(artifacts),
    )
    return artifacts


def managed_dependencies(
    artifacts: Iterable[ArtifactCoordinate],
    organization_group_id: str,
    excluded_markers: Sequence[str] = (),
) -> list[ArtifactCoordinate]:
    """Keep artifacts of *organization_group_id* not matching any excluded marker."""
    kept: list[ArtifactCoordinate] = []
    for artifact in artifacts:
        if artifact.group_id != organization_group_id:
            continue
        if any(marker in artifact.artifact_id for marker in excluded_markers):
            log.debug("bom.excluded", artifact=str(artifact))
            continue
        kept.append(artifact)
    return kept
