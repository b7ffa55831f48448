"""Repository URL builders for Maven-layout repositories.

All functions are pure. Malformed coordinates produce URLs that simply
fail to resolve later.
"""

from __future__ import annotations

import re

from convergence_check.core.config import MAVEN_REPO_BASE

PARENT_SUFFIX = "-parent"
DEPS_BOM_SUFFIX = "-deps-bom"

_GITHUB_URL_RE = re.compile(
    r"(?:https?://)?(?:www\.)?github\.com/([^/]+)/([^/#?]+)",
)


def group_path(group_id: str) -> str:
    return group_id.replace(".", "/")


def metadata_url(group_id: str, artifact_id: str, *, base: str = MAVEN_REPO_BASE) -> str:
    return f"{base}/{group_path(group_id)}/{artifact_id}/maven-metadata.xml"


def pom_url(group_id: str, artifact_id: str, version: str, *, base: str = MAVEN_REPO_BASE) -> str:
    return (
        f"{base}/{group_path(group_id)}/{artifact_id}/{version}/{artifact_id}-{version}.pom"
    )


def parent_pom_url(
    group_id: str, artifact_id: str, version: str, *, base: str = MAVEN_REPO_BASE
) -> str:
    return pom_url(group_id, artifact_id + PARENT_SUFFIX, version, base=base)


def deps_bom_url(
    group_id: str, artifact_id: str, version: str, *, base: str = MAVEN_REPO_BASE
) -> str:
    return pom_url(group_id, artifact_id + DEPS_BOM_SUFFIX, version, base=base)


def parse_github_url(url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from various GitHub URL formats."""
    m = _GITHUB_URL_RE.search(url)
    if not m:
        return None
    owner = m.group(1)
    repo = m.group(2).removesuffix(".git")
    return owner, repo


def scm_pom_url(scm_url: str, version: str) -> str | None:
    """Raw ``pom.xml`` URL at tag ``v<version>`` of a GitHub SCM URL.

    Returns None when *scm_url* does not point at GitHub.
    """
    parsed = parse_github_url(scm_url)
    if parsed is None:
        return None
    owner, repo = parsed
    return f"https://raw.githubusercontent.com/{owner}/{repo}/v{version}/pom.xml"
