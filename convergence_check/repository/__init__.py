"""Maven repository access — URL building, POM parsing, HTTP client."""

from convergence_check.repository.client import MavenRepositoryClient
from convergence_check.repository.pom import parse_latest_version, parse_pom

__all__ = ["MavenRepositoryClient", "parse_latest_version", "parse_pom"]
