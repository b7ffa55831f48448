"""Convergence checker — audit a BOM's libraries for a shared-dependency version."""

from convergence_check.bom import managed_dependencies, read_bom
from convergence_check.models import (
    ArtifactCoordinate,
    Bucket,
    Resolution,
    ResolutionResult,
    RunReport,
)
from convergence_check.resolver import SharedDependencyResolver
from convergence_check.runner import ConvergenceRunner, classify

__all__ = [
    "ArtifactCoordinate",
    "Bucket",
    "ConvergenceRunner",
    "Resolution",
    "ResolutionResult",
    "RunReport",
    "SharedDependencyResolver",
    "classify",
    "managed_dependencies",
    "read_bom",
]
