"""Render a RunReport as human-readable text or JSON-ready data."""

from __future__ import annotations

from typing import Any

from convergence_check.models import Bucket, RunReport

SEPARATOR = "-" * 84

_HEADLINES: dict[Bucket, str] = {
    Bucket.CONVERGED: (
        "SUCCESS - The following {count} libraries had the latest version of {dep}: "
    ),
    Bucket.MISSING_SHARED_DEPENDENCY: (
        "FAIL - The following {count} libraries did not contain any version of {dep}: "
    ),
    Bucket.DIVERGED_VERSION: "FAIL - The following {count} libraries had outdated versions of {dep}: ",
    Bucket.UNRESOLVABLE: "FAIL - The following {count} libraries had unfindable POM files: ",
}


def exit_code(report: RunReport) -> int:
    return 0 if report.success else 1


def render_text(report: RunReport, shared_artifact_id: str) -> list[str]:
    """Report lines: one block per non-empty bucket, then the totals."""
    lines: list[str] = []
    for bucket in Bucket:
        artifacts = report.buckets[bucket]
        if not artifacts:
            continue
        lines.append(SEPARATOR)
        lines.append(_HEADLINES[bucket].format(count=len(artifacts), dep=shared_artifact_id))
        for artifact in artifacts:
            found = report.found_versions.get(artifact)
            suffix = f" Version Found: {found}" if found else ""
            lines.append(f"{artifact.artifact_id}:{artifact.version}{suffix}")

    lines.append(f"Total dependencies checked: {report.total}")
    if report.success:
        lines.append("All found libraries were successful!")
    return lines


def render_json(report: RunReport) -> dict[str, Any]:
    return {
        "latest_version": report.latest_version,
        "total": report.total,
        "success": report.success,
        "buckets": {
            bucket.value: [
                {
                    "group_id": a.group_id,
                    "artifact_id": a.artifact_id,
                    "version": a.version,
                    "found_version": report.found_versions.get(a),
                    "source": report.sources.get(a),
                }
                for a in report.buckets[bucket]
            ]
            for bucket in Bucket
        },
    }
