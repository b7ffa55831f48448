"""Tests for report rendering and exit status."""

from __future__ import annotations

from convergence_check.models import ArtifactCoordinate, Bucket, ResolutionResult, RunReport
from convergence_check.report import SEPARATOR, exit_code, render_json, render_text

DEP = "google-cloud-shared-dependencies"


def _a(artifact_id: str, version: str = "1.0.0") -> ArtifactCoordinate:
    return ArtifactCoordinate("com.google.cloud", artifact_id, version)


def _report() -> RunReport:
    report = RunReport(latest_version="3.1.0")
    report.add(_a("lib-u"), Bucket.UNRESOLVABLE, ResolutionResult.unresolvable())
    report.add(_a("lib-d", "2.0.0"), Bucket.DIVERGED_VERSION, ResolutionResult.found("2.9.0", "u"))
    report.add(_a("lib-c"), Bucket.CONVERGED, ResolutionResult.found("3.1.0"))
    report.add(_a("lib-m"), Bucket.MISSING_SHARED_DEPENDENCY, ResolutionResult.not_declared())
    return report


class TestRenderText:
    def test_bucket_order_is_fixed(self):
        lines = render_text(_report(), DEP)
        headers = [line for line in lines if line.startswith(("SUCCESS", "FAIL"))]
        assert headers == [
            f"SUCCESS - The following 1 libraries had the latest version of {DEP}: ",
            f"FAIL - The following 1 libraries did not contain any version of {DEP}: ",
            f"FAIL - The following 1 libraries had outdated versions of {DEP}: ",
            "FAIL - The following 1 libraries had unfindable POM files: ",
        ]
        assert lines.count(SEPARATOR) == 4

    def test_artifact_lines(self):
        lines = render_text(_report(), DEP)
        assert "lib-c:1.0.0 Version Found: 3.1.0" in lines
        assert "lib-d:2.0.0 Version Found: 2.9.0" in lines
        assert "lib-m:1.0.0" in lines
        assert "lib-u:1.0.0" in lines

    def test_failure_footer(self):
        lines = render_text(_report(), DEP)
        assert lines[-1] == "Total dependencies checked: 4"

    def test_empty_buckets_skipped_and_success_footer(self):
        report = RunReport(latest_version="3.1.0")
        report.add(_a("lib-c"), Bucket.CONVERGED, ResolutionResult.found("3.1.0"))
        lines = render_text(report, DEP)
        assert lines == [
            SEPARATOR,
            f"SUCCESS - The following 1 libraries had the latest version of {DEP}: ",
            "lib-c:1.0.0 Version Found: 3.1.0",
            "Total dependencies checked: 1",
            "All found libraries were successful!",
        ]

    def test_reproducible(self):
        assert render_text(_report(), DEP) == render_text(_report(), DEP)


class TestRenderJson:
    def test_shape(self):
        data = render_json(_report())
        assert data["latest_version"] == "3.1.0"
        assert data["total"] == 4
        assert data["success"] is False
        assert list(data["buckets"]) == [b.value for b in Bucket]
        assert data["buckets"]["diverged_version"] == [
            {
                "group_id": "com.google.cloud",
                "artifact_id": "lib-d",
                "version": "2.0.0",
                "found_version": "2.9.0",
                "source": "u",
            }
        ]
        assert data["buckets"]["unresolvable"][0]["found_version"] is None
        assert data["buckets"]["missing_shared_dependency"][0]["found_version"] == ""


class TestExitCode:
    def test_failure(self):
        assert exit_code(_report()) == 1

    def test_success(self):
        report = RunReport(latest_version="3.1.0")
        report.add(_a("lib-c"), Bucket.CONVERGED, ResolutionResult.found("3.1.0"))
        assert exit_code(report) == 0

    def test_empty_run_succeeds(self):
        assert exit_code(RunReport(latest_version="3.1.0")) == 0
