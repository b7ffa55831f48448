"""CLI entry point: convergence-check.

Subcommands:
    convergence-check check bom.xml                       # Check every managed dependency
    convergence-check latest com.google.cloud:libraries-bom
    convergence-check resolve com.google.cloud:google-cloud-storage:2.30.0
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from convergence_check.bom import managed_dependencies, read_bom
from convergence_check.core.config import Settings, parse_group_artifact
from convergence_check.core.logging import setup_logging
from convergence_check.exceptions import ConfigError, ConvergenceError
from convergence_check.models import ArtifactCoordinate, Resolution, ResolutionResult, RunReport
from convergence_check.report import exit_code, render_json, render_text
from convergence_check.repository.client import MavenRepositoryClient
from convergence_check.runner import ConvergenceRunner

_STATUS_ICONS = {
    "found": "+",
    "not_declared_here": "-",
    "unreachable": "!",
}


def _make_client(settings: Settings) -> MavenRepositoryClient:
    return MavenRepositoryClient(settings.repository_url, settings.timeout)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _build_settings(**overrides: object) -> Settings:
    """Environment settings with any non-None CLI overrides applied on top."""
    try:
        settings = Settings.from_env()
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(settings, **changes)
    except ConfigError as e:
        _fail(str(e))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Check that a BOM's libraries converge on the latest shared dependencies."""
    try:
        setup_logging("DEBUG" if verbose else None)
    except ConfigError as e:
        _fail(str(e))


@main.command("check")
@click.argument("bom_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--repository-url", default=None, help="Maven repository base URL")
@click.option("--timeout", type=float, default=None, help="Connect/read timeout in seconds")
@click.option(
    "--shared-dependency",
    default=None,
    metavar="GROUP:ARTIFACT",
    help="Shared-dependency artifact to audit",
)
@click.option("--organization", default=None, help="Only check artifacts of this groupId")
@click.option(
    "--exclude",
    multiple=True,
    metavar="MARKER",
    help="Skip artifactIds containing MARKER (repeatable; replaces the defaults)",
)
@click.option("--concurrency", type=int, default=None, help="Artifacts resolved in parallel")
@click.option(
    "--latest-artifacts",
    is_flag=True,
    help="Inspect each library's newest release instead of the BOM-pinned version",
)
@click.option(
    "--follow-scm",
    is_flag=True,
    help="Also try the pom.xml in the library's GitHub repository",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check(
    bom_file: Path,
    repository_url: str | None,
    timeout: float | None,
    shared_dependency: str | None,
    organization: str | None,
    exclude: tuple[str, ...],
    concurrency: int | None,
    latest_artifacts: bool,
    follow_scm: bool,
    as_json: bool,
) -> None:
    """Check every managed dependency of BOM_FILE for convergence."""
    shared_group_id = shared_artifact_id = None
    if shared_dependency:
        try:
            shared_group_id, shared_artifact_id = parse_group_artifact(shared_dependency)
        except ConfigError as e:
            _fail(str(e))

    settings = _build_settings(
        repository_url=repository_url.rstrip("/") if repository_url else None,
        timeout=timeout,
        shared_group_id=shared_group_id,
        shared_artifact_id=shared_artifact_id,
        organization_group_id=organization,
        excluded_markers=exclude or None,
        concurrency=concurrency,
        use_latest_artifact_versions=latest_artifacts or None,
        follow_scm=follow_scm or None,
    )

    try:
        # BOM problems surface before any network access.
        artifacts = managed_dependencies(
            read_bom(bom_file),
            settings.organization_group_id,
            settings.excluded_markers,
        )
        report = asyncio.run(_check(artifacts, settings))
    except ConvergenceError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(render_json(report), indent=2))
    else:
        click.echo(
            f"The latest version of {settings.shared_artifact_id} is {report.latest_version}"
        )
        for line in render_text(report, settings.shared_artifact_id):
            click.echo(line)
    sys.exit(exit_code(report))


async def _check(artifacts: list[ArtifactCoordinate], settings: Settings) -> RunReport:
    async with _make_client(settings) as client:
        runner = ConvergenceRunner(client, settings)
        latest = await runner.baseline()
        return await runner.run(artifacts, latest)


@main.command("latest")
@click.argument("coordinate", metavar="GROUP:ARTIFACT")
@click.option("--repository-url", default=None, help="Maven repository base URL")
@click.option("--timeout", type=float, default=None, help="Connect/read timeout in seconds")
def latest(coordinate: str, repository_url: str | None, timeout: float | None) -> None:
    """Print the newest published version of GROUP:ARTIFACT."""
    try:
        group_id, artifact_id = parse_group_artifact(coordinate)
    except ConfigError as e:
        _fail(str(e))
    settings = _build_settings(
        repository_url=repository_url.rstrip("/") if repository_url else None,
        timeout=timeout,
    )

    async def _latest() -> str | None:
        async with _make_client(settings) as client:
            return await client.latest_version(group_id, artifact_id)

    version = asyncio.run(_latest())
    if version is None:
        _fail(f"no published version found for {coordinate}")
    click.echo(version)


@main.command("resolve")
@click.argument("coordinate", metavar="GROUP:ARTIFACT:VERSION")
@click.option("--repository-url", default=None, help="Maven repository base URL")
@click.option("--timeout", type=float, default=None, help="Connect/read timeout in seconds")
@click.option(
    "--shared-dependency",
    default=None,
    metavar="GROUP:ARTIFACT",
    help="Shared-dependency artifact to look for",
)
@click.option("--follow-scm", is_flag=True, help="Also try the GitHub pom.xml")
def resolve(
    coordinate: str,
    repository_url: str | None,
    timeout: float | None,
    shared_dependency: str | None,
    follow_scm: bool,
) -> None:
    """Show how the shared-dependency version of one artifact is resolved."""
    try:
        artifact = ArtifactCoordinate.parse(coordinate)
        shared = parse_group_artifact(shared_dependency) if shared_dependency else (None, None)
    except (ValueError, ConfigError) as e:
        _fail(str(e))
    settings = _build_settings(
        repository_url=repository_url.rstrip("/") if repository_url else None,
        timeout=timeout,
        shared_group_id=shared[0],
        shared_artifact_id=shared[1],
        follow_scm=follow_scm or None,
    )

    async def _resolve() -> tuple[ResolutionResult, list]:
        async with _make_client(settings) as client:
            runner = ConvergenceRunner(client, settings)
            return await runner.resolver.resolve_with_attempts(artifact)

    result, attempts = asyncio.run(_resolve())
    click.echo(f"Resolving {settings.shared_dependency} for {artifact}:")
    for attempt in attempts:
        icon = _STATUS_ICONS.get(attempt.outcome.value, "?")
        found = f" -> {attempt.version}" if attempt.version else ""
        click.echo(f"  [{icon}] {attempt.url}{found}")

    if result.status is Resolution.FOUND:
        click.echo(f"Found: {result.version} ({result.source_url})")
        return
    if result.status is Resolution.NOT_DECLARED:
        click.echo(f"Not declared: no candidate POM manages {settings.shared_dependency}")
    else:
        click.echo("Unresolvable: no candidate POM could be fetched")
    sys.exit(1)


if __name__ == "__main__":
    main()
