"""Runtime settings, read from ``CONVERGENCE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from convergence_check.exceptions import ConfigError

MAVEN_REPO_BASE = "https://repo1.maven.org/maven2"

_ENV_PREFIX = "CONVERGENCE_"


@dataclass(frozen=True)
class Settings:
    repository_url: str = MAVEN_REPO_BASE
    timeout: float = 2.0  # seconds, connect and read
    shared_group_id: str = "com.google.cloud"
    shared_artifact_id: str = "google-cloud-shared-dependencies"
    organization_group_id: str = "com.google.cloud"
    excluded_markers: tuple[str, ...] = field(
        default=("google-cloud-core", "bigtable-emulator")
    )
    concurrency: int = 1
    use_latest_artifact_versions: bool = False
    follow_scm: bool = False

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.concurrency < 1:
            raise ConfigError(f"concurrency must be at least 1, got {self.concurrency}")

    @property
    def shared_dependency(self) -> str:
        return f"{self.shared_group_id}:{self.shared_artifact_id}"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the environment, falling back to defaults."""
        kwargs: dict = {}

        url = _env("REPOSITORY_URL")
        if url:
            kwargs["repository_url"] = url.rstrip("/")

        timeout = _env("TIMEOUT")
        if timeout:
            kwargs["timeout"] = _parse_float("TIMEOUT", timeout)

        shared = _env("SHARED_DEPENDENCY")
        if shared:
            kwargs["shared_group_id"], kwargs["shared_artifact_id"] = parse_group_artifact(shared)

        org = _env("ORGANIZATION")
        if org:
            kwargs["organization_group_id"] = org

        exclude = _env("EXCLUDE")
        if exclude is not None:
            kwargs["excluded_markers"] = tuple(m.strip() for m in exclude.split(",") if m.strip())

        concurrency = _env("CONCURRENCY")
        if concurrency:
            try:
                kwargs["concurrency"] = int(concurrency)
            except ValueError:
                raise ConfigError(
                    f"{_ENV_PREFIX}CONCURRENCY must be an integer, got {concurrency!r}"
                ) from None

        return cls(**kwargs)


def parse_group_artifact(text: str) -> tuple[str, str]:
    """Split ``group:artifact`` into its two parts."""
    parts = text.strip().split(":")
    if len(parts) != 2 or not all(parts):
        raise ConfigError(f"expected groupId:artifactId, got {text!r}")
    return parts[0], parts[1]


def _env(key: str) -> str | None:
    return os.environ.get(_ENV_PREFIX + key)


def _parse_float(key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{_ENV_PREFIX}{key} must be a number, got {value!r}") from None
