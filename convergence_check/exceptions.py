"""Custom exceptions for the convergence checker."""


class ConvergenceError(Exception):
    """Base exception for all convergence-check errors."""


class ConfigError(ConvergenceError):
    """Raised when a setting (env var or CLI option) cannot be parsed."""


class InvalidBomError(ConvergenceError):
    """Raised when the input BOM is missing, unreadable, or not a BOM."""


class PomParseError(ConvergenceError):
    """Raised when a POM or metadata document is not well-formed XML."""


class BaselineUnavailableError(ConvergenceError):
    """Raised when the newest shared-dependency version cannot be established."""

    def __init__(self, group_id: str, artifact_id: str):
        self.group_id = group_id
        self.artifact_id = artifact_id
        super().__init__(
            f"Unable to determine the latest version of {group_id}:{artifact_id}; "
            "refusing to compare against an unknown baseline."
        )
