"""Failure contracts for cleanup runs.

Adapters raise ``SweepFailure`` subclasses for expected runtime failures;
commands catch them and exit with a diagnostic. Programmer bugs raise normal
exceptions.
"""

from __future__ import annotations

from typing import Literal

SweepFailureCode = Literal[
    "default_branch_unresolved",
    "branch_not_found",
    "dependency_missing",
    "external_command_failed",
    "invalid_config",
]


class SweepFailure(Exception):
    """Expected failure that aborts or skips part of a cleanup run."""

    def __init__(
        self,
        code: SweepFailureCode,
        message: str,
        *,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.recovery_hint = recovery_hint


class DefaultBranchUnresolvedError(SweepFailure):
    """The remote's default branch could not be determined."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("default_branch_unresolved", message, recovery_hint=recovery_hint)


class BranchNotFoundError(SweepFailure):
    """A requested remote branch does not exist."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("branch_not_found", message, recovery_hint=recovery_hint)


class DependencyMissingError(SweepFailure):
    """Required executable is missing."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("dependency_missing", message, recovery_hint=recovery_hint)


class ExternalCommandFailedError(SweepFailure):
    """External command (git, gh) failed."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("external_command_failed", message, recovery_hint=recovery_hint)


class InvalidConfigError(SweepFailure):
    """Configuration file or environment value failed validation."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("invalid_config", message, recovery_hint=recovery_hint)


def describe_failure(exc: SweepFailure) -> str:
    """Return the user-facing message for a failure, with its hint if any."""
    message = str(exc)
    if exc.recovery_hint:
        return f"{message}\nhint: {exc.recovery_hint}"
    return message
