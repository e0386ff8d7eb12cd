"""GitHub merge-status lookups backed by the ``gh`` CLI."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, field_validator

from . import exec as exec_util
from . import log as sweep_log

_GH_TIMEOUT_SECONDS = 20.0
MERGED_STATE = "MERGED"


class PullRequestSummary(BaseModel):
    """Subset of ``gh pr list --json`` fields used for merge detection."""

    model_config = ConfigDict(extra="ignore")

    number: int
    state: str | None = None

    @field_validator("state", mode="before")
    @classmethod
    def _normalize_state(cls, value: object) -> object:
        if isinstance(value, str):
            normalized = value.strip().upper()
            return normalized or None
        return value


def _parse_pr_list(result: exec_util.CommandResult) -> list[PullRequestSummary]:
    return exec_util.parse_json_model_list(
        result, model_type=PullRequestSummary, context="gh pr list"
    )


@dataclass
class GithubMergeStatus:
    """Hosting Merge-Status Adapter.

    Availability (``gh`` on PATH and ``gh auth status`` succeeding) is probed
    once per instance. When unavailable every lookup answers ``False``; a
    failing lookup is logged and also answers ``False``.
    """

    timeout_seconds: float = _GH_TIMEOUT_SECONDS
    runner: exec_util.CommandRunner = field(default_factory=exec_util.default_runner)
    gh_path: str = "gh"
    _available: bool | None = field(default=None, init=False, repr=False)

    def _installed(self) -> bool:
        return shutil.which(self.gh_path) is not None

    def _authenticated(self) -> bool:
        result = exec_util.run_with_runner(
            exec_util.CommandRequest(
                argv=(self.gh_path, "auth", "status"),
                timeout_seconds=self.timeout_seconds,
            ),
            runner=self.runner,
        )
        return result is not None and result.ok

    def available(self) -> bool:
        if self._available is None:
            if not self._installed():
                sweep_log.debug("[gh] gh not found on PATH; PR lookups disabled")
                self._available = False
            elif not self._authenticated():
                sweep_log.debug("[gh] gh is not authenticated; PR lookups disabled")
                self._available = False
            else:
                self._available = True
        return self._available

    def merged_pull_requests(self, branch: str) -> list[PullRequestSummary]:
        """Return merged pull requests whose head is ``branch``.

        Raises:
            exec_util.CommandExecutionError: When ``gh`` fails.
            exec_util.CommandParseError: When ``gh`` output is malformed.
        """
        spec = exec_util.CommandSpec(
            request=exec_util.CommandRequest(
                argv=(
                    self.gh_path,
                    "pr",
                    "list",
                    "--state",
                    "merged",
                    "--head",
                    branch,
                    "--json",
                    "number,state",
                ),
                timeout_seconds=self.timeout_seconds,
            ),
            parser=_parse_pr_list,
            context="gh pr list",
        )
        entries = exec_util.run_typed(spec, runner=self.runner)
        return [entry for entry in entries if entry.state == MERGED_STATE]

    def merged_pr_exists(self, branch: str) -> bool:
        if not self.available():
            return False
        try:
            merged = self.merged_pull_requests(branch)
        except (exec_util.CommandExecutionError, exec_util.CommandParseError) as exc:
            sweep_log.warning(f"[gh] PR lookup failed for {branch}: {exc}")
            return False
        if merged:
            numbers = ", ".join(f"#{entry.number}" for entry in merged)
            sweep_log.debug(f"[gh] merged PRs for {branch}: {numbers}")
        return bool(merged)
