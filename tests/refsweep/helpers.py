from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Callable

from refsweep import exec as exec_util
from refsweep.errors import DefaultBranchUnresolvedError, ExternalCommandFailedError

NOW = dt.datetime(2026, 6, 15, 12, 0, tzinfo=dt.timezone.utc)


def ts(*args: int) -> int:
    """Return a UTC epoch timestamp for ``dt.datetime(*args)``."""
    return int(dt.datetime(*args, tzinfo=dt.timezone.utc).timestamp())


@dataclass
class FakeRefSource:
    """In-memory ref source with canned tags, branches, and ancestry."""

    tags: list[str] = field(default_factory=list)
    timestamps: dict[str, int | None] = field(default_factory=dict)
    branches: list[str] = field(default_factory=list)
    merged: set[str] = field(default_factory=set)
    inconclusive: set[str] = field(default_factory=set)
    default_branch: str | None = "main"
    remote: str = "origin"
    fail_deletes: set[str] = field(default_factory=set)
    fetch_error: Exception | None = None
    calls: list[tuple[str, ...]] = field(default_factory=list)

    def list_tags(self) -> list[str]:
        return list(self.tags)

    def commit_timestamp(self, ref: str) -> int | None:
        self.calls.append(("commit_timestamp", ref))
        return self.timestamps.get(ref.removeprefix("refs/tags/"))

    def list_remote_branches(self) -> list[str]:
        return list(self.branches)

    def remote_branch_exists(self, name: str) -> bool:
        return name in self.branches

    def resolve_default_branch(self) -> str:
        if self.default_branch is None:
            raise DefaultBranchUnresolvedError(
                "Unable to determine default branch",
                recovery_hint="run: git remote set-head origin --auto",
            )
        return self.default_branch

    def is_ancestor(self, ancestor: str, descendant: str) -> bool | None:
        self.calls.append(("is_ancestor", ancestor, descendant))
        branch = ancestor.removeprefix(f"{self.remote}/")
        if branch in self.inconclusive:
            return None
        return branch in self.merged

    def fetch_and_prune(self) -> None:
        self.calls.append(("fetch_and_prune",))
        if self.fetch_error is not None:
            raise self.fetch_error

    def _delete(self, kind: str, name: str) -> None:
        self.calls.append((kind, name))
        if name in self.fail_deletes:
            raise ExternalCommandFailedError(f"command failed: {kind} {name}")

    def delete_remote_branch(self, name: str) -> None:
        self._delete("delete_remote_branch", name)

    def delete_tag(self, name: str) -> None:
        self._delete("delete_tag", name)

    def delete_remote_tag_ref(self, name: str) -> None:
        self._delete("delete_remote_tag_ref", name)


@dataclass
class FakeMergeStatus:
    merged_prs: set[str] = field(default_factory=set)
    queried: list[str] = field(default_factory=list)

    def merged_pr_exists(self, branch: str) -> bool:
        self.queried.append(branch)
        return branch in self.merged_prs


@dataclass
class FakeRunner:
    """Command runner that answers from a callback and records requests."""

    respond: Callable[[exec_util.CommandRequest], exec_util.CommandResult | None]
    requests: list[exec_util.CommandRequest] = field(default_factory=list)

    def run(self, request: exec_util.CommandRequest) -> exec_util.CommandResult | None:
        self.requests.append(request)
        return self.respond(request)

    @property
    def argvs(self) -> list[tuple[str, ...]]:
        return [request.argv for request in self.requests]


def result(
    argv: tuple[str, ...], returncode: int = 0, stdout: str = "", stderr: str = ""
) -> exec_util.CommandResult:
    return exec_util.CommandResult(
        argv=argv, returncode=returncode, stdout=stdout, stderr=stderr
    )
