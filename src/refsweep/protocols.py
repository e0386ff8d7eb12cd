"""Collaborator interfaces consumed by the cleanup engines and commands."""

from __future__ import annotations

from typing import Protocol, Sequence


class CommitTimestampSource(Protocol):
    def commit_timestamp(self, ref: str) -> int | None: ...


class AncestrySource(Protocol):
    def is_ancestor(self, ancestor: str, descendant: str) -> bool | None: ...


class MergeStatusSource(Protocol):
    def merged_pr_exists(self, branch: str) -> bool: ...


class RefSource(CommitTimestampSource, AncestrySource, Protocol):
    """Everything a cleanup run reads from or writes to the repository."""

    remote: str

    def list_tags(self) -> Sequence[str]: ...

    def list_remote_branches(self, remote: str | None = None) -> Sequence[str]: ...

    def remote_branch_exists(self, name: str, remote: str | None = None) -> bool: ...

    def resolve_default_branch(self, remote: str | None = None) -> str: ...

    def fetch_and_prune(self, remote: str | None = None) -> None: ...

    def delete_remote_branch(self, name: str, remote: str | None = None) -> None: ...

    def delete_tag(self, name: str) -> None: ...

    def delete_remote_tag_ref(self, name: str, remote: str | None = None) -> None: ...
