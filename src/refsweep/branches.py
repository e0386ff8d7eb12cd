"""Merge detection and safety policy for remote branches."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from . import log as sweep_log
from .issues import NO_SOURCE, IssueIndex, IssueResolution, IssueStatus
from .protocols import AncestrySource, MergeStatusSource

RESERVED_BRANCHES = ("test",)


class BranchBucket(str, Enum):
    PROTECTED = "protected"
    TO_DELETE = "to-delete"
    SAVED_BY_ISSUE = "saved-by-issue"
    SKIPPED_NOT_MERGED = "skipped-not-merged"
    CLOSED_ISSUE_UNMERGED = "closed-issue-unmerged"


class MergeMethod(str, Enum):
    GIT = "GIT"
    PR = "PR"


@dataclass(frozen=True)
class BranchDecision:
    """Classification of a single branch."""

    branch: str
    bucket: BranchBucket
    method: MergeMethod | None = None
    issue: IssueResolution = NO_SOURCE


@dataclass(frozen=True)
class BranchPlan:
    """Ordered decisions for every branch examined in one run."""

    default_branch: str
    issues_enabled: bool
    decisions: tuple[BranchDecision, ...]

    def members(self, bucket: BranchBucket) -> tuple[str, ...]:
        return tuple(item.branch for item in self.decisions if item.bucket is bucket)

    @property
    def to_delete(self) -> tuple[str, ...]:
        return self.members(BranchBucket.TO_DELETE)

    def count_by_method(self, method: MergeMethod) -> int:
        return sum(
            1
            for item in self.decisions
            if item.bucket is BranchBucket.TO_DELETE and item.method is method
        )

    def decision_for(self, branch: str) -> BranchDecision | None:
        for item in self.decisions:
            if item.branch == branch:
                return item
        return None


@dataclass
class BranchMergeEngine:
    """Classify remote branches against the default branch.

    Merge detection runs the local ancestor test first and only asks the
    hosting service when that fails. Issue safety applies when ``issues`` is
    set: a merged branch whose task is still open is saved, and an unmerged
    branch whose task is closed is flagged for manual review.

    Attributes:
        default_branch: Name of the remote default branch.
        ancestry: Answers ancestor queries between refs.
        merge_status: Answers merged-PR queries by head branch.
        issues: Parsed tracker export, or ``None`` when absent.
        remote: Remote whose tracking refs hold the branches.
        reserved: Names that are protected in addition to the default branch.
    """

    default_branch: str
    ancestry: AncestrySource
    merge_status: MergeStatusSource
    issues: IssueIndex | None = None
    remote: str = "origin"
    reserved: tuple[str, ...] = RESERVED_BRANCHES
    _protected: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._protected = frozenset({self.default_branch, *self.reserved})

    @property
    def issues_enabled(self) -> bool:
        return self.issues is not None

    def is_protected(self, branch: str) -> bool:
        return branch in self._protected

    def _remote_ref(self, branch: str) -> str:
        return f"{self.remote}/{branch}"

    def detect_merge(self, branch: str) -> MergeMethod | None:
        is_ancestor = self.ancestry.is_ancestor(
            self._remote_ref(branch), self._remote_ref(self.default_branch)
        )
        if is_ancestor is True:
            return MergeMethod.GIT
        if is_ancestor is None:
            sweep_log.debug(f"[branches] ancestor test inconclusive for {branch}")
        if self.merge_status.merged_pr_exists(branch):
            return MergeMethod.PR
        return None

    def resolve_issue(self, branch: str) -> IssueResolution:
        if self.issues is None:
            return NO_SOURCE
        return self.issues.resolve_branch(branch)

    def classify(self, branch: str) -> BranchDecision:
        if self.is_protected(branch):
            sweep_log.debug(f"[branches] protected {branch}")
            return BranchDecision(branch, BranchBucket.PROTECTED)

        method = self.detect_merge(branch)
        issue = self.resolve_issue(branch)
        if method is not None:
            if issue.blocks_deletion:
                sweep_log.debug(
                    f"[branches] saved {branch} merged={method.value} issue={issue.describe()}"
                )
                return BranchDecision(branch, BranchBucket.SAVED_BY_ISSUE, method, issue)
            sweep_log.debug(
                f"[branches] delete {branch} merged={method.value} issue={issue.describe()}"
            )
            return BranchDecision(branch, BranchBucket.TO_DELETE, method, issue)

        if issue.status is IssueStatus.CLOSED:
            sweep_log.debug(f"[branches] review {branch} not merged but issue={issue.describe()}")
            return BranchDecision(branch, BranchBucket.CLOSED_ISSUE_UNMERGED, None, issue)
        sweep_log.debug(f"[branches] skip {branch} not merged")
        return BranchDecision(branch, BranchBucket.SKIPPED_NOT_MERGED, None, issue)

    def plan(self, branches: Iterable[str]) -> BranchPlan:
        decisions = tuple(self.classify(branch) for branch in branches)
        return BranchPlan(
            default_branch=self.default_branch,
            issues_enabled=self.issues_enabled,
            decisions=decisions,
        )
