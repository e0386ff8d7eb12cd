"""Render bucketed cleanup plans for operators."""

from __future__ import annotations

from typing import Sequence

from .branches import BranchBucket, BranchPlan, MergeMethod
from .io import say, say_lines
from .tags import TagPlan

_BRANCH_HEADINGS = {
    BranchBucket.TO_DELETE: "Branches to delete",
    BranchBucket.SAVED_BY_ISSUE: "Branches saved due to open issues (safety)",
    BranchBucket.SKIPPED_NOT_MERGED: "Branches skipped (not merged)",
    BranchBucket.CLOSED_ISSUE_UNMERGED: (
        "Branches with closed issues but not merged (manual review)"
    ),
    BranchBucket.PROTECTED: "Protected branches",
}


def _section(heading: str, members: Sequence[str], *, show_empty: bool = False) -> None:
    if not members and not show_empty:
        return
    say(f"{heading}: {len(members)}")
    say_lines(members)
    say()


def render_tag_plan(plan: TagPlan) -> None:
    _section("Tags skipped due to invalid format (manual review required)", plan.invalid_format)
    if not plan.valid:
        say("No matching tags found")
        return
    if plan.within_keep:
        say(f"Nothing to delete. Total tags: {len(plan.valid)}")
        _section("Tags kept by count", plan.kept_by_count, show_empty=True)
        return

    _section("Tags kept by count", plan.kept_by_count, show_empty=True)
    _section("Tags skipped due to age", plan.skipped_by_age)
    _section("Tags skipped due to unresolvable commit timestamp", plan.unresolved)
    if plan.to_delete:
        _section(
            f"Tags to delete (commit older than {plan.cutoff.date().isoformat()})",
            plan.to_delete,
        )
    else:
        say("No tags eligible for deletion")
        say()

    say("Summary:")
    say(f"Total matching tags: {len(plan.valid)}")
    say(f"Tags kept by count: {len(plan.kept_by_count)}")
    say(f"Tags skipped due to age: {len(plan.skipped_by_age)}")
    if plan.unresolved:
        say(f"Tags with unresolvable timestamps: {len(plan.unresolved)}")
    say(f"Tags with invalid format: {len(plan.invalid_format)}")
    say(f"Tags to delete: {len(plan.to_delete)}")
    say()


def render_branch_plan(plan: BranchPlan) -> None:
    for bucket in (
        BranchBucket.TO_DELETE,
        BranchBucket.SAVED_BY_ISSUE,
        BranchBucket.SKIPPED_NOT_MERGED,
        BranchBucket.CLOSED_ISSUE_UNMERGED,
        BranchBucket.PROTECTED,
    ):
        members = plan.members(bucket)
        if bucket is BranchBucket.TO_DELETE:
            methods = {
                item.branch: item.method for item in plan.decisions if item.method is not None
            }
            members = tuple(f"{name} ({methods[name].value})" for name in members)
        _section(_BRANCH_HEADINGS[bucket], members)

    say("Summary:")
    say(f"Total remote branches checked: {len(plan.decisions)}")
    say(f"Protected branches skipped: {len(plan.members(BranchBucket.PROTECTED))}")
    say(f"Branches to delete: {len(plan.to_delete)}")
    say(f"  - via git merge-base: {plan.count_by_method(MergeMethod.GIT)}")
    say(f"  - via GitHub PRs: {plan.count_by_method(MergeMethod.PR)}")
    say(f"Branches saved by issues safety check: {len(plan.members(BranchBucket.SAVED_BY_ISSUE))}")
    say(f"Branches skipped (not merged): {len(plan.members(BranchBucket.SKIPPED_NOT_MERGED))}")
    say(
        "Branches with closed issues (manual review): "
        f"{len(plan.members(BranchBucket.CLOSED_ISSUE_UNMERGED))}"
    )
    say()
