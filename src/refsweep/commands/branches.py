"""Implementation for the ``refsweep branches`` command."""

from __future__ import annotations

from pathlib import Path

from .. import config
from .. import log as sweep_log
from ..branches import BranchMergeEngine
from ..errors import BranchNotFoundError, SweepFailure, describe_failure
from ..execute import delete_each
from ..git import GitRefSource
from ..io import die, say
from ..issues import IssueIndex
from ..models import SweepConfig
from ..protocols import MergeStatusSource, RefSource
from ..prs import GithubMergeStatus
from ..report import render_branch_plan
from .common import finish_deletions, load_sweep_config


def _target_branches(source: RefSource, target: str | None) -> list[str]:
    if not target:
        return list(source.list_remote_branches())
    if not source.remote_branch_exists(target):
        raise BranchNotFoundError(f"branch '{source.remote}/{target}' not found")
    return [target]


def cleanup_branches(
    args: object,
    *,
    source: RefSource | None = None,
    merge_status: MergeStatusSource | None = None,
    sweep_config: SweepConfig | None = None,
    issues_file: Path | None = None,
) -> None:
    """Report, and with ``--apply`` delete, remote branches already merged.

    Args:
        args: CLI argument object with ``branch`` and ``apply`` fields.
        source: Ref source override; defaults to git in the working directory.
        merge_status: Hosting lookup override; defaults to the ``gh`` CLI.
        sweep_config: Project config override; defaults to ``.refsweep.json``.
        issues_file: Tracker export override; defaults to ``issues_file`` from
            the config, relative to the working directory.

    Returns:
        None. Exits non-zero on fatal errors or failed deletions.
    """
    sweep_config = sweep_config or load_sweep_config()
    target = getattr(args, "branch", None) or None
    apply = bool(getattr(args, "apply", False))
    sweep_log.debug(f"[branches] start target={target or 'all'} apply={apply}")

    if target:
        say("Mode: single branch")
        say(f"Target branch: {target}")
    else:
        say("Mode: all remote branches")
    say()

    if source is None:
        source = GitRefSource(remote=sweep_config.remote, git_path=sweep_config.git.path)
    if merge_status is None:
        merge_status = GithubMergeStatus()
    issues_path = issues_file or config.issues_path(sweep_config)

    try:
        source.fetch_and_prune()
        default_branch = source.resolve_default_branch()
        branches = _target_branches(source, target)
        issues = IssueIndex.load(issues_path)

        say(f"Default branch: {default_branch}")
        if issues is not None:
            say(f"Issues file: {issues_path} (enabled)")
        else:
            say(f"Issues file: {issues_path.name} not found (disabled)")
        say()

        engine = BranchMergeEngine(
            default_branch=default_branch,
            ancestry=source,
            merge_status=merge_status,
            issues=issues,
            remote=source.remote,
            reserved=sweep_config.protected_branches,
        )
        plan = engine.plan(branches)
    except SweepFailure as exc:
        die(describe_failure(exc))

    render_branch_plan(plan)
    if not plan.to_delete:
        return
    if not apply:
        say("Dry run mode. Use --apply to delete branches")
        return

    report = delete_each(plan.to_delete, source.delete_remote_branch, label="branch")
    finish_deletions(report, label="branch")
