"""Git adapter exposing the ref operations cleanup runs need."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from . import exec as exec_util
from . import log as sweep_log
from .errors import (
    DefaultBranchUnresolvedError,
    DependencyMissingError,
    ExternalCommandFailedError,
)

DEFAULT_REMOTE = "origin"
_FALLBACK_DEFAULT_BRANCHES = ("main", "master")
_DIGITS = re.compile(r"[0-9]+")


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path.

    Example:
        >>> git_command(["tag"])
        ['git', 'tag']
        >>> git_command(["tag"], git_path="/opt/git/bin/git")
        ['/opt/git/bin/git', 'tag']
    """
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def remote_branch_prefix(remote: str) -> str:
    return f"refs/remotes/{remote}/"


@dataclass
class GitRefSource:
    """Ref Source Adapter backed by the ``git`` executable.

    All reads go through ``runner`` so tests can substitute canned results.
    Missing ``git`` is always fatal; a non-zero exit is interpreted per
    operation.

    Attributes:
        repo_dir: Repository working directory (``None`` uses the process cwd).
        remote: Remote name whose tracking refs are inspected.
        git_path: Git executable path.
        runner: Command runner used for every invocation.
    """

    repo_dir: Path | None = None
    remote: str = DEFAULT_REMOTE
    git_path: str = "git"
    runner: exec_util.CommandRunner = field(default_factory=exec_util.default_runner)

    def _run(self, args: list[str]) -> exec_util.CommandResult:
        argv = git_command(args, git_path=self.git_path)
        if self.repo_dir is not None:
            argv = [argv[0], "-C", str(self.repo_dir), *argv[1:]]
        sweep_log.trace(f"[git] run args={' '.join(args)}")
        result = exec_util.run_with_runner(
            exec_util.CommandRequest(argv=tuple(argv)), runner=self.runner
        )
        if result is None:
            raise DependencyMissingError(
                f"missing required command: {argv[0]}",
                recovery_hint="install git or set git.path in .refsweep.json",
            )
        if not result.ok:
            sweep_log.debug(
                f"[git] exit={result.returncode} args={' '.join(args)} "
                f"detail={result.detail() or 'none'}"
            )
        return result

    def _run_checked(self, args: list[str]) -> exec_util.CommandResult:
        result = self._run(args)
        if not result.ok:
            detail = result.detail()
            message = f"command failed: git {' '.join(args)}"
            if detail:
                message = f"{message}\n{detail}"
            raise ExternalCommandFailedError(message)
        return result

    def ref_exists(self, ref: str) -> bool:
        return self._run(["show-ref", "--verify", "--quiet", ref]).ok

    def list_tags(self) -> list[str]:
        """Return all local tag names in git's listing order."""
        result = self._run_checked(["tag", "--list"])
        return exec_util.parse_lines(result)

    def list_remote_branches(self, remote: str | None = None) -> list[str]:
        """Return remote-tracking branch names without the remote prefix.

        Symbolic refs such as ``origin/HEAD`` are excluded.
        """
        prefix = remote_branch_prefix(remote or self.remote)
        result = self._run_checked(
            ["for-each-ref", "--format=%(refname)%09%(symref)", prefix.rstrip("/")]
        )
        branches: list[str] = []
        for line in result.stdout.splitlines():
            refname, _sep, symref = line.partition("\t")
            refname = refname.strip()
            if not refname or symref.strip():
                continue
            if not refname.startswith(prefix):
                continue
            name = refname[len(prefix) :]
            if name:
                branches.append(name)
        return branches

    def remote_branch_exists(self, name: str, remote: str | None = None) -> bool:
        return self.ref_exists(f"{remote_branch_prefix(remote or self.remote)}{name}")

    def resolve_default_branch(self, remote: str | None = None) -> str:
        """Determine the remote's default branch.

        Prefers the ``<remote>/HEAD`` symbolic ref, then falls back to
        ``main`` and ``master`` tracking refs.

        Raises:
            DefaultBranchUnresolvedError: When none of the probes succeed.
        """
        active_remote = remote or self.remote
        prefix = remote_branch_prefix(active_remote)
        result = self._run(["symbolic-ref", "--quiet", f"{prefix}HEAD"])
        if result.ok:
            ref = result.stdout.strip()
            if ref.startswith(prefix):
                branch = ref[len(prefix) :].strip()
                if branch:
                    return branch
        for candidate in _FALLBACK_DEFAULT_BRANCHES:
            if self.ref_exists(f"{prefix}{candidate}"):
                return candidate
        raise DefaultBranchUnresolvedError(
            "Unable to determine default branch",
            recovery_hint=f"run: git remote set-head {active_remote} --auto",
        )

    def commit_timestamp(self, ref: str) -> int | None:
        """Return the committer timestamp of the commit ``ref`` points at.

        Annotated tags are peeled to their target commit, so the tag object's
        own creation time is never used. Returns ``None`` when git fails or
        prints something that is not an integer.
        """
        result = self._run(["log", "-1", "--format=%ct", ref])
        if not result.ok:
            return None
        raw = result.stdout.strip()
        if not _DIGITS.fullmatch(raw):
            return None
        return int(raw)

    def is_ancestor(self, ancestor: str, descendant: str) -> bool | None:
        """Return whether ``ancestor`` is an ancestor of ``descendant``.

        Returns ``True``/``False`` for git's explicit status codes, or ``None``
        when git fails for another reason (missing ref, invalid repo, etc.).
        """
        result = self._run(["merge-base", "--is-ancestor", ancestor, descendant])
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        return None

    def fetch_and_prune(self, remote: str | None = None) -> None:
        """Refresh remote-tracking refs and drop ones deleted upstream."""
        self._run_checked(["fetch", "--prune", remote or self.remote])

    def delete_remote_branch(self, name: str, remote: str | None = None) -> None:
        self._run_checked(["push", remote or self.remote, "--delete", name])

    def delete_tag(self, name: str) -> None:
        self._run_checked(["tag", "-d", name])

    def delete_remote_tag_ref(self, name: str, remote: str | None = None) -> None:
        self._run_checked(["push", remote or self.remote, f":refs/tags/{name}"])

