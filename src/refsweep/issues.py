"""Issue status lookup over an exported tracker CSV.

The export is a CSV with a header row; column 1 holds the numeric issue ID and
column 3 its status. Branches reference issues through a five-digit prefix
(``12345-fix-login``).

Example:
    >>> index = IssueIndex.from_rows([["12345", "Fix login", "Closed"]])
    >>> index.resolve_branch("12345-fix-login").status
    <IssueStatus.CLOSED: 'closed'>
    >>> index.resolve_branch("hotfix").status
    <IssueStatus.NO_TASK: 'no_task'>
"""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

from . import log as sweep_log
from .errors import InvalidConfigError

DEFAULT_ISSUES_FILE = "issues.csv"
CLOSED_STATUS = "closed"
TASK_PREFIX_PATTERN = re.compile(r"^([0-9]{5})")
_ID_COLUMN = 0
_STATUS_COLUMN = 2
_DIGITS = re.compile(r"[0-9]+")


class IssueStatus(str, Enum):
    """Outcome of resolving a branch against the issue index."""

    NO_SOURCE = "no_source"
    NO_TASK = "no_task"
    NOT_FOUND = "not_found"
    CLOSED = "closed"
    OPEN = "open"


@dataclass(frozen=True)
class IssueResolution:
    """Issue state derived for one branch.

    ``raw_status`` keeps the lowercased tracker value, so ``OPEN`` covers any
    status other than ``closed`` (``in progress``, ``review``...).
    """

    status: IssueStatus
    issue_id: int | None = None
    raw_status: str | None = None

    @property
    def blocks_deletion(self) -> bool:
        return self.status is IssueStatus.OPEN

    def describe(self) -> str:
        if self.issue_id is None:
            return self.status.value
        if self.raw_status is None:
            return f"#{self.issue_id} {self.status.value}"
        return f"#{self.issue_id} {self.raw_status}"


NO_SOURCE = IssueResolution(IssueStatus.NO_SOURCE)


def task_id_for_branch(branch: str) -> int | None:
    """Return the numeric task ID encoded as a branch-name prefix.

    Example:
        >>> task_id_for_branch("00042-cleanup")
        42
        >>> task_id_for_branch("feature/12345") is None
        True
    """
    match = TASK_PREFIX_PATTERN.match(branch)
    if not match:
        return None
    return int(match.group(1))


@dataclass
class IssueIndex:
    """Mapping of issue ID to lowercased status.

    Duplicate IDs resolve to the last row seen; each duplicate is recorded in
    ``duplicates`` and logged as a warning.
    """

    statuses: dict[int, str] = field(default_factory=dict)
    duplicates: list[int] = field(default_factory=list)
    source: Path | None = None

    @classmethod
    def from_rows(
        cls, rows: Iterable[Sequence[str]], *, source: Path | None = None
    ) -> IssueIndex:
        """Build an index from data rows (header already removed)."""
        index = cls(source=source)
        for line_number, row in enumerate(rows, start=2):
            if len(row) <= _STATUS_COLUMN:
                sweep_log.debug(f"[issues] skip short row line={line_number}")
                continue
            raw_id = row[_ID_COLUMN].strip()
            if not _DIGITS.fullmatch(raw_id):
                sweep_log.debug(f"[issues] skip non-numeric id line={line_number} id={raw_id!r}")
                continue
            issue_id = int(raw_id)
            status = row[_STATUS_COLUMN].strip().lower()
            if issue_id in index.statuses:
                index.duplicates.append(issue_id)
                sweep_log.warning(
                    f"[issues] duplicate issue id {issue_id} at line {line_number}; "
                    "using the last occurrence"
                )
            index.statuses[issue_id] = status
        return index

    @classmethod
    def load(cls, path: Path) -> IssueIndex | None:
        """Parse ``path`` once; return ``None`` when the file does not exist."""
        if not path.is_file():
            return None
        try:
            with path.open("r", encoding="utf-8-sig", newline="") as handle:
                reader = csv.reader(handle)
                next(reader, None)
                index = cls.from_rows(reader, source=path)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise InvalidConfigError(f"unable to read issues file {path}: {exc}") from exc
        sweep_log.debug(f"[issues] loaded {len(index.statuses)} issues from {path}")
        return index

    def __len__(self) -> int:
        return len(self.statuses)

    def status_for(self, issue_id: int) -> str | None:
        return self.statuses.get(issue_id)

    def resolve_branch(self, branch: str) -> IssueResolution:
        issue_id = task_id_for_branch(branch)
        if issue_id is None:
            return IssueResolution(IssueStatus.NO_TASK)
        raw_status = self.status_for(issue_id)
        if raw_status is None:
            return IssueResolution(IssueStatus.NOT_FOUND, issue_id=issue_id)
        if raw_status == CLOSED_STATUS:
            return IssueResolution(IssueStatus.CLOSED, issue_id=issue_id, raw_status=raw_status)
        return IssueResolution(IssueStatus.OPEN, issue_id=issue_id, raw_status=raw_status)
