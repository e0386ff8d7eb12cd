"""Retention policy for numeric release tags.

Tags named with exactly four digits are release tags. The newest ``keep`` of
them are always retained; older ones are deleted only when the commit they
point at is older than ``months`` calendar months.

Example:
    >>> import datetime as dt
    >>> now = dt.datetime(2026, 8, 31, tzinfo=dt.timezone.utc)
    >>> months_ago(now, 6).date()
    datetime.date(2026, 2, 28)
"""

from __future__ import annotations

import calendar
import datetime as dt
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from . import log as sweep_log
from .protocols import CommitTimestampSource

TAG_PATTERN = re.compile(r"^[0-9]{4}$")
DEFAULT_KEEP = 50
DEFAULT_MONTHS = 6


class TagBucket(str, Enum):
    KEPT_BY_COUNT = "kept-by-count"
    SKIPPED_BY_AGE = "skipped-by-age"
    TO_DELETE = "to-delete"
    INVALID_FORMAT = "invalid-format"
    UNRESOLVED = "unresolved"


def is_release_tag(name: str) -> bool:
    return TAG_PATTERN.fullmatch(name) is not None


def tag_ref(name: str) -> str:
    return f"refs/tags/{name}"


def months_ago(now: dt.datetime, months: int) -> dt.datetime:
    """Subtract calendar months from ``now``.

    The day of month is clamped to the length of the target month, so
    March 31 minus one month is February 28 (or 29). A result before year 1
    is clamped to ``datetime.min`` in the same timezone.

    Example:
        >>> months_ago(dt.datetime(2026, 6, 15), 30000)
        datetime.datetime(1, 1, 1, 0, 0)
    """
    if months < 0:
        raise ValueError("months must be non-negative")
    total = now.year * 12 + (now.month - 1) - months
    year, month_index = divmod(total, 12)
    if year < dt.MINYEAR:
        return dt.datetime.min.replace(tzinfo=now.tzinfo)
    month = month_index + 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class TagPlan:
    """Bucketed outcome of one tag retention pass."""

    keep: int
    months: int
    cutoff: dt.datetime
    valid: tuple[str, ...]
    kept_by_count: tuple[str, ...]
    skipped_by_age: tuple[str, ...]
    to_delete: tuple[str, ...]
    invalid_format: tuple[str, ...]
    unresolved: tuple[str, ...] = ()

    @property
    def candidates(self) -> tuple[str, ...]:
        """Valid tags beyond the retention count, oldest first."""
        return self.valid[: max(len(self.valid) - self.keep, 0)]

    @property
    def within_keep(self) -> bool:
        return len(self.valid) <= self.keep

    def members(self, bucket: TagBucket) -> tuple[str, ...]:
        if bucket is TagBucket.KEPT_BY_COUNT:
            return self.kept_by_count
        if bucket is TagBucket.SKIPPED_BY_AGE:
            return self.skipped_by_age
        if bucket is TagBucket.TO_DELETE:
            return self.to_delete
        if bucket is TagBucket.INVALID_FORMAT:
            return self.invalid_format
        return self.unresolved

    def bucket_of(self, tag: str) -> TagBucket | None:
        for bucket in TagBucket:
            if tag in self.members(bucket):
                return bucket
        return None


def _as_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def classify_tags(
    tags: Iterable[str],
    *,
    keep: int,
    months: int,
    now: dt.datetime,
    source: CommitTimestampSource,
) -> TagPlan:
    """Partition ``tags`` into retention buckets.

    Only deletion candidates have their commit timestamp resolved, so tags
    kept by count never touch the repository. A candidate whose timestamp
    cannot be resolved lands in ``unresolved`` and is never deleted.

    Args:
        tags: Tag names in any order.
        keep: Number of newest valid tags always retained.
        months: Minimum commit age, in calendar months, for deletion.
        now: Reference time for the age cutoff.
        source: Resolves commit timestamps for tag refs.

    Returns:
        The bucketed plan.
    """
    if keep < 0:
        raise ValueError("keep must be non-negative")
    cutoff = months_ago(_as_utc(now), months)
    cutoff_ts = cutoff.timestamp()

    valid: list[str] = []
    invalid: list[str] = []
    for name in tags:
        if is_release_tag(name):
            valid.append(name)
        else:
            invalid.append(name)
    valid.sort(key=int)

    split = max(len(valid) - keep, 0)
    candidates = valid[:split]
    kept = valid[split:]

    skipped: list[str] = []
    to_delete: list[str] = []
    unresolved: list[str] = []
    for name in candidates:
        commit_ts = source.commit_timestamp(tag_ref(name))
        if commit_ts is None:
            sweep_log.warning(f"Invalid commit timestamp for tag {name}")
            unresolved.append(name)
            continue
        if commit_ts < cutoff_ts:
            sweep_log.debug(f"[tags] delete {name} commit_ts={commit_ts} cutoff={int(cutoff_ts)}")
            to_delete.append(name)
        else:
            sweep_log.debug(f"[tags] too recent {name} commit_ts={commit_ts}")
            skipped.append(name)

    return TagPlan(
        keep=keep,
        months=months,
        cutoff=cutoff,
        valid=tuple(valid),
        kept_by_count=tuple(kept),
        skipped_by_age=tuple(skipped),
        to_delete=tuple(to_delete),
        invalid_format=tuple(invalid),
        unresolved=tuple(unresolved),
    )
