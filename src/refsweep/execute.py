"""Apply-mode deletion loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from . import log as sweep_log
from .errors import SweepFailure
from .io import say


@dataclass
class DeletionReport:
    deleted: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def delete_each(
    names: Iterable[str],
    delete: Callable[[str], None],
    *,
    label: str,
) -> DeletionReport:
    """Run ``delete`` for each name, one at a time, without retries.

    A failure is recorded and the loop moves on to the next name.
    """
    report = DeletionReport()
    for name in names:
        try:
            delete(name)
        except SweepFailure as exc:
            sweep_log.error(f"failed to delete {label} {name}: {exc}")
            report.failed.append((name, str(exc)))
            continue
        say(f"Deleted {label} {name}")
        report.deleted.append(name)
    return report
