"""Shared helpers for cleanup commands."""

from __future__ import annotations

from .. import config
from .. import log as sweep_log
from ..errors import SweepFailure, describe_failure
from ..execute import DeletionReport
from ..io import die, say
from ..models import SweepConfig


def load_sweep_config() -> SweepConfig:
    try:
        return config.load_config()
    except SweepFailure as exc:
        die(describe_failure(exc))


def finish_deletions(report: DeletionReport, *, label: str) -> None:
    """Print the completion marker, exiting non-zero when any deletion failed."""
    total = len(report.deleted) + len(report.failed)
    sweep_log.debug(f"[apply] {label} deleted={len(report.deleted)} failed={len(report.failed)}")
    if report.failed:
        for name, _detail in report.failed:
            say(f"Failed: {name}")
        die(f"{len(report.failed)} of {total} {label} deletions failed")
    say("Done")
