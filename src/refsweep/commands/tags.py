"""Implementation for the ``refsweep tags`` command."""

from __future__ import annotations

import datetime as dt

from .. import cli_defaults
from .. import log as sweep_log
from ..errors import SweepFailure, describe_failure
from ..execute import delete_each
from ..git import GitRefSource
from ..io import die, say
from ..models import SweepConfig
from ..protocols import RefSource
from ..report import render_tag_plan
from ..tags import classify_tags
from .common import finish_deletions, load_sweep_config


def _delete_release_tag(source: RefSource, tag: str) -> None:
    source.delete_tag(tag)
    source.delete_remote_tag_ref(tag)


def cleanup_tags(
    args: object,
    *,
    source: RefSource | None = None,
    sweep_config: SweepConfig | None = None,
    now: dt.datetime | None = None,
) -> None:
    """Report, and with ``--apply`` delete, release tags past retention.

    Args:
        args: CLI argument object with ``keep``, ``months``, and ``apply``
            fields.
        source: Ref source override; defaults to git in the working directory.
        sweep_config: Project config override; defaults to ``.refsweep.json``.
        now: Reference time for the age cutoff; defaults to the current time.

    Returns:
        None. Exits non-zero on fatal errors or failed deletions.
    """
    sweep_config = sweep_config or load_sweep_config()
    keep = cli_defaults.resolve_keep_default(getattr(args, "keep", None), sweep_config.tags.keep)
    months = cli_defaults.resolve_months_default(
        getattr(args, "months", None), sweep_config.tags.months
    )
    for resolved in (keep, months):
        if resolved.source == "env":
            sweep_log.debug(cli_defaults.describe_translated_default(resolved))
    apply = bool(getattr(args, "apply", False))
    sweep_log.debug(
        f"[tags] start keep={keep.value} ({keep.source}) "
        f"months={months.value} ({months.source}) apply={apply}"
    )

    if source is None:
        source = GitRefSource(remote=sweep_config.remote, git_path=sweep_config.git.path)
    reference_time = now or dt.datetime.now(tz=dt.timezone.utc)
    try:
        plan = classify_tags(
            source.list_tags(),
            keep=keep.value,
            months=months.value,
            now=reference_time,
            source=source,
        )
    except SweepFailure as exc:
        die(describe_failure(exc))

    render_tag_plan(plan)
    if not plan.to_delete:
        return
    if not apply:
        say("Dry run mode. Use --apply to delete tags")
        return

    report = delete_each(
        plan.to_delete, lambda tag: _delete_release_tag(source, tag), label="tag"
    )
    finish_deletions(report, label="tag")
