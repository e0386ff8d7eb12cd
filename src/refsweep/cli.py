"""Typer entrypoint for the refsweep CLI."""

from enum import Enum
from types import SimpleNamespace
from typing import Annotated, Optional

import typer

from . import __version__
from . import log as sweep_log
from .commands import cleanup_branches as branches_cmd
from .commands import cleanup_tags as tags_cmd

app = typer.Typer(
    name="refsweep",
    help="Clean up obsolete release tags and merged remote branches. Dry run by default.",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


class LogLevelName(str, Enum):
    trace = "trace"
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: Annotated[
        Optional[LogLevelName],
        typer.Option(
            "--log-level",
            case_sensitive=False,
            help="Log level for diagnostics (also REFSWEEP_LOG_LEVEL).",
        ),
    ] = None,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable colored output (also NO_COLOR)."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    if log_level is not None:
        sweep_log.set_level(log_level.value)
    if no_color:
        sweep_log.set_no_color(True)


@app.command(
    "tags",
    epilog=(
        "Examples: refsweep tags | refsweep tags --keep 50 --months 6 | "
        "refsweep tags --keep 50 --months 6 --apply"
    ),
)
def tags_command(
    keep: Annotated[
        Optional[int],
        typer.Option(
            "--keep",
            min=0,
            help="Number of latest tags to keep (default: 50, env REFSWEEP_KEEP).",
        ),
    ] = None,
    months: Annotated[
        Optional[int],
        typer.Option(
            "--months",
            min=0,
            help=(
                "Do not delete tags whose commit is newer than this many months "
                "(default: 6, env REFSWEEP_MONTHS)."
            ),
        ),
    ] = None,
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Perform deletion (default is dry run)."),
    ] = False,
) -> None:
    """Delete old four-digit release tags beyond the retention count."""
    tags_cmd(SimpleNamespace(keep=keep, months=months, apply=apply))


@app.command(
    "branches",
    epilog=(
        "Examples: refsweep branches | refsweep branches --branch 777-feature | "
        "refsweep branches --branch old-feature --apply"
    ),
)
def branches_command(
    branch: Annotated[
        Optional[str],
        typer.Option("--branch", help="Process only a specific remote branch."),
    ] = None,
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Delete merged branches (default is dry run)."),
    ] = False,
) -> None:
    """Delete remote branches already merged into the default branch."""
    branches_cmd(SimpleNamespace(branch=branch, apply=apply))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
