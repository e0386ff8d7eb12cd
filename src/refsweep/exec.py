"""Typed subprocess boundary shared by the git and gh adapters.

Adapters never call ``subprocess`` directly: they build a ``CommandRequest``
and hand it to a ``CommandRunner``, so tests can answer with canned results.
"""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from typing import Callable, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

ParsedT = TypeVar("ParsedT")
ModelT = TypeVar("ModelT", bound=BaseModel)

TIMEOUT_RETURNCODE = 124


@dataclass(frozen=True)
class CommandRequest:
    argv: tuple[str, ...]
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    def detail(self) -> str:
        """Return the most useful diagnostic text (stderr, else stdout)."""
        return (self.stderr or self.stdout or "").strip()


class CommandRunner(Protocol):
    """Runs one request; answers ``None`` when the executable is missing."""

    def run(self, request: CommandRequest) -> CommandResult | None: ...


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


class SubprocessCommandRunner:
    """Runner backed by ``subprocess.run`` with captured text output."""

    def run(self, request: CommandRequest) -> CommandResult | None:
        try:
            completed = subprocess.run(
                list(request.argv),
                check=False,
                capture_output=True,
                text=True,
                timeout=request.timeout_seconds,
            )
        except FileNotFoundError:
            return None
        except subprocess.TimeoutExpired as exc:
            return CommandResult(
                argv=request.argv,
                returncode=TIMEOUT_RETURNCODE,
                stdout=_text(exc.stdout),
                stderr=_text(exc.stderr),
                timed_out=True,
            )
        return CommandResult(
            argv=request.argv,
            returncode=completed.returncode,
            stdout=_text(completed.stdout),
            stderr=_text(completed.stderr),
        )


_DEFAULT_COMMAND_RUNNER: CommandRunner = SubprocessCommandRunner()


def default_runner() -> CommandRunner:
    return _DEFAULT_COMMAND_RUNNER


@dataclass(frozen=True)
class CommandSpec(Generic[ParsedT]):
    """A request paired with the parser for its successful output."""

    request: CommandRequest
    parser: Callable[[CommandResult], ParsedT]
    context: str | None = None


@dataclass(frozen=True)
class CommandExecutionError(RuntimeError):
    """The command was missing, failed, or timed out."""

    request: CommandRequest
    detail: str
    result: CommandResult | None = None

    def __str__(self) -> str:
        return self.detail


@dataclass(frozen=True)
class CommandParseError(RuntimeError):
    """The command succeeded but its output could not be parsed."""

    request: CommandRequest
    detail: str
    context: str | None = None

    def __str__(self) -> str:
        return self.detail


def run_with_runner(
    request: CommandRequest, *, runner: CommandRunner | None = None
) -> CommandResult | None:
    return (runner or _DEFAULT_COMMAND_RUNNER).run(request)


def command_failure_detail(request: CommandRequest, result: CommandResult) -> str:
    command_text = " ".join(request.argv)
    if result.timed_out:
        return f"command timed out: {command_text}"
    output = result.detail()
    if output:
        return f"command failed: {command_text}\n{output}"
    return f"command failed: {command_text}"


def run_typed(spec: CommandSpec[ParsedT], *, runner: CommandRunner | None = None) -> ParsedT:
    """Run ``spec`` and return its parsed output.

    Raises:
        CommandExecutionError: When the command is missing or exits non-zero.
        CommandParseError: When the parser rejects the output.
    """
    request = spec.request
    result = run_with_runner(request, runner=runner)
    if result is None:
        raise CommandExecutionError(
            request=request, detail=f"missing required command: {request.argv[0]}"
        )
    if not result.ok:
        raise CommandExecutionError(
            request=request, detail=command_failure_detail(request, result), result=result
        )
    try:
        return spec.parser(result)
    except CommandParseError:
        raise
    except Exception as exc:
        context = f" ({spec.context})" if spec.context else ""
        raise CommandParseError(
            request=request,
            detail=f"failed to parse command output{context}: {exc}",
            context=spec.context,
        ) from exc


def parse_lines(result: CommandResult) -> list[str]:
    """Return the non-blank stdout lines, stripped."""
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def parse_json_model_list(
    result: CommandResult, *, model_type: type[ModelT], context: str | None = None
) -> list[ModelT]:
    """Validate a JSON array on stdout into ``model_type`` rows.

    Blank output is an empty list, since ``gh`` prints nothing when no
    pull request matches.
    """
    suffix = f" ({context})" if context else ""
    raw = result.stdout.strip()
    if not raw:
        return []

    def fail(reason: str) -> CommandParseError:
        return CommandParseError(
            request=CommandRequest(argv=result.argv),
            detail=f"failed to parse command output{suffix}: {reason}",
            context=context,
        )

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise fail(str(exc)) from exc
    if not isinstance(payload, list):
        raise fail("expected a JSON list")
    try:
        return [model_type.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise fail(str(exc)) from exc
