"""Tests for typed command execution helpers."""

from __future__ import annotations

import subprocess

import pytest
from pydantic import BaseModel

from refsweep import exec as exec_util
from tests.refsweep.helpers import FakeRunner, result


class _Item(BaseModel):
    number: int


def test_subprocess_command_runner_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """Runner returns typed output and forwards execution options."""
    calls: dict[str, object] = {}

    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        calls["argv"] = argv
        calls["kwargs"] = kwargs
        return subprocess.CompletedProcess(argv, 0, stdout="ok", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    request = exec_util.CommandRequest(argv=("git", "tag"), timeout_seconds=5.0)
    outcome = exec_util.SubprocessCommandRunner().run(request)

    assert outcome == exec_util.CommandResult(
        argv=("git", "tag"), returncode=0, stdout="ok", stderr=""
    )
    assert calls["argv"] == ["git", "tag"]
    run_kwargs = calls["kwargs"]
    assert isinstance(run_kwargs, dict)
    assert run_kwargs["check"] is False
    assert run_kwargs["capture_output"] is True
    assert run_kwargs["text"] is True
    assert run_kwargs["timeout"] == 5.0


def test_subprocess_command_runner_returns_none_when_missing_executable(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        del argv, kwargs
        raise FileNotFoundError

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert exec_util.SubprocessCommandRunner().run(exec_util.CommandRequest(argv=("gh",))) is None


def test_subprocess_command_runner_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Runner normalizes timeout failures into typed timeout results."""

    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(argv, 1.0, output="partial", stderr="slow")

    monkeypatch.setattr(subprocess, "run", fake_run)

    outcome = exec_util.SubprocessCommandRunner().run(
        exec_util.CommandRequest(argv=("gh", "pr", "list"), timeout_seconds=1.0)
    )

    assert outcome is not None
    assert outcome.timed_out is True
    assert outcome.returncode == 124
    assert not outcome.ok


def test_run_typed_parses_successful_output() -> None:
    runner = FakeRunner(lambda request: result(request.argv, stdout='[{"number": 7}]'))
    spec = exec_util.CommandSpec(
        request=exec_util.CommandRequest(argv=("gh", "pr", "list")),
        parser=lambda outcome: exec_util.parse_json_model_list(outcome, model_type=_Item),
    )

    assert exec_util.run_typed(spec, runner=runner) == [_Item(number=7)]


def test_run_typed_reports_missing_command() -> None:
    spec = exec_util.CommandSpec(
        request=exec_util.CommandRequest(argv=("gh", "pr", "list")),
        parser=exec_util.parse_lines,
    )

    with pytest.raises(exec_util.CommandExecutionError) as excinfo:
        exec_util.run_typed(spec, runner=FakeRunner(lambda request: None))

    assert str(excinfo.value) == "missing required command: gh"


def test_run_typed_reports_failure_with_output() -> None:
    runner = FakeRunner(lambda request: result(request.argv, returncode=2, stderr="boom"))
    spec = exec_util.CommandSpec(
        request=exec_util.CommandRequest(argv=("gh", "pr", "list")),
        parser=exec_util.parse_lines,
    )

    with pytest.raises(exec_util.CommandExecutionError) as excinfo:
        exec_util.run_typed(spec, runner=runner)

    assert str(excinfo.value) == "command failed: gh pr list\nboom"
    assert excinfo.value.result is not None


def test_run_typed_wraps_parser_errors() -> None:
    def parser(outcome: exec_util.CommandResult) -> int:
        return int(outcome.stdout)

    spec = exec_util.CommandSpec(
        request=exec_util.CommandRequest(argv=("git", "log")),
        parser=parser,
        context="git log",
    )

    runner = FakeRunner(lambda request: result(request.argv, stdout="x"))

    with pytest.raises(exec_util.CommandParseError) as excinfo:
        exec_util.run_typed(spec, runner=runner)

    assert "(git log)" in str(excinfo.value)


@pytest.mark.parametrize("stdout", ['{"number": 1}', '[{"number": "many"}]', "not json"])
def test_parse_json_model_list_rejects_bad_payloads(stdout: str) -> None:
    with pytest.raises(exec_util.CommandParseError):
        exec_util.parse_json_model_list(
            result(("gh",), stdout=stdout), model_type=_Item, context="gh pr list"
        )


def test_parse_json_model_list_treats_blank_output_as_empty() -> None:
    assert exec_util.parse_json_model_list(result(("gh",), stdout="  \n"), model_type=_Item) == []


def test_command_failure_detail_mentions_timeout() -> None:
    request = exec_util.CommandRequest(argv=("gh", "auth", "status"))
    outcome = exec_util.CommandResult(
        argv=request.argv, returncode=124, stdout="", stderr="", timed_out=True
    )

    assert exec_util.command_failure_detail(request, outcome) == "command timed out: gh auth status"
