from __future__ import annotations

from pathlib import Path

import pytest

from refsweep.errors import InvalidConfigError
from refsweep.issues import IssueIndex, IssueStatus, task_id_for_branch


def _write(path: Path, text: str, encoding: str = "utf-8") -> Path:
    path.write_text(text, encoding=encoding)
    return path


@pytest.mark.parametrize(
    ("branch", "expected"),
    [
        ("12345-fix-login", 12345),
        ("123456-long", 12345),
        ("00042-cleanup", 42),
        ("1234-short", None),
        ("feature/12345", None),
        ("hotfix", None),
    ],
)
def test_task_id_for_branch(branch: str, expected: int | None) -> None:
    assert task_id_for_branch(branch) == expected


def test_load_returns_none_when_file_missing(tmp_path: Path) -> None:
    assert IssueIndex.load(tmp_path / "issues.csv") is None


def test_load_parses_statuses_and_skips_header(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "issues.csv",
        "ID,Subject,Status\n12345,Fix login,Closed\n23456,\"Refactor, part 2\",In Progress\n",
    )

    index = IssueIndex.load(path)

    assert index is not None
    assert index.source == path
    assert len(index) == 2
    assert index.status_for(12345) == "closed"
    assert index.status_for(23456) == "in progress"


def test_load_strips_utf8_bom(tmp_path: Path) -> None:
    path = _write(tmp_path / "issues.csv", "ID,Subject,Status\n12345,x,Closed\n", "utf-8-sig")

    index = IssueIndex.load(path)

    assert index is not None
    assert index.status_for(12345) == "closed"


def test_header_only_file_yields_empty_index(tmp_path: Path) -> None:
    path = _write(tmp_path / "issues.csv", "ID,Subject,Status\n")

    index = IssueIndex.load(path)

    assert index is not None
    assert len(index) == 0


def test_from_rows_skips_short_and_non_numeric_rows() -> None:
    index = IssueIndex.from_rows(
        [
            ["12345", "ok", "Open"],
            ["23456", "missing status"],
            ["abc", "bad id", "Closed"],
            ["", "blank", "Closed"],
        ]
    )

    assert index.statuses == {12345: "open"}


def test_duplicate_ids_keep_last_occurrence_and_warn(
    capsys: pytest.CaptureFixture[str],
) -> None:
    index = IssueIndex.from_rows([["12345", "a", "Open"], ["12345", "b", "Closed"]])

    assert index.status_for(12345) == "closed"
    assert index.duplicates == [12345]
    assert "duplicate issue id 12345" in capsys.readouterr().err


def test_undecodable_file_raises_invalid_config(tmp_path: Path) -> None:
    path = tmp_path / "issues.csv"
    path.write_bytes(b"ID,Subject,Status\n12345,\xff\xfe,Closed\n")

    with pytest.raises(InvalidConfigError):
        IssueIndex.load(path)


@pytest.mark.parametrize(
    ("branch", "status"),
    [
        ("12345-a", IssueStatus.CLOSED),
        ("23456-b", IssueStatus.OPEN),
        ("99999-c", IssueStatus.NOT_FOUND),
        ("no-task", IssueStatus.NO_TASK),
    ],
)
def test_resolve_branch(branch: str, status: IssueStatus) -> None:
    index = IssueIndex.from_rows([["12345", "a", " Closed "], ["23456", "b", "Review"]])

    resolution = index.resolve_branch(branch)

    assert resolution.status is status
    assert resolution.blocks_deletion is (status is IssueStatus.OPEN)


def test_describe_includes_issue_id_and_raw_status() -> None:
    index = IssueIndex.from_rows([["23456", "b", "In Progress"]])

    assert index.resolve_branch("23456-b").describe() == "#23456 in progress"
    assert index.resolve_branch("99999-b").describe() == "#99999 not_found"
    assert index.resolve_branch("plain").describe() == "no_task"
