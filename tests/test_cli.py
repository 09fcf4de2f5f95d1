"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from vcsstate import cli
from vcsstate.cli import _build_parser, main
from vcsstate.errors import BinaryUnavailableError, NotFoundError
from vcsstate.inspector import RepoState
from vcsstate.models import BranchRevision

REV = "7cafcd837844e784b526369c9bce262804aebc60"


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "status"])
    assert args.verbose is True
    assert args.command == "status"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["status", "--verbose"])
    assert args.verbose is True
    assert args.command == "status"


def test_cli_status_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["status", "repo", "--vcs", "hg", "--json", "--offline"])
    assert (args.path, args.vcs, args.json, args.offline) == ("repo", "hg", True, True)


def test_cli_accepts_log_file(tmp_path: Path) -> None:
    parser = _build_parser()
    args = parser.parse_args(["--log-file", str(tmp_path / "run.log"), "status"])
    assert args.log_file == tmp_path / "run.log"
    assert parser.parse_args(["status"]).log_file is None


def test_cli_rejects_unknown_vcs() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["status", "--vcs", "svn"])


def test_cli_remote_requires_url() -> None:
    parser = _build_parser()
    args = parser.parse_args(["remote", "https://example.com/repo"])
    assert args.url == "https://example.com/repo"
    assert args.vcs is None


class _StubInspector:
    def __init__(self, vcs: object) -> None:
        self.vcs = vcs

    def inspect(self, repo: str, *, online: bool = True) -> RepoState:
        return RepoState(
            tool="git",
            path=repo,
            status="",
            branch="main",
            default_branch="main",
            default_branch_source="remote" if online else "no_remote",
            remote_url="https://example.com/repo",
            local_revision=REV,
            remote_revision=REV,
        )


class _StubRemote:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    def remote_branch_and_revision(self, url: str) -> BranchRevision:
        if self.error is not None:
            raise self.error
        return BranchRevision(branch="main", revision=REV)


@pytest.fixture
def stub_backends(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> list[str]:
    tools: list[str] = []

    def fake_new_vcs(tool: str, **_: object) -> object:
        tools.append(tool)
        return object()

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "new_vcs", fake_new_vcs)
    monkeypatch.setattr(cli, "RepositoryInspector", _StubInspector)
    return tools


def test_status_prints_summary(
    stub_backends: list[str], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / ".git").mkdir()

    main(["status", str(tmp_path)])

    out = capsys.readouterr().out
    assert stub_backends == ["git"]
    assert "working copy: clean" in out
    assert "default branch: main (remote)" in out
    assert f"remote revision: {REV}" in out


def test_status_json_output(
    stub_backends: list[str], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    main(["status", str(tmp_path), "--vcs", "hg", "--json", "--offline"])

    data = json.loads(capsys.readouterr().out)
    assert stub_backends == ["hg"]
    assert data["default_branch_source"] == "no_remote"
    assert data["clean"] is True
    assert data["up_to_date"] is True


def test_status_uses_configured_vcs(stub_backends: list[str], tmp_path: Path) -> None:
    (tmp_path / ".vcsstate.yml").write_text("vcs: bzr\n", encoding="utf-8")
    plain = tmp_path / "plain"
    plain.mkdir()

    main(["status", str(plain)])

    assert stub_backends == ["bzr"]


def test_status_without_repository_exits(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "detect_tool", lambda path: None)

    with pytest.raises(SystemExit) as excinfo:
        main(["status", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "no repository found" in capsys.readouterr().err


def test_status_reports_capability_errors(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    def missing_binary(tool: str, **_: object) -> object:
        raise BinaryUnavailableError(tool, "git binary unavailable: not found")

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "new_vcs", missing_binary)

    with pytest.raises(SystemExit) as excinfo:
        main(["status", str(tmp_path), "--vcs", "git"])

    assert excinfo.value.code == 1
    assert "git binary unavailable" in capsys.readouterr().err


def test_remote_prints_branch_and_revision(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    requested: list[str] = []

    def fake_new_remote_vcs(tool: str, **_: object) -> _StubRemote:
        requested.append(tool)
        return _StubRemote()

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "new_remote_vcs", fake_new_remote_vcs)

    main(["remote", "https://example.com/repo"])

    assert requested == ["git"]
    assert capsys.readouterr().out.strip() == f"main {REV}"


def test_remote_not_found_exits(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        cli,
        "new_remote_vcs",
        lambda tool, **_: _StubRemote(NotFoundError(RuntimeError("gone"))),
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["remote", "https://example.com/gone", "--json"])

    assert excinfo.value.code == 1
    assert "remote repository not found" in capsys.readouterr().err


def test_invalid_config_exits(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / ".vcsstate.yml").write_text("timeout: 0\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit):
        main(["status"])

    assert "timeout must be a positive" in capsys.readouterr().err
