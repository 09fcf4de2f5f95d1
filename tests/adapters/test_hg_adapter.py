"""Tests for the Mercurial adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.fake_runner import FakeRunner
from vcsstate.adapters.hg import Hg
from vcsstate.errors import (
    CommandError,
    MalformedOutputError,
    NoRemoteError,
    NotFoundError,
    UnsupportedOperationError,
)
from vcsstate.models import BranchRevision, Capability, StashPolicy

REV = "a3f1c9d0e8b7a6f5e4d3c2b1a0f9e8d7c6b5a4f3"
IDENTIFY = ["hg", "--debug", "identify", "-i", "--rev", "default", "default"]


def test_status_and_branch(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(["hg", "status"], "M setup.py\n")
    fake_runner.respond(["hg", "branch"], "stable\n")
    hg = Hg(runner=fake_runner)

    assert hg.status(tmp_path) == "M setup.py\n"
    assert hg.branch(tmp_path) == "stable"
    assert all(call.cwd == tmp_path for call in fake_runner.calls)


def test_local_revision(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(["hg", "--debug", "identify", "-i", "--rev", "default"], f"{REV}+\n")

    assert Hg(runner=fake_runner).local_revision(tmp_path, "default") == REV


def test_local_revision_rejects_short_output(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(["hg", "--debug", "identify", "-i", "--rev", "default"], "a3f1c9d0e8b7\n")

    with pytest.raises(MalformedOutputError):
        Hg(runner=fake_runner).local_revision(tmp_path, "default")


def test_stash_lists_shelves(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(["hg", "shelve", "--list"], "default  (2m ago)  changes to: wip\n")

    assert Hg(runner=fake_runner).stash(tmp_path).startswith("default")


def test_stash_without_shelve_extension_is_empty(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(
        ["hg", "shelve", "--list"], stderr="hg: unknown command 'shelve'\n", returncode=255
    )

    assert Hg(runner=fake_runner).stash(tmp_path) == ""


def test_stash_without_shelve_extension_can_be_unsupported(
    fake_runner: FakeRunner, tmp_path: Path
) -> None:
    fake_runner.respond(
        ["hg", "shelve", "--list"], stderr="hg: unknown command 'shelve'\n", returncode=255
    )
    hg = Hg(stash_policy=StashPolicy.UNSUPPORTED, runner=fake_runner)

    with pytest.raises(UnsupportedOperationError, match="stash is not implemented for hg"):
        hg.stash(tmp_path)


def test_stash_other_errors_propagate(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(
        ["hg", "shelve", "--list"], stderr="abort: no repository found\n", returncode=255
    )

    with pytest.raises(CommandError):
        Hg(runner=fake_runner).stash(tmp_path)


@pytest.mark.parametrize("stdout, expected", [("changeset: 4:a3f1c9d0e8b7\n", True), ("", False)])
def test_contains_uses_log_output(
    fake_runner: FakeRunner, tmp_path: Path, stdout: str, expected: bool
) -> None:
    fake_runner.respond(["hg", "log", "--branch", "default", "--rev", REV], stdout)

    assert Hg(runner=fake_runner).contains(tmp_path, REV, "default") is expected


@pytest.mark.parametrize(
    "stderr", [f"abort: unknown revision '{REV}'!\n", f"abort: unknown revision '{REV}'\n"]
)
def test_contains_unknown_revision_is_false(
    fake_runner: FakeRunner, tmp_path: Path, stderr: str
) -> None:
    fake_runner.respond(
        ["hg", "log", "--branch", "default", "--rev", REV], stderr=stderr, returncode=255
    )

    assert Hg(runner=fake_runner).contains(tmp_path, REV, "default") is False


def test_remote_url(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(["hg", "paths", "default"], "https://hg.example.com/repo\n")

    assert Hg(runner=fake_runner).remote_url(tmp_path) == "https://hg.example.com/repo"


def test_remote_url_without_default_path(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.respond(["hg", "paths", "default"], stderr="not found!\n", returncode=1)

    with pytest.raises(NoRemoteError):
        Hg(runner=fake_runner).remote_url(tmp_path)


def test_remote_branch_and_revision_reads_last_line(
    fake_runner: FakeRunner, tmp_path: Path
) -> None:
    fake_runner.respond(
        IDENTIFY, f"using https://hg.example.com/repo\nsending capabilities command\n{REV}\n"
    )

    result = Hg(runner=fake_runner).remote_branch_and_revision(tmp_path)

    assert result == BranchRevision(branch="default", revision=REV)


def test_remote_branch_and_revision_without_default_path(
    fake_runner: FakeRunner, tmp_path: Path
) -> None:
    fake_runner.respond(
        IDENTIFY, stderr="abort: repository default not found!\n", returncode=255
    )

    with pytest.raises(NoRemoteError):
        Hg(runner=fake_runner).remote_branch_and_revision(tmp_path)


def test_remote_branch_and_revision_http_not_found(
    fake_runner: FakeRunner, tmp_path: Path
) -> None:
    fake_runner.respond(IDENTIFY, stderr="abort: HTTP Error 404: Not Found\n", returncode=255)

    with pytest.raises(NotFoundError):
        Hg(runner=fake_runner).remote_branch_and_revision(tmp_path)


def test_capabilities_and_defaults() -> None:
    hg = Hg()

    assert hg.supports(Capability.STASH)
    assert not hg.supports(Capability.REMOTE_CONTAINS)
    assert hg.no_remote_default_branch() == "default"
    with pytest.raises(UnsupportedOperationError):
        hg.remote_contains(".", REV, "default")
    with pytest.raises(UnsupportedOperationError):
        hg.cached_remote_default_branch()
