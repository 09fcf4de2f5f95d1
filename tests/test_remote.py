"""Tests for the URL-only remote adapters."""

from __future__ import annotations

import pytest

from tests._fixtures.fake_runner import FakeRunner
from vcsstate.errors import CommandError, MalformedOutputError, NotFoundError
from vcsstate.models import BranchRevision
from vcsstate.remote import RemoteGit, RemoteHg
from vcsstate.versions import GIT_PROTOCOLS

GIT28, GIT17 = GIT_PROTOCOLS
URL = "https://github.com/example/project"
REV = "7cafcd837844e784b526369c9bce262804aebc60"


def test_remote_git_reads_symref(fake_runner: FakeRunner) -> None:
    fake_runner.respond(
        ["git", "ls-remote", "--symref", URL, "HEAD", "refs/heads/*"],
        f"ref: refs/heads/main\tHEAD\n{REV}\tHEAD\n{REV}\trefs/heads/main\n",
    )

    result = RemoteGit(GIT28, runner=fake_runner).remote_branch_and_revision(URL)

    assert result == BranchRevision(branch="main", revision=REV)
    call = fake_runner.calls[0]
    assert call.cwd is None
    assert call.env is not None and call.env["GIT_ASKPASS"] == "true"


def test_remote_git_guesses_branch_without_symref(fake_runner: FakeRunner) -> None:
    # Some hosts (googlesource.com among them) omit the symref line.
    fake_runner.respond(
        ["git", "ls-remote", "--symref", URL, "HEAD", "refs/heads/*"],
        f"{REV}\tHEAD\n{REV}\trefs/heads/master\n",
    )

    branch, revision = RemoteGit(GIT28, runner=fake_runner).remote_branch_and_revision(URL)

    assert (branch, revision) == ("master", REV)
    assert len(fake_runner.calls) == 1


def test_remote_git_guess_fails_without_matching_branch(fake_runner: FakeRunner) -> None:
    fake_runner.respond(
        ["git", "ls-remote", "--symref", URL, "HEAD", "refs/heads/*"],
        f"{REV}\tHEAD\n",
    )

    with pytest.raises(MalformedOutputError):
        RemoteGit(GIT28, runner=fake_runner).remote_branch_and_revision(URL)


def test_remote_git17_parses_plain_listing(fake_runner: FakeRunner) -> None:
    fake_runner.respond(
        ["git", "ls-remote", URL, "HEAD", "refs/heads/*"],
        f"{REV}\tHEAD\n{REV}\trefs/heads/develop\n{REV}\trefs/heads/master\n",
    )

    result = RemoteGit(GIT17, runner=fake_runner).remote_branch_and_revision(URL)

    assert result == BranchRevision(branch="master", revision=REV)


def test_remote_git_not_found(fake_runner: FakeRunner) -> None:
    fake_runner.respond(
        ["git", "ls-remote", "--symref", URL, "HEAD", "refs/heads/*"],
        stderr=f"remote: Repository not found.\nfatal: repository '{URL}/' not found\n",
        returncode=128,
    )

    with pytest.raises(NotFoundError):
        RemoteGit(GIT28, runner=fake_runner).remote_branch_and_revision(URL)


def test_remote_git_other_failures_keep_stderr(fake_runner: FakeRunner) -> None:
    fake_runner.respond(
        ["git", "ls-remote", "--symref", URL, "HEAD", "refs/heads/*"],
        stderr="fatal: unable to access: Could not resolve host: github.com\n",
        returncode=128,
    )

    with pytest.raises(CommandError, match="Could not resolve host"):
        RemoteGit(GIT28, runner=fake_runner).remote_branch_and_revision(URL)


def test_remote_hg_identifies_default_branch(fake_runner: FakeRunner) -> None:
    hg_url = "https://hg.example.com/project"
    fake_runner.respond(
        ["hg", "--debug", "identify", "-i", "--rev", "default", hg_url],
        f"using {hg_url}\nsending capabilities command\n{REV}\n",
    )

    result = RemoteHg(runner=fake_runner).remote_branch_and_revision(hg_url)

    assert result == BranchRevision(branch="default", revision=REV)
    assert fake_runner.calls[0].env == {"LANG": "en_US.UTF-8", "LC_ALL": "en_US.UTF-8"}


def test_remote_hg_http_not_found(fake_runner: FakeRunner) -> None:
    hg_url = "https://hg.example.com/missing"
    fake_runner.respond(
        ["hg", "--debug", "identify", "-i", "--rev", "default", hg_url],
        stderr="abort: HTTP Error 404: Not Found\n",
        returncode=255,
    )

    with pytest.raises(NotFoundError):
        RemoteHg(runner=fake_runner).remote_branch_and_revision(hg_url)
