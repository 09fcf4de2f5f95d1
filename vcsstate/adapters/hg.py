"""Mercurial adapter."""

from __future__ import annotations

from ..config import CommandSettings
from ..errors import CommandError, NoRemoteError, NotFoundError
from ..models import BranchRevision, Capability, CommandResult, StashPolicy
from ..parsers import parse_last_line, parse_revision, trim_last_newline
from ..runner import CommandRunner, raise_for_result
from .base import VCS, RepoPath

HG_REVISION_LENGTH = 40
HG_DEFAULT_BRANCH = "default"
# Name of the default path in [paths]; also what `hg identify` contacts.
HG_DEFAULT_PATH = "default"

_UNKNOWN_SHELVE = "hg: unknown command 'shelve'\n"
_HTTP_NOT_FOUND = "HTTP Error 404"


def remote_identify(result: CommandResult) -> BranchRevision:
    """Build the branch/revision pair from ``hg --debug identify -i`` output.

    The remote branch is not queried; Mercurial's ``default`` branch is assumed.
    """
    if not result.ok and _HTTP_NOT_FOUND in result.stderr:
        raise NotFoundError(
            CommandError(
                result.args,
                result.returncode,
                result.stderr,
                timed_out=result.timed_out,
            )
        )
    raise_for_result(result)
    revision = parse_revision(parse_last_line(result.stdout), HG_REVISION_LENGTH)
    return BranchRevision(branch=HG_DEFAULT_BRANCH, revision=revision)


def identify_args(source: str) -> list[str]:
    return ["hg", "--debug", "identify", "-i", "--rev", HG_DEFAULT_BRANCH, source]


class Hg(VCS):
    """Mercurial support.

    Without the shelve extension, :meth:`stash` follows ``stash_policy``:
    ``EMPTY`` reports no shelved changes, ``UNSUPPORTED`` raises.
    """

    name = "hg"
    revision_length = HG_REVISION_LENGTH
    capabilities = frozenset(
        {
            Capability.STASH,
            Capability.CONTAINS,
            Capability.REMOTE_URL,
            Capability.REMOTE_BRANCH_AND_REVISION,
        }
    )

    def __init__(
        self,
        *,
        stash_policy: StashPolicy = StashPolicy.EMPTY,
        runner: CommandRunner | None = None,
        settings: CommandSettings | None = None,
    ) -> None:
        super().__init__(runner=runner, settings=settings)
        self.stash_policy = stash_policy

    def __repr__(self) -> str:
        return f"Hg(stash_policy={self.stash_policy.value!r})"

    def status(self, repo: RepoPath) -> str:
        return self._output(["hg", "status"], cwd=repo, env=self._env())

    def branch(self, repo: RepoPath) -> str:
        return trim_last_newline(self._output(["hg", "branch"], cwd=repo, env=self._env()))

    def local_revision(self, repo: RepoPath, default_branch: str) -> str:
        out = self._output(
            ["hg", "--debug", "identify", "-i", "--rev", default_branch],
            cwd=repo,
            env=self._env(),
        )
        return parse_revision(out, self.revision_length)

    def stash(self, repo: RepoPath) -> str:
        result = self._run(["hg", "shelve", "--list"], cwd=repo, env=self._env())
        if not result.ok and result.stderr == _UNKNOWN_SHELVE:
            if self.stash_policy is StashPolicy.UNSUPPORTED:
                raise self._unsupported("stash")
            return ""
        raise_for_result(result)
        return result.stdout

    def contains(self, repo: RepoPath, revision: str, default_branch: str) -> bool:
        result = self._run(
            ["hg", "log", "--branch", default_branch, "--rev", revision],
            cwd=repo,
            env=self._env(),
        )
        # Older releases end the message with "!", newer ones don't.
        if not result.ok and result.stderr.startswith(f"abort: unknown revision '{revision}'"):
            return False
        raise_for_result(result)
        # Any log output means the revision is on that branch.
        return bool(result.stdout)

    def remote_url(self, repo: RepoPath) -> str:
        result = self._run(["hg", "paths", HG_DEFAULT_PATH], cwd=repo, env=self._env())
        if not result.ok and "not found!" in (result.stderr + result.stdout):
            raise NoRemoteError()
        raise_for_result(result)
        return trim_last_newline(result.stdout)

    def remote_branch_and_revision(self, repo: RepoPath) -> BranchRevision:
        result = self._run(identify_args(HG_DEFAULT_PATH), cwd=repo, env=self._env())
        if not result.ok and f"repository {HG_DEFAULT_PATH} not found" in result.stderr:
            raise NoRemoteError()
        return remote_identify(result)

    def no_remote_default_branch(self) -> str:
        return HG_DEFAULT_BRANCH

    def _env(self) -> dict[str, str]:
        return self._settings.locale_env()


__all__ = ["HG_DEFAULT_BRANCH", "HG_REVISION_LENGTH", "Hg", "identify_args", "remote_identify"]
