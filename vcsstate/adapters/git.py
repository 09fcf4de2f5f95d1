"""Git adapter covering git 1.7+ and 2.8+ binaries."""

from __future__ import annotations

from typing import List

from ..config import CommandSettings
from ..errors import (
    BranchNotFoundError,
    CommandError,
    NoOriginRemoteError,
    NoRemoteError,
    NotFoundError,
)
from ..logging import get_logger
from ..models import BranchRevision, Capability, CommandResult
from ..parsers import (
    ORIGIN,
    parse_branch_listing,
    parse_head_branch,
    parse_ls_remote,
    parse_remote_fetch_url,
    parse_revision,
    parse_symref_ls_remote,
    trim_last_newline,
)
from ..runner import CommandRunner, raise_for_result
from ..versions import GIT_PROTOCOLS, GitProtocol
from .base import VCS, RepoPath

logger = get_logger("adapters.git")

GIT_REVISION_LENGTH = 40

_NO_ORIGIN_PREFIX = f"fatal: '{ORIGIN}' does not appear to be a git repository\n"
_NO_SUCH_REMOTE = f"No such remote '{ORIGIN}'"
_REPOSITORY_NOT_FOUND_PREFIX = "remote: Repository not found.\n"
# git < 2.20 says "no such commit", later releases "malformed object name".
_UNKNOWN_COMMIT_PREFIXES = ("error: no such commit {}\n", "error: malformed object name {}\n")


def ls_remote_args(protocol: GitProtocol, remote: str) -> List[str]:
    """Arguments that list HEAD and every branch of ``remote`` in one round trip."""
    args = ["git", "ls-remote"]
    if protocol.symref:
        args.append("--symref")
    args.extend([remote, "HEAD", "refs/heads/*"])
    return args


def raise_for_remote_result(
    result: CommandResult, protocol: GitProtocol, *, named_remote: bool
) -> None:
    """Translate a failed remote query into the matching vcsstate error."""
    if result.ok:
        return
    if named_remote and result.stderr.startswith(_NO_ORIGIN_PREFIX):
        raise NoRemoteError()
    if protocol.detects_not_found and result.stderr.startswith(_REPOSITORY_NOT_FOUND_PREFIX):
        raise NotFoundError(
            CommandError(result.args, result.returncode, result.stderr, timed_out=result.timed_out)
        )
    raise_for_result(result)


class Git(VCS):
    """Git support; command lines follow the selected :class:`GitProtocol`."""

    name = "git"
    revision_length = GIT_REVISION_LENGTH
    capabilities = frozenset(
        {
            Capability.STASH,
            Capability.CONTAINS,
            Capability.REMOTE_CONTAINS,
            Capability.REMOTE_URL,
            Capability.REMOTE_BRANCH_AND_REVISION,
        }
    )

    def __init__(
        self,
        protocol: GitProtocol = GIT_PROTOCOLS[0],
        *,
        runner: CommandRunner | None = None,
        settings: CommandSettings | None = None,
    ) -> None:
        super().__init__(runner=runner, settings=settings)
        self.protocol = protocol

    def __repr__(self) -> str:
        return f"Git(protocol={self.protocol.name!r})"

    def status(self, repo: RepoPath) -> str:
        return self._output(["git", "status", "--porcelain"], cwd=repo, env=self._local_env())

    def branch(self, repo: RepoPath) -> str:
        # rev-parse is porcelain and its output may change; there's no plumbing alternative.
        out = self._output(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=repo, env=self._local_env()
        )
        return trim_last_newline(out)

    def local_revision(self, repo: RepoPath, default_branch: str) -> str:
        out = self._output(["git", "rev-parse", default_branch], cwd=repo, env=self._local_env())
        return parse_revision(out, self.revision_length)

    def stash(self, repo: RepoPath) -> str:
        return self._output(["git", "stash", "list"], cwd=repo, env=self._local_env())

    def contains(self, repo: RepoPath, revision: str, default_branch: str) -> bool:
        return self._branch_contains(
            repo, revision, default_branch, ["git", "branch", "--list", "--contains"]
        )

    def remote_contains(self, repo: RepoPath, revision: str, default_branch: str) -> bool:
        return self._branch_contains(
            repo,
            revision,
            f"{ORIGIN}/{default_branch}",
            ["git", "branch", "--remotes", "--list", "--contains"],
        )

    def remote_url(self, repo: RepoPath) -> str:
        # Only origin counts, whatever remote the checked out branch tracks.
        if self.protocol.remote_get_url:
            result = self._run(
                ["git", "remote", "get-url", ORIGIN], cwd=repo, env=self._local_env()
            )
            if not result.ok and _NO_SUCH_REMOTE in result.stderr:
                raise NoRemoteError()
            raise_for_result(result)
            return trim_last_newline(result.stdout)

        out = self._output(["git", "remote", "-v"], cwd=repo, env=self._local_env())
        try:
            return parse_remote_fetch_url(out)
        except NoOriginRemoteError as exc:
            raise NoRemoteError() from exc

    def remote_branch_and_revision(self, repo: RepoPath) -> BranchRevision:
        result = self._run(
            ls_remote_args(self.protocol, ORIGIN), cwd=repo, env=self._settings.remote_env()
        )
        raise_for_remote_result(result, self.protocol, named_remote=True)

        if self.protocol.symref:
            try:
                return parse_symref_ls_remote(result.stdout)
            except BranchNotFoundError as exc:
                # Some servers ignore --symref.
                logger.debug("ls-remote reply had no HEAD symref; asking remote show")
                revision = exc.revision
        else:
            revision = parse_ls_remote(result.stdout).revision

        return BranchRevision(branch=self._remote_head_branch(repo), revision=revision)

    def no_remote_default_branch(self) -> str:
        return "master"

    # ------------------------------------------------------------------
    # Internals

    def _local_env(self) -> dict[str, str]:
        return self._settings.locale_env()

    def _remote_head_branch(self, repo: RepoPath) -> str:
        result = self._run(
            ["git", "remote", "show", ORIGIN], cwd=repo, env=self._settings.remote_env()
        )
        raise_for_remote_result(result, self.protocol, named_remote=True)
        return parse_head_branch(result.stdout)

    def _branch_contains(
        self, repo: RepoPath, revision: str, branch: str, command: List[str]
    ) -> bool:
        result = self._run([*command, revision, branch], cwd=repo, env=self._local_env())
        if not result.ok and any(
            result.stderr.startswith(prefix.format(revision))
            for prefix in _UNKNOWN_COMMIT_PREFIXES
        ):
            return False
        raise_for_result(result)
        return parse_branch_listing(result.stdout, branch)


__all__ = ["GIT_REVISION_LENGTH", "Git", "ls_remote_args", "raise_for_remote_result"]
