"""Adapters that query a remote repository by URL, without a working copy."""

from __future__ import annotations

from .adapters.base import RemoteVCS
from .adapters.git import ls_remote_args, raise_for_remote_result
from .adapters.hg import identify_args, remote_identify
from .config import CommandSettings
from .errors import BranchNotFoundError
from .logging import get_logger
from .models import BranchRevision
from .parsers import guess_branch, parse_ls_remote, parse_symref_ls_remote
from .runner import CommandRunner
from .versions import GIT_PROTOCOLS, GitProtocol

logger = get_logger("remote")


class RemoteGit(RemoteVCS):
    """Remote-only git queries via ``git ls-remote``."""

    name = "git"

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
        return f"RemoteGit(protocol={self.protocol.name!r})"

    def remote_branch_and_revision(self, remote_url: str) -> BranchRevision:
        result = self._run(
            ls_remote_args(self.protocol, remote_url), env=self._settings.remote_env()
        )
        raise_for_remote_result(result, self.protocol, named_remote=False)

        if not self.protocol.symref:
            return parse_ls_remote(result.stdout)
        try:
            return parse_symref_ls_remote(result.stdout)
        except BranchNotFoundError as exc:
            logger.debug("%s did not report a HEAD symref; guessing branch", remote_url)
            branch = guess_branch(result.stdout, exc.revision)
            return BranchRevision(branch=branch, revision=exc.revision)


class RemoteHg(RemoteVCS):
    """Remote-only Mercurial queries via ``hg identify``."""

    name = "hg"

    def __repr__(self) -> str:
        return "RemoteHg()"

    def remote_branch_and_revision(self, remote_url: str) -> BranchRevision:
        result = self._run(identify_args(remote_url), env=self._settings.locale_env())
        return remote_identify(result)


__all__ = ["RemoteGit", "RemoteHg"]
