"""Base classes for version control adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import FrozenSet, Iterable, Mapping

from ..config import CommandSettings
from ..errors import UnsupportedOperationError
from ..models import BranchRevision, Capability, CommandResult
from ..runner import CommandRunner

RepoPath = Path | str


class _Adapter:
    """Runner and settings plumbing shared by local and remote adapters."""

    name: str = ""

    def __init__(
        self,
        *,
        runner: CommandRunner | None = None,
        settings: CommandSettings | None = None,
    ) -> None:
        self._settings = settings or CommandSettings()
        self._runner = runner or CommandRunner(timeout=self._settings.timeout)

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: RepoPath | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        return self._runner.run(args, cwd=cwd, env=env)

    def _output(
        self,
        args: Iterable[str],
        *,
        cwd: RepoPath | None = None,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._runner.output(args, cwd=cwd, env=env)

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(self.name, operation)


class VCS(_Adapter, ABC):
    """Queries the state of a local working copy rooted at a directory.

    Adapters hold no per-repository state; one instance can serve any number
    of directories, including concurrently. Optional operations raise
    :class:`UnsupportedOperationError` unless listed in :attr:`capabilities`.
    """

    capabilities: FrozenSet[Capability] = frozenset()

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @abstractmethod
    def status(self, repo: RepoPath) -> str:
        """Return the working directory status; empty when there is nothing outstanding."""

    @abstractmethod
    def branch(self, repo: RepoPath) -> str:
        """Return the name of the locally checked out branch."""

    @abstractmethod
    def local_revision(self, repo: RepoPath, default_branch: str) -> str:
        """Return the current local revision of ``default_branch``."""

    def stash(self, repo: RepoPath) -> str:
        """Return a non-empty listing if the repository has stashed changes."""
        raise self._unsupported("stash")

    def contains(self, repo: RepoPath, revision: str, default_branch: str) -> bool:
        """Report whether the local ``default_branch`` contains ``revision``."""
        raise self._unsupported("contains")

    def remote_contains(self, repo: RepoPath, revision: str, default_branch: str) -> bool:
        """Report whether the remote ``default_branch`` contains ``revision``."""
        raise self._unsupported("remote_contains")

    def remote_url(self, repo: RepoPath) -> str:
        """Return the primary remote URL, or raise :class:`NoRemoteError`."""
        raise self._unsupported("remote_url")

    def remote_branch_and_revision(self, repo: RepoPath) -> BranchRevision:
        """Return the remote default branch and its latest revision.

        Needs the network. Raises :class:`NoRemoteError` when there is no
        remote and :class:`NotFoundError` when the remote repository is gone;
        in both cases :meth:`no_remote_default_branch` is the fallback.
        """
        raise self._unsupported("remote_branch_and_revision")

    def cached_remote_default_branch(self) -> str:
        """Best-effort offline guess of the remote default branch."""
        raise self._unsupported("cached_remote_default_branch")

    @abstractmethod
    def no_remote_default_branch(self) -> str:
        """Default branch name to use only when there is no remote to ask."""


class RemoteVCS(_Adapter, ABC):
    """Queries a remote repository by URL, without a local working copy."""

    @abstractmethod
    def remote_branch_and_revision(self, remote_url: str) -> BranchRevision:
        """Return the remote default branch and its latest revision."""


__all__ = ["RemoteVCS", "RepoPath", "VCS"]
