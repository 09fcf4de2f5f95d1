"""Aggregate repository state from the individual adapter queries."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .adapters import VCS
from .errors import CommandError, NoRemoteError, NotFoundError, UnsupportedOperationError, VCSError
from .logging import get_logger
from .models import Capability

logger = get_logger("inspector")

SOURCE_REMOTE = "remote"
SOURCE_CACHED = "cached"
SOURCE_NO_REMOTE = "no_remote"


@dataclass
class RepoState:
    """Snapshot of a working copy and its default remote."""

    tool: str
    path: str
    status: str
    branch: str
    default_branch: str
    default_branch_source: str
    stash: Optional[str] = None
    remote_url: Optional[str] = None
    local_revision: Optional[str] = None
    remote_revision: Optional[str] = None
    local_contains_remote: Optional[bool] = None
    no_remote: bool = False
    remote_not_found: bool = False
    remote_error: Optional[str] = None

    @property
    def clean(self) -> bool:
        return self.status == ""

    @property
    def up_to_date(self) -> Optional[bool]:
        if self.local_revision is None or self.remote_revision is None:
            return None
        return self.local_revision == self.remote_revision

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["clean"] = self.clean
        data["up_to_date"] = self.up_to_date
        return data


class RepositoryInspector:
    """Collects a :class:`RepoState` for a working copy using one adapter."""

    def __init__(self, vcs: VCS) -> None:
        self.vcs = vcs

    def inspect(self, repo: Path | str, *, online: bool = True) -> RepoState:
        """Query the working copy and, when ``online``, its default remote.

        The default branch comes from the remote when it can be asked. With no
        remote (or a remote that no longer exists) the tool's built-in default
        is used; on any other remote failure, or offline, the cached remote
        default is tried before the built-in one.
        """
        vcs = self.vcs
        state = RepoState(
            tool=vcs.name,
            path=str(repo),
            status=vcs.status(repo),
            branch=vcs.branch(repo),
            default_branch="",
            default_branch_source="",
        )

        if vcs.supports(Capability.STASH):
            try:
                state.stash = vcs.stash(repo)
            except UnsupportedOperationError:
                state.stash = None

        if vcs.supports(Capability.REMOTE_URL):
            try:
                state.remote_url = vcs.remote_url(repo)
            except NoRemoteError:
                state.no_remote = True

        if state.no_remote:
            state.default_branch = vcs.no_remote_default_branch()
            state.default_branch_source = SOURCE_NO_REMOTE
        elif online and vcs.supports(Capability.REMOTE_BRANCH_AND_REVISION):
            self._resolve_remote(repo, state)
        else:
            state.default_branch, state.default_branch_source = self._offline_default_branch()

        try:
            state.local_revision = vcs.local_revision(repo, state.default_branch)
        except CommandError as exc:
            # The default branch may not exist locally yet.
            logger.info("No local revision for %s in %s: %s", state.default_branch, repo, exc)

        if (
            state.remote_revision
            and state.local_revision
            and vcs.supports(Capability.CONTAINS)
        ):
            state.local_contains_remote = vcs.contains(
                repo, state.remote_revision, state.default_branch
            )
        return state

    def _resolve_remote(self, repo: Path | str, state: RepoState) -> None:
        vcs = self.vcs
        try:
            branch, revision = vcs.remote_branch_and_revision(repo)
        except NoRemoteError:
            state.no_remote = True
        except NotFoundError as exc:
            logger.info("Remote repository for %s not found: %s", repo, exc)
            state.remote_not_found = True
        except VCSError as exc:
            logger.info("Remote query for %s failed: %s", repo, exc)
            state.remote_error = str(exc)
            state.default_branch, state.default_branch_source = self._offline_default_branch()
            return
        else:
            state.default_branch = branch
            state.default_branch_source = SOURCE_REMOTE
            state.remote_revision = revision
            return
        state.default_branch = vcs.no_remote_default_branch()
        state.default_branch_source = SOURCE_NO_REMOTE

    def _offline_default_branch(self) -> Tuple[str, str]:
        try:
            return self.vcs.cached_remote_default_branch(), SOURCE_CACHED
        except VCSError as exc:
            logger.debug("No cached remote default branch: %s", exc)
        return self.vcs.no_remote_default_branch(), SOURCE_NO_REMOTE


__all__ = ["RepoState", "RepositoryInspector"]
