"""Bazaar adapter (local queries only)."""

from __future__ import annotations

from ..parsers import parse_revision, trim_last_newline
from .base import VCS, RepoPath

# Bazaar revision ids are "<committer>-<timestamp>-<random>" rather than SHA-1
# hashes; 60 characters is the sanity floor.
BZR_REVISION_LENGTH = 60


class Bzr(VCS):
    """Bazaar support.

    Each Bazaar branch lives in its own directory, so ``default_branch`` is
    not used to select a line of development. Stash, containment and every
    remote query raise :class:`UnsupportedOperationError`.
    """

    name = "bzr"
    revision_length = BZR_REVISION_LENGTH

    def __repr__(self) -> str:
        return "Bzr()"

    def status(self, repo: RepoPath) -> str:
        return self._output(["bzr", "status"], cwd=repo, env=self._settings.locale_env())

    def branch(self, repo: RepoPath) -> str:
        out = self._output(["bzr", "nick"], cwd=repo, env=self._settings.locale_env())
        return trim_last_newline(out)

    def local_revision(self, repo: RepoPath, default_branch: str) -> str:
        out = self._output(
            ["bzr", "version-info", "--custom", "--template={revision_id}\n"],
            cwd=repo,
            env=self._settings.locale_env(),
        )
        return parse_revision(out, self.revision_length)

    def no_remote_default_branch(self) -> str:
        return "default"


__all__ = ["BZR_REVISION_LENGTH", "Bzr"]
