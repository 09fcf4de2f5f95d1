"""Per-tool adapters implementing the :class:`VCS` capability set."""

from .base import VCS, RemoteVCS, RepoPath
from .bzr import Bzr
from .git import Git
from .hg import Hg

__all__ = ["Bzr", "Git", "Hg", "RemoteVCS", "RepoPath", "VCS"]
