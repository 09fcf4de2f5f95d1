"""Query the state of git, Mercurial and Bazaar repositories through their binaries."""

from .adapters import VCS, Bzr, Git, Hg, RemoteVCS
from .errors import (
    BinaryUnavailableError,
    BranchNotFoundError,
    CapabilityError,
    CommandError,
    MalformedOutputError,
    NoOriginRemoteError,
    NoRemoteError,
    NotFoundError,
    UnsupportedOperationError,
    UnsupportedToolError,
    VCSError,
)
from .factory import ProbeCache, detect_tool, new_remote_vcs, new_vcs
from .inspector import RepositoryInspector, RepoState
from .models import BranchRevision, Capability, CommandResult, StashPolicy, Version
from .remote import RemoteGit, RemoteHg
from .runner import CommandRunner
from .versions import BinaryProbe, probe_binary

__version__ = "0.1.0"

__all__ = [
    "BinaryProbe",
    "BinaryUnavailableError",
    "BranchNotFoundError",
    "BranchRevision",
    "Bzr",
    "Capability",
    "CapabilityError",
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "Git",
    "Hg",
    "MalformedOutputError",
    "NoRemoteError",
    "NoOriginRemoteError",
    "NotFoundError",
    "ProbeCache",
    "RemoteGit",
    "RemoteHg",
    "RemoteVCS",
    "RepoState",
    "RepositoryInspector",
    "StashPolicy",
    "UnsupportedOperationError",
    "UnsupportedToolError",
    "VCS",
    "VCSError",
    "Version",
    "detect_tool",
    "new_remote_vcs",
    "new_vcs",
    "probe_binary",
]
