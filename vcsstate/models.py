"""Core data models shared across vcsstate components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple


class Capability(str, Enum):
    """Optional operations an adapter may or may not support."""

    STASH = "stash"
    CONTAINS = "contains"
    REMOTE_CONTAINS = "remote_contains"
    REMOTE_URL = "remote_url"
    REMOTE_BRANCH_AND_REVISION = "remote_branch_and_revision"
    CACHED_REMOTE_DEFAULT_BRANCH = "cached_remote_default_branch"


class StashPolicy(str, Enum):
    """What a missing stash/shelve feature is reported as."""

    EMPTY = "empty"
    UNSUPPORTED = "unsupported"


class Version(NamedTuple):
    """Major/minor pair reported by a tool binary; compares lexicographically."""

    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of a single tool invocation."""

    args: List[str]
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


@dataclass(frozen=True)
class BranchRevision:
    """Default branch of a remote together with its tip revision."""

    branch: str
    revision: str

    @property
    def resolved(self) -> bool:
        return bool(self.branch) and bool(self.revision)

    def __iter__(self):  # type: ignore[no-untyped-def]
        yield self.branch
        yield self.revision


__all__ = ["BranchRevision", "Capability", "CommandResult", "StashPolicy", "Version"]
