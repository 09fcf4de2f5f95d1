"""Selection of the adapter matching the installed tool binary."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from .adapters import VCS, Bzr, Git, Hg, RemoteVCS
from .config import CommandSettings
from .errors import BinaryUnavailableError, UnsupportedToolError
from .logging import get_logger
from .remote import RemoteGit, RemoteHg
from .runner import CommandRunner
from .versions import BZR, GIT, HG, BinaryProbe, GitProtocol, probe_binary, select_protocol, tool_spec

logger = get_logger("factory")

_METADATA_DIRS: Tuple[Tuple[str, str], ...] = ((".git", GIT), (".hg", HG), (".bzr", BZR))


class ProbeCache:
    """Probes each tool binary once and hands out the stored result.

    Long-lived callers (the HTTP service) keep one cache so repeated requests
    do not run `<binary> --version` again. Safe to share between threads.
    """

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self._runner = runner
        self._probes: Dict[str, BinaryProbe] = {}
        self._lock = threading.Lock()

    def get(self, tool: str) -> BinaryProbe:
        tool = tool.lower()
        with self._lock:
            probe = self._probes.get(tool)
            if probe is None:
                probe = probe_binary(tool, self._runner)
                self._probes[tool] = probe
        return probe


def new_vcs(
    tool: str,
    *,
    probe: BinaryProbe | None = None,
    runner: CommandRunner | None = None,
    settings: CommandSettings | None = None,
) -> VCS:
    """Return the local adapter for ``tool`` matching the installed binary.

    ``probe`` is the result of :func:`probe_binary`; when omitted the binary
    is probed now. Raises :class:`CapabilityError` subclasses when the tool
    is unknown, missing, or too old.
    """
    tool, runner, settings = _prepare(tool, runner, settings)
    probe = _checked_probe(tool, probe, runner)
    if tool == GIT:
        return Git(_git_protocol(probe), runner=runner, settings=settings)
    if tool == HG:
        probe.version()
        return Hg(runner=runner, settings=settings)
    probe.version()
    return Bzr(runner=runner, settings=settings)


def new_remote_vcs(
    tool: str,
    *,
    probe: BinaryProbe | None = None,
    runner: CommandRunner | None = None,
    settings: CommandSettings | None = None,
) -> RemoteVCS:
    """Return the remote-only adapter for ``tool`` matching the installed binary."""
    tool, runner, settings = _prepare(tool, runner, settings)
    if tool == BZR:
        raise UnsupportedToolError(tool, "remote support")
    probe = _checked_probe(tool, probe, runner)
    if tool == GIT:
        return RemoteGit(_git_protocol(probe), runner=runner, settings=settings)
    probe.version()
    return RemoteHg(runner=runner, settings=settings)


def detect_tool(path: Path | str) -> Optional[str]:
    """Return the tool whose metadata directory is found at or above ``path``."""
    current = Path(path).expanduser().resolve()
    for directory in (current, *current.parents):
        for marker, tool in _METADATA_DIRS:
            # A .git file (not directory) marks a linked worktree or submodule.
            if (directory / marker).exists():
                return tool
    return None


def _prepare(
    tool: str, runner: CommandRunner | None, settings: CommandSettings | None
) -> Tuple[str, CommandRunner, CommandSettings]:
    tool = tool.lower()
    tool_spec(tool)
    settings = settings or CommandSettings()
    runner = runner or CommandRunner(timeout=settings.timeout)
    return tool, runner, settings


def _checked_probe(tool: str, probe: BinaryProbe | None, runner: CommandRunner) -> BinaryProbe:
    if probe is None:
        return probe_binary(tool, runner)
    if probe.tool != tool:
        raise ValueError(f"probe is for {probe.tool}, not {tool}")
    return probe


def _git_protocol(probe: BinaryProbe) -> GitProtocol:
    version = probe.version()
    protocol = select_protocol(version)
    if protocol is None:
        raise BinaryUnavailableError(GIT, f"no git protocol supports version {version}")
    logger.debug("Using %s protocol for git %s", protocol.name, version)
    return protocol


__all__ = ["ProbeCache", "detect_tool", "new_remote_vcs", "new_vcs"]
