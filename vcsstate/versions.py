"""Tool version detection and protocol selection."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Sequence

from .errors import BinaryUnavailableError, CommandError, UnsupportedToolError
from .logging import get_logger
from .models import Version
from .runner import CommandRunner

logger = get_logger("versions")

GIT = "git"
HG = "hg"
BZR = "bzr"


@dataclass(frozen=True)
class ToolSpec:
    """How to ask a tool for its version and how to read the answer."""

    name: str
    binary: str
    version_pattern: Pattern[str]
    minimum: Version


TOOLS: Dict[str, ToolSpec] = {
    GIT: ToolSpec(GIT, "git", re.compile(r"^git version (\d+)\.(\d+)"), Version(1, 7)),
    HG: ToolSpec(HG, "hg", re.compile(r"\(version (\d+)\.(\d+)"), Version(1, 0)),
    BZR: ToolSpec(BZR, "bzr", re.compile(r"^Bazaar \(bzr\) (\d+)\.(\d+)"), Version(2, 0)),
}


@dataclass(frozen=True)
class GitProtocol:
    """Behaviour of a range of git releases, from ``minimum`` upwards."""

    name: str
    minimum: Version
    symref: bool
    remote_get_url: bool
    detects_not_found: bool


GIT_PROTOCOLS: Sequence[GitProtocol] = (
    GitProtocol("git28", Version(2, 8), symref=True, remote_get_url=True, detects_not_found=True),
    GitProtocol("git17", Version(1, 7), symref=False, remote_get_url=False, detects_not_found=False),
)


def parse_version(tool: str, text: str) -> Version:
    """Read the major/minor version out of ``<tool> --version`` output."""
    spec = tool_spec(tool)
    match = spec.version_pattern.search(text)
    if match is None:
        raise BinaryUnavailableError(
            tool, f"unable to parse {spec.binary} version from {text.strip()!r}"
        )
    return Version(int(match.group(1)), int(match.group(2)))


def tool_spec(tool: str) -> ToolSpec:
    try:
        return TOOLS[tool]
    except KeyError:
        raise UnsupportedToolError(tool) from None


def select_protocol(
    version: Version, protocols: Sequence[GitProtocol] = GIT_PROTOCOLS
) -> Optional[GitProtocol]:
    """Return the protocol with the greatest floor not above ``version``."""
    best: Optional[GitProtocol] = None
    for protocol in protocols:
        if protocol.minimum <= version and (best is None or protocol.minimum > best.minimum):
            best = protocol
    return best


@dataclass(frozen=True)
class BinaryProbe:
    """Result of running ``<binary> --version`` once.

    Either ``version_text`` or ``error`` is set. Callers keep a probe for as
    long as they like and hand it to the factories, which never probe again.
    """

    tool: str
    version_text: str = ""
    error: Optional[str] = None

    def version(self) -> Version:
        """Return the detected version or raise :class:`BinaryUnavailableError`."""
        spec = tool_spec(self.tool)
        if self.error is not None:
            raise BinaryUnavailableError(self.tool, self.error)
        version = parse_version(self.tool, self.version_text)
        if version < spec.minimum:
            raise BinaryUnavailableError(
                self.tool,
                f"{spec.name} support requires {spec.binary} binary version "
                f"{spec.minimum}+, but you have: {self.version_text.strip()!r}",
            )
        return version


def probe_binary(tool: str, runner: CommandRunner | None = None) -> BinaryProbe:
    """Run ``<binary> --version`` and capture the outcome as a :class:`BinaryProbe`."""
    spec = tool_spec(tool)
    runner = runner or CommandRunner()
    try:
        text = runner.output([spec.binary, "--version"])
    except CommandError as exc:
        logger.debug("Probe for %s failed: %s", spec.binary, exc)
        return BinaryProbe(tool=tool, error=f"{spec.binary} binary unavailable: {exc}")
    logger.debug("Probe for %s reported %r", spec.binary, text.strip())
    return BinaryProbe(tool=tool, version_text=text)


__all__ = [
    "BZR",
    "BinaryProbe",
    "GIT",
    "GIT_PROTOCOLS",
    "GitProtocol",
    "HG",
    "TOOLS",
    "ToolSpec",
    "parse_version",
    "probe_binary",
    "select_protocol",
    "tool_spec",
]
