"""Exception types raised by vcsstate adapters, parsers and factories."""

from __future__ import annotations

from typing import Sequence


class VCSError(RuntimeError):
    """Base class for every error raised by vcsstate."""


class CapabilityError(VCSError):
    """Raised by the factories when no adapter can be provided."""


class BinaryUnavailableError(CapabilityError):
    """The tool binary is missing, reports an unreadable version, or is too old."""

    def __init__(self, tool: str, message: str) -> None:
        super().__init__(message)
        self.tool = tool


class UnsupportedToolError(CapabilityError):
    """The requested tool identifier has no adapter."""

    def __init__(self, tool: str, feature: str = "support") -> None:
        super().__init__(f"{tool} {feature} not implemented")
        self.tool = tool


class NoRemoteError(VCSError):
    """The local repository has no valid default remote."""

    def __init__(self, message: str = "local repository has no valid remote") -> None:
        super().__init__(message)


class NotFoundError(VCSError):
    """The remote host answered but the repository does not exist."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"remote repository not found:\n{cause}")
        self.cause = cause


class MalformedOutputError(VCSError):
    """Tool output did not have the expected shape."""

    def __init__(self, message: str, output: str = "") -> None:
        if output:
            message = f"{message} (got {len(output)} bytes: {_snippet(output)!r})"
        super().__init__(message)
        self.output = output


class NoOriginRemoteError(MalformedOutputError):
    """A remote listing parsed cleanly but has no ``origin`` fetch entry."""

    def __init__(self) -> None:
        super().__init__("no origin remote")


class BranchNotFoundError(MalformedOutputError):
    """ls-remote reported the HEAD revision but no symbolic branch pointer.

    Servers without ``--symref`` support produce this; callers fall back to
    another way of finding the branch and can reuse :attr:`revision`.
    """

    def __init__(self, revision: str, output: str = "") -> None:
        super().__init__("HEAD branch not found in ls-remote output")
        self.revision = revision
        self.output = output


class CommandError(VCSError):
    """A tool invocation exited non-zero (or could not be started)."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: int,
        stderr: str = "",
        *,
        timed_out: bool = False,
    ) -> None:
        command = " ".join(args)
        detail = stderr.rstrip("\n")
        if timed_out:
            message = f"{command} timed out and was interrupted"
        else:
            message = f"{command} failed with exit status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out


class UnsupportedOperationError(VCSError):
    """The operation has no safe mapping onto this tool."""

    def __init__(self, tool: str, operation: str) -> None:
        super().__init__(f"{operation} is not implemented for {tool}")
        self.tool = tool
        self.operation = operation


def _snippet(output: str, limit: int = 80) -> str:
    if len(output) <= limit:
        return output
    return output[: limit - 3] + "..."


__all__ = [
    "BinaryUnavailableError",
    "BranchNotFoundError",
    "CapabilityError",
    "CommandError",
    "MalformedOutputError",
    "NoOriginRemoteError",
    "NoRemoteError",
    "NotFoundError",
    "UnsupportedOperationError",
    "UnsupportedToolError",
    "VCSError",
]
