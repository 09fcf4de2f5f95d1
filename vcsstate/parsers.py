"""Parsers for the textual output of git, Mercurial and Bazaar subcommands.

All functions are pure: they take captured stdout and either return a value
or raise :class:`~vcsstate.errors.MalformedOutputError` (or its
:class:`~vcsstate.errors.BranchNotFoundError` subclass).
"""

from __future__ import annotations

from typing import List, Tuple

from .errors import BranchNotFoundError, MalformedOutputError, NoOriginRemoteError
from .models import BranchRevision

HEADS_PREFIX = "refs/heads/"
SYMREF_PREFIX = "ref: refs/heads/"
PREFERRED_BRANCH = "master"
HEAD_BRANCH_MARKER = "\n  HEAD branch: "
FETCH_SUFFIX = " (fetch)"
ORIGIN = "origin"


def trim_last_newline(text: str) -> str:
    """Remove exactly one trailing newline (``\\n`` or ``\\r\\n``), if present."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


def parse_revision(out: str, length: int) -> str:
    """Return the first ``length`` characters of ``out``.

    Shorter output means the tool did not print a full revision, which is
    treated as malformed rather than padded or accepted.
    """
    if len(out) < length:
        raise MalformedOutputError(
            f"output length {len(out)} is shorter than {length}", out
        )
    return out[:length]


def parse_remote_fetch_url(out: str) -> str:
    """Return the fetch URL of the ``origin`` remote from ``git remote -v``.

    Lines look like ``origin<TAB>https://example.com/repo (fetch)``. Other
    remotes are ignored even when ``origin`` is absent.
    """
    if not out:
        raise NoOriginRemoteError()
    for line in _lines(out):
        name, sep, url_kind = line.partition("\t")
        if not sep:
            raise MalformedOutputError("remote line is missing a tab separator", line)
        if name != ORIGIN or not url_kind.endswith(FETCH_SUFFIX):
            continue
        return url_kind[: -len(FETCH_SUFFIX)]
    raise NoOriginRemoteError()


def parse_ls_remote(out: str) -> BranchRevision:
    """Parse plain ``git ls-remote <remote> HEAD refs/heads/*`` output.

    The reply only carries revisions, so the branch is guessed: among the
    branches at HEAD's revision ``master`` wins, otherwise one of them is
    picked arbitrarily (the last one listed).
    """
    if not out:
        raise MalformedOutputError("empty ls-remote output")
    references = _references(out)
    revision = ""
    for rev, ref in references:
        if ref == "HEAD":
            revision = rev
            break
    branch = _pick_branch(references, revision) if revision else ""
    if not branch or not revision:
        raise MalformedOutputError("HEAD revision not found in ls-remote output", out)
    return BranchRevision(branch=branch, revision=revision)


def parse_symref_ls_remote(out: str) -> BranchRevision:
    """Parse ``git ls-remote --symref <remote> HEAD refs/heads/*`` output.

    HEAD appears twice: ``ref: refs/heads/<branch><TAB>HEAD`` and
    ``<revision><TAB>HEAD``. When only the revision line is present (the
    server ignored ``--symref``), :class:`BranchNotFoundError` carries the
    revision so the caller can resolve the branch another way.
    """
    if not out:
        raise MalformedOutputError("empty ls-remote output")
    branch = ""
    revision = ""
    for target, ref in _references(out):
        if ref != "HEAD":
            continue
        if target.startswith(SYMREF_PREFIX):
            branch = target[len(SYMREF_PREFIX):]
        else:
            revision = target
        if branch and revision:
            return BranchRevision(branch=branch, revision=revision)
    if revision:
        raise BranchNotFoundError(revision, out)
    raise MalformedOutputError("HEAD branch or revision not found in ls-remote output", out)


def guess_branch(out: str, revision: str) -> str:
    """Guess which branch in ls-remote output points at ``revision``.

    ``master`` is preferred when it matches; otherwise the choice among
    several matching branches is arbitrary.
    """
    if not out:
        raise MalformedOutputError("empty ls-remote output")
    branch = _pick_branch(_references(out), revision)
    if not branch:
        raise MalformedOutputError(f"no branch at revision {revision} in ls-remote output", out)
    return branch


def parse_head_branch(out: str) -> str:
    """Return the ``HEAD branch`` value from ``git remote show <remote>``."""
    index = out.find(HEAD_BRANCH_MARKER)
    if index == -1:
        raise MalformedOutputError("no HEAD branch", out)
    index += len(HEAD_BRANCH_MARKER)
    end = out.find("\n", index)
    if end == -1:
        end = len(out)
    return out[index:end].rstrip("\r")


def parse_last_line(out: str) -> str:
    """Return the last line of ``out`` (hg prints progress before the answer)."""
    lines = trim_last_newline(out).split("\n")
    return lines[-1]


def parse_branch_listing(out: str, branch: str) -> bool:
    """Report whether ``git branch --list`` output names exactly ``branch``.

    A contained revision yields ``* <branch>`` when the branch is checked out
    and ``  <branch>`` otherwise; anything else counts as not contained.
    """
    return out in (f"* {branch}\n", f"  {branch}\n")


def _lines(out: str) -> List[str]:
    return trim_last_newline(out).split("\n")


def _references(out: str) -> List[Tuple[str, str]]:
    references: List[Tuple[str, str]] = []
    for line in _lines(out):
        target, sep, ref = line.partition("\t")
        if not sep:
            raise MalformedOutputError("ls-remote line is missing a tab separator", line)
        references.append((target, ref))
    return references


def _pick_branch(references: List[Tuple[str, str]], revision: str) -> str:
    branch = ""
    for rev, ref in references:
        if rev != revision or not ref.startswith(HEADS_PREFIX):
            continue
        # Once master is chosen it is never replaced by another match.
        if branch != PREFERRED_BRANCH:
            branch = ref[len(HEADS_PREFIX):]
    return branch


__all__ = [
    "guess_branch",
    "parse_branch_listing",
    "parse_head_branch",
    "parse_last_line",
    "parse_ls_remote",
    "parse_remote_fetch_url",
    "parse_revision",
    "parse_symref_ls_remote",
    "trim_last_newline",
]
