"""Subprocess execution for tool binaries."""

from __future__ import annotations

import os
import signal
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Mapping

from .config import DEFAULT_TIMEOUT
from .errors import CommandError
from .logging import get_logger
from .models import CommandResult

logger = get_logger("runner")


class CommandRunner:
    """Runs a tool binary to completion, interrupting it after a deadline.

    Environment overrides are layered over a private copy of the ambient
    environment; ``os.environ`` itself is never modified.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ) -> None:
        self.timeout = timeout
        self._popen = popen

    def run(
        self,
        args: Iterable[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run the command and return separated stdout/stderr.

        A non-zero exit status is reported in the result, not raised. Only a
        missing executable raises (as :class:`CommandError`).
        """
        argv = list(args)
        logger.debug("Running %s (cwd=%s)", " ".join(argv), cwd or ".")
        try:
            process = self._popen(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                env=_overlay_env(env),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise CommandError(argv, -1, str(exc)) from exc

        timed_out = False
        try:
            stdout, stderr = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            logger.warning(
                "%s exceeded %.1fs timeout; sending interrupt", " ".join(argv), self.timeout
            )
            process.send_signal(signal.SIGINT)
            stdout, stderr = process.communicate()

        return CommandResult(
            args=argv,
            returncode=process.returncode,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            timed_out=timed_out,
        )

    def output(
        self,
        args: Iterable[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Run the command and return stdout, raising on failure.

        Standard error is not included in the raised error.
        """
        result = self.run(args, cwd=cwd, env=env)
        if not result.ok:
            raise CommandError(result.args, result.returncode, timed_out=result.timed_out)
        return result.stdout


def raise_for_result(result: CommandResult) -> None:
    """Raise :class:`CommandError` with stderr attached if ``result`` failed."""
    if not result.ok:
        raise CommandError(
            result.args, result.returncode, result.stderr, timed_out=result.timed_out
        )


def _overlay_env(overrides: Mapping[str, str] | None) -> dict[str, str] | None:
    if not overrides:
        return None
    env = os.environ.copy()
    env.update(overrides)
    return env


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


__all__ = ["CommandRunner", "raise_for_result"]
