"""Configuration loading for vcsstate (.vcsstate.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".vcsstate.yml"

DEFAULT_TIMEOUT = 20.0
DEFAULT_LOCALE = "en_US.UTF-8"
# `true` is the /bin/true command, not a boolean: git believes it asked for a
# password and fails instead of prompting.
DEFAULT_ASKPASS = "true"
# StrictHostKeyChecking defaults to "ask", which would block on input.
DEFAULT_SSH_COMMAND = "ssh -o StrictHostKeyChecking=yes"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CommandSettings:
    """How tool binaries are invoked."""

    timeout: float = DEFAULT_TIMEOUT
    locale: str = DEFAULT_LOCALE
    askpass: str = DEFAULT_ASKPASS
    ssh_command: str = DEFAULT_SSH_COMMAND

    def locale_env(self) -> Dict[str, str]:
        """Overrides that keep textual output parse-stable.

        LC_ALL outranks LANG and every LC_* category, so both are set.
        """
        return {"LANG": self.locale, "LC_ALL": self.locale}

    def remote_env(self) -> Dict[str, str]:
        """Overrides for commands that talk to a remote; never prompt."""
        env = self.locale_env()
        env["GIT_ASKPASS"] = self.askpass
        env["GIT_SSH_COMMAND"] = self.ssh_command
        return env


@dataclass
class VCSStateConfig:
    """Represents the settings defined in .vcsstate.yml."""

    root: Path
    commands: CommandSettings = field(default_factory=CommandSettings)
    vcs: Optional[str] = None


def load_config(config_path: Path) -> VCSStateConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return VCSStateConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    commands = CommandSettings()
    timeout = _as_float(data.get("timeout"))
    if timeout is not None:
        if timeout <= 0:
            raise ConfigError("timeout must be a positive number of seconds")
        commands.timeout = timeout
    commands.locale = _as_str(data.get("locale")) or commands.locale
    commands.askpass = _as_str(data.get("askpass")) or commands.askpass
    commands.ssh_command = _as_str(data.get("ssh_command")) or commands.ssh_command

    vcs = _as_str(data.get("vcs"))
    return VCSStateConfig(root=root, commands=commands, vcs=vcs.lower() if vcs else None)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


__all__ = ["CommandSettings", "ConfigError", "VCSStateConfig", "load_config"]
