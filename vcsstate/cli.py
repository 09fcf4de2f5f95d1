"""CLI entrypoints for vcsstate commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .config import ConfigError, VCSStateConfig, load_config
from .errors import NotFoundError, VCSError
from .factory import detect_tool, new_remote_vcs, new_vcs
from .inspector import RepositoryInspector, RepoState
from .logging import configure_logging
from .versions import TOOLS


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Log every tool invocation for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_vcs_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--vcs",
        choices=sorted(TOOLS),
        default=None,
        help="Version control tool to use (detected from the path when omitted).",
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vcsstate",
        description="Report working copy and remote state of version control repositories.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .vcsstate.yml or the directory holding it (defaults to the current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser(
        "status",
        help="Show the state of a local working copy.",
    )
    _add_verbose_option(status_parser, suppress_default=True)
    _add_vcs_option(status_parser)
    _add_json_option(status_parser)
    status_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the working copy (defaults to current directory).",
    )
    status_parser.add_argument(
        "--offline",
        action="store_true",
        help="Do not contact the remote.",
    )

    remote_parser = subparsers.add_parser(
        "remote",
        help="Show the default branch and revision of a remote repository.",
    )
    _add_verbose_option(remote_parser, suppress_default=True)
    _add_vcs_option(remote_parser)
    _add_json_option(remote_parser)
    remote_parser.add_argument("url", help="Remote repository URL.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for vcsstate commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config or Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"vcsstate: {exc}\n")

    if args.command == "status":
        tool = _resolve_tool(args.vcs, config, Path(args.path))
        if tool is None:
            parser.exit(1, f"vcsstate: no repository found at {args.path}\n")
        try:
            vcs = new_vcs(tool, settings=config.commands)
            state = RepositoryInspector(vcs).inspect(args.path, online=not args.offline)
        except VCSError as exc:
            parser.exit(1, f"vcsstate status failed: {exc}\n")
        if args.json:
            print(json.dumps(state.to_dict(), indent=2, sort_keys=True))
        else:
            print(_format_state(state))
    elif args.command == "remote":
        tool = args.vcs or config.vcs or "git"
        try:
            remote = new_remote_vcs(tool, settings=config.commands)
            branch, revision = remote.remote_branch_and_revision(args.url)
        except NotFoundError as exc:
            parser.exit(1, f"vcsstate: {exc}\n")
        except VCSError as exc:
            parser.exit(1, f"vcsstate remote failed: {exc}\n")
        if args.json:
            print(json.dumps({"url": args.url, "branch": branch, "revision": revision}))
        else:
            print(f"{branch} {revision}")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _resolve_tool(explicit: Optional[str], config: VCSStateConfig, path: Path) -> Optional[str]:
    if explicit:
        return explicit
    detected = detect_tool(path)
    return detected or config.vcs


def _format_state(state: RepoState) -> str:
    lines = [f"{state.path} ({state.tool}) on {state.branch}"]
    lines.append("  working copy: " + ("clean" if state.clean else "modified"))
    if state.stash:
        lines.append("  stash: present")
    if state.no_remote:
        lines.append("  remote: none")
    elif state.remote_not_found:
        lines.append(f"  remote: {state.remote_url or '?'} (repository not found)")
    elif state.remote_url:
        lines.append(f"  remote: {state.remote_url}")
    lines.append(f"  default branch: {state.default_branch} ({state.default_branch_source})")
    if state.local_revision:
        lines.append(f"  local revision: {state.local_revision}")
    if state.remote_revision:
        lines.append(f"  remote revision: {state.remote_revision}")
    if state.up_to_date is False:
        lines.append("  ahead of remote" if state.local_contains_remote else "  behind remote")
    if state.remote_error:
        lines.append(f"  remote error: {state.remote_error}")
    return "\n".join(lines)


if __name__ == "__main__":
    main(sys.argv[1:])
