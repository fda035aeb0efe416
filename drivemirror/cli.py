"""CLI entrypoints for drivemirror commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import GITHUB_TOKEN_ENV_KEYS, GOOGLE_TOKEN_ENV_KEYS, load_config, resolve_token
from .errors import MirrorError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
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


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drivemirror",
        description="Copy a Google Drive file or folder into a new GitHub repository.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    mirror_parser = subparsers.add_parser(
        "mirror",
        help="Create a repository whose initial commit holds the Drive contents.",
    )
    _add_verbose_option(mirror_parser, suppress_default=True)
    mirror_parser.add_argument(
        "source",
        help="Drive file or folder link, or its bare identifier.",
    )
    mirror_parser.add_argument(
        "--repo",
        required=True,
        help="Name of the repository to create under the authenticated account.",
    )
    mirror_parser.add_argument(
        "--config",
        default=".",
        help="Path to .drivemirror.yml or the directory holding it (defaults to current directory).",
    )
    mirror_parser.add_argument(
        "--google-token",
        default=None,
        help="Drive access token (defaults to $DRIVEMIRROR_GOOGLE_TOKEN or $GOOGLE_ACCESS_TOKEN).",
    )
    mirror_parser.add_argument(
        "--github-token",
        default=None,
        help="GitHub token with repo scope (defaults to $DRIVEMIRROR_GITHUB_TOKEN or $GITHUB_TOKEN).",
    )
    mirror_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write detailed logs to this file.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for drivemirror commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=getattr(args, "log_file", None))

    if args.command == "mirror":
        try:
            config = load_config(Path(args.config))
        except MirrorError as exc:
            parser.exit(1, f"{exc.describe()}\n")
        orchestrator = Orchestrator(config)
        try:
            result = orchestrator.run(
                args.source,
                args.repo,
                google_token=resolve_token(args.google_token, GOOGLE_TOKEN_ENV_KEYS),
                github_token=resolve_token(args.github_token, GITHUB_TOKEN_ENV_KEYS),
            )
        except MirrorError as exc:
            parser.exit(1, f"drivemirror mirror failed: {exc.describe()}\n")
        if result is None:
            print("No files found; repository was not created")
        else:
            print(f"Repository created: {result.repository_url} ({result.files_published} file(s))")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
