"""Astound CLI — astound build / astound dev.

Entry point for the ``astound`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the astound CLI."""
    parser = argparse.ArgumentParser(
        prog="astound",
        description="Page build pipeline for file-based Astound apps.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("build", "Build every route into <public>/.astound"),
        ("dev", "Build, then rebuild routes as they change"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("root", nargs="?", default=".", help="Project root directory")
        sub.add_argument("--public", dest="public_dir", default=None, help="Public directory")
        sub.add_argument("--app", dest="app_dir", default=None, help="Route source directory")
        sub.add_argument(
            "--plugin",
            dest="plugins",
            action="append",
            default=None,
            help="Plugin reference (registry key or module:attr); repeatable",
        )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from astound import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from astound.app import build, dev

    overrides = {
        "public_dir": args.public_dir,
        "app_dir": args.app_dir,
        "plugins": args.plugins,
    }
    if args.command == "build":
        build(root=args.root, **overrides)
    elif args.command == "dev":
        dev(root=args.root, **overrides)


if __name__ == "__main__":
    main()
