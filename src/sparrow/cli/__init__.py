"""Sparrow CLI: serve an app from an import string.

Entry point registered as ``sparrow`` in ``pyproject.toml``::

    [project.scripts]
    sparrow = "sparrow.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``sparrow`` command."""
    parser = argparse.ArgumentParser(
        prog="sparrow",
        description="Sparrow: middleware chains and routing over ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- sparrow run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve an App or Responder")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. sparrow.demos.express:app)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (defaults to the app config)",
    )
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level (defaults to the app config)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from sparrow.cli._run import run_command

        run_command(args)
