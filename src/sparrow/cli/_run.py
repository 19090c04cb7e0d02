"""``sparrow run``: resolve an import string and serve it."""

import argparse
import logging
import sys

from sparrow.cli._resolve import resolve_app
from sparrow.errors import ConfigurationError
from sparrow.server.runner import run_server


def run_command(args: argparse.Namespace) -> None:
    """Serve ``args.app``; CLI flags override the app's config."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    log_level = args.log_level or app.config.log_level
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run_server(
            app,
            app.config,
            host=args.host,
            port=args.port,
            workers=args.workers,
            log_level=log_level,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
