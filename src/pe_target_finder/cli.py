"""Command-line interface for PE Target Finder.

Provides a ``search`` subcommand that signs in, runs one company search and
renders the result, and an ``info`` subcommand that prints the effective
configuration.

Entry point
-----------
The ``main()`` function is registered as a console script in
``pyproject.toml``::

    [project.scripts]
    pe-target-finder = "pe_target_finder.cli:main"

Usage examples::

    pe-target-finder search --min-price 1000000 --max-price 5000000 \\
        --location Texas --growth 10 --industry Healthcare
    pe-target-finder search --industry Software --json
    pe-target-finder info
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pe_target_finder.domain.enums import SearchField, View
from pe_target_finder.domain.values import Identity, Resolved
from pe_target_finder.infrastructure.config import AppConfig, load_config_from_json

logger = logging.getLogger(__name__)

_FIELD_FLAGS: dict[str, SearchField] = {
    "min_price": SearchField.MINIMUM_PRICE,
    "max_price": SearchField.MAXIMUM_PRICE,
    "location": SearchField.LOCATION,
    "growth": SearchField.GROWTH_TARGET_PERCENT,
    "industry": SearchField.INDUSTRY,
}

EXIT_OK = 0
EXIT_SEARCH_FAILED = 1
EXIT_NOT_SIGNED_IN = 2


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="pe-target-finder",
        description="Private Equity Target Finder -- find acquisition targets.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        default=False,
        help="Show version and exit.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON configuration file.  Defaults to environment variables.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    # -- search ------------------------------------------------------------
    search_parser = subparsers.add_parser(
        "search",
        help="Run one company search.",
        description="Sign in, submit one search and render the results.",
    )
    search_parser.add_argument("--min-price", type=str, default="", help="Minimum purchase price ($).")
    search_parser.add_argument("--max-price", type=str, default="", help="Maximum purchase price ($).")
    search_parser.add_argument("--location", type=str, default="", help="Location.")
    search_parser.add_argument("--growth", type=str, default="", help="Growth target percentage.")
    search_parser.add_argument("--industry", type=str, default="", help="Industry.")
    search_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print results as a JSON array instead of the console view.",
    )

    # -- info --------------------------------------------------------------
    subparsers.add_parser(
        "info",
        help="Show version and effective configuration.",
        description="Print the version and the configuration the CLI would use.",
    )

    return parser


def _load_config(args: argparse.Namespace) -> AppConfig:
    if args.config:
        return load_config_from_json(Path(args.config).read_text(encoding="utf-8"))
    return AppConfig.from_env()


# =========================================================================
# Subcommand: search
# =========================================================================

async def _sign_in(app: Any) -> None:
    """Establish a session with the configured identity provider."""
    provider = app.identity_provider
    if provider.provider_name == "memory":
        user = getpass.getuser()
        provider.sign_in(Identity(user_id=f"local-{user}", email=f"{user}@localhost"))
        return

    email = os.environ.get("SUPABASE_EMAIL", "")
    password = os.environ.get("SUPABASE_PASSWORD", "")
    if not email or not password:
        logger.warning("search: SUPABASE_EMAIL / SUPABASE_PASSWORD not set")
        return
    try:
        await provider.sign_in_with_password(email, password)
    except Exception as exc:
        logger.warning("search: sign-in failed: %s", exc)


async def _run_search(args: argparse.Namespace, config: AppConfig) -> int:
    from pe_target_finder.app import TargetFinderApp
    from pe_target_finder.presentation.console import ConsoleView
    from pe_target_finder.services.search import candidates_to_records

    app = TargetFinderApp.from_config(config, console=ConsoleView())
    await _sign_in(app)
    async with app:
        if app.view is View.LOGIN:
            app.render()
            return EXIT_NOT_SIGNED_IN

        search = app.search
        for flag, search_field in _FIELD_FLAGS.items():
            search.update_field(search_field, getattr(args, flag))

        lifecycle = await search.submit_search()

        if args.json:
            print(json.dumps(candidates_to_records(lifecycle.results), indent=2))
        else:
            app.render()
        return EXIT_OK if isinstance(lifecycle, Resolved) else EXIT_SEARCH_FAILED


def _cmd_search(args: argparse.Namespace) -> int:
    """Execute the ``search`` subcommand."""
    config = _load_config(args)
    return asyncio.run(_run_search(args, config))


# =========================================================================
# Subcommand: info
# =========================================================================

def _cmd_info(args: argparse.Namespace) -> int:
    """Execute the ``info`` subcommand."""
    from pe_target_finder import __version__

    config = _load_config(args)
    print(f"PE Target Finder v{__version__}")
    print()
    print("Configuration:")
    print(json.dumps(config.to_dict(), indent=2))
    return EXIT_OK


# =========================================================================
# Main entry point
# =========================================================================

def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  Defaults to ``sys.argv[1:]``.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from pe_target_finder import __version__
        print(f"pe-target-finder {__version__}")
        sys.exit(0)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers: dict[str, Any] = {
        "search": _cmd_search,
        "info": _cmd_info,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        exit_code = 130
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
