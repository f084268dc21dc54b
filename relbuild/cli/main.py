# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for relbuild.

Run with no arguments from the repository root to produce a release build:

    relbuild

The options only touch what surrounds the build (where the repository is,
how much gets logged, whether to actually run). None of them changes a
tool command.

Usage:
    relbuild
    relbuild --dry-run
    relbuild --config relbuild.yaml --log-level DEBUG
"""

import argparse
import sys

from relbuild.cli.commands import handle_build


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relbuild",
        description=(
            "Release build: remove stale static assets, build the frontend "
            "with trunk, then clean and build the backend with cargo."
        ),
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config file).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Show the build plan and check for trunk and cargo without running anything.",
    )
    parser.set_defaults(func=handle_build)
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    Parses the (optional) options, runs the build, and exits with the
    build's exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
