# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Handler for the release build.

There is exactly one operation, so there is exactly one handler. It loads
config, levels the loggers, then either runs the pipeline or (with
--dry-run) the preflight. No print() calls; everything goes through the
structured logger and tools write to the terminal directly.
"""

import argparse
import logging
from pathlib import Path

from relbuild.cli.exit_codes import CONFIG_ERROR, INTERRUPTED, RUNTIME_ERROR, SUCCESS
from relbuild.config.exceptions import ConfigError
from relbuild.config.loader import resolve_config
from relbuild.config.schema import RelbuildConfig
from relbuild.logging.logger import configure_package_logging, get_logger
from relbuild.pipeline.orchestrator import preflight, run_release_build
from relbuild.runtime.environment import check_minimum_python, get_system_info
from relbuild.utils.paths import resolve_repository_root


def _load_and_configure(
    args: argparse.Namespace,
) -> tuple[int, RelbuildConfig | None, logging.Logger]:
    """
    Load config and set up logging.

    Returns a tuple of (exit_code, config, logger). If exit_code is not SUCCESS,
    the caller should return it immediately.
    """
    log_level = args.log_level or "INFO"
    logger = get_logger("relbuild.cli.build", log_level=log_level)

    config_path = Path(args.config) if args.config is not None else None
    try:
        config = resolve_config(config_path)
    except ConfigError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        return CONFIG_ERROR, None, logger

    # The command line wins over the file.
    if args.log_level is None:
        log_level = config.global_config.log_level
    log_file = None
    if config.global_config.log_file is not None:
        log_file = Path(config.global_config.log_file)
    try:
        configure_package_logging(log_level, log_file)
    except OSError as err:
        logger.error("Cannot open log file", extra={"log_file": str(log_file), "error": str(err)})
        return CONFIG_ERROR, None, logger

    return SUCCESS, config, logger


def handle_build(args: argparse.Namespace) -> int:
    """Run the release build (or its dry run) and return the process exit code."""
    exit_code, config, logger = _load_and_configure(args)
    if exit_code != SUCCESS:
        return exit_code

    try:
        check_minimum_python()
        root = resolve_repository_root()
        system_info = get_system_info()
        logger.info(
            "Release build started",
            extra={
                "root": str(root),
                "dry_run": args.dry_run,
                "config": args.config,
                "python_version": system_info.python_version,
                "platform": system_info.platform,
            },
        )

        if args.dry_run:
            return preflight(root, config.layout)

        result = run_release_build(root, config.layout)
        return result.exit_code

    except KeyboardInterrupt:
        logger.error("Interrupted")
        return INTERRUPTED
    except ConfigError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        return CONFIG_ERROR
    except Exception as err:
        logger.error("Runtime error", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR
