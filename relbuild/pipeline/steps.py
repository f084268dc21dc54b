# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The six release-build steps.

Each step is a function of the current WorkingContext (plus its
collaborators) that returns the next context and a StepResult. Steps never
raise for expected failures; the exit status travels in the result and the
orchestrator decides what to do with it.

Exit statuses for non-tool failures follow what `cd` and `rm` report.
"""

import os
from pathlib import Path

from relbuild.logging.logger import get_logger
from relbuild.pipeline.context import WorkingContext
from relbuild.pipeline.filesystem import remove_tree
from relbuild.pipeline.results import StepResult
from relbuild.pipeline.tools import (
    ToolRunner,
    build_package_release_command,
    bundle_release_command,
    clean_workspace_command,
)

_logger = get_logger(__name__)

NAVIGATION_FAILURE: int = 1
REMOVAL_FAILURE: int = 1

REMOVE_STATIC = "remove-static"
ENTER_FRONTEND = "enter-frontend"
BUNDLE = "bundle"
RETURN_ROOT = "return-root"
CLEAN = "clean"
COMPILE = "compile"

StepOutcome = tuple[WorkingContext, StepResult]


def _enterable(directory: Path) -> str | None:
    """Return why `directory` cannot be entered, or None if it can."""
    if not directory.exists():
        return f"{directory} does not exist"
    if not directory.is_dir():
        return f"{directory} is not a directory"
    if not os.access(directory, os.X_OK):
        return f"{directory} is not enterable (permission denied)"
    return None


def _enter(context: WorkingContext, step: str, directory: Path) -> StepOutcome:
    problem = _enterable(directory)
    if problem is not None:
        return context, StepResult(step=step, exit_code=NAVIGATION_FAILURE, message=problem)
    return context.moved_to(directory), StepResult(step=step, exit_code=0, message=str(directory))


def _run_tool(
    context: WorkingContext, step: str, command: list[str], runner: ToolRunner
) -> StepOutcome:
    status = runner.run(command, context)
    message = " ".join(command)
    if status != 0:
        message = f"{message} exited with status {status}"
    return context, StepResult(step=step, exit_code=status, message=message)


def remove_static_assets(context: WorkingContext, static_dir: Path) -> StepOutcome:
    """Delete the backend's static-asset directory. Missing is fine."""
    try:
        removal = remove_tree(static_dir)
    except OSError as err:
        _logger.error(
            "Could not remove static assets",
            extra={"path": str(static_dir), "error": str(err)},
        )
        return context, StepResult(
            step=REMOVE_STATIC,
            exit_code=REMOVAL_FAILURE,
            message=f"cannot remove {static_dir}: {err}",
        )

    message = f"removed {static_dir}" if removal.existed else f"{static_dir} already absent"
    return context, StepResult(step=REMOVE_STATIC, exit_code=0, message=message)


def enter_frontend(context: WorkingContext, frontend_dir: Path) -> StepOutcome:
    return _enter(context, ENTER_FRONTEND, frontend_dir)


def bundle_frontend(context: WorkingContext, runner: ToolRunner) -> StepOutcome:
    return _run_tool(context, BUNDLE, bundle_release_command(), runner)


def return_to_root(context: WorkingContext) -> StepOutcome:
    """Go back to the repository root, checking it is still there."""
    return _enter(context, RETURN_ROOT, context.root)


def clean_workspace(context: WorkingContext, runner: ToolRunner) -> StepOutcome:
    return _run_tool(context, CLEAN, clean_workspace_command(), runner)


def compile_backend(context: WorkingContext, runner: ToolRunner, package: str) -> StepOutcome:
    return _run_tool(context, COMPILE, build_package_release_command(package), runner)
