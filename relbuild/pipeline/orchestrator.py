# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release-build orchestrator.

Runs the fixed pipeline

    remove-static -> enter-frontend -> bundle -> return-root -> clean -> compile

and stops at the first step that fails. That step's exit status becomes the
run's exit status. Nothing is rolled back: if the bundle fails after the
static directory was removed, the directory stays removed.
"""

import time
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from relbuild.config.exceptions import ConfigValidationError
from relbuild.config.schema import LayoutConfig
from relbuild.logging.logger import get_logger
from relbuild.pipeline import steps
from relbuild.pipeline.context import WorkingContext
from relbuild.pipeline.results import PipelineResult, StepResult
from relbuild.pipeline.tools import (
    BUNDLER_EXECUTABLE,
    COMMAND_NOT_FOUND,
    COMPILER_EXECUTABLE,
    SubprocessToolRunner,
    ToolRunner,
    build_package_release_command,
    bundle_release_command,
    clean_workspace_command,
)
from relbuild.runtime.environment import check_tool
from relbuild.utils.paths import join_within_root

_logger = get_logger(__name__)

StepFunction = Callable[[WorkingContext], steps.StepOutcome]


@dataclass(frozen=True)
class ResolvedLayout:
    """Absolute locations the pipeline works with."""

    root: Path
    frontend_dir: Path
    static_dir: Path
    backend_package: str

    @classmethod
    def from_config(cls, root: Path, layout: LayoutConfig) -> "ResolvedLayout":
        """
        Raises:
            ConfigValidationError: A layout path escapes the repository root.
        """
        try:
            return cls(
                root=root,
                frontend_dir=join_within_root(root, layout.frontend_dir),
                static_dir=join_within_root(root, layout.static_dir),
                backend_package=layout.backend_package,
            )
        except ValueError as err:
            raise ConfigValidationError(str(err)) from err


@dataclass(frozen=True)
class PlannedStep:
    """One entry of the pipeline: a name, what it does, and how to run it."""

    name: str
    description: str
    run: StepFunction


def build_plan(layout: ResolvedLayout, runner: ToolRunner) -> list[PlannedStep]:
    """The pipeline, in execution order."""
    return [
        PlannedStep(
            steps.REMOVE_STATIC,
            f"rm -rf {layout.static_dir}",
            partial(steps.remove_static_assets, static_dir=layout.static_dir),
        ),
        PlannedStep(
            steps.ENTER_FRONTEND,
            f"cd {layout.frontend_dir}",
            partial(steps.enter_frontend, frontend_dir=layout.frontend_dir),
        ),
        PlannedStep(
            steps.BUNDLE,
            " ".join(bundle_release_command()),
            partial(steps.bundle_frontend, runner=runner),
        ),
        PlannedStep(
            steps.RETURN_ROOT,
            f"cd {layout.root}",
            steps.return_to_root,
        ),
        PlannedStep(
            steps.CLEAN,
            " ".join(clean_workspace_command()),
            partial(steps.clean_workspace, runner=runner),
        ),
        PlannedStep(
            steps.COMPILE,
            " ".join(build_package_release_command(layout.backend_package)),
            partial(steps.compile_backend, runner=runner, package=layout.backend_package),
        ),
    ]


def run_plan(plan: list[PlannedStep], context: WorkingContext) -> PipelineResult:
    """
    Execute planned steps in order, fail-fast.

    The context returned by each step is handed to the next one. On failure
    the loop stops and the context is left where the failing step left it.
    """
    results: list[StepResult] = []

    for planned in plan:
        _logger.info(
            "Step started",
            extra={"step": planned.name, "action": planned.description, "cwd": str(context.current)},
        )
        start = time.monotonic()
        context, result = planned.run(context)
        result = result.with_elapsed(time.monotonic() - start)
        results.append(result)

        if not result.success:
            _logger.error(
                "Step failed, aborting build",
                extra={
                    "step": result.step,
                    "exit_code": result.exit_code,
                    "detail": result.message,
                    "elapsed_seconds": round(result.elapsed_seconds, 3),
                },
            )
            break

        _logger.info(
            "Step finished",
            extra={
                "step": result.step,
                "detail": result.message,
                "elapsed_seconds": round(result.elapsed_seconds, 3),
            },
        )

    return PipelineResult(context=context, steps=results)


def run_release_build(
    root: Path,
    layout: LayoutConfig,
    runner: Optional[ToolRunner] = None,
) -> PipelineResult:
    """
    Produce the release artifact set for the repository at `root`.

    Args:
        root: Absolute repository root.
        layout: Where the frontend, static directory and backend package are.
        runner: Tool runner; defaults to real subprocesses.

    Returns:
        PipelineResult whose exit_code is 0 only if every step succeeded.
    """
    if runner is None:
        runner = SubprocessToolRunner()

    resolved = ResolvedLayout.from_config(root, layout)
    plan = build_plan(resolved, runner)
    start = time.monotonic()
    result = run_plan(plan, WorkingContext.at_root(root))

    summary = {
        "exit_code": result.exit_code,
        "steps_run": result.step_names,
        "elapsed_seconds": round(time.monotonic() - start, 3),
    }
    if result.success:
        _logger.info("Release build complete", extra=summary)
    else:
        _logger.error("Release build failed", extra={**summary, "failed_step": result.failed_step.step})
    return result


def preflight(root: Path, layout: LayoutConfig) -> int:
    """
    Dry run: log the plan and whether trunk and cargo are on PATH.

    Nothing is removed and nothing is executed. Returns 0 if both tools are
    found, COMMAND_NOT_FOUND otherwise.
    """
    resolved = ResolvedLayout.from_config(root, layout)
    for index, planned in enumerate(build_plan(resolved, SubprocessToolRunner()), start=1):
        _logger.info(
            "Planned step",
            extra={"position": index, "step": planned.name, "action": planned.description},
        )

    _logger.info(
        "Layout",
        extra={
            "frontend_present": resolved.frontend_dir.is_dir(),
            "static_present": resolved.static_dir.exists(),
        },
    )

    missing = []
    for executable in (BUNDLER_EXECUTABLE, COMPILER_EXECUTABLE):
        check = check_tool(executable)
        if check.found:
            _logger.info("Tool available", extra={"tool": check.name, "path": check.path})
        else:
            _logger.warning("Tool not found on PATH", extra={"tool": check.name})
            missing.append(check.name)

    return COMMAND_NOT_FOUND if missing else 0
