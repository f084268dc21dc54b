# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Result types for pipeline steps and whole runs.

These are plain frozen dataclasses. A StepResult is consumed immediately by
the orchestrator's fail-fast check, and the PipelineResult is what the CLI
turns into a process exit code.
"""

from dataclasses import dataclass, field
from typing import Optional

from relbuild.pipeline.context import WorkingContext

SUCCESS_STATUS: int = 0


@dataclass(frozen=True)
class StepResult:
    """Outcome of one pipeline step."""

    step: str
    exit_code: int
    message: str = ""
    elapsed_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.exit_code == SUCCESS_STATUS

    def with_elapsed(self, elapsed_seconds: float) -> "StepResult":
        return StepResult(
            step=self.step,
            exit_code=self.exit_code,
            message=self.message,
            elapsed_seconds=elapsed_seconds,
        )


@dataclass(frozen=True)
class PipelineResult:
    """
    Outcome of a full run.

    `steps` only holds the steps that actually ran, in order. When a step
    fails it is the last entry and nothing after it was attempted.
    """

    context: WorkingContext
    steps: list[StepResult] = field(default_factory=list)

    @property
    def failed_step(self) -> Optional[StepResult]:
        for result in self.steps:
            if not result.success:
                return result
        return None

    @property
    def success(self) -> bool:
        return self.failed_step is None

    @property
    def exit_code(self) -> int:
        failed = self.failed_step
        return SUCCESS_STATUS if failed is None else failed.exit_code

    @property
    def step_names(self) -> list[str]:
        return [result.step for result in self.steps]
