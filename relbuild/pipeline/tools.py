# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
External tool invocation.

The bundler (trunk) and the compiler (cargo) are black boxes. All we need
from them is an exit status, so the seam is a single method:

    run(command, context) -> exit status

SubprocessToolRunner is the real implementation. Tests swap in a recording
stand-in with the same method.

No shell=True, no timeout, no output capture: tool output goes straight to
the operator's terminal and a hung tool hangs the build.
"""

import os
import signal
import subprocess
from typing import Protocol, Sequence

from relbuild.logging.logger import get_logger
from relbuild.pipeline.context import WorkingContext

logger = get_logger(__name__)

BUNDLER_EXECUTABLE = "trunk"
COMPILER_EXECUTABLE = "cargo"

# Shell conventions, so a failed run reports what `sh build.sh` would.
COMMAND_NOT_EXECUTABLE: int = 126
COMMAND_NOT_FOUND: int = 127
SIGNAL_EXIT_BASE: int = 128


def bundle_release_command() -> list[str]:
    return [BUNDLER_EXECUTABLE, "build", "--release"]


def clean_workspace_command() -> list[str]:
    return [COMPILER_EXECUTABLE, "clean"]


def build_package_release_command(package: str) -> list[str]:
    return [COMPILER_EXECUTABLE, "build", "-p", package, "--release"]


class ToolRunner(Protocol):
    """Anything that can run a command in a working context and report its exit status."""

    def run(self, command: Sequence[str], context: WorkingContext) -> int:
        ...


def normalize_returncode(returncode: int) -> int:
    """
    Map a subprocess return code onto a shell-style exit status.

    subprocess reports death-by-signal as a negative number; a shell reports
    128 + signal number. The latter is what we propagate so the value is a
    valid process exit status.
    """
    if returncode < 0:
        return SIGNAL_EXIT_BASE + (-returncode)
    return returncode


class SubprocessToolRunner:
    """Runs tools as child processes, blocking until they exit."""

    def run(self, command: Sequence[str], context: WorkingContext) -> int:
        argv = list(command)
        cwd = str(context.current)
        logger.debug("Spawning tool", extra={"command": argv, "cwd": cwd})

        try:
            completed = subprocess.run(argv, cwd=cwd, check=False)
        except FileNotFoundError:
            # Also raised when cwd has gone away between steps.
            logger.error(
                "Executable not found, is it installed and on PATH?",
                extra={"command": argv, "cwd": cwd, "cwd_exists": os.path.isdir(cwd)},
            )
            return COMMAND_NOT_FOUND
        except OSError as err:
            # PermissionError, exec format error, argument list too long.
            logger.error(
                "Executable could not be run",
                extra={"command": argv, "errno": err.errno, "error": str(err)},
            )
            return COMMAND_NOT_EXECUTABLE

        status = normalize_returncode(completed.returncode)
        if completed.returncode < 0:
            try:
                signal_name = signal.Signals(-completed.returncode).name
            except ValueError:
                signal_name = str(-completed.returncode)
            logger.warning(
                "Tool terminated by signal",
                extra={"command": argv, "signal": signal_name, "exit_code": status},
            )
        return status
