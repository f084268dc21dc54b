# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Environment validation for relbuild.

Checks that the machine can run the orchestrator at all (Python version) and,
for dry runs, whether the external build tools are reachable on PATH. A real
run does not pre-check tools: a missing tool surfaces as exit 127 from the
step that needed it.
"""

import platform
import shutil
import sys
from dataclasses import dataclass
from typing import NamedTuple, Optional

MINIMUM_PYTHON_MAJOR = 3
MINIMUM_PYTHON_MINOR = 11


class SystemInfo(NamedTuple):
    """Snapshot of the current system environment."""

    python_version: str
    platform: str


@dataclass(frozen=True)
class ToolCheck:
    """Result of looking up one external executable."""

    name: str
    found: bool
    path: Optional[str]


def get_python_version() -> tuple[int, int, int]:
    """Return the current Python version as a (major, minor, micro) tuple."""
    return sys.version_info[:3]


def check_minimum_python() -> None:
    """
    Verify we're running Python 3.11+.

    Raises:
        RuntimeError: If Python version is below 3.11.
    """
    major, minor, _ = get_python_version()
    if major < MINIMUM_PYTHON_MAJOR or (
        major == MINIMUM_PYTHON_MAJOR and minor < MINIMUM_PYTHON_MINOR
    ):
        raise RuntimeError(
            f"relbuild requires Python >= {MINIMUM_PYTHON_MAJOR}.{MINIMUM_PYTHON_MINOR}, "
            f"but you're running {major}.{minor}. Please upgrade."
        )


def get_system_info() -> SystemInfo:
    """Collect basic system information for logging and diagnostics."""
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
    )


def check_tool(executable: str) -> ToolCheck:
    """Look up an executable on PATH."""
    location = shutil.which(executable)
    return ToolCheck(name=executable, found=location is not None, path=location)
