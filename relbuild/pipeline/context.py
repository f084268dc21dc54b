# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Working directory context.

The pipeline moves between the repository root and the frontend subtree.
Instead of calling os.chdir (process-wide state), each step receives a
WorkingContext and returns the context the next step should run in. Tools
get `context.current` as their cwd.
"""

from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True)
class WorkingContext:
    """Where the pipeline currently is, and where it started."""

    root: Path
    current: Path

    @classmethod
    def at_root(cls, root: Path) -> "WorkingContext":
        return cls(root=root, current=root)

    def moved_to(self, directory: Path) -> "WorkingContext":
        return replace(self, current=directory)

    @property
    def at_repository_root(self) -> bool:
        return self.current == self.root
