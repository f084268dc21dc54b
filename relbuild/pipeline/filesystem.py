# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Recursive removal with `rm -rf` semantics.

An absent target is success, so removing twice ends in the same state.
Symlinks are unlinked, never followed. Anything that exists but cannot be
deleted raises OSError for the caller to turn into a failed step.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path

from relbuild.logging.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class RemovalResult:
    """What a removal actually did."""

    path: Path
    existed: bool
    removed_files: int
    freed_bytes: int


def _count_tree(path: Path) -> tuple[int, int]:
    """Count files and bytes under a directory without following symlinks."""
    files = 0
    total = 0
    for entry in path.rglob("*"):
        try:
            if entry.is_file() and not entry.is_symlink():
                files += 1
                total += entry.stat().st_size
        except OSError:
            continue
    return files, total


def remove_tree(path: Path) -> RemovalResult:
    """
    Remove `path` and everything under it, if it exists.

    Raises:
        OSError: The path exists but could not be removed (permissions,
            files in use). No partial-removal recovery is attempted.
    """
    if not path.exists() and not path.is_symlink():
        _logger.debug("Nothing to remove", extra={"path": str(path)})
        return RemovalResult(path=path, existed=False, removed_files=0, freed_bytes=0)

    if path.is_dir() and not path.is_symlink():
        files, size = _count_tree(path)
        shutil.rmtree(path)
    else:
        files = 1
        size = path.lstat().st_size
        path.unlink()

    _logger.debug(
        "Removed path",
        extra={"path": str(path), "removed_files": files, "freed_bytes": size},
    )
    return RemovalResult(path=path, existed=True, removed_files=files, freed_bytes=size)
