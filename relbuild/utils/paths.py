# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for relbuild.

The rules:
  - layout paths are relative to the repository root
  - a layout path must never escape the repository root
  - symlinks are not followed when checking containment, so a symlinked
    static directory is judged (and later removed) as the link itself
"""

import os
from pathlib import Path


def resolve_repository_root() -> Path:
    """
    The repository root is wherever relbuild was started from.

    Only the path is normalised here. Whether it exists is checked by the
    pipeline steps, not assumed.
    """
    return Path(os.path.abspath(Path.cwd()))


def join_within_root(root: Path, relative: str) -> Path:
    """
    Join a layout path onto the repository root and make sure it stays inside.

    The check is lexical (os.path.normpath), not resolve(), because the
    static directory may be a symlink that we must not follow.

    Raises:
        ValueError: If the joined path escapes the root or is the root itself.
    """
    normalized_root = Path(os.path.normpath(root))
    target = Path(os.path.normpath(normalized_root / relative))

    if target == normalized_root or normalized_root not in target.parents:
        raise ValueError(
            f"Path '{relative}' resolves to '{target}' which is outside "
            f"the repository root '{normalized_root}'. This is not allowed."
        )

    return target
