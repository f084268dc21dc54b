# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader for relbuild.

Without --config the conventional layout is used and nothing is read from
disk. With --config the named file must exist, parse as a YAML mapping and
validate; there is no fallback to defaults once a file has been named.

Validation errors are reported one per line as `section.field: problem`, so
an operator can see at a glance which layout path or logging option to fix.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from relbuild.config.exceptions import ConfigLoadError, ConfigValidationError
from relbuild.config.schema import RelbuildConfig, default_config

# Keys people reach for that relbuild deliberately does not support.
_UNSUPPORTED_HINTS: dict[str, str] = {
    "bundler_flags": "trunk arguments are fixed to `trunk build --release`",
    "cargo_flags": "cargo arguments are fixed to `cargo clean` and `cargo build -p <package> --release`",
    "parallel": "the frontend and backend are always built one after the other",
}


def _read_mapping(config_path: Path) -> dict[str, Any]:
    """
    Read the file and return its top-level YAML mapping.

    Raises:
        ConfigLoadError: Missing, unreadable, not YAML, or not a mapping.
    """
    if not config_path.is_file():
        reason = "not found" if not config_path.exists() else "is not a file"
        raise ConfigLoadError(f"Config file {reason}: {config_path}")

    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"{config_path} must contain a YAML mapping with a `global:` section, "
            f"got {type(parsed).__name__}"
        )
    return parsed


def _describe(err: ValidationError) -> list[str]:
    """Flatten pydantic errors into `section.field: message` lines."""
    lines = []
    for error in err.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        message = error["msg"]
        field = str(error["loc"][-1]) if error["loc"] else ""
        if error["type"] == "extra_forbidden" and field in _UNSUPPORTED_HINTS:
            message = f"{message} ({_UNSUPPORTED_HINTS[field]})"
        lines.append(f"{location}: {message}")
    return lines


def load_config(config_path: Path) -> RelbuildConfig:
    """
    Load and validate a config file.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations, including layout paths that
            are absolute or climb out of the repository root.
    """
    raw_data = _read_mapping(config_path)

    try:
        return RelbuildConfig.model_validate(raw_data)
    except ValidationError as err:
        details = "\n  ".join(_describe(err))
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n  {details}"
        ) from err


def resolve_config(config_path: Optional[Path]) -> RelbuildConfig:
    """The config named on the command line, or the defaults when none was given."""
    if config_path is None:
        return default_config()
    return load_config(config_path)
