# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for relbuild.

Configuration only covers what sits around the build: logging and where the
frontend and backend live inside the repository. Tool commands are hard-coded
in relbuild.pipeline.tools and are deliberately not configurable.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

from pathlib import PurePosixPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}, got '{value}'")
        return upper


class LayoutConfig(BaseModel):
    """
    Where things live, relative to the repository root.

    The bundler must be set up (in the frontend's own config) to write into
    static_dir. relbuild only removes that directory before the frontend
    build, it never copies anything into it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    frontend_dir: str = Field(default="frontend", description="Frontend project subtree")
    backend_package: str = Field(
        default="backend",
        min_length=1,
        description="Cargo package name passed to `cargo build -p`",
    )
    static_dir: str = Field(
        default="backend/static",
        description="Static-asset directory the backend serves from",
    )

    @field_validator("frontend_dir", "static_dir")
    @classmethod
    def _check_relative(cls, value: str) -> str:
        path = PurePosixPath(value)
        if not value or path.is_absolute() or ".." in path.parts:
            raise ValueError(f"'{value}' must be a relative path inside the repository root")
        if path == PurePosixPath("."):
            raise ValueError("path must not point at the repository root itself")
        return value


class RelbuildConfig(BaseModel):
    """
    Top-level config container.

    A YAML file must carry `global:`. `layout:` is optional and falls back to
    the conventional frontend/ + backend/static layout.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    layout: LayoutConfig = Field(default_factory=LayoutConfig)


def default_config() -> RelbuildConfig:
    """The config used when no --config file is given."""
    return RelbuildConfig.model_validate({"global": {"config_version": "1.0.0"}})
