# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for relbuild tests.

The pipeline never needs real trunk or cargo here: RecordingToolRunner stands
in for both and writes every call into a journal so tests can check order.
"""

import textwrap
from pathlib import Path
from typing import Sequence

import pytest

from relbuild.pipeline.context import WorkingContext


class RecordingToolRunner:
    """
    Tool runner stand-in.

    `exit_codes` maps a command key ("trunk build", "cargo clean",
    "cargo build") to the status that call should return. Anything not
    listed returns 0.
    """

    def __init__(self, exit_codes: dict[str, int] | None = None) -> None:
        self.exit_codes = exit_codes or {}
        self.calls: list[tuple[list[str], Path]] = []

    def run(self, command: Sequence[str], context: WorkingContext) -> int:
        argv = list(command)
        self.calls.append((argv, context.current))
        return self.exit_codes.get(" ".join(argv[:2]), 0)

    @property
    def commands(self) -> list[str]:
        return [" ".join(argv[:2]) for argv, _ in self.calls]


@pytest.fixture()
def runner() -> RecordingToolRunner:
    return RecordingToolRunner()


@pytest.fixture()
def repo(tmp_path: Path) -> Path:
    """
    A repository root with the conventional layout and a stale build.

        frontend/index.html
        backend/Cargo.toml
        backend/static/index.html
        backend/static/assets/old-app.js
    """
    root = tmp_path / "repo"
    (root / "frontend").mkdir(parents=True)
    (root / "frontend" / "index.html").write_text("<html></html>", encoding="utf-8")
    (root / "backend" / "static" / "assets").mkdir(parents=True)
    (root / "backend" / "Cargo.toml").write_text('[package]\nname = "backend"\n', encoding="utf-8")
    (root / "backend" / "static" / "index.html").write_text("stale", encoding="utf-8")
    (root / "backend" / "static" / "assets" / "old-app.js").write_text("stale", encoding="utf-8")
    return root


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "relbuild.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (missing config_version)."""
    config_content = textwrap.dedent("""\
        global:
          log_level: "INFO"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def make_runner() -> type[RecordingToolRunner]:
    """For tests that need a runner with scripted exit codes."""
    return RecordingToolRunner
