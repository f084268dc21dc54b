# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the release-build orchestrator.

We verify:
  - the full success path runs every step once, in order
  - the first failing step stops the run and its status is the run's status
  - a missing frontend aborts before any tool runs
  - the working context ends where it started
  - nothing is rolled back after a failure
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from relbuild.config.exceptions import ConfigValidationError
from relbuild.config.schema import LayoutConfig
from relbuild.pipeline.orchestrator import ResolvedLayout, preflight, run_release_build
from relbuild.pipeline.tools import COMMAND_NOT_FOUND

if TYPE_CHECKING:
    from conftest import RecordingToolRunner

_FULL_ORDER = ["remove-static", "enter-frontend", "bundle", "return-root", "clean", "compile"]


class TestFullSuccess:
    def test_exits_zero_and_runs_every_step_in_order(self, repo: Path, runner: RecordingToolRunner) -> None:
        result = run_release_build(repo, LayoutConfig(), runner=runner)

        assert result.exit_code == 0
        assert result.success
        assert result.step_names == _FULL_ORDER

    def test_each_tool_invoked_once_in_order(self, repo: Path, runner: RecordingToolRunner) -> None:
        run_release_build(repo, LayoutConfig(), runner=runner)

        assert runner.commands == ["trunk build", "cargo clean", "cargo build"]

    def test_tools_get_the_hard_coded_commands(self, repo: Path, runner: RecordingToolRunner) -> None:
        run_release_build(repo, LayoutConfig(), runner=runner)

        commands = [argv for argv, _ in runner.calls]
        assert commands == [
            ["trunk", "build", "--release"],
            ["cargo", "clean"],
            ["cargo", "build", "-p", "backend", "--release"],
        ]

    def test_bundler_runs_in_frontend_and_cargo_in_root(self, repo: Path, runner: RecordingToolRunner) -> None:
        run_release_build(repo, LayoutConfig(), runner=runner)

        cwds = [cwd for _, cwd in runner.calls]
        assert cwds == [repo / "frontend", repo, repo]

    def test_stale_static_assets_are_gone(self, repo: Path, runner: RecordingToolRunner) -> None:
        run_release_build(repo, LayoutConfig(), runner=runner)

        assert not (repo / "backend" / "static").exists()
        assert (repo / "backend" / "Cargo.toml").is_file()

    def test_works_when_static_dir_never_existed(self, repo: Path, runner: RecordingToolRunner) -> None:
        import shutil

        shutil.rmtree(repo / "backend" / "static")

        result = run_release_build(repo, LayoutConfig(), runner=runner)
        assert result.exit_code == 0


class TestContextRoundTrip:
    def test_context_ends_at_root(self, repo: Path, runner: RecordingToolRunner) -> None:
        result = run_release_build(repo, LayoutConfig(), runner=runner)

        assert result.context.current == repo
        assert result.context.at_repository_root

    def test_process_cwd_is_never_changed(
        self, repo: Path, runner: RecordingToolRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(repo.parent)
        before = os.getcwd()

        run_release_build(repo, LayoutConfig(), runner=runner)

        assert os.getcwd() == before


class TestFailFast:
    @pytest.mark.parametrize(
        "failing_command, expected_commands, expected_steps",
        [
            ("trunk build", ["trunk build"], _FULL_ORDER[:3]),
            ("cargo clean", ["trunk build", "cargo clean"], _FULL_ORDER[:5]),
            ("cargo build", ["trunk build", "cargo clean", "cargo build"], _FULL_ORDER),
        ],
    )
    def test_later_steps_never_run(
        self,
        repo: Path,
        make_runner: type[RecordingToolRunner],
        failing_command: str,
        expected_commands: list[str],
        expected_steps: list[str],
    ) -> None:
        runner = make_runner({failing_command: 101})

        result = run_release_build(repo, LayoutConfig(), runner=runner)

        assert result.exit_code == 101
        assert runner.commands == expected_commands
        assert result.step_names == expected_steps
        assert result.failed_step is not None
        assert result.failed_step.step == expected_steps[-1]

    def test_bundler_status_three_propagates_and_compiler_untouched(
        self, repo: Path, make_runner: type[RecordingToolRunner]
    ) -> None:
        runner = make_runner({"trunk build": 3})

        result = run_release_build(repo, LayoutConfig(), runner=runner)

        assert result.exit_code == 3
        assert not any(cmd.startswith("cargo") for cmd in runner.commands)

    def test_failed_bundle_leaves_static_dir_removed(
        self, repo: Path, make_runner: type[RecordingToolRunner]
    ) -> None:
        runner = make_runner({"trunk build": 1})

        run_release_build(repo, LayoutConfig(), runner=runner)

        assert not (repo / "backend" / "static").exists()


class TestMissingFrontend:
    def test_aborts_at_navigation_with_no_tools_invoked(self, repo: Path, runner: RecordingToolRunner) -> None:
        import shutil

        shutil.rmtree(repo / "frontend")

        result = run_release_build(repo, LayoutConfig(), runner=runner)

        assert result.exit_code != 0
        assert result.step_names == ["remove-static", "enter-frontend"]
        assert runner.calls == []

    def test_frontend_that_is_a_file_is_fatal(self, repo: Path, runner: RecordingToolRunner) -> None:
        import shutil

        shutil.rmtree(repo / "frontend")
        (repo / "frontend").write_text("not a directory", encoding="utf-8")

        result = run_release_build(repo, LayoutConfig(), runner=runner)

        assert result.exit_code == 1
        assert runner.calls == []


class TestCustomLayout:
    def test_layout_paths_and_package_are_honoured(self, tmp_path: Path, runner: RecordingToolRunner) -> None:
        root = tmp_path / "mono"
        (root / "web").mkdir(parents=True)
        (root / "server" / "public").mkdir(parents=True)
        (root / "server" / "public" / "old.css").write_text("x", encoding="utf-8")
        layout = LayoutConfig(frontend_dir="web", static_dir="server/public", backend_package="server")

        result = run_release_build(root, layout, runner=runner)

        assert result.exit_code == 0
        assert not (root / "server" / "public").exists()
        assert runner.calls[0][1] == root / "web"
        assert runner.calls[-1][0] == ["cargo", "build", "-p", "server", "--release"]

    def test_resolved_layout_rejects_escape(self, tmp_path: Path) -> None:
        layout = LayoutConfig.model_construct(
            frontend_dir="frontend", static_dir="backend/../../outside", backend_package="backend"
        )
        with pytest.raises(ConfigValidationError, match="outside"):
            ResolvedLayout.from_config(tmp_path, layout)


class TestPreflight:
    def test_runs_nothing_and_keeps_static_dir(
        self, repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "relbuild.runtime.environment.shutil.which", lambda name: f"/usr/bin/{name}"
        )

        status = preflight(repo, LayoutConfig())

        assert status == 0
        assert (repo / "backend" / "static" / "index.html").is_file()

    def test_missing_tool_reports_not_found(
        self, repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "relbuild.runtime.environment.shutil.which",
            lambda name: None if name == "trunk" else f"/usr/bin/{name}",
        )

        assert preflight(repo, LayoutConfig()) == COMMAND_NOT_FOUND
