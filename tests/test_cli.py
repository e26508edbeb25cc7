"""Tests for CLI commands: pnpm/git are mocked, no Node toolchain needed."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from monodeploy.cli import _format_size, main
from monodeploy.exceptions import BuildError, ExtractError


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("monodeploy.cli.setup_logging") as mock_setup:
        yield mock_setup


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestFormatSize:
    def test_bytes(self):
        assert _format_size(512) == "512 B"

    def test_kilobytes(self):
        assert _format_size(2048) == "2.0 KB"

    def test_megabytes(self):
        assert _format_size(5 * 1024 * 1024) == "5.0 MB"


# ── check ──


class TestCheck:
    def test_consistent(self, runner, workspace, make_package):
        make_package("mcp-a", dependencies={"lib": "1.0.0"})
        make_package("mcp-b", dependencies={"lib": "1.0.0"})
        result = runner.invoke(main, ["check", "--root", str(workspace)])
        assert result.exit_code == 0
        assert "All dependency versions are consistent across 2 package(s)" in result.output

    def test_inconsistent(self, runner, workspace, make_package):
        make_package("mcp-a", dependencies={"lib": "1.0.0"})
        make_package("mcp-b", dependencies={"lib": "1.0.0"})
        make_package("mcp-c", dependencies={"lib": "2.0.0"})
        result = runner.invoke(main, ["check", "--root", str(workspace)])
        assert result.exit_code == 1
        assert "Inconsistent versions for lib:" in result.output
        assert "1.0.0 used by: mcp-a, mcp-b" in result.output
        assert "2.0.0 used by: mcp-c" in result.output
        assert "pnpm.overrides" in result.output

    def test_json_output(self, runner, workspace, make_package):
        make_package("mcp-a", dependencies={"lib": "1.0.0"})
        make_package("mcp-b", dependencies={"lib": "^1.0.0"})
        result = runner.invoke(main, ["check", "--root", str(workspace), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["violations"][0]["dependency"] == "lib"

    def test_custom_prefix(self, runner, workspace, make_package):
        make_package("svc-a", dependencies={"lib": "1.0.0"})
        make_package("svc-b", dependencies={"lib": "2.0.0"})
        make_package("mcp-a", dependencies={"lib": "3.0.0"})
        result = runner.invoke(main, ["check", "--root", str(workspace), "--prefix", "svc-", "--json"])
        data = json.loads(result.output)
        assert data["packages"] == ["svc-a", "svc-b"]

    def test_prefix_from_environment(self, runner, workspace, make_package):
        make_package("svc-a", dependencies={"lib": "1.0.0"})
        result = runner.invoke(
            main,
            ["check", "--json"],
            env={"MONODEPLOY_ROOT": str(workspace), "MONODEPLOY_PACKAGE_PREFIX": "svc-"},
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["packages"] == ["svc-a"]

    def test_skipped_manifest_is_a_warning(self, runner, workspace, make_package):
        make_package("mcp-a", dependencies={"lib": "1.0.0"})
        make_package("mcp-b", raw="{oops")
        result = runner.invoke(main, ["check", "--root", str(workspace)])
        assert result.exit_code == 0
        assert "Warning: skipped mcp-b (unreadable)" in result.output

    def test_missing_root(self, runner, tmp_path: Path):
        result = runner.invoke(main, ["check", "--root", str(tmp_path / "nope")])
        assert result.exit_code == 2

    def test_verbose_sets_debug(self, runner, workspace, _no_logging_setup):
        runner.invoke(main, ["-v", "check", "--root", str(workspace)])
        assert _no_logging_setup.call_args[0][0] == "DEBUG"

    def test_bad_timeout_is_usage_error(self, runner, workspace):
        result = runner.invoke(
            main,
            ["check", "--root", str(workspace)],
            env={"MONODEPLOY_COMMAND_TIMEOUT": "later"},
        )
        assert result.exit_code == 2
        assert "MONODEPLOY_COMMAND_TIMEOUT" in result.output


# ── bundle ──


class TestBundle:
    def test_bundle_with_mocked_toolchain(self, runner, workspace):
        (workspace / "mcp-opener").mkdir()
        toolchain = MagicMock()
        target = workspace / "dist"
        with patch("monodeploy.cli.PnpmToolchain", return_value=toolchain) as mock_cls:
            result = runner.invoke(
                main,
                [
                    "bundle",
                    "--root",
                    str(workspace),
                    "--target",
                    str(target),
                    "--service",
                    "mcp-opener",
                    "--service",
                    "mcp-gitlab-ci",
                ],
                env={"MONODEPLOY_PNPM": "/opt/pnpm"},
            )
        assert result.exit_code == 0, result.output
        assert mock_cls.call_args.kwargs["pnpm"] == "/opt/pnpm"
        toolchain.build_all.assert_called_once_with(workspace.resolve(), "mcp-")
        toolchain.extract.assert_called_once()
        assert "[-] mcp-gitlab-ci  source_missing" in result.output
        assert "[+] mcp-opener  deployed" in result.output
        assert "Bundle size:" in result.output
        assert target.is_dir()

    def test_build_failure_exit_code(self, runner, workspace):
        toolchain = MagicMock()
        toolchain.build_all.side_effect = BuildError(["pnpm"], 1, "type error")
        with patch("monodeploy.cli.PnpmToolchain", return_value=toolchain):
            result = runner.invoke(
                main,
                ["bundle", "--root", str(workspace), "--target", str(workspace / "out"), "--json"],
            )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["build_failed"] is True
        assert {s["status"] for s in data["services"]} == {"build_failed"}
        assert len(data["services"]) == 6

    def test_blank_extract_error_text(self, runner, workspace):
        (workspace / "mcp-opener").mkdir()
        toolchain = MagicMock()
        toolchain.extract.side_effect = ExtractError(["pnpm"], 1, "  \n  ")
        with patch("monodeploy.cli.PnpmToolchain", return_value=toolchain):
            result = runner.invoke(
                main,
                [
                    "bundle",
                    "--root",
                    str(workspace),
                    "--target",
                    str(workspace / "out"),
                    "--service",
                    "mcp-opener",
                ],
            )
        assert result.exit_code == 0, result.output
        assert "[!] mcp-opener  extract_failed" in result.output

    def test_unknown_service(self, runner, workspace):
        result = runner.invoke(main, ["bundle", "--root", str(workspace), "--service", "mcp-nope"])
        assert result.exit_code == 2
        assert "mcp-nope" in result.output


class TestServices:
    def test_lists_registry(self, runner):
        result = runner.invoke(main, ["services"])
        assert result.exit_code == 0
        assert "mcp-stream-workflow-status" in result.output
        assert "dashboard/dist -> dashboard/dist (required)" in result.output
        assert "prompts -> prompts (optional)" in result.output

    def test_configured_prefix(self, runner):
        result = runner.invoke(main, ["services", "--prefix", "mcp-stream-"])
        assert result.exit_code == 0
        assert "-> workflow-status" in result.output
