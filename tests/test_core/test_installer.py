"""Unit tests for nginit.core.installer."""

from __future__ import annotations

import pytest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from nginit.core.installer import (
    LEGACY_PEER_DEPS_FLAG,
    build_ng_new_args,
    create_angular_project,
    init_npm_project,
    install_angular_cli,
    install_node_with_winget,
    install_packages,
    manual_install_hint,
    nvm_install_instructions,
    run_npm_install,
)
from nginit.exceptions import CommandError

PROJECT = Path("/work/shop")


def _command_error(argv) -> CommandError:
    return CommandError("failed", command=argv, returncode=1, stderr="ERESOLVE")


@pytest.mark.unit
class TestInstallPackages:
    """Tests for install_packages and run_npm_install."""

    @pytest.mark.asyncio
    async def test_success_first_try(self) -> None:
        """Test a clean install runs once without the legacy flag."""
        run = AsyncMock(return_value=(0, "", ""))
        with patch("nginit.core.installer.run_command", run):
            result = await install_packages(["ngx-toastr@^18.0.0"], PROJECT)

        run.assert_awaited_once()
        assert run.call_args.args[0] == ["npm", "install", "ngx-toastr@^18.0.0"]
        assert run.call_args.kwargs["cwd"] == PROJECT
        assert result.packages == ("ngx-toastr@^18.0.0",)
        assert result.legacy_peer_deps is False

    @pytest.mark.asyncio
    async def test_dev_dependencies(self) -> None:
        """Test dev installs pass --save-dev before the packages."""
        run = AsyncMock(return_value=(0, "", ""))
        with patch("nginit.core.installer.run_command", run):
            await install_packages(["prettier"], PROJECT, dev=True)

        assert run.call_args.args[0] == ["npm", "install", "--save-dev", "prettier"]

    @pytest.mark.asyncio
    async def test_retries_with_legacy_peer_deps(self) -> None:
        """Test a failed install is retried once with --legacy-peer-deps."""
        run = AsyncMock(return_value=(1, "", "ERESOLVE"))
        check = AsyncMock(return_value="")
        with patch("nginit.core.installer.run_command", run), patch(
            "nginit.core.installer.check_command", check
        ):
            result = await install_packages(["a", "b"], PROJECT)

        check.assert_awaited_once()
        assert check.call_args.args[0] == ["npm", "install", LEGACY_PEER_DEPS_FLAG, "a", "b"]
        assert result.legacy_peer_deps is True

    @pytest.mark.asyncio
    async def test_retry_failure_raises(self) -> None:
        """Test a failing retry propagates CommandError."""
        run = AsyncMock(return_value=(1, "", "ERESOLVE"))
        check = AsyncMock(side_effect=_command_error(["npm", "install"]))
        with patch("nginit.core.installer.run_command", run), patch(
            "nginit.core.installer.check_command", check
        ):
            with pytest.raises(CommandError):
                await install_packages(["a"], PROJECT)

    @pytest.mark.asyncio
    async def test_no_retry_when_disabled(self) -> None:
        """Test legacy_retry=False fails immediately."""
        run = AsyncMock(return_value=(1, "", "ERESOLVE"))
        check = AsyncMock()
        with patch("nginit.core.installer.run_command", run), patch(
            "nginit.core.installer.check_command", check
        ):
            with pytest.raises(CommandError) as exc_info:
                await install_packages(["a"], PROJECT, legacy_retry=False)

        check.assert_not_awaited()
        assert exc_info.value.stderr == "ERESOLVE"

    @pytest.mark.asyncio
    async def test_empty_packages(self) -> None:
        """Test there is nothing to install."""
        with pytest.raises(ValueError):
            await install_packages([], PROJECT)

    @pytest.mark.asyncio
    async def test_plain_npm_install(self) -> None:
        """Test run_npm_install passes no package arguments."""
        run = AsyncMock(return_value=(0, "", ""))
        with patch("nginit.core.installer.run_command", run):
            result = await run_npm_install(PROJECT)

        assert run.call_args.args[0] == ["npm", "install"]
        assert result.packages == ()


@pytest.mark.unit
class TestMiscCommands:
    """Tests for the smaller npm wrappers."""

    def test_manual_install_hint(self) -> None:
        """Test the hint names the directory and the packages."""
        hint = manual_install_hint(PROJECT, ["a@^1.0.0", "b"])

        assert hint == [f"cd {PROJECT}", "npm install a@^1.0.0 b --force"]

    @pytest.mark.asyncio
    async def test_init_npm_project(self) -> None:
        """Test npm init -y reports success."""
        with patch("nginit.core.installer.run_command", AsyncMock(return_value=(1, "", "x"))):
            assert await init_npm_project(PROJECT) is False

    @pytest.mark.asyncio
    async def test_install_angular_cli(self) -> None:
        """Test a pinned global CLI install."""
        check = AsyncMock(return_value="")
        with patch("nginit.core.installer.check_command", check):
            await install_angular_cli("17.3.0")

        assert check.call_args.args[0] == ["npm", "install", "-g", "@angular/cli@17.3.0"]

    @pytest.mark.asyncio
    async def test_install_angular_cli_latest(self) -> None:
        """Test 'latest' installs the bare package name."""
        check = AsyncMock(return_value="")
        with patch("nginit.core.installer.check_command", check):
            await install_angular_cli()

        assert check.call_args.args[0] == ["npm", "install", "-g", "@angular/cli"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "version, package_id",
        [("LTS", "OpenJS.NodeJS.LTS"), ("current", "OpenJS.NodeJS")],
    )
    async def test_winget(self, version: str, package_id: str) -> None:
        """Test the winget package id follows the requested channel."""
        run = AsyncMock(return_value=(0, "", ""))
        with patch("nginit.core.installer.run_command", run):
            assert await install_node_with_winget(version) is True

        assert run.call_args.args[0] == ["winget", "install", package_id]


@pytest.mark.unit
class TestProjectGeneration:
    """Tests for build_ng_new_args and create_angular_project."""

    def test_minimal(self) -> None:
        """Test no version and no options."""
        assert build_ng_new_args("shop") == ["npx", "@angular/cli", "new", "shop"]

    def test_options(self) -> None:
        """Test flags and booleans render as npm expects."""
        args = build_ng_new_args(
            "shop",
            "17.3.0",
            {"skip_install": True, "routing": True, "style": "scss", "strict": False, "standalone": None},
        )

        assert args == [
            "npx",
            "@angular/cli@17.3.0",
            "new",
            "shop",
            "--skip-install",
            "--routing=true",
            "--style=scss",
            "--strict=false",
        ]

    def test_unknown_options_ignored(self) -> None:
        """Test options ng new does not take are dropped."""
        assert build_ng_new_args("shop", "17.3.0", {"ssr": True, "style": ""})[-1] == "shop"

    @pytest.mark.asyncio
    async def test_create_streams_output(self) -> None:
        """Test ng new runs uncaptured in the requested directory."""
        check = AsyncMock(return_value="")
        with patch("nginit.core.installer.check_command", check):
            await create_angular_project("shop", "17.3.0", {"routing": True}, cwd=PROJECT)

        assert check.call_args.kwargs["cwd"] == PROJECT
        assert check.call_args.kwargs["capture"] is False

    @pytest.mark.asyncio
    async def test_create_failure(self) -> None:
        """Test a failed ng new raises CommandError."""
        check = AsyncMock(side_effect=_command_error(["npx"]))
        with patch("nginit.core.installer.check_command", check):
            with pytest.raises(CommandError):
                await create_angular_project("shop")


@pytest.mark.unit
class TestNvmInstructions:
    """Tests for nvm_install_instructions."""

    def test_windows(self) -> None:
        """Test Windows points at nvm-windows releases."""
        info = nvm_install_instructions("Windows")

        assert info.os == "Windows"
        assert "nvm-windows" in info.download
        assert info.install is None

    def test_macos(self) -> None:
        """Test macOS gets the curl installer and shell reload hints."""
        info = nvm_install_instructions("Darwin")

        assert info.os == "macOS"
        assert info.install.startswith("curl -o-")
        assert any("zshrc" in step for step in info.post_install)

    def test_linux_default(self) -> None:
        """Test any other system gets Linux instructions with a wget alternative."""
        info = nvm_install_instructions("FreeBSD")

        assert info.os == "Linux"
        assert info.alternative.startswith("wget")

    def test_detects_platform(self) -> None:
        """Test the running platform is used when none is given."""
        with patch("nginit.core.installer.platform.system", return_value="Darwin"):
            assert nvm_install_instructions().os == "macOS"
