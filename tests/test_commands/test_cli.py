"""Unit tests for the ng-init command line."""

from __future__ import annotations

import json
from pathlib import Path
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from nginit.cli import cli
from nginit.__version__ import __version__
from nginit.core.profiles import ProfileStore
from nginit.exceptions import NetworkError, WizardAbortedError
from nginit.models import (
    CompatibilityResult,
    LibraryRequest,
    LibraryResolution,
    ResolutionSource,
    SearchHit,
    SystemVersions,
)
from nginit.models.compatibility import REASON_NO_COMPATIBLE_VERSION, REASON_PEER_SATISFIED
from nginit.models.profile import Profile, ProfileLibrary
from nginit.models.registry import AngularVersions

NODE_RANGE = "^18.19.1 || ^20.11.1 || >=22.0.0"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every command in an empty directory with no user config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NGINIT_CONFIG", raising=False)
    with patch("nginit.config.user_config_path", return_value=tmp_path / "home" / "config.toml"):
        yield


@pytest.fixture
def profiles_config(tmp_path: Path) -> Path:
    """Config file pointing the profile store into the temp directory."""
    path = tmp_path / "nginit.toml"
    path.write_text(
        f'[nginit]\nprofiles_dir = "{(tmp_path / "profiles").as_posix()}"\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def store(tmp_path: Path) -> ProfileStore:
    return ProfileStore(tmp_path / "profiles")


def fake_session(registry=None, resolver=None):
    """Stand-in for registry_session yielding the given collaborators."""

    @asynccontextmanager
    async def session(config):
        yield SimpleNamespace(registry=registry or MagicMock(), resolver=resolver or MagicMock())

    return session


def _resolution(name: str, spec: str, *, warning: bool = False) -> LibraryResolution:
    if warning:
        result = CompatibilityResult(
            resolved_version_spec=spec,
            source=ResolutionSource.FALLBACK,
            reason=REASON_NO_COMPATIBLE_VERSION,
            warning=True,
            detail="inspected 20 stable version(s)",
        )
    else:
        result = CompatibilityResult(
            resolved_version_spec=spec,
            source=ResolutionSource.DYNAMIC,
            reason=REASON_PEER_SATISFIED,
            peer_dependency_seen="^17.0.0",
            version=spec.lstrip("^"),
        )
    return LibraryResolution(LibraryRequest.parse(name), result)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestRootGroup:
    """Tests for the top-level group and global options."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"ng-init {__version__}" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["-h"])

        assert result.exit_code == 0
        for command in ("new", "doctor", "resolve", "versions", "search", "profile"):
            assert command in result.output

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a config error stops before any command runs."""
        bad = tmp_path / "bad.toml"
        bad.write_text("[nginit]\nscan_limit = 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["-c", str(bad), "doctor"])

        assert result.exit_code == 1
        assert "scan_limit must be at least 1" in result.output

    def test_missing_config_file_is_usage_error(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["-c", "missing.toml", "doctor"])

        assert result.exit_code == 2

    def test_no_subcommand_runs_wizard(self, runner: CliRunner) -> None:
        """Test bare ``ng-init`` starts the new-project wizard."""
        with patch("nginit.commands.new._new_async", new_callable=AsyncMock) as run:
            result = runner.invoke(cli, [])

        assert result.exit_code == 0
        run.assert_awaited_once()
        options = run.await_args.args[1]
        assert options.project_name is None
        assert options.directory == Path.cwd().resolve()


# ---------------------------------------------------------------------------
# new
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestNewCommand:
    """Tests for the new command."""

    def test_options_reach_the_wizard(self, runner: CliRunner, tmp_path: Path) -> None:
        with patch("nginit.commands.new._new_async", new_callable=AsyncMock) as run:
            result = runner.invoke(
                cli,
                [
                    "new",
                    "shop",
                    "-a",
                    "17.3.0",
                    "-t",
                    "Material",
                    "-d",
                    str(tmp_path),
                    "--skip-install",
                    "--skip-git",
                ],
            )

        assert result.exit_code == 0
        options = run.await_args.args[1]
        assert options.project_name == "shop"
        assert options.angular_version == "17.3.0"
        assert options.template == "material"
        assert options.directory == tmp_path.resolve()
        assert options.skip_install is True
        assert options.skip_git is True

    def test_unknown_template(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["new", "shop", "-t", "react"])

        assert result.exit_code == 2

    def test_wizard_abort_exits_one(self, runner: CliRunner) -> None:
        """Test a stopped wizard prints its reason as a warning."""
        abort = WizardAbortedError("Node.js is not installed", step="environment")
        with patch("nginit.commands.new._new_async", new_callable=AsyncMock, side_effect=abort):
            result = runner.invoke(cli, ["new", "shop"])

        assert result.exit_code == 1
        assert "[WARNING] Node.js is not installed" in result.output

    def test_error_exits_one(self, runner: CliRunner) -> None:
        error = NetworkError("registry down")
        with patch("nginit.commands.new._new_async", new_callable=AsyncMock, side_effect=error):
            result = runner.invoke(cli, ["new", "shop"])

        assert result.exit_code == 1
        assert "[ERROR]" in result.output


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestResolveCommand:
    """Tests for the resolve command."""

    def test_json_output(self, runner: CliRunner) -> None:
        resolved = [_resolution("@ngrx/store", "^17.2.0"), _resolution("ngx-toastr", "^18.0.0")]
        with patch("nginit.commands.resolve.registry_session", fake_session()), patch(
            "nginit.commands.resolve.resolve_libraries",
            new_callable=AsyncMock,
            return_value=resolved,
        ) as resolve_libraries:
            result = runner.invoke(
                cli, ["resolve", "@ngrx/store", "ngx-toastr", "-a", "17.3.0", "-f", "json"]
            )

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["angular_version"] == "17.3.0"
        assert [lib["name"] for lib in payload["libraries"]] == ["@ngrx/store", "ngx-toastr"]
        assert payload["libraries"][0]["result"]["resolved_version_spec"] == "^17.2.0"
        assert payload["libraries"][0]["result"]["source"] == "dynamic"

        requests = resolve_libraries.await_args.args[1]
        assert requests == [LibraryRequest("@ngrx/store"), LibraryRequest("ngx-toastr")]
        assert resolve_libraries.await_args.args[2] == "17.3.0"

    def test_warning_exits_one(self, runner: CliRunner) -> None:
        """Test a fallback with a warning is shown and fails the command."""
        resolved = [_resolution("legacy-widget", "^2.0.0", warning=True)]
        with patch("nginit.commands.resolve.registry_session", fake_session()), patch(
            "nginit.commands.resolve.resolve_libraries",
            new_callable=AsyncMock,
            return_value=resolved,
        ):
            result = runner.invoke(cli, ["resolve", "legacy-widget", "-a", "17.3.0"])

        assert result.exit_code == 1
        assert "inspected 20 stable version(s)" in result.output

    def test_library_error_exits_one(self, runner: CliRunner) -> None:
        failed = [LibraryResolution(LibraryRequest("ngx-mask"), error="boom")]
        with patch("nginit.commands.resolve.registry_session", fake_session()), patch(
            "nginit.commands.resolve.resolve_libraries",
            new_callable=AsyncMock,
            return_value=failed,
        ):
            result = runner.invoke(cli, ["resolve", "ngx-mask", "-a", "17.3.0", "-f", "json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["libraries"][0]["error"] == "boom"

    def test_empty_library_name(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["resolve", " ", "-a", "17.3.0"])

        assert result.exit_code == 2

    def test_angular_version_required(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["resolve", "ngx-mask"])

        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# doctor
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestDoctorCommand:
    """Tests for the doctor command."""

    def test_invalid_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["doctor", "-a", "17"])

        assert result.exit_code == 2
        assert "not a valid version" in result.output

    def test_healthy_toolchain(self, runner: CliRunner) -> None:
        system = SystemVersions(node="20.11.1", npm="10.2.4", nvm="0.39.7", angular_cli="17.3.0")
        with patch(
            "nginit.commands.doctor.environment.get_system_versions",
            new_callable=AsyncMock,
            return_value=system,
        ):
            result = runner.invoke(cli, ["doctor"])

        assert result.exit_code == 0
        assert "v20.11.1" in result.output

    def test_missing_node(self, runner: CliRunner) -> None:
        with patch(
            "nginit.commands.doctor.environment.get_system_versions",
            new_callable=AsyncMock,
            return_value=SystemVersions(),
        ):
            result = runner.invoke(cli, ["doctor"])

        assert result.exit_code == 1
        assert "Node.js is required" in result.output
        assert "not installed" in result.output

    def test_node_too_old_for_angular(self, runner: CliRunner) -> None:
        """Test an unsatisfied engines range recommends a Node.js version."""
        system = SystemVersions(node="16.20.2", npm="8.19.4", nvm="0.39.7", angular_cli="17.3.0")
        with patch(
            "nginit.commands.doctor.environment.get_system_versions",
            new_callable=AsyncMock,
            return_value=system,
        ), patch("nginit.commands.doctor.registry_session", fake_session()), patch(
            "nginit.commands.doctor.engines.node_requirement_for_angular",
            new_callable=AsyncMock,
            return_value=NODE_RANGE,
        ):
            result = runner.invoke(cli, ["doctor", "-a", "17.3.0"])

        assert result.exit_code == 1
        assert "Recommended Node.js" in result.output

    def test_node_satisfies_angular(self, runner: CliRunner) -> None:
        system = SystemVersions(node="20.11.1", npm="10.2.4", nvm="0.39.7", angular_cli="17.3.0")
        with patch(
            "nginit.commands.doctor.environment.get_system_versions",
            new_callable=AsyncMock,
            return_value=system,
        ), patch("nginit.commands.doctor.registry_session", fake_session()), patch(
            "nginit.commands.doctor.engines.node_requirement_for_angular",
            new_callable=AsyncMock,
            return_value=NODE_RANGE,
        ):
            result = runner.invoke(cli, ["doctor", "-a", "17.3.0"])

        assert result.exit_code == 0
        assert "[OK]" in result.output


# ---------------------------------------------------------------------------
# versions / search
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestVersionsCommand:
    """Tests for the versions command."""

    def test_angular_versions_with_tags(self, runner: CliRunner) -> None:
        registry = MagicMock()
        registry.get_angular_versions = AsyncMock(
            return_value=AngularVersions(
                versions=("17.3.1", "17.3.0", "16.2.12"), latest="17.3.1", lts="16.2.12"
            )
        )
        with patch("nginit.commands.versions.registry_session", fake_session(registry)):
            result = runner.invoke(cli, ["versions"])

        assert result.exit_code == 0
        assert "17.3.1 (latest)" in result.output
        assert "16.2.12 (lts)" in result.output

    def test_unknown_package(self, runner: CliRunner) -> None:
        registry = MagicMock()
        registry.fetch_package_metadata = AsyncMock(return_value=None)
        with patch("nginit.commands.versions.registry_session", fake_session(registry)):
            result = runner.invoke(cli, ["versions", "no-such-package"])

        assert result.exit_code == 1
        assert "No versions found for no-such-package" in result.output

    def test_major_without_versions(self, runner: CliRunner) -> None:
        registry = MagicMock()
        registry.get_angular_versions = AsyncMock(return_value=AngularVersions(versions=("17.3.1",)))
        with patch("nginit.commands.versions.registry_session", fake_session(registry)):
            result = runner.invoke(cli, ["versions", "-m", "12"])

        assert result.exit_code == 1
        assert "no stable 12.x versions" in result.output


@pytest.mark.unit
class TestSearchCommand:
    """Tests for the search command."""

    def test_query_too_short(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["search", "a"])

        assert result.exit_code == 2
        assert "at least 2 characters" in result.output

    def test_results_with_compatibility(self, runner: CliRunner) -> None:
        registry = MagicMock()
        registry.search_packages = AsyncMock(
            return_value=[SearchHit("ngx-toastr", "18.0.0", author="scttcper")]
        )
        resolver = MagicMock()
        resolver.check_version_compatibility = AsyncMock(
            return_value=SimpleNamespace(compatible=True, reason=REASON_PEER_SATISFIED)
        )
        with patch("nginit.commands.search.registry_session", fake_session(registry, resolver)):
            result = runner.invoke(cli, ["search", "toastr", "-s", "5", "-a", "17.3.0"])

        assert result.exit_code == 0
        assert "ngx-toastr" in result.output
        registry.search_packages.assert_awaited_once_with("toastr", 5)
        resolver.check_version_compatibility.assert_awaited_once_with(
            "ngx-toastr", "18.0.0", "17.3.0"
        )

    def test_no_results(self, runner: CliRunner) -> None:
        registry = MagicMock()
        registry.search_packages = AsyncMock(return_value=[])
        with patch("nginit.commands.search.registry_session", fake_session(registry)):
            result = runner.invoke(cli, ["search", "zzzz"])

        assert result.exit_code == 0
        assert "No packages found" in result.output


# ---------------------------------------------------------------------------
# profile
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestProfileCommands:
    """Tests for the profile command group."""

    def test_list_empty(self, runner: CliRunner, profiles_config: Path) -> None:
        result = runner.invoke(cli, ["-c", str(profiles_config), "profile", "list"])

        assert result.exit_code == 0
        assert "No saved profiles" in result.output

    def test_list_and_show(self, runner: CliRunner, profiles_config: Path, store: ProfileStore) -> None:
        store.save("team", Profile(angular_version="17.3.0", libraries=[ProfileLibrary("ngx-toastr")]))

        listed = runner.invoke(cli, ["-c", str(profiles_config), "profile", "list"])
        shown = runner.invoke(cli, ["-c", str(profiles_config), "profile", "show", "team"])

        assert listed.exit_code == 0
        assert "team" in listed.output
        assert shown.exit_code == 0
        assert "17.3.0" in shown.output
        assert "ngx-toastr" in shown.output

    def test_show_missing(self, runner: CliRunner, profiles_config: Path) -> None:
        result = runner.invoke(cli, ["-c", str(profiles_config), "profile", "show", "ghost"])

        assert result.exit_code == 1
        assert "Profile 'ghost' not found" in result.output

    def test_export_then_import(
        self, runner: CliRunner, profiles_config: Path, store: ProfileStore, tmp_path: Path
    ) -> None:
        """Test an exported profile can be imported back after deletion."""
        store.save("team", Profile(angular_version="17.3.0"))
        exported = tmp_path / "team.json"

        export = runner.invoke(
            cli, ["-c", str(profiles_config), "profile", "export", "team", str(exported)]
        )
        delete = runner.invoke(cli, ["-c", str(profiles_config), "profile", "delete", "team", "-y"])
        imported = runner.invoke(cli, ["-c", str(profiles_config), "profile", "import", str(exported)])

        assert export.exit_code == 0
        assert json.loads(exported.read_text(encoding="utf-8"))["name"] == "team"
        assert delete.exit_code == 0
        assert imported.exit_code == 0
        assert 'Profile "team" imported' in imported.output
        assert store.load("team").angular_version == "17.3.0"

    def test_export_missing(self, runner: CliRunner, profiles_config: Path) -> None:
        result = runner.invoke(cli, ["-c", str(profiles_config), "profile", "export", "ghost"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_import_invalid_file(self, runner: CliRunner, profiles_config: Path, tmp_path: Path) -> None:
        bogus = tmp_path / "bogus.json"
        bogus.write_text('{"hello": "world"}', encoding="utf-8")

        result = runner.invoke(cli, ["-c", str(profiles_config), "profile", "import", str(bogus)])

        assert result.exit_code == 1
        assert "Invalid profile file format" in result.output

    def test_delete_declined(self, runner: CliRunner, profiles_config: Path, store: ProfileStore) -> None:
        """Test answering no keeps the profile."""
        store.save("team", Profile())

        with patch("nginit.commands.profile.confirm", return_value=False):
            result = runner.invoke(cli, ["-c", str(profiles_config), "profile", "delete", "team"])

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert store.load("team") is not None

    def test_delete_missing(self, runner: CliRunner, profiles_config: Path) -> None:
        result = runner.invoke(cli, ["-c", str(profiles_config), "profile", "delete", "ghost", "-y"])

        assert result.exit_code == 1
