"""
npm / npx / nvm installer wrappers for ng-init.

Every function here shells out to an external tool. Installs that fail
because of peer-dependency conflicts are retried once with
``--legacy-peer-deps`` (configurable); a failure after that raises
:class:`~nginit.exceptions.CommandError` and the caller can show
:func:`manual_install_hint` to the user.
"""

from __future__ import annotations

import platform
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Union

from nginit.exceptions import CommandError
from nginit.utils.process import check_command, run_command
from nginit.utils.logger import get_logger
from nginit.constants import ANGULAR_CLI_PACKAGE, INSTALL_TIMEOUT

logger = get_logger("installer")

LEGACY_PEER_DEPS_FLAG = "--legacy-peer-deps"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful npm install.

    Attributes:
        packages: Package specifiers that were installed (empty for a plain
            ``npm install``).
        legacy_peer_deps: The install only succeeded after retrying with
            ``--legacy-peer-deps``.
    """

    packages: Sequence[str] = ()
    legacy_peer_deps: bool = False


@dataclass(frozen=True)
class NvmInstructions:
    """How to install nvm on one operating system."""

    os: str
    steps: List[str]
    repo: Optional[str] = None
    download: Optional[str] = None
    install: Optional[str] = None
    alternative: Optional[str] = None
    post_install: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# npm installs
# ---------------------------------------------------------------------------


async def _npm_install(
    args: Sequence[str],
    project_path: PathLike,
    *,
    legacy_retry: bool,
) -> bool:
    """Run ``npm install`` with ``args``; return True if the retry was needed."""
    argv = ["npm", "install", *args]
    returncode, _, stderr = await run_command(argv, cwd=project_path, timeout=INSTALL_TIMEOUT)
    if returncode == 0:
        return False

    if not legacy_retry:
        raise CommandError(
            "npm install failed", command=argv, returncode=returncode, stderr=stderr
        )

    logger.warning("npm install failed, retrying with %s", LEGACY_PEER_DEPS_FLAG)
    retry_argv = ["npm", "install", LEGACY_PEER_DEPS_FLAG, *args]
    await check_command(retry_argv, cwd=project_path, timeout=INSTALL_TIMEOUT)
    return True


async def install_packages(
    packages: Sequence[str],
    project_path: PathLike,
    *,
    dev: bool = False,
    legacy_retry: bool = True,
) -> InstallResult:
    """Install ``packages`` into the project at ``project_path``.

    Args:
        packages: ``npm install`` specifiers (``name`` or ``name@range``).
        project_path: Project directory containing ``package.json``.
        dev: Save as devDependencies.
        legacy_retry: Retry once with ``--legacy-peer-deps`` on failure.

    Raises:
        ValueError: ``packages`` is empty.
        CommandError: The install failed (after the retry, if enabled).
    """
    if not packages:
        raise ValueError("no packages to install")

    args = (["--save-dev"] if dev else []) + list(packages)
    legacy = await _npm_install(args, project_path, legacy_retry=legacy_retry)
    return InstallResult(packages=tuple(packages), legacy_peer_deps=legacy)


async def run_npm_install(
    project_path: PathLike,
    *,
    legacy_retry: bool = True,
) -> InstallResult:
    """Run a plain ``npm install`` in ``project_path``."""
    legacy = await _npm_install([], project_path, legacy_retry=legacy_retry)
    return InstallResult(legacy_peer_deps=legacy)


def manual_install_hint(project_path: PathLike, packages: Sequence[str] = ()) -> List[str]:
    """Commands the user can run by hand after an install failed."""
    install = " ".join(["npm install", *packages, "--force"])
    return [f"cd {project_path}", install]


async def init_npm_project(project_path: PathLike) -> bool:
    """Run ``npm init -y``."""
    returncode, _, stderr = await run_command(["npm", "init", "-y"], cwd=project_path)
    if returncode != 0:
        logger.error("Failed to initialize npm project: %s", stderr)
    return returncode == 0


async def install_global_package(name: str, version: str = "latest") -> None:
    """Run ``npm install -g name[@version]``.

    Raises:
        CommandError: The install failed.
    """
    spec = name if version == "latest" else f"{name}@{version}"
    await check_command(["npm", "install", "-g", spec], timeout=INSTALL_TIMEOUT, capture=False)


async def install_angular_cli(version: str = "latest") -> None:
    await install_global_package(ANGULAR_CLI_PACKAGE, version)


# ---------------------------------------------------------------------------
# Project generation
# ---------------------------------------------------------------------------


def build_ng_new_args(
    project_name: str,
    angular_version: Optional[str] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> List[str]:
    """Build the ``npx @angular/cli@{v} new ...`` argument vector.

    Recognized options: ``skip_install`` (flag), ``routing``, ``style``,
    ``strict`` and ``standalone``. Booleans render as ``true``/``false``.

    Examples:
        >>> build_ng_new_args("shop", "17.3.0", {"routing": True, "style": "scss"})
        ['npx', '@angular/cli@17.3.0', 'new', 'shop', '--routing=true', '--style=scss']
    """
    options = options or {}
    cli = f"{ANGULAR_CLI_PACKAGE}@{angular_version}" if angular_version else ANGULAR_CLI_PACKAGE
    args = ["npx", cli, "new", project_name]

    if options.get("skip_install"):
        args.append("--skip-install")
    for key in ("routing", "style", "strict", "standalone"):
        value = options.get(key)
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        args.append(f"--{key}={value}")
    return args


async def create_angular_project(
    project_name: str,
    angular_version: Optional[str] = None,
    options: Optional[Mapping[str, Any]] = None,
    *,
    cwd: Optional[PathLike] = None,
) -> None:
    """Generate a project with the requested Angular CLI through ``npx``.

    Output is streamed to the terminal since ``ng new`` may prompt.

    Raises:
        CommandError: ``ng new`` failed.
    """
    argv = build_ng_new_args(project_name, angular_version, options)
    logger.info("Creating Angular project: %s", " ".join(argv))
    await check_command(argv, cwd=cwd, timeout=INSTALL_TIMEOUT, capture=False)


# ---------------------------------------------------------------------------
# Node.js / nvm installation
# ---------------------------------------------------------------------------


async def install_node_with_winget(version: str = "LTS") -> bool:
    """Install Node.js on Windows with winget."""
    package_id = "OpenJS.NodeJS.LTS" if version == "LTS" else "OpenJS.NodeJS"
    returncode, _, _ = await run_command(
        ["winget", "install", package_id], timeout=INSTALL_TIMEOUT, capture=False
    )
    return returncode == 0


_NVM_SH_REPO = "https://github.com/nvm-sh/nvm"
_NVM_SH_SCRIPT = "https://raw.githubusercontent.com/nvm-sh/nvm/master/install.sh"


def nvm_install_instructions(os_name: Optional[str] = None) -> NvmInstructions:
    """Return nvm installation instructions for ``os_name``.

    Args:
        os_name: ``platform.system()`` value; detected when omitted.
    """
    system = os_name or platform.system()

    if system == "Windows":
        return NvmInstructions(
            os="Windows",
            download="https://github.com/coreybutler/nvm-windows/releases",
            steps=[
                "Download nvm-setup.exe",
                "Run the installer",
                "Restart your terminal",
            ],
        )

    if system == "Darwin":
        return NvmInstructions(
            os="macOS",
            repo=_NVM_SH_REPO,
            install=f"curl -o- {_NVM_SH_SCRIPT} | bash",
            post_install=[
                "Restart terminal",
                "If using zsh: source ~/.zshrc",
                "If using bash: source ~/.bash_profile",
            ],
            steps=[
                "Run the install command",
                "Reload your shell configuration",
                "Verify: nvm --version",
                "Install Node: nvm install node",
            ],
        )

    return NvmInstructions(
        os="Linux",
        repo=_NVM_SH_REPO,
        install=f"curl -o- {_NVM_SH_SCRIPT} | bash",
        alternative=f"wget -qO- {_NVM_SH_SCRIPT} | bash",
        steps=[
            "Run install command",
            "Restart terminal or run: source ~/.bashrc",
            "Verify: nvm --version",
            "Install Node: nvm install node",
        ],
    )
