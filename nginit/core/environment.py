"""
Local environment detection for ng-init.

Probes ``node``, ``npm``, ``nvm`` and ``ng`` through short-lived
subprocesses. A missing or failing tool is reported as ``None`` (or an
empty list / ``False``), never as an exception.

``nvm`` is a shell function on Unix and a separate executable on
Windows, so nvm commands are always run through the shell.
"""

from __future__ import annotations

import re
import shlex
from typing import List, Optional

from nginit.models.environment import SystemVersions
from nginit.utils.process import Command, run_command
from nginit.utils.logger import get_logger
from nginit.constants import INSTALL_TIMEOUT, PROBE_TIMEOUT

logger = get_logger("environment")

_SEMVER = re.compile(r"(\d+\.\d+\.\d+)")
_ANGULAR_CLI = re.compile(r"Angular CLI: (\d+\.\d+\.\d+)")


async def _probe(cmd: Command, timeout: float = PROBE_TIMEOUT) -> Optional[str]:
    returncode, stdout, _ = await run_command(cmd, timeout=timeout)
    if returncode != 0:
        return None
    return stdout.strip() or None


# ---------------------------------------------------------------------------
# Version probes
# ---------------------------------------------------------------------------


async def get_node_version() -> Optional[str]:
    """Return the Node.js version without the leading ``v``."""
    output = await _probe(["node", "--version"])
    return output.lstrip("v") if output else None


async def get_npm_version() -> Optional[str]:
    return await _probe(["npm", "--version"])


async def get_nvm_version() -> Optional[str]:
    return await _probe("nvm --version")


async def is_nvm_installed() -> bool:
    return await get_nvm_version() is not None


async def get_angular_cli_version() -> Optional[str]:
    """Return the globally installed Angular CLI version.

    Parsed from the ``Angular CLI: x.y.z`` line of ``ng version``.
    """
    output = await _probe("ng version")
    if not output:
        return None
    match = _ANGULAR_CLI.search(output)
    return match.group(1) if match else None


async def get_system_versions() -> SystemVersions:
    """Probe the whole toolchain, one tool after another."""
    versions = SystemVersions(
        node=await get_node_version(),
        npm=await get_npm_version(),
        nvm=await get_nvm_version(),
        angular_cli=await get_angular_cli_version(),
    )
    logger.debug("Detected toolchain: %s", versions.to_dict())
    return versions


# ---------------------------------------------------------------------------
# nvm
# ---------------------------------------------------------------------------


def parse_version_lines(output: str) -> List[str]:
    """Extract the first ``x.y.z`` of each line of nvm output."""
    versions = []
    for line in output.splitlines():
        match = _SEMVER.search(line)
        if match:
            versions.append(match.group(1))
    return versions


async def list_installed_node_versions() -> List[str]:
    output = await _probe("nvm list")
    return parse_version_lines(output) if output else []


async def list_available_node_versions() -> List[str]:
    output = await _probe("nvm list available")
    return parse_version_lines(output) if output else []


async def switch_node_version(version: str) -> bool:
    """Run ``nvm use {version}``, streaming its output to the terminal."""
    returncode, _, _ = await run_command(
        f"nvm use {shlex.quote(version)}", timeout=PROBE_TIMEOUT, capture=False
    )
    return returncode == 0


async def install_node_version(version: str) -> bool:
    """Run ``nvm install {version}``, streaming its output to the terminal."""
    returncode, _, _ = await run_command(
        f"nvm install {shlex.quote(version)}", timeout=INSTALL_TIMEOUT, capture=False
    )
    return returncode == 0
