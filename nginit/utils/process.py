"""
External process helpers for ng-init.

Thin asyncio wrappers around ``node``, ``npm``, ``npx``, ``nvm``, ``git``
and friends. :func:`run_command` never raises for a failing or missing
program; it reports ``(returncode, stdout, stderr)`` and leaves the
decision to the caller. :func:`check_command` raises
:class:`~nginit.exceptions.CommandError` instead.
"""

from __future__ import annotations

import os
import shutil
import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from nginit.utils.logger import get_logger
from nginit.exceptions import CommandError
from nginit.constants import INSTALL_TIMEOUT

logger = get_logger("process")

Command = Union[str, Sequence[str]]
CommandResult = Tuple[int, str, str]


def _describe(cmd: Command) -> str:
    return cmd if isinstance(cmd, str) else " ".join(cmd)


def _resolve_argv(cmd: Sequence[str]) -> List[str]:
    # npm/npx are .cmd shims on Windows and cannot be exec'd by bare name
    argv = list(cmd)
    found = shutil.which(argv[0])
    if found:
        argv[0] = found
    return argv


async def run_command(
    cmd: Command,
    cwd: Optional[Union[str, Path]] = None,
    timeout: float = INSTALL_TIMEOUT,
    capture: bool = True,
    env: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """Run a command asynchronously.

    Args:
        cmd: Argument vector, or a shell command string (needed for shell
            functions such as ``nvm``).
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        capture: Capture stdout/stderr; when ``False`` they inherit the
            parent's streams so the user sees installer output live.
        env: Extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple. Timeouts and programs
        that cannot be started report ``-1``.
    """
    merged_env: Optional[Dict[str, str]] = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None
    description = _describe(cmd)
    logger.debug("Running: %s (cwd=%s)", description, cwd or ".")

    try:
        if isinstance(cmd, str):
            process = await asyncio.create_subprocess_shell(
                cmd,
                stdout=stdout_pipe,
                stderr=stderr_pipe,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
        else:
            process = await asyncio.create_subprocess_exec(
                *_resolve_argv(cmd),
                stdout=stdout_pipe,
                stderr=stderr_pipe,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
    except OSError as exc:
        logger.debug("Could not start %s: %s", description, exc)
        return -1, "", f"Could not start {description}: {exc}"

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return -1, "", f"Command timed out after {timeout}s: {description}"

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return process.returncode or 0, stdout_str, stderr_str


async def check_command(
    cmd: Command,
    cwd: Optional[Union[str, Path]] = None,
    timeout: float = INSTALL_TIMEOUT,
    capture: bool = True,
    env: Optional[Dict[str, str]] = None,
) -> str:
    """Run a command and return its stdout.

    Raises:
        CommandError: The command exited non-zero, timed out or could not
            be started.
    """
    returncode, stdout, stderr = await run_command(
        cmd, cwd=cwd, timeout=timeout, capture=capture, env=env
    )
    if returncode != 0:
        argv = [cmd] if isinstance(cmd, str) else list(cmd)
        raise CommandError(
            f"Command failed: {_describe(cmd)}",
            command=argv,
            returncode=returncode,
            stderr=stderr or stdout,
        )
    return stdout
