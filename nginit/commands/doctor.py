"""Doctor command implementation for ng-init.

Reports the local toolchain (Node.js, npm, nvm, Angular CLI) and, for a
given Angular version, whether the installed Node.js satisfies the
version's ``engines.node`` range and whether a newer Angular CLI is
needed.

Typical usage::

    $ ng-init doctor
    $ ng-init doctor --angular-version 17.3.0
"""

from __future__ import annotations

import sys
import click
import asyncio
from typing import Optional

from nginit.core import registry_session
from nginit.core import engines, environment, installer
from nginit.exceptions import NgInitError
from nginit.context import pass_context, NgInitContext
from nginit.models import SystemVersions
from nginit.utils import (
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.doctor")


@click.command()
@click.option(
    "--angular-version",
    "-a",
    help="Check Node.js and Angular CLI against this Angular version.",
)
@pass_context
def doctor(ctx: NgInitContext, angular_version: Optional[str]) -> None:
    """Check the local Angular toolchain.

    Exits:
        0 when everything needed is present and compatible, 1 otherwise.
    """
    if angular_version and not engines.is_valid_angular_version(angular_version):
        raise click.BadParameter(
            f"{angular_version} is not a valid version", param_hint="--angular-version"
        )

    try:
        healthy = asyncio.run(_doctor_async(ctx, angular_version))
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)

    sys.exit(0 if healthy else 1)


async def _doctor_async(ctx: NgInitContext, angular_version: Optional[str]) -> bool:
    system = await environment.get_system_versions()
    _print_system(system)

    healthy = True
    if not system.has_node:
        print_error("Node.js is required but was not found")
        healthy = False
    if not system.npm:
        print_error("npm is required but was not found")
        healthy = False
    if not system.has_nvm:
        guide = installer.nvm_install_instructions()
        print_warning(f"nvm not found; see {guide.repo or guide.download} to manage Node.js versions")

    if angular_version is None:
        return healthy

    async with registry_session(ctx.config) as session:
        required = await engines.node_requirement_for_angular(session.registry, angular_version)

    compat = engines.check_node_compatibility(system.node, required)
    if compat.compatible:
        print_success(f"Node.js v{system.node} satisfies {required} (Angular {angular_version})")
    else:
        healthy = False
        print_error(compat.error or f"Node.js {required} is required for Angular {angular_version}")
        print_warning(f"Recommended Node.js: v{engines.recommended_node_version(required)}")

    cli_need = engines.needs_angular_cli(system.angular_cli, angular_version)
    if cli_need.needed:
        print_warning(cli_need.reason)
        if cli_need.suggestion:
            get_raw_console().print(f"  {cli_need.suggestion}", style="dim")

    return healthy


def _print_system(system: SystemVersions) -> None:
    rows = [
        {"Tool": tool, "Version": f"v{version}" if version else "not installed"}
        for tool, version in (
            ("Node.js", system.node),
            ("npm", system.npm),
            ("nvm", system.nvm),
            ("Angular CLI", system.angular_cli),
        )
    ]
    print_table(
        rows,
        title="System Environment",
        row_styler=lambda row: "dim" if row["Version"] == "not installed" else None,
    )
