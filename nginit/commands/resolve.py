"""Resolve command implementation for ng-init.

Resolves, for each requested library, the npm version specifier to
install alongside a target Angular version, without creating a project.

Each library is resolved through :class:`CompatibilityResolver`:

1. ``name`` (or ``name@latest``) searches the newest stable versions for
   one whose Angular peer dependency accepts the target.
2. ``name@version`` checks that exact version and reports whether it is
   compatible.

Registry failures never abort the command; affected libraries fall back
to ``latest`` and are marked ``fallback`` in the output.

Typical usage::

    $ ng-init resolve @ngrx/store ngx-toastr --angular 17.3.0

    # Check a pinned version, machine-readable output
    $ ng-init resolve ngx-mask@16.4.2 --angular 17.3.0 --format json
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import Any, Dict, List, Sequence

from nginit.core import registry_session, resolve_libraries
from nginit.exceptions import NgInitError
from nginit.context import pass_context, NgInitContext
from nginit.models import LibraryRequest, LibraryResolution
from nginit.utils import (
    colorize_source,
    get_logger,
    get_raw_console,
    print_error,
    print_table,
    print_warning,
)

logger = get_logger("commands.resolve")


@click.command()
@click.argument("libraries", nargs=-1, required=True)
@click.option(
    "--angular",
    "-a",
    "angular_version",
    required=True,
    help="Target Angular version (e.g. 17.3.0).",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def resolve(
    ctx: NgInitContext,
    libraries: Sequence[str],
    angular_version: str,
    format: str,
) -> None:
    """Resolve compatible versions of LIBRARIES for an Angular version.

    LIBRARIES are ``name``, ``name@version`` or ``@scope/name@version``.

    Exits:
        0 when every library resolved without warnings, 1 otherwise.
    """
    try:
        requests = [LibraryRequest.parse(spec) for spec in libraries]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="LIBRARIES") from e

    try:
        resolutions = asyncio.run(_resolve_async(ctx, requests, angular_version))
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)

    if format == "json":
        _display_json(resolutions, angular_version)
    else:
        _display_table(resolutions, angular_version)

    clean = all(item.result is not None and not item.result.warning for item in resolutions)
    sys.exit(0 if clean else 1)


async def _resolve_async(
    ctx: NgInitContext,
    requests: List[LibraryRequest],
    angular_version: str,
) -> List[LibraryResolution]:
    async with registry_session(ctx.config) as session:
        return await resolve_libraries(session.resolver, requests, angular_version)


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------


def _display_table(resolutions: List[LibraryResolution], angular_version: str) -> None:
    rows: List[Dict[str, Any]] = []
    for item in resolutions:
        if item.result is None:
            rows.append(
                {
                    "Library": item.request.name,
                    "Requested": item.request.requested_version,
                    "Install": "-",
                    "Source": "[red]error[/red]",
                    "Reason": item.error or "",
                }
            )
            continue
        rows.append(
            {
                "Library": item.request.name,
                "Requested": item.request.requested_version,
                "Install": item.request.install_spec(item.result.resolved_version_spec),
                "Source": colorize_source(item.result.source.value, warning=item.result.warning),
                "Reason": item.result.reason,
            }
        )

    print_table(
        rows,
        title=f"Library versions for Angular {angular_version}",
        column_styles={
            "Library": {"style": "bold"},
            "Install": {"style": "cyan", "no_wrap": True},
        },
    )

    for item in resolutions:
        if item.result is not None and item.result.warning:
            print_warning(f"{item.request.name}: {item.result.detail or item.result.reason}")


def _display_json(resolutions: List[LibraryResolution], angular_version: str) -> None:
    payload = {
        "angular_version": angular_version,
        "libraries": [
            {
                "name": item.request.name,
                "requested": item.request.requested_version,
                "result": item.result.to_dict() if item.result else None,
                "error": item.error,
            }
            for item in resolutions
        ],
    }
    get_raw_console().print_json(json.dumps(payload))
