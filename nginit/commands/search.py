"""Search command implementation for ng-init.

Full-text search of the npm registry, with an optional compatibility
check of each hit against an Angular version.

Typical usage::

    $ ng-init search toastr
    $ ng-init search "date picker" --size 5 --angular 17.3.0
"""

from __future__ import annotations

import sys
import click
import asyncio
from typing import Any, Dict, List, Optional

from nginit.core import registry_session
from nginit.exceptions import NgInitError
from nginit.context import pass_context, NgInitContext
from nginit.models import SearchHit
from nginit.utils import get_logger, print_error, print_table, print_warning

logger = get_logger("commands.search")


@click.command()
@click.argument("query")
@click.option(
    "--size",
    "-s",
    type=click.IntRange(1, 250),
    default=10,
    show_default=True,
    help="Maximum number of results.",
)
@click.option(
    "--angular",
    "-a",
    "angular_version",
    default=None,
    help="Also check each result's latest version against this Angular version.",
)
@pass_context
def search(ctx: NgInitContext, query: str, size: int, angular_version: Optional[str]) -> None:
    """Search the npm registry for QUERY."""
    if len(query.strip()) < 2:
        raise click.BadParameter("search terms must be at least 2 characters", param_hint="QUERY")

    try:
        rows = asyncio.run(_search_async(ctx, query, size, angular_version))
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)

    if not rows:
        print_warning(f"No packages found for '{query}'")
        return

    print_table(
        rows,
        title=f"npm packages matching '{query}'",
        column_styles={
            "Package": {"style": "bold", "no_wrap": True},
            "Description": {"overflow": "ellipsis"},
        },
    )


async def _search_async(
    ctx: NgInitContext,
    query: str,
    size: int,
    angular_version: Optional[str],
) -> List[Dict[str, Any]]:
    async with registry_session(ctx.config) as session:
        hits = await session.registry.search_packages(query, size)

        rows = []
        for hit in hits:
            row = _row(hit)
            if angular_version and hit.version:
                check = await session.resolver.check_version_compatibility(
                    hit.name, hit.version, angular_version
                )
                row[f"Angular {angular_version}"] = (
                    "[green]yes[/green]" if check.compatible else f"[red]no[/red] ({check.reason})"
                )
            rows.append(row)
        return rows


def _row(hit: SearchHit) -> Dict[str, Any]:
    return {
        "Package": hit.name + (" ✓" if hit.verified else ""),
        "Version": hit.version,
        "Author": hit.author,
        "Description": hit.description,
    }
