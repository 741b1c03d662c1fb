"""Versions command implementation for ng-init.

Lists the stable published versions of a package grouped by major
version, newest first. Without an argument it lists Angular versions
(``@angular/cli``) together with the ``latest`` and ``lts`` dist-tags.

Typical usage::

    $ ng-init versions
    $ ng-init versions @ngrx/store --major 17
"""

from __future__ import annotations

import sys
import click
import asyncio
from typing import Dict, List, Optional, Tuple

from nginit.constants import ANGULAR_CLI_PACKAGE
from nginit.core import registry_session
from nginit.exceptions import NgInitError
from nginit.context import pass_context, NgInitContext
from nginit.utils import (
    filter_stable_versions,
    get_logger,
    major_versions,
    print_error,
    print_table,
    sort_versions_desc,
)
from nginit.utils.version_utils import major_of

logger = get_logger("commands.versions")


@click.command()
@click.argument("package", default=ANGULAR_CLI_PACKAGE)
@click.option(
    "--major",
    "-m",
    type=int,
    default=None,
    help="Only show versions of this major.",
)
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=5,
    show_default=True,
    help="Versions shown per major.",
)
@pass_context
def versions(ctx: NgInitContext, package: str, major: Optional[int], limit: int) -> None:
    """List stable versions of PACKAGE (default: @angular/cli)."""
    try:
        found, tags = asyncio.run(_versions_async(ctx, package))
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)

    if not found:
        print_error(f"No versions found for {package}")
        sys.exit(1)

    rows = []
    for m in major_versions(found):
        if major is not None and int(m) != major:
            continue
        in_major = [v for v in found if major_of(v) == int(m)]
        shown = ", ".join(_label(v, tags) for v in in_major[:limit])
        if len(in_major) > limit:
            shown += f", ... (+{len(in_major) - limit})"
        rows.append({"Major": m, "Versions": shown})

    if not rows:
        print_error(f"{package} has no stable {major}.x versions")
        sys.exit(1)

    print_table(rows, title=f"{package} versions", column_styles={"Major": {"style": "bold", "justify": "right"}})


async def _versions_async(ctx: NgInitContext, package: str) -> Tuple[List[str], Dict[str, str]]:
    async with registry_session(ctx.config) as session:
        if package == ANGULAR_CLI_PACKAGE:
            angular = await session.registry.get_angular_versions()
            tags: Dict[str, str] = {}
            if angular.latest:
                tags[angular.latest] = "latest"
            if angular.lts:
                tags.setdefault(angular.lts, "lts")
            return list(angular.versions), tags

        metadata = await session.registry.fetch_package_metadata(package)
        if metadata is None:
            return [], {}
        stable: List[str] = sort_versions_desc(filter_stable_versions(metadata.versions))
        return stable, {v: t for t, v in metadata.dist_tags.items() if v in stable}


def _label(version: str, tags: Dict[str, str]) -> str:
    tag = tags.get(version)
    return f"{version} ({tag})" if tag else version
