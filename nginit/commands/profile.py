"""Profile command group for ng-init.

Manage the wizard profiles stored in ``{profiles_dir}/profiles.json``.

Typical usage::

    $ ng-init profile list
    $ ng-init profile show team-default
    $ ng-init profile export team-default team-default.json
    $ ng-init profile import team-default.json
    $ ng-init profile delete team-default --yes
"""

from __future__ import annotations

import sys
import click
from pathlib import Path

from nginit.core import ProfileStore
from nginit.exceptions import NgInitError
from nginit.context import pass_context, NgInitContext
from nginit.utils import (
    confirm,
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.profile")


def _store(ctx: NgInitContext) -> ProfileStore:
    return ProfileStore(ctx.config.profiles_dir)


@click.group()
def profile() -> None:
    """Manage saved wizard profiles."""


@profile.command("list")
@pass_context
def list_profiles(ctx: NgInitContext) -> None:
    """List saved profiles."""
    store = _store(ctx)
    rows = []
    for name in store.list_names():
        details = store.details(name)
        if details is None:
            rows.append({"Name": name, "Angular": "-", "Template": "-", "Libraries": "invalid"})
            continue
        rows.append(
            {
                "Name": name,
                "Angular": details["angular_version"] or "-",
                "Template": details["template"] or "-",
                "Libraries": details["libraries"],
                "Updated": details["updated_at"] or "-",
            }
        )

    if not rows:
        print_warning("No saved profiles")
        return
    print_table(rows, title="Saved profiles", headers=["Name", "Angular", "Template", "Libraries", "Updated"])


@profile.command("show")
@click.argument("name")
@pass_context
def show_profile(ctx: NgInitContext, name: str) -> None:
    """Show the contents of profile NAME."""
    loaded = _store(ctx).load(name)
    if loaded is None:
        print_error(f"Profile '{name}' not found")
        sys.exit(1)

    console = get_raw_console()
    console.print(f"[highlight]{name}[/highlight]")
    console.print(f"  Angular:  {loaded.angular_version or '-'}")
    console.print(f"  Template: {loaded.template or '-'}")
    for key, value in loaded.options.items():
        console.print(f"  {key}: {value}", style="dim")

    if loaded.libraries:
        print_table(
            [
                {
                    "Library": lib.name,
                    "Version": lib.version,
                    "Dev": "yes" if lib.is_dev else "",
                }
                for lib in loaded.libraries
            ]
        )


@profile.command("delete")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@pass_context
def delete_profile(ctx: NgInitContext, name: str, yes: bool) -> None:
    """Delete profile NAME."""
    if not yes and not confirm(f"Delete profile '{name}'?", default=False):
        print_warning("Cancelled")
        return

    try:
        deleted = _store(ctx).delete(name)
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)

    if not deleted:
        print_error(f"Profile '{name}' not found")
        sys.exit(1)
    print_success(f"Profile '{name}' deleted")


@profile.command("export")
@click.argument("name")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path), required=False)
@pass_context
def export_profile(ctx: NgInitContext, name: str, output: Path) -> None:
    """Export profile NAME to OUTPUT (default: NAME.json)."""
    try:
        written = _store(ctx).export(name, output or Path(f"{name}.json"))
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)
    print_success(f"Profile exported to {written}")


@profile.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_context
def import_profile(ctx: NgInitContext, file: Path) -> None:
    """Import a profile from an exported FILE."""
    try:
        name = _store(ctx).import_file(file)
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)
    print_success(f"Profile \"{name}\" imported")
