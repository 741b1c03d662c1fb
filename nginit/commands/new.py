"""New command implementation for ng-init.

Runs the interactive project wizard: environment check, Angular version,
Node.js compatibility, libraries, ``ng new``, installs and git.

Every prompt can be skipped by passing the answer as an option, which is
how scripted and CI invocations use the command.

Typical usage::

    # Fully interactive
    $ ng-init new

    # Pre-answer the name and version, reuse a saved profile
    $ ng-init new my-app --angular-version 17.3.0 --profile team-default

    # Generate and scaffold only
    $ ng-init new my-app --skip-install --skip-git
"""

from __future__ import annotations

import sys
import click
import asyncio
from pathlib import Path
from typing import Optional

from nginit.core import Wizard, WizardOptions, WizardResult, registry_session
from nginit.exceptions import NgInitError, WizardAbortedError
from nginit.context import pass_context, NgInitContext
from nginit.templates import PROJECT_TEMPLATES
from nginit.utils import Prompter, get_logger, print_error, print_warning

logger = get_logger("commands.new")


@click.command()
@click.argument("project_name", required=False)
@click.option(
    "--angular-version",
    "-a",
    help="Angular version to use (skips the version prompt).",
)
@click.option(
    "--profile",
    "-p",
    help="Start from a saved profile.",
)
@click.option(
    "--template",
    "-t",
    type=click.Choice(sorted(PROJECT_TEMPLATES), case_sensitive=False),
    help="Project template (skips the template prompt).",
)
@click.option(
    "--directory",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Parent directory for the project (default: current directory).",
)
@click.option(
    "--skip-install",
    is_flag=True,
    help="Do not run npm install.",
)
@click.option(
    "--skip-git",
    is_flag=True,
    help="Do not initialize a git repository.",
)
@pass_context
def new(
    ctx: NgInitContext,
    project_name: Optional[str],
    angular_version: Optional[str],
    profile: Optional[str],
    template: Optional[str],
    directory: Optional[Path],
    skip_install: bool,
    skip_git: bool,
) -> None:
    """Create a new Angular project with the interactive wizard.

    Exits:
        0 when the project was created, 1 when the wizard stopped or a
        step failed.
    """
    options = WizardOptions(
        project_name=project_name,
        angular_version=angular_version,
        profile=profile,
        template=template.lower() if template else None,
        directory=(directory or Path.cwd()).resolve(),
        skip_install=skip_install,
        skip_git=skip_git,
    )

    try:
        asyncio.run(_new_async(ctx, options))
    except WizardAbortedError as e:
        print_warning(e.message)
        logger.debug("Wizard stopped at step %s", e.details.get("step"))
        sys.exit(1)
    except NgInitError as e:
        print_error(f"{e}")
        sys.exit(1)


async def _new_async(ctx: NgInitContext, options: WizardOptions) -> WizardResult:
    """Open a registry session and run the wizard inside it."""
    async with registry_session(ctx.config) as session:
        wizard = Wizard(
            Prompter(),
            session.registry,
            session.resolver,
            ctx.config,
        )
        return await wizard.run(options)
