"""
Command-line interface for ng-init.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from nginit.config import load_config
from nginit.__version__ import __version__
from nginit.context import NgInitContext
from nginit.exceptions import ConfigError, NgInitError
from nginit.utils.logger import get_logger, setup_logging
from nginit.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="NGINIT_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="NGINIT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="ng-init",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """ng-init: create Angular projects with compatible libraries pre-installed.

    \b
    Available commands:
      ng-init new                  Run the project wizard (default)
      ng-init doctor               Check Node.js, npm, nvm and Angular CLI
      ng-init resolve              Resolve library versions for an Angular version
      ng-init versions             List published versions of a package
      ng-init search               Search the npm registry
      ng-init profile              Manage saved wizard profiles

    \b
    Examples:
      ng-init
      ng-init new my-app --angular-version 17.3.0
      ng-init resolve @ngrx/store ngx-toastr --angular 17.3.0
      ng-init -v doctor

    Use ``ng-init COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    nginit_ctx = NgInitContext()
    nginit_ctx.config_path = config or (
        loaded_config.source_path if loaded_config.source_path else None
    )
    nginit_ctx.color = color
    nginit_ctx.verbose = verbose
    nginit_ctx.config = loaded_config
    ctx.obj = nginit_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("ng-init v%s", __version__)
    logger.debug("Config path: %s", nginit_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)

    if ctx.invoked_subcommand is None:
        ctx.invoke(new)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
try:
    from nginit.commands.new import new
    from nginit.commands.doctor import doctor
    from nginit.commands.search import search
    from nginit.commands.resolve import resolve
    from nginit.commands.profile import profile
    from nginit.commands.versions import versions

    cli.add_command(new)
    cli.add_command(doctor)
    cli.add_command(resolve)
    cli.add_command(versions)
    cli.add_command(search)
    cli.add_command(profile)

except ImportError as exc:
    sys.stderr.write(f"FATAL: Failed to import CLI commands: {exc}\n")
    sys.exit(1)


def main() -> int:
    """Main entry point for the ng-init CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except NgInitError as exc:
        print_error(str(exc))
        logger.debug(
            "NgInitError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
