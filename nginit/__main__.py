"""
Executable module for ng-init.

Running:
    python -m nginit

is equivalent to:
    ng-init

This module simply forwards execution to the CLI entrypoint defined in
`nginit.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: BaseException) -> None:
    """Report a CLI import failure on stderr."""
    try:
        from nginit.__version__ import __version__

        version = __version__
    except ImportError:
        version = "<unknown>"

    sys.stderr.write(f"ng-init version: {version}\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m nginit`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from nginit.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
