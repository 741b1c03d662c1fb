"""
Utility helpers for ng-init.

This package provides reusable utilities used across ng-init, including:

- Console output and prompt helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Async HTTP client and process utilities
- Version set helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from nginit.utils.filesystem import (
    read_json_file,
    safe_read_file,
    safe_write_file,
    validate_path,
    write_json_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from nginit.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from nginit.utils.console import (
    Choice,
    Prompter,
    colorize_source,
    confirm,
    get_raw_console,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP and process utilities
# ---------------------------------------------------------------------------

from nginit.utils.http import HTTPClient
from nginit.utils.process import check_command, run_command

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from nginit.utils.version_utils import (
    filter_stable_versions,
    major_versions,
    minor_versions_for_major,
    patch_versions_for_minor,
    sort_versions_desc,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "Choice",
    "Prompter",
    "confirm",
    "print_info",
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "colorize_source",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # Filesystem
    "read_json_file",
    "safe_read_file",
    "safe_write_file",
    "validate_path",
    "write_json_file",
    # HTTP / processes
    "HTTPClient",
    "run_command",
    "check_command",
    # Version utilities
    "filter_stable_versions",
    "major_versions",
    "minor_versions_for_major",
    "patch_versions_for_minor",
    "sort_versions_desc",
]
