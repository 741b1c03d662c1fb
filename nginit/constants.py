"""
Centralized constants for ng-init.

This module defines immutable configuration values used across ng-init,
including registry endpoints, network settings, resolver defaults, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "ng-init/{version} (python-httpx)"

# ---------------------------------------------------------------------------
# npm endpoints
# ---------------------------------------------------------------------------

#: Base URL of the npm package registry.
NPM_REGISTRY_URL: Final[str] = "https://registry.npmjs.org"

#: Path of the registry search endpoint (relative to the registry URL).
NPM_SEARCH_PATH: Final[str] = "/-/v1/search"

#: Weekly download counts endpoint.
NPM_DOWNLOADS_URL: Final[str] = "https://api.npmjs.org/downloads/point/last-week/{package}"

#: Package whose published versions define the selectable Angular versions.
ANGULAR_CLI_PACKAGE: Final[str] = "@angular/cli"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Timeout in seconds for package metadata requests.
DEFAULT_TIMEOUT: Final[float] = 10.0

#: Timeout in seconds for per-version requests (peer deps, engines, search).
DEFAULT_PEER_TIMEOUT: Final[float] = 5.0

#: Retries for failed HTTP requests. Zero keeps the worst-case resolution
#: latency at ``scan_limit * timeout``.
DEFAULT_MAX_RETRIES: Final[int] = 0

# ---------------------------------------------------------------------------
# Registry cache and resolver
# ---------------------------------------------------------------------------

#: Lifetime of a cached registry response, in seconds.
DEFAULT_CACHE_TTL: Final[float] = 5 * 60

#: Number of newest stable versions inspected when scanning peer deps.
DEFAULT_SCAN_LIMIT: Final[int] = 20

#: Packages whose peer-dependency entry decides Angular compatibility.
DEFAULT_CORE_PACKAGES: Final[Sequence[str]] = ("@angular/core", "@angular/common")

#: Scopes whose packages are versioned in lockstep with Angular itself.
DEFAULT_MIRRORED_SCOPES: Final[Sequence[str]] = ("@angular/",)

#: Markers identifying pre-release versions.
PRERELEASE_MARKERS: Final[Sequence[str]] = ("rc", "beta", "alpha", "next")

#: Default number of compatible versions offered as suggestions.
DEFAULT_SUGGESTION_COUNT: Final[int] = 10

# ---------------------------------------------------------------------------
# Node.js compatibility
# ---------------------------------------------------------------------------

#: ``engines.node`` ranges by Angular major, used when the registry is
#: unreachable.
ANGULAR_NODE_FALLBACK: Final[Mapping[str, str]] = {
    "19": "^18.19.1 || ^20.11.1 || ^22.0.0",
    "18": "^18.19.1 || ^20.11.1 || ^22.0.0",
    "17": "^18.13.0 || ^20.9.0",
    "16": "^16.14.0 || ^18.10.0",
    "15": "^14.20.0 || ^16.13.0 || ^18.10.0",
    "14": "^14.15.0 || ^16.10.0",
    "13": "^12.20.0 || ^14.15.0 || ^16.10.0",
    "12": "^12.20.0 || ^14.15.0",
    "11": "^10.13.0 || ^12.11.0",
    "10": "^10.13.0 || ^12.11.0",
}

#: Node range assumed for Angular majors missing from the fallback matrix.
DEFAULT_NODE_REQUIREMENT: Final[str] = "^18.13.0 || ^20.9.0"

#: Recommended LTS release per Node.js major.
NODE_LTS_RECOMMENDATIONS: Final[Mapping[int, str]] = {
    22: "22.11.0",
    20: "20.11.1",
    18: "18.20.4",
    16: "16.20.2",
    14: "14.21.3",
}

#: Node version recommended when no range matches a known LTS line.
DEFAULT_NODE_RECOMMENDATION: Final[str] = "18.20.4"

# ---------------------------------------------------------------------------
# External processes
# ---------------------------------------------------------------------------

#: Timeout in seconds for version probes such as ``node --version``.
PROBE_TIMEOUT: Final[int] = 30

#: Timeout in seconds for installs and project generation.
INSTALL_TIMEOUT: Final[int] = 1800

# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

#: Directory holding ng-init user data (profiles, user config).
DEFAULT_PROFILES_DIR: Final[str] = "~/.ng-init"

#: File name of the profile store inside the profiles directory.
PROFILES_FILE_NAME: Final[str] = "profiles.json"

#: Version written into exported profile files.
PROFILE_EXPORT_VERSION: Final[str] = "1.0.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

#: Project-local configuration file name.
CONFIG_FILE_NAME: Final[str] = "nginit.toml"

#: User configuration file name inside the profiles directory.
USER_CONFIG_FILE_NAME: Final[str] = "config.toml"

#: Whether npm installs retry with ``--legacy-peer-deps`` on failure.
DEFAULT_LEGACY_PEER_DEPS_RETRY: Final[bool] = True

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed size (in bytes) of files read back by ng-init.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
