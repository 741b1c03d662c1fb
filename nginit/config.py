"""Configuration file loader for ng-init.

Handles discovery, loading, parsing, and validation of configuration files.
Settings live under an ``[nginit]`` table in either a project-local
``nginit.toml`` or the user file ``~/.ng-init/config.toml``.

Discovery order:

1. Explicit path from ``--config`` or ``NGINIT_CONFIG``
2. ``nginit.toml`` in current directory
3. ``config.toml`` in the user data directory (``~/.ng-init``)

Configuration precedence: defaults < config file < environment < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``nginit.toml``)::

    [nginit]
    registry_url = "https://registry.npmjs.org"
    scan_limit = 30
    core_packages = ["@angular/core", "@angular/common"]
    legacy_peer_deps_retry = false
"""

from __future__ import annotations


import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from nginit.exceptions import ConfigError
from nginit.utils.logger import get_logger
from nginit.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CACHE_TTL,
    DEFAULT_CORE_PACKAGES,
    DEFAULT_LEGACY_PEER_DEPS_RETRY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MIRRORED_SCOPES,
    DEFAULT_PEER_TIMEOUT,
    DEFAULT_PROFILES_DIR,
    DEFAULT_SCAN_LIMIT,
    DEFAULT_TIMEOUT,
    NPM_REGISTRY_URL,
    USER_CONFIG_FILE_NAME,
)

logger = get_logger("config")

SECTION_NAME = "nginit"


@dataclass
class NgInitConfig:
    """Parsed and validated ng-init configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        registry_url: Base URL of the npm registry.
        request_timeout: Timeout in seconds for package metadata requests.
        peer_timeout: Timeout in seconds for per-version requests.
        max_retries: Retries for timeouts, connect failures and 5xx.
        cache_ttl: Lifetime of cached registry responses, in seconds.
        scan_limit: Stable versions inspected per library during resolution.
        profiles_dir: Directory holding saved profiles.
        core_packages: Peer dependencies that decide Angular compatibility.
        mirrored_scopes: Scopes versioned in lockstep with Angular.
        legacy_peer_deps_retry: Retry failed npm installs with
            ``--legacy-peer-deps``.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    registry_url: str = NPM_REGISTRY_URL
    request_timeout: float = DEFAULT_TIMEOUT
    peer_timeout: float = DEFAULT_PEER_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    cache_ttl: float = DEFAULT_CACHE_TTL
    scan_limit: int = DEFAULT_SCAN_LIMIT
    profiles_dir: str = DEFAULT_PROFILES_DIR
    core_packages: Tuple[str, ...] = tuple(DEFAULT_CORE_PACKAGES)
    mirrored_scopes: Tuple[str, ...] = tuple(DEFAULT_MIRRORED_SCOPES)
    legacy_peer_deps_retry: bool = DEFAULT_LEGACY_PEER_DEPS_RETRY

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "registry_url": self.registry_url,
            "request_timeout": self.request_timeout,
            "peer_timeout": self.peer_timeout,
            "max_retries": self.max_retries,
            "cache_ttl": self.cache_ttl,
            "scan_limit": self.scan_limit,
            "profiles_dir": self.profiles_dir,
            "core_packages": list(self.core_packages),
            "mirrored_scopes": list(self.mirrored_scopes),
            "legacy_peer_deps_retry": self.legacy_peer_deps_retry,
        }


def user_config_path() -> Path:
    """Location of the per-user configuration file."""
    return Path(DEFAULT_PROFILES_DIR).expanduser() / USER_CONFIG_FILE_NAME


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Search order:

    1. ``explicit_path`` (from ``--config`` or ``NGINIT_CONFIG``)
    2. ``nginit.toml`` in current directory
    3. ``~/.ng-init/config.toml``

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    # 1. Explicit path takes priority
    if explicit_path is not None:
        resolved = explicit_path.expanduser().resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    # 2. nginit.toml in current directory
    project_toml = Path.cwd() / CONFIG_FILE_NAME
    if project_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, project_toml)
        return project_toml

    # 3. User configuration
    user_toml = user_config_path()
    if user_toml.is_file():
        logger.debug("Found user config: %s", user_toml)
        return user_toml

    logger.debug("No configuration file found")
    return None


def load_config(config_path: Optional[Path] = None) -> NgInitConfig:
    """Load and validate ng-init configuration.

    Discovers config file (or uses provided path), parses and validates it.
    Returns config with defaults if no file found.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`NgInitConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return NgInitConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    section = raw.get(SECTION_NAME, {})
    if not isinstance(section, dict):
        raise ConfigError(
            f"[{SECTION_NAME}] must be a table",
            config_path=str(resolved),
        )

    if not section:
        logger.debug("Config file found but no [%s] section, using defaults", SECTION_NAME)
        return NgInitConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


# ---------------------------------------------------------------------------
# Section validation
# ---------------------------------------------------------------------------

_KNOWN_KEYS = frozenset(
    {
        "registry_url",
        "request_timeout",
        "peer_timeout",
        "max_retries",
        "cache_ttl",
        "scan_limit",
        "profiles_dir",
        "core_packages",
        "mirrored_scopes",
        "legacy_peer_deps_retry",
    }
)


def _type_error(key: str, expected: str, value: Any, config_path: str) -> ConfigError:
    return ConfigError(
        f"{key} must be {expected}, got {type(value).__name__}",
        config_path=config_path,
        option=key,
    )


def _positive_number(section: Dict[str, Any], key: str, config_path: str) -> float:
    val = section[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise _type_error(key, "a number", val, config_path)
    if val <= 0:
        raise ConfigError(f"{key} must be positive", config_path=config_path, option=key)
    return float(val)


def _int_at_least(section: Dict[str, Any], key: str, minimum: int, config_path: str) -> int:
    val = section[key]
    if isinstance(val, bool) or not isinstance(val, int):
        raise _type_error(key, "an integer", val, config_path)
    if val < minimum:
        raise ConfigError(
            f"{key} must be at least {minimum}", config_path=config_path, option=key
        )
    return val


def _non_empty_str(section: Dict[str, Any], key: str, config_path: str) -> str:
    val = section[key]
    if not isinstance(val, str):
        raise _type_error(key, "a string", val, config_path)
    if not val.strip():
        raise ConfigError(f"{key} must not be empty", config_path=config_path, option=key)
    return val


def _str_list(section: Dict[str, Any], key: str, config_path: str) -> Tuple[str, ...]:
    val = section[key]
    if not isinstance(val, list) or not all(isinstance(item, str) for item in val):
        raise _type_error(key, "a list of strings", val, config_path)
    return tuple(val)


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> NgInitConfig:
    """Parse and validate the ``[nginit]`` table.

    Rejects unknown keys and type mismatches.

    Raises:
        ConfigError: Unknown keys or incorrect types (e.g., string for number).
    """
    config = NgInitConfig()

    unknown = set(section.keys()) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "registry_url" in section:
        config.registry_url = _non_empty_str(section, "registry_url", config_path).rstrip("/")

    if "request_timeout" in section:
        config.request_timeout = _positive_number(section, "request_timeout", config_path)

    if "peer_timeout" in section:
        config.peer_timeout = _positive_number(section, "peer_timeout", config_path)

    if "max_retries" in section:
        config.max_retries = _int_at_least(section, "max_retries", 0, config_path)

    if "cache_ttl" in section:
        config.cache_ttl = _positive_number(section, "cache_ttl", config_path)

    if "scan_limit" in section:
        config.scan_limit = _int_at_least(section, "scan_limit", 1, config_path)

    if "profiles_dir" in section:
        config.profiles_dir = _non_empty_str(section, "profiles_dir", config_path)

    if "core_packages" in section:
        core: List[str] = list(_str_list(section, "core_packages", config_path))
        if not core:
            raise ConfigError(
                "core_packages must not be empty",
                config_path=config_path,
                option="core_packages",
            )
        config.core_packages = tuple(core)

    if "mirrored_scopes" in section:
        config.mirrored_scopes = _str_list(section, "mirrored_scopes", config_path)

    if "legacy_peer_deps_retry" in section:
        val = section["legacy_peer_deps_retry"]
        if not isinstance(val, bool):
            raise _type_error("legacy_peer_deps_retry", "a boolean", val, config_path)
        config.legacy_peer_deps_retry = val

    return config
