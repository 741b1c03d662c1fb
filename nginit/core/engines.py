"""
Node.js / Angular compatibility checks for ng-init.

Angular pins the Node.js versions it supports through the ``engines.node``
field of ``@angular/cli``. These helpers read that range (falling back to
a static matrix offline) and judge local or installable Node versions
against it using npm range semantics.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from semantic_version import NpmSpec, Version

from nginit.models.environment import CliRequirement, NodeCompatibility
from nginit.core.registry import RegistryClient
from nginit.utils.logger import get_logger
from nginit.utils.version_utils import major_of, normalize_range, sort_versions_desc
from nginit.constants import (
    ANGULAR_CLI_PACKAGE,
    ANGULAR_NODE_FALLBACK,
    DEFAULT_NODE_RECOMMENDATION,
    DEFAULT_NODE_REQUIREMENT,
    NODE_LTS_RECOMMENDATIONS,
)

logger = get_logger("engines")

_RANGE_MAJOR = re.compile(r"(\d+)\.")


def check_node_compatibility(current: Optional[str], required: str) -> NodeCompatibility:
    """Check ``current`` Node.js version against the ``required`` npm range.

    An unparseable version or range counts as incompatible; the parse
    error is reported in :attr:`NodeCompatibility.error`.

    Examples:
        >>> check_node_compatibility("18.19.0", "^18.13.0 || ^20.9.0").compatible
        True
    """
    if not current:
        return NodeCompatibility(False, current, required, "Node.js is not installed")

    try:
        compatible = Version.coerce(current.lstrip("v")) in NpmSpec(normalize_range(required))
    except ValueError as exc:
        return NodeCompatibility(False, current, required, str(exc))
    return NodeCompatibility(compatible, current, required)


def find_compatible_versions(available: Iterable[str], required: str) -> List[str]:
    """Return the versions in ``available`` that satisfy ``required``, newest first."""
    try:
        spec = NpmSpec(normalize_range(required))
    except ValueError:
        logger.debug("Cannot parse Node range %r", required)
        return []

    matching = []
    for version in available:
        try:
            if Version.coerce(version.lstrip("v")) in spec:
                matching.append(version)
        except ValueError:
            continue
    return sort_versions_desc(matching)


def recommended_node_version(required: str) -> str:
    """Pick a known LTS release for the first alternative of ``required``.

    Examples:
        >>> recommended_node_version("^18.13.0 || ^20.9.0")
        '18.20.4'
    """
    for alternative in required.split("||"):
        match = _RANGE_MAJOR.search(alternative)
        if match:
            recommendation = NODE_LTS_RECOMMENDATIONS.get(int(match.group(1)))
            if recommendation:
                return recommendation
    return DEFAULT_NODE_RECOMMENDATION


async def node_requirement_for_angular(
    registry: RegistryClient,
    angular_version: str,
) -> str:
    """Return the ``engines.node`` range of ``@angular/cli@{angular_version}``.

    Uses the static matrix when the registry has no answer.
    """
    manifest = await registry.fetch_version_manifest(ANGULAR_CLI_PACKAGE, angular_version)
    if manifest:
        engines = manifest.get("engines") or {}
        node_range = engines.get("node") if isinstance(engines, dict) else None
        if node_range:
            return str(node_range)

    major = angular_version.split(".", 1)[0]
    logger.info("Using built-in Node requirement for Angular %s", major)
    return ANGULAR_NODE_FALLBACK.get(major, DEFAULT_NODE_REQUIREMENT)


def needs_angular_cli(current: Optional[str], target: str) -> CliRequirement:
    """Decide whether the installed Angular CLI can generate ``target`` projects."""
    if not current:
        return CliRequirement(True, "Angular CLI is not installed")

    current_major = major_of(current)
    target_major = major_of(target)
    if current_major != target_major:
        return CliRequirement(
            True,
            f"Angular CLI version mismatch (current: {current_major}, target: {target_major})",
            f"Consider using npx {ANGULAR_CLI_PACKAGE}@{target} instead",
        )
    return CliRequirement(False, "Angular CLI version is compatible")


def is_valid_angular_version(version: str) -> bool:
    """Return True if ``version`` is a full semantic version (``17.3.0``)."""
    try:
        Version(version)
    except ValueError:
        return False
    return True
