"""
Version set utilities for ng-init.

Pure helpers over flat lists of npm version strings: pre-release
filtering, numeric ordering, and partitioning into the major → minor →
patch tiers used by the version pickers.

Pre-release filtering happens once, upstream, through
:func:`filter_stable_versions`; the tier functions assume their input is
already filtered so that all three tiers stay consistent.

All orderings are numeric (``10.0.0`` sorts above ``9.0.0``) and stable:
strings that compare equal keep their input order.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from nginit.constants import PRERELEASE_MARKERS

_NUMERIC = re.compile(r"^\d+$")
_LEADING_INT = re.compile(r"^(\d+)")
_COMPARATOR_GAP = re.compile(r"(<=|>=|<|>|=|\^|~)\s+")


def is_prerelease(version: str) -> bool:
    """Return True for pre-release or build-tagged versions.

    Examples:
        >>> is_prerelease("17.0.0-rc.1")
        True
        >>> is_prerelease("17.0.0+sha.5114f85")
        True
        >>> is_prerelease("17.0.0")
        False
    """
    if "-" in version or "+" in version:
        return True
    lowered = version.lower()
    return any(marker in lowered for marker in PRERELEASE_MARKERS)


def filter_stable_versions(versions: Iterable[str]) -> List[str]:
    """Drop pre-release and build-metadata versions, preserving order."""
    return [v for v in versions if v and not is_prerelease(v)]


def version_key(version: str) -> Tuple[int, int, int]:
    """Numeric sort key ``(major, minor, patch)`` for a version string.

    A leading ``v`` (as printed by nvm) is ignored. Missing or non-numeric
    components count as ``0`` so that malformed strings still sort
    deterministically.

    Examples:
        >>> version_key("17.2.1")
        (17, 2, 1)
        >>> version_key("4.x")
        (4, 0, 0)
    """
    parts = version.lstrip("v").split(".")
    key = []
    for index in range(3):
        if index < len(parts):
            match = _LEADING_INT.match(parts[index])
            key.append(int(match.group(1)) if match else 0)
        else:
            key.append(0)
    return key[0], key[1], key[2]


def sort_versions_desc(versions: Iterable[str]) -> List[str]:
    """Sort versions newest first (stable for equal keys)."""
    return sorted(versions, key=version_key, reverse=True)


def major_of(version: str) -> Optional[int]:
    """Return the numeric major component, or ``None`` when not numeric."""
    head = version.split(".", 1)[0].lstrip("v")
    return int(head) if _NUMERIC.match(head) else None


def major_versions(versions: Sequence[str]) -> List[str]:
    """Return distinct major components, highest first.

    Leading components that are not purely numeric are excluded.

    Examples:
        >>> major_versions(["17.2.0", "16.1.0", "17.0.0", "x.1.0"])
        ['17', '16']
    """
    seen = []
    for version in versions:
        head = version.split(".", 1)[0]
        if _NUMERIC.match(head) and head not in seen:
            seen.append(head)
    return sorted(seen, key=int, reverse=True)


def minor_versions_for_major(versions: Sequence[str], major: str) -> List[str]:
    """Return distinct ``"major.minor"`` prefixes within ``major``, highest first.

    Examples:
        >>> minor_versions_for_major(["17.2.0", "17.10.1", "17.2.3"], "17")
        ['17.10', '17.2']
    """
    prefix = f"{major}."
    seen = []
    for version in versions:
        if not version.startswith(prefix):
            continue
        parts = version.split(".")
        if len(parts) < 2 or not _NUMERIC.match(parts[1]):
            continue
        major_minor = f"{parts[0]}.{parts[1]}"
        if major_minor not in seen:
            seen.append(major_minor)
    return sorted(seen, key=lambda mm: int(mm.split(".")[1]), reverse=True)


def patch_versions_for_minor(versions: Sequence[str], major_minor: str) -> List[str]:
    """Return full versions within ``major_minor``, highest first.

    Examples:
        >>> patch_versions_for_minor(["17.2.0", "17.2.10", "17.20.0"], "17.2")
        ['17.2.10', '17.2.0']
    """
    prefix = f"{major_minor}."
    matching = [v for v in versions if v.startswith(prefix)]
    return sort_versions_desc(matching)


def strip_range_prefix(spec: str) -> str:
    """Remove a leading ``^`` or ``~`` from a version specifier."""
    return spec.strip().lstrip("^~")


def normalize_range(spec: str) -> str:
    """Drop whitespace between a comparator and its version.

    npm accepts ``>= 16.0.0``; :class:`semantic_version.NpmSpec` only
    parses ``>=16.0.0``.

    Examples:
        >>> normalize_range(">= 16.0.0 || ^ 17.0.0")
        '>=16.0.0 || ^17.0.0'
        >>> normalize_range("1.0.0 - 2.0.0")
        '1.0.0 - 2.0.0'
    """
    return _COMPARATOR_GAP.sub(r"\1", spec.strip())
