"""
Unified data model exports for ng-init.

This module re-exports the core data models so callers can import them
from ``nginit.models`` instead of individual submodules.

Example:
    >>> from nginit.models import LibraryRequest, CompatibilityResult
"""

from __future__ import annotations

from nginit.models.registry import (
    AngularVersions,
    CacheEntry,
    FetchOutcome,
    FetchStatus,
    PackageDetails,
    PackageMetadata,
    SearchHit,
    VersionPeerInfo,
)
from nginit.models.compatibility import (
    CompatibilityResult,
    CompatibleVersion,
    LibraryRequest,
    LibraryResolution,
    ResolutionSource,
    VersionCompatibility,
)
from nginit.models.environment import CliRequirement, NodeCompatibility, SystemVersions
from nginit.models.profile import Profile, ProfileLibrary

__all__ = [
    "AngularVersions",
    "CacheEntry",
    "FetchOutcome",
    "FetchStatus",
    "PackageDetails",
    "PackageMetadata",
    "SearchHit",
    "VersionPeerInfo",
    "CompatibilityResult",
    "CompatibleVersion",
    "LibraryRequest",
    "LibraryResolution",
    "ResolutionSource",
    "VersionCompatibility",
    "CliRequirement",
    "NodeCompatibility",
    "SystemVersions",
    "Profile",
    "ProfileLibrary",
]
