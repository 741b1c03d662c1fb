"""
Registry data models for ng-init.

Immutable snapshots of what the npm registry told us about a package,
plus the small tagged-result type the registry client uses internally to
tell "not found" apart from "registry unreachable".
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, TypeVar

T = TypeVar("T")


class FetchStatus(str, Enum):
    """Why a registry lookup did or did not produce data."""

    OK = "ok"
    NOT_FOUND = "not_found"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    """Tagged result of a registry lookup.

    Attributes:
        status: Outcome classification.
        value: Payload when ``status`` is :attr:`FetchStatus.OK`.
        detail: Human-readable explanation for absent data.
    """

    status: FetchStatus
    value: Optional[T] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @classmethod
    def success(cls, value: T) -> "FetchOutcome[T]":
        return cls(FetchStatus.OK, value)

    @classmethod
    def not_found(cls, detail: str = "") -> "FetchOutcome[T]":
        return cls(FetchStatus.NOT_FOUND, None, detail)

    @classmethod
    def unreachable(cls, detail: str = "") -> "FetchOutcome[T]":
        return cls(FetchStatus.UNREACHABLE, None, detail)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value stamped with the clock reading at fetch completion."""

    data: T
    fetched_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.fetched_at <= ttl


@dataclass(frozen=True)
class PackageMetadata:
    """Package document from ``GET /{name}``.

    Attributes:
        name: Package name as published.
        dist_tags: Tag name → version (``latest``, ``next``, ``lts`` ...).
        versions: Every published version in registry order, no duplicates.
        description: Package description.
        homepage: Homepage URL, if any.
        license: License identifier, if any.
        keywords: Registry keywords.
    """

    name: str
    dist_tags: Mapping[str, str] = field(default_factory=dict)
    versions: Tuple[str, ...] = ()
    description: str = ""
    homepage: Optional[str] = None
    license: Optional[str] = None
    keywords: Tuple[str, ...] = ()

    @property
    def latest(self) -> Optional[str]:
        """Version pointed to by the ``latest`` dist-tag."""
        return self.dist_tags.get("latest")

    @classmethod
    def from_registry(cls, name: str, document: Mapping[str, Any]) -> "PackageMetadata":
        """Build metadata from a raw registry document."""
        raw_versions = document.get("versions") or {}
        versions = tuple(dict.fromkeys(v for v in raw_versions if isinstance(v, str)))

        dist_tags = {
            str(tag): str(version)
            for tag, version in (document.get("dist-tags") or {}).items()
            if version
        }

        license_value = document.get("license")
        if isinstance(license_value, dict):
            license_value = license_value.get("type")

        return cls(
            name=document.get("name") or name,
            dist_tags=dist_tags,
            versions=versions,
            description=document.get("description") or "",
            homepage=document.get("homepage"),
            license=license_value,
            keywords=tuple(document.get("keywords") or ()),
        )


@dataclass(frozen=True)
class VersionPeerInfo:
    """Peer dependencies declared by one published version."""

    package_name: str
    version: str
    peer_dependencies: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchHit:
    """One package from the registry search endpoint."""

    name: str
    version: str
    description: str = "No description"
    author: str = "Unknown"
    date: Optional[str] = None
    verified: bool = False

    @classmethod
    def from_search_object(cls, obj: Mapping[str, Any]) -> "SearchHit":
        package = obj.get("package") or {}
        publisher = package.get("publisher") or {}
        return cls(
            name=package.get("name", ""),
            version=package.get("version", ""),
            description=package.get("description") or "No description",
            author=publisher.get("username") or "Unknown",
            date=package.get("date"),
            verified=bool(publisher.get("verified", False)),
        )


@dataclass(frozen=True)
class PackageDetails:
    """Metadata enriched with weekly download counts."""

    metadata: PackageMetadata
    weekly_downloads: int = 0


@dataclass(frozen=True)
class AngularVersions:
    """Stable Angular CLI versions, newest first, plus notable dist-tags."""

    versions: Tuple[str, ...] = ()
    latest: Optional[str] = None
    lts: Optional[str] = None


def peer_map(document: Mapping[str, Any]) -> Dict[str, str]:
    """Extract the ``peerDependencies`` map from a version document."""
    peers = document.get("peerDependencies") or {}
    if not isinstance(peers, dict):
        return {}
    return {str(k): str(v) for k, v in peers.items()}
