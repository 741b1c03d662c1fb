"""
Compatibility resolution models for ng-init.

:class:`LibraryRequest` is what the wizard asks for; :class:`CompatibilityResult`
is what the resolver answers, one per request.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

from nginit.models.registry import FetchStatus

LATEST = "latest"

# Reasons recorded on results
REASON_METADATA_UNAVAILABLE = "metadata unavailable"
REASON_MATCHED_MAJOR = "matched major version"
REASON_NO_PEER_DEPENDENCY = "no peer dependency declared"
REASON_PEER_SATISFIED = "peer dependency satisfied"
REASON_NO_COMPATIBLE_VERSION = "no compatible version found"
REASON_REQUESTED_COMPATIBLE = "requested version compatible"
REASON_REQUESTED_INCOMPATIBLE = "requested version incompatible"


class ResolutionSource(str, Enum):
    """Whether a result is backed by registry evidence."""

    DYNAMIC = "dynamic"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CompatibilityResult:
    """Outcome of resolving one library against a target Angular version.

    Attributes:
        resolved_version_spec: Specifier to hand to npm (``^2.0.0``, ``latest``).
        source: ``DYNAMIC`` when backed by registry data, else ``FALLBACK``.
        reason: One of the ``REASON_*`` constants.
        peer_dependency_seen: The core peer-dependency range that was checked.
        warning: The caller should surface this result prominently.
        version: Concrete version the specifier was built from, if any.
        fallback_cause: Why metadata was unavailable, for fallbacks.
        detail: Human-readable explanation.

    Raises:
        ValueError: A fallback result claims a peer dependency.
    """

    resolved_version_spec: str
    source: ResolutionSource
    reason: str
    peer_dependency_seen: Optional[str] = None
    warning: bool = False
    version: Optional[str] = None
    fallback_cause: Optional[FetchStatus] = None
    detail: str = ""

    def __post_init__(self) -> None:
        if self.source is ResolutionSource.FALLBACK and self.peer_dependency_seen:
            raise ValueError("fallback results cannot carry a peer dependency")

    @property
    def is_fallback(self) -> bool:
        return self.source is ResolutionSource.FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "resolved_version_spec": self.resolved_version_spec,
            "version": self.version,
            "source": self.source.value,
            "reason": self.reason,
            "peer_dependency": self.peer_dependency_seen,
            "warning": self.warning,
            "fallback_cause": self.fallback_cause.value if self.fallback_cause else None,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class LibraryRequest:
    """A library the user wants installed."""

    name: str
    requested_version: str = LATEST
    is_dev_dependency: bool = False

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("library name must not be empty")

    @property
    def wants_latest(self) -> bool:
        return self.requested_version == LATEST

    @classmethod
    def parse(cls, spec: str, *, dev: bool = False) -> "LibraryRequest":
        """Parse ``name``, ``name@version`` or ``@scope/name@version``.

        Examples:
            >>> LibraryRequest.parse("lodash@4.17.21").requested_version
            '4.17.21'
            >>> LibraryRequest.parse("@ngrx/store").name
            '@ngrx/store'
        """
        spec = spec.strip()
        at = spec.rfind("@")
        if at > 0:
            name, version = spec[:at], spec[at + 1 :]
        else:
            name, version = spec, ""
        return cls(name=name, requested_version=version or LATEST, is_dev_dependency=dev)

    def install_spec(self, version_spec: Optional[str] = None) -> str:
        """Return the ``npm install`` argument for this library."""
        spec = version_spec or self.requested_version
        if not spec or spec == LATEST:
            return self.name
        return f"{self.name}@{spec}"


@dataclass(frozen=True)
class VersionCompatibility:
    """Whether one concrete library version suits the target Angular version."""

    compatible: bool
    reason: str
    peer_dependency: Optional[str] = None


@dataclass(frozen=True)
class CompatibleVersion:
    """A version found compatible during a suggestion search."""

    version: str
    reason: str
    peer_dependency: Optional[str] = None


@dataclass
class LibraryResolution:
    """Per-library outcome of a batch resolution.

    ``result`` is ``None`` when resolution was aborted by a transport
    error; ``error`` then holds the message.
    """

    request: LibraryRequest
    result: Optional[CompatibilityResult] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.result is None
