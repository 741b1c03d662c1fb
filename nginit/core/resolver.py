"""
Library compatibility resolver for ng-init.

Given a library name and a target Angular version, decide which version
specifier to hand to ``npm install``. Decisions are backed by registry
evidence where possible (``DYNAMIC``) and degrade to a best-effort
specifier otherwise (``FALLBACK``); they never raise for missing data.

Resolution proceeds in order:

1. Fetch package metadata. Unavailable → ``FALLBACK "latest"``.
2. Packages published in lockstep with Angular (``@angular/*``) are
   matched by major version without looking at peer dependencies.
3. Otherwise the newest stable versions are scanned one by one. The first
   version whose core peer dependency is absent or satisfied wins.
4. Nothing matched → ``FALLBACK "^{latest}"`` with ``warning`` set.

Example::

    resolver = CompatibilityResolver(registry)
    result = await resolver.find_compatible_version("ngx-toastr", "17.3.0")
    print(result.resolved_version_spec)        # e.g. "^18.0.0"
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple

from semantic_version import NpmSpec, Version

from nginit.models.registry import FetchStatus
from nginit.models.compatibility import (
    LATEST,
    REASON_MATCHED_MAJOR,
    REASON_METADATA_UNAVAILABLE,
    REASON_NO_COMPATIBLE_VERSION,
    REASON_NO_PEER_DEPENDENCY,
    REASON_PEER_SATISFIED,
    REASON_REQUESTED_COMPATIBLE,
    REASON_REQUESTED_INCOMPATIBLE,
    CompatibilityResult,
    CompatibleVersion,
    LibraryRequest,
    LibraryResolution,
    ResolutionSource,
    VersionCompatibility,
)
from nginit.core.registry import RegistryClient
from nginit.exceptions import TransportError
from nginit.utils.logger import get_logger
from nginit.utils.version_utils import (
    filter_stable_versions,
    major_of,
    normalize_range,
    sort_versions_desc,
    strip_range_prefix,
)
from nginit.constants import (
    DEFAULT_CORE_PACKAGES,
    DEFAULT_MIRRORED_SCOPES,
    DEFAULT_SCAN_LIMIT,
    DEFAULT_SUGGESTION_COUNT,
)

logger = get_logger("resolver")


class CompatibilityResolver:
    """Resolve library versions compatible with a target Angular version.

    Args:
        registry: Registry client used for metadata and peer lookups.
        core_packages: Peer-dependency names that decide compatibility,
            checked in order; the first one a version declares is used.
        mirrored_scopes: Name prefixes of packages versioned in lockstep
            with Angular.
        scan_limit: Maximum number of stable versions inspected per
            library.
    """

    def __init__(
        self,
        registry: RegistryClient,
        *,
        core_packages: Sequence[str] = DEFAULT_CORE_PACKAGES,
        mirrored_scopes: Sequence[str] = DEFAULT_MIRRORED_SCOPES,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
    ) -> None:
        if scan_limit <= 0:
            raise ValueError("scan_limit must be positive")
        if not core_packages:
            raise ValueError("at least one core package is required")
        self.registry = registry
        self.core_packages = tuple(core_packages)
        self.mirrored_scopes = tuple(mirrored_scopes)
        self.scan_limit = scan_limit

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def find_compatible_version(
        self,
        name: str,
        target_version: str,
    ) -> CompatibilityResult:
        """Find the best version specifier of ``name`` for ``target_version``.

        Args:
            name: Library name (scoped names allowed).
            target_version: Concrete Angular version, e.g. ``"17.3.0"``.

        Returns:
            A :class:`CompatibilityResult`; never ``None``.

        Raises:
            TransportError: A registry response body could not be decoded.
        """
        outcome = await self.registry.fetch_package_metadata_outcome(name)
        metadata = outcome.value
        if metadata is None:
            return CompatibilityResult(
                resolved_version_spec=LATEST,
                source=ResolutionSource.FALLBACK,
                reason=REASON_METADATA_UNAVAILABLE,
                fallback_cause=outcome.status,
                detail=outcome.detail,
            )

        target_major = major_of(target_version)
        stable = sort_versions_desc(filter_stable_versions(metadata.versions))

        if self._is_mirrored(name):
            for version in stable:
                if major_of(version) == target_major:
                    logger.debug("%s follows Angular majors, picked %s", name, version)
                    return CompatibilityResult(
                        resolved_version_spec=f"^{version}",
                        source=ResolutionSource.DYNAMIC,
                        reason=REASON_MATCHED_MAJOR,
                        version=version,
                    )

        for version in stable[: self.scan_limit]:
            peers = await self.registry.fetch_peer_dependencies(name, version)
            core_name, peer_range = self._core_peer(peers)

            if peer_range is None:
                logger.debug("%s@%s declares no core peer dependency", name, version)
                return CompatibilityResult(
                    resolved_version_spec=f"^{version}",
                    source=ResolutionSource.DYNAMIC,
                    reason=REASON_NO_PEER_DEPENDENCY,
                    version=version,
                )

            if satisfies_peer_range(target_version, peer_range):
                logger.debug(
                    "%s@%s accepts %s %s", name, version, core_name, peer_range
                )
                return CompatibilityResult(
                    resolved_version_spec=f"^{version}",
                    source=ResolutionSource.DYNAMIC,
                    reason=REASON_PEER_SATISFIED,
                    peer_dependency_seen=peer_range,
                    version=version,
                )

        latest = metadata.latest
        logger.warning(
            "No version of %s found compatible with Angular %s", name, target_version
        )
        return CompatibilityResult(
            resolved_version_spec=f"^{latest}" if latest else LATEST,
            source=ResolutionSource.FALLBACK,
            reason=REASON_NO_COMPATIBLE_VERSION,
            warning=True,
            version=latest,
            detail=f"inspected {min(len(stable), self.scan_limit)} stable version(s)",
        )

    async def check_version_compatibility(
        self,
        name: str,
        version: str,
        target_version: str,
    ) -> VersionCompatibility:
        """Check one explicit version of ``name`` against ``target_version``.

        ``^`` and ``~`` prefixes on ``version`` are ignored.
        """
        clean = strip_range_prefix(version)
        outcome = await self.registry.fetch_peer_dependencies_outcome(name, clean)

        if outcome.status is FetchStatus.NOT_FOUND:
            return VersionCompatibility(False, f"{name}@{clean} is not published")
        if outcome.value is None:
            # Registry unreachable: nothing contradicts the request
            return VersionCompatibility(True, REASON_METADATA_UNAVAILABLE)

        _, peer_range = self._core_peer(outcome.value.peer_dependencies)
        if peer_range is None:
            return VersionCompatibility(True, REASON_NO_PEER_DEPENDENCY)

        if satisfies_peer_range(target_version, peer_range):
            return VersionCompatibility(True, REASON_PEER_SATISFIED, peer_range)

        return VersionCompatibility(
            False,
            f"requires Angular {peer_range}",
            peer_range,
        )

    async def resolve(
        self,
        request: LibraryRequest,
        target_version: str,
    ) -> CompatibilityResult:
        """Resolve a :class:`LibraryRequest`.

        ``latest`` requests go through :meth:`find_compatible_version`.
        Explicit requests keep the requested specifier and are flagged
        with ``warning`` when incompatible.
        """
        if request.wants_latest:
            return await self.find_compatible_version(request.name, target_version)

        check = await self.check_version_compatibility(
            request.name, request.requested_version, target_version
        )
        return CompatibilityResult(
            resolved_version_spec=request.requested_version,
            source=ResolutionSource.DYNAMIC,
            reason=(
                REASON_REQUESTED_COMPATIBLE
                if check.compatible
                else REASON_REQUESTED_INCOMPATIBLE
            ),
            peer_dependency_seen=check.peer_dependency,
            warning=not check.compatible,
            version=strip_range_prefix(request.requested_version),
            detail=check.reason,
        )

    async def find_all_compatible_versions(
        self,
        name: str,
        target_version: str,
        max_results: int = DEFAULT_SUGGESTION_COUNT,
    ) -> List[CompatibleVersion]:
        """Return up to ``max_results`` compatible versions, newest first.

        Unlike :meth:`find_compatible_version` this walks every stable
        version, so older targets still get suggestions.
        """
        metadata = await self.registry.fetch_package_metadata(name)
        if metadata is None:
            return []

        found: List[CompatibleVersion] = []
        stable = sort_versions_desc(filter_stable_versions(metadata.versions))
        for version in stable:
            if len(found) >= max_results:
                break
            check = await self.check_version_compatibility(name, version, target_version)
            if check.compatible:
                found.append(CompatibleVersion(version, check.reason, check.peer_dependency))
        return found

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _is_mirrored(self, name: str) -> bool:
        return any(name.startswith(scope) for scope in self.mirrored_scopes)

    def _core_peer(
        self,
        peers: Mapping[str, str],
    ) -> Tuple[Optional[str], Optional[str]]:
        for core_name in self.core_packages:
            if core_name in peers:
                return core_name, peers[core_name]
        return None, None


# ---------------------------------------------------------------------------
# Range matching
# ---------------------------------------------------------------------------


def satisfies_peer_range(target_version: str, peer_range: str) -> bool:
    """Return True if ``target_version`` satisfies the npm ``peer_range``.

    Falls back to major-version pattern matching when either side cannot
    be parsed as npm semver.

    Examples:
        >>> satisfies_peer_range("17.3.0", "^16.0.0 || ^17.0.0")
        True
        >>> satisfies_peer_range("17.3.0", ">=18.0.0")
        False
    """
    try:
        return Version.coerce(target_version) in NpmSpec(normalize_range(peer_range))
    except ValueError:
        logger.debug("Unparseable peer range %r, using pattern match", peer_range)
        return _matches_major_pattern(target_version, peer_range)


def _matches_major_pattern(target_version: str, peer_range: str) -> bool:
    major = major_of(target_version)
    if major is None:
        return False
    patterns = (
        f"^{major}.",
        f"~{major}.",
        f">={major}.",
        f"{major}.x",
        f"{major}.0.0",
    )
    return any(pattern in peer_range for pattern in patterns)


# ---------------------------------------------------------------------------
# Batch resolution
# ---------------------------------------------------------------------------


async def resolve_libraries(
    resolver: CompatibilityResolver,
    requests: Sequence[LibraryRequest],
    target_version: str,
) -> List[LibraryResolution]:
    """Resolve ``requests`` one after another.

    A :class:`TransportError` aborts only the affected library; its
    message is recorded and the next library is resolved.
    """
    resolutions: List[LibraryResolution] = []
    for request in requests:
        try:
            result = await resolver.resolve(request, target_version)
        except TransportError as exc:
            logger.error("Resolution of %s aborted: %s", request.name, exc)
            resolutions.append(LibraryResolution(request, error=str(exc)))
            continue
        resolutions.append(LibraryResolution(request, result))
    return resolutions
