"""npm registry client for ng-init.

Fetches package metadata and per-version peer dependencies from the npm
registry through a shared :class:`HTTPClient`, caching successful
responses in an explicitly owned :class:`RegistryCache` so repeated
lookups within one session cost no network round-trip.

Absent data never raises: an unknown package or an unreachable registry
yields ``None`` (metadata) or ``{}`` (peer dependencies). The ``*_outcome``
variants return a :class:`FetchOutcome` tagged with the cause instead.
Only a :class:`~nginit.exceptions.TransportError` (an undecodable
response body or an unusable transport) propagates. Resets and dropped
connections are retried and then read as absence.

Typical usage::

    from nginit.utils.http import HTTPClient
    from nginit.core.registry import RegistryCache, RegistryClient

    async with HTTPClient() as http:
        registry = RegistryClient(http, RegistryCache())
        meta = await registry.fetch_package_metadata("@angular/material")
        print(meta.latest)                         # e.g. "17.3.1"
        peers = await registry.fetch_peer_dependencies("ngx-mask", "17.0.0")
"""

from __future__ import annotations

import time
import threading
from urllib.parse import quote
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from nginit.models.registry import (
    AngularVersions,
    CacheEntry,
    FetchOutcome,
    PackageDetails,
    PackageMetadata,
    SearchHit,
    VersionPeerInfo,
    peer_map,
)
from nginit.exceptions import NetworkError, PackageNotFoundError
from nginit.utils.http import HTTPClient
from nginit.utils.logger import get_logger
from nginit.utils.version_utils import filter_stable_versions, sort_versions_desc
from nginit.constants import (
    ANGULAR_CLI_PACKAGE,
    DEFAULT_CACHE_TTL,
    DEFAULT_PEER_TIMEOUT,
    DEFAULT_TIMEOUT,
    NPM_DOWNLOADS_URL,
    NPM_REGISTRY_URL,
    NPM_SEARCH_PATH,
)

logger = get_logger("registry")

__all__ = ["RegistryCache", "RegistryClient", "encode_package_name", "format_downloads"]


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class RegistryCache:
    """Session-scoped TTL cache for registry responses.

    Two independent stores: package metadata keyed by name, and peer
    dependencies keyed by ``(name, version)``. Entries older than ``ttl``
    seconds (measured from fetch completion) are treated as absent. There
    is no size bound; the cache lives for one CLI invocation.

    Args:
        ttl: Entry lifetime in seconds.
        clock: Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._metadata: Dict[str, CacheEntry[PackageMetadata]] = {}
        self._peers: Dict[Tuple[str, str], CacheEntry[VersionPeerInfo]] = {}

    def get_metadata(self, name: str) -> Optional[PackageMetadata]:
        """Return fresh cached metadata for ``name``, or ``None``."""
        with self._lock:
            entry = self._metadata.get(name)
            if entry is None:
                return None
            if not entry.is_fresh(self._clock(), self.ttl):
                del self._metadata[name]
                return None
            return entry.data

    def set_metadata(self, name: str, metadata: PackageMetadata) -> None:
        with self._lock:
            self._metadata[name] = CacheEntry(metadata, self._clock())

    def get_peers(self, name: str, version: str) -> Optional[VersionPeerInfo]:
        """Return fresh cached peer info for ``(name, version)``, or ``None``."""
        key = (name, version)
        with self._lock:
            entry = self._peers.get(key)
            if entry is None:
                return None
            if not entry.is_fresh(self._clock(), self.ttl):
                del self._peers[key]
                return None
            return entry.data

    def set_peers(self, info: VersionPeerInfo) -> None:
        with self._lock:
            self._peers[(info.package_name, info.version)] = CacheEntry(
                info, self._clock()
            )

    def clear(self) -> None:
        with self._lock:
            self._metadata.clear()
            self._peers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._metadata) + len(self._peers)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class RegistryClient:
    """Cached, non-throwing access to the npm registry.

    Args:
        http_client: A pre-configured :class:`HTTPClient` (owns the
            connection pool).
        cache: Session cache; a fresh one is created when omitted.
        registry_url: Base URL of the registry.
        metadata_timeout: Per-call timeout for package documents.
        peer_timeout: Per-call timeout for version documents and search.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        cache: Optional[RegistryCache] = None,
        *,
        registry_url: str = NPM_REGISTRY_URL,
        metadata_timeout: float = DEFAULT_TIMEOUT,
        peer_timeout: float = DEFAULT_PEER_TIMEOUT,
    ) -> None:
        self.http_client = http_client
        self.cache = cache if cache is not None else RegistryCache()
        self.registry_url = registry_url.rstrip("/")
        self.metadata_timeout = metadata_timeout
        self.peer_timeout = peer_timeout

    # ------------------------------------------------------------------
    # Package metadata
    # ------------------------------------------------------------------

    async def fetch_package_metadata(self, name: str) -> Optional[PackageMetadata]:
        """Return metadata for ``name``, or ``None`` when unavailable.

        A cache hit within the TTL issues no request. Failures are logged
        at WARNING and are not cached, so the next call retries.

        Raises:
            ValueError: ``name`` is empty.
            TransportError: The response body could not be decoded.
        """
        outcome = await self.fetch_package_metadata_outcome(name)
        return outcome.value

    async def fetch_package_metadata_outcome(
        self,
        name: str,
    ) -> FetchOutcome[PackageMetadata]:
        """Like :meth:`fetch_package_metadata` but tagged with the cause."""
        if not name or not name.strip():
            raise ValueError("package name must not be empty")

        cached = self.cache.get_metadata(name)
        if cached is not None:
            logger.debug("Cache hit for %s", name)
            return FetchOutcome.success(cached)

        url = self.package_url(name)
        try:
            document = await self.http_client.get_json(url, timeout=self.metadata_timeout)
        except PackageNotFoundError:
            logger.warning("Package '%s' not found in registry", name)
            return FetchOutcome.not_found(f"{name} is not published")
        except NetworkError as exc:
            logger.warning("Could not fetch package data for %s: %s", name, exc.message)
            return FetchOutcome.unreachable(exc.message)

        metadata = PackageMetadata.from_registry(name, document)
        self.cache.set_metadata(name, metadata)
        return FetchOutcome.success(metadata)

    # ------------------------------------------------------------------
    # Per-version documents
    # ------------------------------------------------------------------

    async def fetch_peer_dependencies(self, name: str, version: str) -> Dict[str, str]:
        """Return the ``peerDependencies`` map of ``name@version``.

        An empty map means either "no constraints declared" or "version
        document unavailable"; use :meth:`fetch_peer_dependencies_outcome`
        to distinguish.
        """
        outcome = await self.fetch_peer_dependencies_outcome(name, version)
        return dict(outcome.value.peer_dependencies) if outcome.value else {}

    async def fetch_peer_dependencies_outcome(
        self,
        name: str,
        version: str,
    ) -> FetchOutcome[VersionPeerInfo]:
        """Fetch (or return cached) peer dependencies, tagged with the cause."""
        cached = self.cache.get_peers(name, version)
        if cached is not None:
            return FetchOutcome.success(cached)

        outcome = await self._fetch_version_document(name, version)
        if not outcome.ok or outcome.value is None:
            logger.debug(
                "No version document for %s@%s (%s)", name, version, outcome.status.value
            )
            return FetchOutcome(outcome.status, None, outcome.detail)

        info = VersionPeerInfo(
            package_name=name,
            version=version,
            peer_dependencies=peer_map(outcome.value),
        )
        self.cache.set_peers(info)
        return FetchOutcome.success(info)

    async def fetch_version_manifest(
        self,
        name: str,
        version: str,
    ) -> Optional[Dict[str, Any]]:
        """Return the raw document of ``name@version`` (``engines``, ``peerDependencies`` ...)."""
        outcome = await self._fetch_version_document(name, version)
        return outcome.value

    async def _fetch_version_document(
        self,
        name: str,
        version: str,
    ) -> FetchOutcome[Dict[str, Any]]:
        url = f"{self.package_url(name)}/{quote(version, safe='')}"
        try:
            document = await self.http_client.get_json(url, timeout=self.peer_timeout)
        except PackageNotFoundError:
            return FetchOutcome.not_found(f"{name}@{version} is not published")
        except NetworkError as exc:
            return FetchOutcome.unreachable(exc.message)
        return FetchOutcome.success(document)

    # ------------------------------------------------------------------
    # Search and statistics
    # ------------------------------------------------------------------

    async def search_packages(self, query: str, size: int = 10) -> List[SearchHit]:
        """Full-text search; returns ``[]`` when the search endpoint fails."""
        if not query.strip():
            return []

        url = f"{self.registry_url}{NPM_SEARCH_PATH}"
        try:
            document = await self.http_client.get_json(
                url,
                timeout=self.peer_timeout,
                params={"text": query, "size": size},
            )
        except NetworkError as exc:
            logger.error("Error searching npm packages: %s", exc.message)
            return []

        return [
            SearchHit.from_search_object(obj)
            for obj in document.get("objects") or []
            if isinstance(obj, Mapping)
        ]

    async def fetch_weekly_downloads(self, name: str) -> int:
        """Return last week's download count, ``0`` when unknown."""
        url = NPM_DOWNLOADS_URL.format(package=name)
        try:
            document = await self.http_client.get_json(url, timeout=self.peer_timeout)
        except NetworkError:
            return 0
        downloads = document.get("downloads", 0)
        return downloads if isinstance(downloads, int) else 0

    async def get_package_details(self, name: str) -> Optional[PackageDetails]:
        """Metadata plus weekly downloads, or ``None`` if the package is unknown."""
        metadata = await self.fetch_package_metadata(name)
        if metadata is None:
            return None
        downloads = await self.fetch_weekly_downloads(name)
        return PackageDetails(metadata=metadata, weekly_downloads=downloads)

    async def get_angular_versions(self) -> AngularVersions:
        """Stable Angular CLI versions newest first, with ``latest``/``lts`` tags."""
        metadata = await self.fetch_package_metadata(ANGULAR_CLI_PACKAGE)
        if metadata is None:
            logger.error("Error fetching Angular versions")
            return AngularVersions()

        versions = sort_versions_desc(filter_stable_versions(metadata.versions))
        return AngularVersions(
            versions=tuple(versions),
            latest=metadata.dist_tags.get("latest"),
            lts=metadata.dist_tags.get("lts"),
        )

    # ------------------------------------------------------------------
    # URL helpers
    # ------------------------------------------------------------------

    def package_url(self, name: str) -> str:
        return f"{self.registry_url}/{encode_package_name(name)}"


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def encode_package_name(name: str) -> str:
    """Percent-encode a package name as a single URL path segment.

    Example::

        >>> encode_package_name("@angular/core")
        '%40angular%2Fcore'
    """
    return quote(name.strip(), safe="")


def format_downloads(downloads: int) -> str:
    """Format a download count for display (``1.2M``, ``3.4K``)."""
    if downloads >= 1_000_000:
        return f"{downloads / 1_000_000:.1f}M"
    if downloads >= 1_000:
        return f"{downloads / 1_000:.1f}K"
    return str(downloads)
