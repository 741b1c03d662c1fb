"""
Registry session wiring for ng-init commands.

One session per CLI invocation: a single :class:`HTTPClient` (connection
pool), one :class:`RegistryCache`, and the registry client and resolver
built on top of them from the loaded configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from contextlib import asynccontextmanager
from typing import AsyncIterator

from nginit.config import NgInitConfig
from nginit.core.registry import RegistryCache, RegistryClient
from nginit.core.resolver import CompatibilityResolver
from nginit.utils.http import HTTPClient


@dataclass(frozen=True)
class RegistrySession:
    registry: RegistryClient
    resolver: CompatibilityResolver


@asynccontextmanager
async def registry_session(config: NgInitConfig) -> AsyncIterator[RegistrySession]:
    """Open the HTTP client and build the registry client and resolver.

    Example::

        async with registry_session(config) as session:
            result = await session.resolver.find_compatible_version("ngx-mask", "17.3.0")
    """
    async with HTTPClient(
        timeout=config.request_timeout,
        max_retries=config.max_retries,
    ) as http:
        registry = RegistryClient(
            http,
            RegistryCache(ttl=config.cache_ttl),
            registry_url=config.registry_url,
            metadata_timeout=config.request_timeout,
            peer_timeout=config.peer_timeout,
        )
        resolver = CompatibilityResolver(
            registry,
            core_packages=config.core_packages,
            mirrored_scopes=config.mirrored_scopes,
            scan_limit=config.scan_limit,
        )
        yield RegistrySession(registry, resolver)
