"""Shared fixtures for the ng-init test suite."""

from __future__ import annotations

import pytest
from urllib.parse import quote
from typing import Any, Dict, List, Mapping, Optional
from unittest.mock import AsyncMock, MagicMock

from nginit.constants import NPM_REGISTRY_URL
from nginit.exceptions import PackageNotFoundError
from nginit.utils.http import HTTPClient


class FakeRegistryHTTP:
    """In-memory stand-in for :class:`HTTPClient` serving registry documents.

    Unknown URLs answer like a registry 404. A route may hold an exception
    instance, which is raised instead of returning a document.
    """

    def __init__(self, base_url: str = NPM_REGISTRY_URL) -> None:
        self.base_url = base_url
        self.routes: Dict[str, Any] = {}
        self.calls: List[str] = []
        self.mock = MagicMock(spec=HTTPClient)
        self.mock.get_json = AsyncMock(side_effect=self._get_json)

    def package_url(self, name: str) -> str:
        return f"{self.base_url}/{quote(name, safe='')}"

    def add_package(
        self,
        name: str,
        versions: Mapping[str, Optional[Mapping[str, str]]],
        *,
        latest: Optional[str] = None,
        dist_tags: Optional[Mapping[str, str]] = None,
        **document: Any,
    ) -> None:
        """Register a package; ``versions`` maps version → peerDependencies."""
        tags = dict(dist_tags or {})
        if latest or versions:
            tags.setdefault("latest", latest or list(versions)[-1])

        self.routes[self.package_url(name)] = {
            "name": name,
            "dist-tags": tags,
            "versions": {v: {"version": v} for v in versions},
            **document,
        }
        for version, peers in versions.items():
            manifest: Dict[str, Any] = {"name": name, "version": version}
            if peers is not None:
                manifest["peerDependencies"] = dict(peers)
            self.routes[f"{self.package_url(name)}/{quote(version, safe='')}"] = manifest

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    def calls_to(self, url: str) -> int:
        return self.calls.count(url)

    async def _get_json(self, url: str, *, timeout: Optional[float] = None, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(url)
        value = self.routes.get(url)
        if value is None:
            raise PackageNotFoundError(f"Resource not found: {url}", url=url, status_code=404)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_http() -> FakeRegistryHTTP:
    """A fake registry transport with no packages registered."""
    return FakeRegistryHTTP()
