"""
Wizard profile model for ng-init.

A profile captures the answers of one wizard run (Angular version,
template, libraries, ``ng new`` options) so the next project can be
created with the same setup. Profiles are stored as JSON with camelCase
keys, matching the export file format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from nginit.models.compatibility import LATEST, LibraryRequest


@dataclass
class ProfileLibrary:
    """One library entry of a profile."""

    name: str
    version: str = LATEST
    is_dev: bool = False

    def to_request(self) -> LibraryRequest:
        return LibraryRequest(self.name, self.version or LATEST, self.is_dev)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "version": self.version}
        if self.is_dev:
            data["isDev"] = True
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProfileLibrary":
        return cls(
            name=str(data["name"]),
            version=str(data.get("version") or LATEST),
            is_dev=bool(data.get("isDev", False)),
        )


@dataclass
class Profile:
    """Saved wizard configuration.

    Attributes:
        angular_version: Angular version the project was created with.
        template: Key of the project template used, if any.
        libraries: Libraries that were installed.
        options: ``ng new`` options (routing, style, strict, standalone).
        created_at: ISO-8601 timestamp set when the profile is saved.
        updated_at: ISO-8601 timestamp set when the profile is saved.
    """

    angular_version: Optional[str] = None
    template: Optional[str] = None
    libraries: List[ProfileLibrary] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the on-disk camelCase representation."""
        data: Dict[str, Any] = {
            "angularVersion": self.angular_version,
            "template": self.template,
            "libraries": [lib.to_dict() for lib in self.libraries],
            "options": dict(self.options),
        }
        if self.created_at:
            data["createdAt"] = self.created_at
        if self.updated_at:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        """Build a profile from its stored representation.

        Raises:
            ValueError: ``data`` is not a mapping or a library entry lacks
                a name.
        """
        if not isinstance(data, Mapping):
            raise ValueError("profile must be a JSON object")

        libraries = []
        for entry in data.get("libraries") or []:
            if not isinstance(entry, Mapping) or not entry.get("name"):
                raise ValueError(f"invalid library entry: {entry!r}")
            libraries.append(ProfileLibrary.from_dict(entry))

        return cls(
            angular_version=data.get("angularVersion"),
            template=data.get("template"),
            libraries=libraries,
            options=dict(data.get("options") or {}),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )
