"""
Saved wizard profiles for ng-init.

Profiles live in a single JSON object keyed by profile name at
``{profiles_dir}/profiles.json``. A missing or corrupt store reads as
empty rather than failing, so a broken file never blocks project
creation. Exports wrap one profile in
``{name, profile, exportedAt, version}``.

Example::

    store = ProfileStore("~/.ng-init")
    store.save("team-default", Profile(angular_version="17.3.0", template="enterprise"))
    store.export("team-default", "team-default.json")
"""

from __future__ import annotations

from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from nginit.models.profile import Profile
from nginit.exceptions import FileOperationError, ProfileError
from nginit.utils.logger import get_logger
from nginit.utils.filesystem import read_json_file, write_json_file
from nginit.constants import (
    DEFAULT_PROFILES_DIR,
    PROFILE_EXPORT_VERSION,
    PROFILES_FILE_NAME,
)

logger = get_logger("profiles")

PathLike = Union[str, Path]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ProfileStore:
    """JSON-file backed store of wizard profiles.

    Args:
        directory: Directory holding ``profiles.json``; ``~`` is expanded.
    """

    def __init__(self, directory: PathLike = DEFAULT_PROFILES_DIR) -> None:
        self.directory = Path(directory).expanduser()
        self.path = self.directory / PROFILES_FILE_NAME

    # ------------------------------------------------------------------
    # Raw store
    # ------------------------------------------------------------------

    def load_all(self) -> Dict[str, Dict[str, Any]]:
        """Return every stored profile as raw dictionaries."""
        if not self.path.exists():
            return {}
        try:
            data = read_json_file(self.path)
        except FileOperationError as exc:
            logger.warning("Ignoring unreadable profile store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring profile store %s: not a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, dict)}

    def _save_all(self, profiles: Dict[str, Dict[str, Any]]) -> None:
        write_json_file(self.path, profiles)

    # ------------------------------------------------------------------
    # Profile operations
    # ------------------------------------------------------------------

    def save(self, name: str, profile: Profile) -> Profile:
        """Store ``profile`` under ``name``, stamping its timestamps.

        Raises:
            ProfileError: ``name`` is empty.
            FileOperationError: The store could not be written.
        """
        if not name or not name.strip():
            raise ProfileError("Profile name must not be empty")

        stamp = _now()
        profile.created_at = stamp
        profile.updated_at = stamp

        profiles = self.load_all()
        profiles[name] = profile.to_dict()
        self._save_all(profiles)
        logger.info("Saved profile %s", name)
        return profile

    def load(self, name: str) -> Optional[Profile]:
        """Return the profile called ``name``, or ``None``."""
        raw = self.load_all().get(name)
        if raw is None:
            return None
        try:
            return Profile.from_dict(raw)
        except ValueError as exc:
            logger.warning("Profile %s is invalid: %s", name, exc)
            return None

    def delete(self, name: str) -> bool:
        """Delete ``name``; return False when no such profile exists."""
        profiles = self.load_all()
        if name not in profiles:
            return False
        del profiles[name]
        self._save_all(profiles)
        logger.info("Deleted profile %s", name)
        return True

    def list_names(self) -> List[str]:
        return list(self.load_all())

    def details(self, name: str) -> Optional[Dict[str, Any]]:
        """Summary of a profile for listings."""
        profile = self.load(name)
        if profile is None:
            return None
        return {
            "name": name,
            "angular_version": profile.angular_version,
            "template": profile.template,
            "libraries": len(profile.libraries),
            "created_at": profile.created_at,
            "updated_at": profile.updated_at,
        }

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export(self, name: str, output_path: PathLike) -> Path:
        """Write profile ``name`` to ``output_path`` in the export format.

        Raises:
            ProfileError: No profile called ``name``.
        """
        raw = self.load_all().get(name)
        if raw is None:
            raise ProfileError(f"Profile '{name}' not found", profile_name=name)

        payload = {
            "name": name,
            "profile": raw,
            "exportedAt": _now(),
            "version": PROFILE_EXPORT_VERSION,
        }
        return write_json_file(Path(output_path).expanduser(), payload)

    def import_file(self, file_path: PathLike) -> str:
        """Import an exported profile, returning its name.

        Raises:
            ProfileError: The file is unreadable or not an export.
        """
        try:
            payload = read_json_file(Path(file_path).expanduser())
        except FileOperationError as exc:
            raise ProfileError(f"Failed to import profile: {exc.message}") from exc

        if not isinstance(payload, dict) or not payload.get("name") or not payload.get("profile"):
            raise ProfileError("Invalid profile file format")

        name = str(payload["name"])
        try:
            profile = Profile.from_dict(payload["profile"])
        except ValueError as exc:
            raise ProfileError(f"Invalid profile: {exc}", profile_name=name) from exc

        self.save(name, profile)
        return name
