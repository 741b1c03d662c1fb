"""
Project scaffolding for ng-init.

Writes the boilerplate around a freshly generated Angular project: git
repository and initial commit, ``.gitignore``, README, CHANGELOG, folder
trees, ``package.json`` script updates and configuration presets.

File operations raise :class:`~nginit.exceptions.FileOperationError`; git
operations raise :class:`~nginit.exceptions.CommandError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from nginit.templates import CHANGELOG, CONFIG_PRESETS, GITIGNORE, render_readme
from nginit.exceptions import FileOperationError
from nginit.utils.process import check_command
from nginit.utils.logger import get_logger
from nginit.utils.filesystem import (
    read_json_file,
    safe_write_file,
    write_json_file,
)
from nginit.constants import PROBE_TIMEOUT

logger = get_logger("scaffold")

PathLike = Union[str, Path]

_INVALID_NAME_CHARS = set('<>:"|?*') | {chr(c) for c in range(0x20)}
_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

PACKAGE_JSON = "package.json"


# ---------------------------------------------------------------------------
# Git
# ---------------------------------------------------------------------------


async def init_git_repo(project_path: PathLike) -> None:
    """Run ``git init`` in ``project_path``."""
    await check_command(["git", "init"], cwd=project_path, timeout=PROBE_TIMEOUT)
    logger.info("Initialized git repository in %s", project_path)


async def create_initial_commit(project_path: PathLike, message: str) -> None:
    """Stage everything and commit it with ``message``."""
    await check_command(["git", "add", "."], cwd=project_path, timeout=PROBE_TIMEOUT)
    await check_command(
        ["git", "commit", "-m", message], cwd=project_path, timeout=PROBE_TIMEOUT
    )
    logger.info("Created initial commit in %s", project_path)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def create_gitignore(project_path: PathLike, content: str = GITIGNORE) -> Path:
    return safe_write_file(Path(project_path) / ".gitignore", content)


def create_readme(
    project_path: PathLike,
    name: str,
    description: Optional[str] = None,
) -> Path:
    return safe_write_file(Path(project_path) / "README.md", render_readme(name, description))


def create_changelog(project_path: PathLike, content: str = CHANGELOG) -> Path:
    return safe_write_file(Path(project_path) / "CHANGELOG.md", content)


# ---------------------------------------------------------------------------
# Folders and files
# ---------------------------------------------------------------------------


def create_project_folders(project_path: PathLike, folders: Sequence[str]) -> List[Path]:
    """Create ``folders`` (relative paths) below ``project_path``."""
    created = []
    root = Path(project_path)
    for folder in folders:
        path = root / folder
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileOperationError(
                f"Failed to create folder: {exc}",
                file_path=str(path),
                operation="mkdir",
                original_error=exc,
            ) from exc
        created.append(path)
    return created


def create_project_files(project_path: PathLike, files: Mapping[str, Any]) -> List[Path]:
    """Write ``files`` (relative path → content) below ``project_path``.

    Non-string content is serialized as 2-space indented JSON.
    """
    written = []
    root = Path(project_path)
    for relative, content in files.items():
        text = content if isinstance(content, str) else json.dumps(content, indent=2) + "\n"
        written.append(safe_write_file(root / relative, text))
    return written


def is_directory_empty(path: PathLike) -> bool:
    """Return True if ``path`` is an empty directory or does not exist."""
    directory = Path(path)
    if not directory.exists():
        return True
    if not directory.is_dir():
        return False
    return not any(directory.iterdir())


def ensure_directory(path: PathLike) -> Path:
    directory = Path(path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to create directory: {exc}",
            file_path=str(directory),
            operation="mkdir",
            original_error=exc,
        ) from exc
    return directory


def validate_directory_name(name: str) -> Union[bool, str]:
    """Validate a project directory name.

    Returns:
        ``True`` when valid, otherwise an error message suitable for a
        prompt validator.

    Examples:
        >>> validate_directory_name("my-app")
        True
        >>> validate_directory_name("CON")
        'Directory name is reserved'
    """
    if not name:
        return "Directory name cannot be empty"
    if any(ch in _INVALID_NAME_CHARS for ch in name):
        return "Directory name contains invalid characters"
    if name.upper() in _RESERVED_NAMES:
        return "Directory name is reserved"
    if len(name) > 255:
        return "Directory name is too long"
    if name.endswith(" ") or name.endswith("."):
        return "Directory name cannot end with a space or period"
    return True


# ---------------------------------------------------------------------------
# package.json
# ---------------------------------------------------------------------------


def read_package_json(project_path: PathLike) -> Optional[Dict[str, Any]]:
    """Return the parsed ``package.json``, or ``None`` if missing or invalid."""
    path = Path(project_path) / PACKAGE_JSON
    try:
        data = read_json_file(path)
    except FileOperationError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return None
    return data if isinstance(data, dict) else None


def write_package_json(project_path: PathLike, content: Mapping[str, Any]) -> Path:
    return write_json_file(Path(project_path) / PACKAGE_JSON, dict(content))


def update_package_json_scripts(project_path: PathLike, scripts: Mapping[str, str]) -> Path:
    """Merge ``scripts`` into the ``scripts`` section of ``package.json``.

    Raises:
        FileOperationError: ``package.json`` is missing or not a JSON object.
    """
    package_json = read_package_json(project_path)
    if package_json is None:
        raise FileOperationError(
            "package.json not found or invalid",
            file_path=str(Path(project_path) / PACKAGE_JSON),
            operation="read",
        )
    merged = dict(package_json.get("scripts") or {})
    merged.update(scripts)
    package_json["scripts"] = merged
    return write_package_json(project_path, package_json)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


def apply_config_preset(project_path: PathLike, preset_key: str) -> List[str]:
    """Write the files and scripts of a configuration preset.

    Callable file entries are merged with the existing (JSON) file.

    Returns:
        Dev packages the preset needs installed.

    Raises:
        KeyError: Unknown ``preset_key``.
    """
    preset = CONFIG_PRESETS[preset_key]
    root = Path(project_path)
    files: Dict[str, Any] = {}

    for relative, content in (preset.get("files") or {}).items():
        if callable(content):
            existing_path = root / relative
            existing = None
            if existing_path.exists():
                try:
                    existing = read_json_file(existing_path)
                except FileOperationError:
                    # tsconfig files may carry comments; start from scratch
                    logger.warning("Could not parse %s, replacing it", existing_path)
            content = content(existing if isinstance(existing, dict) else None)
        files[relative] = content

    create_project_files(root, files)

    scripts = preset.get("scripts")
    if scripts:
        update_package_json_scripts(root, scripts)

    logger.info("Applied preset %s", preset_key)
    return list(preset.get("dev_packages") or [])
