"""
Filesystem utilities for ng-init.

This module provides safe helpers for reading and writing the files
ng-init generates (package.json, configuration presets, docs, profiles).
Writes go through a temporary file and an atomic replace. All filesystem
errors are normalized to ``FileOperationError``.
"""

from __future__ import annotations

import os
import json
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from nginit.utils.logger import get_logger
from nginit.exceptions import FileOperationError
from nginit.constants import MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Validate and resolve an existing file path."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Atomically write text to a file using a temporary file + replace."""
    temp_path: Optional[Path] = None

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="\n",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except OSError as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> Path:
    """Atomically write text to ``file_path``, creating parent directories.

    Returns:
        The path that was written.
    """
    path = Path(file_path)
    _atomic_write(path, content)
    logger.debug("Wrote %s (%d bytes)", path, len(content))
    return path


def read_json_file(file_path: PathLike) -> Any:
    """Read and parse a JSON file.

    Raises:
        FileOperationError: The file is missing, unreadable or not JSON.
    """
    text = safe_read_file(file_path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise FileOperationError(
            f"Invalid JSON: {exc}",
            file_path=str(file_path),
            operation="parse",
            original_error=exc,
        ) from exc


def write_json_file(file_path: PathLike, data: Any) -> Path:
    """Write ``data`` as 2-space indented JSON with a trailing newline."""
    return safe_write_file(file_path, json.dumps(data, indent=2) + "\n")


def validate_path(
    path: PathLike,
    *,
    base_dir: Optional[PathLike] = None,
) -> Path:
    """Resolve and validate a filesystem path.

    If ``base_dir`` is provided, the resolved path must be within it.
    """
    resolved = Path(path).expanduser().resolve(strict=False)

    if base_dir:
        base = Path(base_dir).expanduser().resolve(strict=False)
        try:
            resolved.relative_to(base)
        except ValueError:
            raise FileOperationError(
                f"Path outside allowed base directory: {resolved}",
                file_path=str(path),
                operation="validate",
            )

    return resolved
