"""
ng-init version information.

Single source of truth for the package version, read by ``pyproject.toml``
and ``ng-init --version``.
"""

from __future__ import annotations

__version__ = "1.0.0"
