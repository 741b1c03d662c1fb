"""
ng-init: Angular project initializer with library pre-install.

ng-init checks the local Node.js / npm / nvm / Angular CLI environment,
lets you pick an Angular version, resolves companion-library versions
that are compatible with it against the npm registry, and scaffolds the
project (Angular CLI, npm install, git, boilerplate files).

Features include:
    • Environment check with Node.js compatibility guidance
    • Three-tier Angular version picker (major → minor → patch)
    • Peer-dependency aware library version resolution
    • Project templates, library bundles and config presets
    • Reusable wizard profiles
"""

from __future__ import annotations

from nginit.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "ng-init Contributors"
__license__ = "MIT"
__description__ = "Angular project initializer with library pre-install."

__all__ = [
    "__version__",
]
