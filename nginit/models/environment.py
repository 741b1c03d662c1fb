"""
Local toolchain models for ng-init.

Snapshots of what the environment probes found (Node.js, npm, nvm, Angular
CLI) and the verdicts derived from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SystemVersions:
    """Versions of the local toolchain; ``None`` means not installed.

    Attributes:
        node: Node.js version without the leading ``v``.
        npm: npm version.
        nvm: nvm version.
        angular_cli: Globally installed Angular CLI version.
    """

    node: Optional[str] = None
    npm: Optional[str] = None
    nvm: Optional[str] = None
    angular_cli: Optional[str] = None

    @property
    def has_node(self) -> bool:
        return self.node is not None

    @property
    def has_nvm(self) -> bool:
        return self.nvm is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node": self.node,
            "npm": self.npm,
            "nvm": self.nvm,
            "angular_cli": self.angular_cli,
        }


@dataclass(frozen=True)
class NodeCompatibility:
    """Whether the current Node.js version satisfies a required range."""

    compatible: bool
    current: Optional[str]
    required: str
    error: Optional[str] = None


@dataclass(frozen=True)
class CliRequirement:
    """Whether a (different) Angular CLI is needed for the target version."""

    needed: bool
    reason: str
    suggestion: Optional[str] = None
