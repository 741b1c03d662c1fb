"""
Core functionality exports for ng-init.

This module provides convenient access to the core subsystems of ng-init.
Importing from here keeps user-facing imports clean and stable:

    from nginit.core import CompatibilityResolver, RegistryClient
"""

from __future__ import annotations

from nginit.core.profiles import ProfileStore
from nginit.core.session import RegistrySession, registry_session
from nginit.core.registry import RegistryCache, RegistryClient
from nginit.core.resolver import CompatibilityResolver, resolve_libraries
from nginit.core.wizard import Wizard, WizardOptions, WizardResult

__all__ = [
    "RegistryCache",
    "RegistryClient",
    "CompatibilityResolver",
    "resolve_libraries",
    "RegistrySession",
    "registry_session",
    "ProfileStore",
    "Wizard",
    "WizardOptions",
    "WizardResult",
]
