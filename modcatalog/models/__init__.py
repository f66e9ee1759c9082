"""
Unified data model exports for modcatalog.

Example:
    >>> from modcatalog.models import Module, Release, EnvironmentSnapshot
"""

from __future__ import annotations

from modcatalog.models.release import Asset, Release
from modcatalog.models.module import Module
from modcatalog.models.environment import EnvironmentSnapshot
from modcatalog.models.decision import (
    LatestVersionIs,
    PrimaryAction,
    ReleaseDecision,
    SecondaryAction,
)

__all__ = [
    "Asset",
    "Release",
    "Module",
    "EnvironmentSnapshot",
    "ReleaseDecision",
    "LatestVersionIs",
    "PrimaryAction",
    "SecondaryAction",
]
