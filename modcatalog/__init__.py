"""
modcatalog: release catalog browser for optional host modules

modcatalog lets a host application discover, install, update and
uninstall optional modules published on one or more release channels.

Features include:
    • Release resolution against the host runtime's compatibility ranges
    • Stable and opt-in pre-release tracks
    • Per-module install / update / uninstall decisions
    • Channel, search and architecture filtering of the catalog
    • Hosted (bridge) and query-string environment sources
"""

from __future__ import annotations

from modcatalog.__version__ import __version__
from modcatalog.core.decision import decide, decide_all
from modcatalog.core.resolver import resolve_compatible_release, select_asset
from modcatalog.models import (
    Asset,
    EnvironmentSnapshot,
    LatestVersionIs,
    Module,
    PrimaryAction,
    Release,
    ReleaseDecision,
    SecondaryAction,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "modcatalog Contributors"
__license__ = "Apache-2.0"
__description__ = "Release resolution and catalog browsing for optional host modules."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    "decide",
    "decide_all",
    "resolve_compatible_release",
    "select_asset",
    "Asset",
    "Release",
    "Module",
    "EnvironmentSnapshot",
    "ReleaseDecision",
    "LatestVersionIs",
    "PrimaryAction",
    "SecondaryAction",
]
