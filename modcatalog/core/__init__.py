"""
Core functionality exports for modcatalog.

    from modcatalog.core import CatalogStore, decide_all
"""

from __future__ import annotations

from modcatalog.core.resolver import resolve_compatible_release, select_asset
from modcatalog.core.decision import decide, decide_all
from modcatalog.core.catalog import (
    Catalog,
    CatalogStatistics,
    CatalogStore,
    parse_catalog,
)
from modcatalog.core.environment import (
    EnvironmentProvider,
    HostBridge,
    UninstallResult,
)

__all__ = [
    "resolve_compatible_release",
    "select_asset",
    "decide",
    "decide_all",
    "Catalog",
    "CatalogStatistics",
    "CatalogStore",
    "parse_catalog",
    "EnvironmentProvider",
    "HostBridge",
    "UninstallResult",
]
