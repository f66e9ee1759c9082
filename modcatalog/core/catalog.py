"""Module catalog loading and filtering for modcatalog.

A catalog is a JSON array of module entries published next to the browser
(``index.json`` by default) or on any static host. :class:`CatalogStore`
loads catalogs from URLs or local files and caches each source for the
lifetime of the store; :class:`Catalog` offers the channel, installability
and search filters used to build the list of modules shown to the user.

Typical usage::

    from modcatalog.utils.http import HTTPClient
    from modcatalog.core.catalog import CatalogStore

    async with HTTPClient() as http:
        store = CatalogStore(http)
        catalog = await store.load("https://example.org/index.json")
        visible = catalog.filter_channels(["Official"]).search("anova")
"""

from __future__ import annotations

import re
import json
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from modcatalog.constants import DEFAULT_CHANNEL
from modcatalog.exceptions import CatalogError, NetworkError
from modcatalog.models.environment import EnvironmentSnapshot
from modcatalog.models.module import Module
from modcatalog.models.release import Release
from modcatalog.core.resolver import resolve_compatible_release
from modcatalog.utils.filesystem import safe_read_file
from modcatalog.utils.http import HTTPClient
from modcatalog.utils.logger import get_logger
from modcatalog.utils.version_utils import is_newer

logger = get_logger("catalog")

__all__ = ["Catalog", "CatalogStatistics", "CatalogStore", "parse_catalog"]

_HTML_TAG = re.compile(r"<[^>]*>")


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogStatistics:
    """Aggregate counts over a catalog.

    Attributes:
        modules: Number of modules.
        releases: Number of stable releases across all modules.
        pre_releases: Number of pre-releases across all modules.
        assets: Number of stable-release assets across all modules.
    """

    modules: int
    releases: int
    pre_releases: int
    assets: int

    @property
    def average_assets_per_release(self) -> float:
        return self.assets / self.releases if self.releases else 0.0

    def to_json(self) -> Dict[str, Any]:
        return {
            "modules": self.modules,
            "releases": self.releases,
            "pre_releases": self.pre_releases,
            "assets": self.assets,
            "average_assets_per_release": round(self.average_assets_per_release, 2),
        }


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class Catalog:
    """An ordered, immutable collection of modules.

    Filters return new :class:`Catalog` instances and keep catalog order.

    Args:
        modules: Modules in catalog order.
        source: URL or path the catalog was loaded from, if any.
    """

    def __init__(self, modules: Iterable[Module], source: Optional[str] = None) -> None:
        self._modules: Tuple[Module, ...] = tuple(modules)
        self.source = source

    @property
    def modules(self) -> Tuple[Module, ...]:
        return self._modules

    def __iter__(self) -> Iterator[Module]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"Catalog(source={self.source!r}, modules={len(self._modules)})"

    def get(self, name: str) -> Optional[Module]:
        """Return the module called *name*, or ``None``."""
        for module in self._modules:
            if module.name == name:
                return module
        return None

    def _derive(self, modules: Iterable[Module]) -> "Catalog":
        return Catalog(modules, source=self.source)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def channels(self) -> List[str]:
        """Return every channel in the catalog, sorted, default channel first."""
        names = sorted({c for module in self._modules for c in module.channels})
        if DEFAULT_CHANNEL in names:
            names.remove(DEFAULT_CHANNEL)
            names.insert(0, DEFAULT_CHANNEL)
        return names

    def filter_channels(self, selected: Sequence[str]) -> "Catalog":
        """Keep modules listed in at least one of the *selected* channels.

        An empty selection yields an empty catalog.
        """
        wanted = set(selected)
        if not wanted:
            return self._derive(())
        return self._derive(m for m in self._modules if m.in_any_channel(wanted))

    def filter_installable(self, snapshot: EnvironmentSnapshot) -> "Catalog":
        """Keep modules whose latest candidate release ships for the host.

        The candidate is the compatible stable release; with pre-releases
        enabled a compatible pre-release replaces it when it is newer or when
        no stable release is compatible. The candidate must have an asset for
        the snapshot architecture.
        """
        kept = []
        for module in self._modules:
            candidate = _installable_candidate(module, snapshot)
            if candidate is None:
                logger.debug("%s: no compatible release", module.name)
                continue
            if snapshot.architecture not in candidate.architectures:
                logger.debug(
                    "%s: release %s has no %s asset",
                    module.name,
                    candidate.version,
                    snapshot.architecture,
                )
                continue
            kept.append(module)
        return self._derive(kept)

    def search(self, term: Optional[str]) -> "Catalog":
        """Keep modules whose title, name or description contains *term*.

        Matching is case-insensitive and ignores HTML markup in
        descriptions. A blank term keeps every module.
        """
        if term is None or not term.strip():
            return self._derive(self._modules)

        needle = term.lower()
        return self._derive(m for m in self._modules if _matches(m, needle))

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def statistics(self) -> CatalogStatistics:
        """Count modules, releases, pre-releases and stable-release assets."""
        releases = sum(len(m.releases) for m in self._modules)
        return CatalogStatistics(
            modules=len(self._modules),
            releases=releases,
            pre_releases=sum(len(m.pre_releases) for m in self._modules),
            assets=sum(len(r.assets) for m in self._modules for r in m.releases),
        )

    def to_json(self) -> List[Dict[str, Any]]:
        return [module.to_json() for module in self._modules]


def _installable_candidate(
    module: Module, snapshot: EnvironmentSnapshot
) -> Optional[Release]:
    runtime = snapshot.installed_runtime_version
    candidate = resolve_compatible_release(module.releases, runtime)

    if snapshot.allow_pre_release:
        pre = resolve_compatible_release(module.pre_releases, runtime)
        if pre is not None and (
            candidate is None or is_newer(candidate.version, pre.version)
        ):
            candidate = pre

    return candidate


def _matches(module: Module, needle: str) -> bool:
    if needle in module.display_name.lower() or needle in module.name.lower():
        return True
    plain = _HTML_TAG.sub("", module.description)
    return needle in plain.lower()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_catalog(data: Any, source: Optional[str] = None) -> Catalog:
    """Build a :class:`Catalog` from decoded catalog JSON.

    Args:
        data: The decoded document; must be a list of module objects.
        source: URL or path used in error messages.

    Raises:
        CatalogError: The document is not a list, an entry is invalid or two
            entries share a name.
    """
    if not isinstance(data, list):
        raise CatalogError(
            f"Catalog must be a JSON array, got {type(data).__name__}",
            source=source,
        )

    modules: List[Module] = []
    seen: Dict[str, int] = {}

    for index, entry in enumerate(data):
        try:
            module = Module.from_dict(entry)
        except CatalogError as exc:
            raise CatalogError(
                f"Invalid catalog entry: {exc.message}",
                source=source,
                entry=index,
            ) from exc

        if module.name in seen:
            raise CatalogError(
                f"Duplicate module '{module.name}' "
                f"(first at entry {seen[module.name]})",
                source=source,
                entry=index,
            )
        seen[module.name] = index
        modules.append(module)

    logger.debug("Parsed %d modules from %s", len(modules), source or "<memory>")
    return Catalog(modules, source=source)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class CatalogStore:
    """Async-safe cache of loaded catalogs keyed by source.

    Each source is fetched at most once per store, however many coroutines
    ask for it concurrently.

    Args:
        http_client: Client used for ``http://`` and ``https://`` sources.
            Only required when loading remote catalogs.
    """

    def __init__(self, http_client: Optional[HTTPClient] = None) -> None:
        self.http_client = http_client
        self._catalogs: Dict[str, Catalog] = {}
        self._lock = asyncio.Lock()

    async def load(self, source: str) -> Catalog:
        """Return the catalog at *source*, fetching it on first use.

        Args:
            source: ``http(s)://`` URL or local file path.

        Raises:
            CatalogError: The catalog does not exist, is not JSON or has
                invalid entries.
            NetworkError: The remote fetch failed for another reason.
            FileOperationError: The local file could not be read.
        """
        if source in self._catalogs:
            return self._catalogs[source]

        async with self._lock:
            if source in self._catalogs:
                return self._catalogs[source]

            if _is_url(source):
                data = await self._fetch_remote(source)
            else:
                data = _read_local(source)

            catalog = parse_catalog(data, source=source)
            self._catalogs[source] = catalog
            logger.info("Loaded %d modules from %s", len(catalog), source)
            return catalog

    def get_cached(self, source: str) -> Optional[Catalog]:
        """Return an already-loaded catalog without fetching."""
        return self._catalogs.get(source)

    async def _fetch_remote(self, url: str) -> Any:
        if self.http_client is None:
            raise CatalogError(
                "An HTTP client is required for remote catalogs", source=url
            )

        try:
            return await self.http_client.get_json(url)
        except NetworkError as exc:
            if exc.status_code == 404:
                raise CatalogError(f"Catalog not found at {url}", source=url) from exc
            if exc.status_code is None and exc.response_body is not None:
                raise CatalogError(
                    f"Catalog at {url} is not valid JSON", source=url
                ) from exc
            raise


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_local(path: str) -> Any:
    text = safe_read_file(path)
    try:
        return json.loads(text)
    except ValueError as exc:
        raise CatalogError(
            f"Catalog at {path} is not valid JSON: {exc}", source=path
        ) from exc
