"""Release and asset selection for modcatalog.

The resolver answers two questions for one release track of one module:
which release accepts the host runtime, and which of that release's assets
matches the host architecture.

Catalog order is trusted. :func:`resolve_compatible_release` returns the
*first* compatible release it sees and never re-sorts; catalogs list
releases most recent first, so the first match is the most recent
compatible one.
"""

from __future__ import annotations

from typing import Iterable, Optional

from modcatalog.models.release import Asset, Release
from modcatalog.utils.version_utils import satisfies_range


def resolve_compatible_release(
    releases: Iterable[Release],
    installed_runtime_version: str,
) -> Optional[Release]:
    """Return the first release whose compatibility range accepts the runtime.

    A release without a compatibility range accepts every runtime.

    Args:
        releases: Releases of one track, in catalog order.
        installed_runtime_version: Version of the host runtime.

    Returns:
        The first compatible release, or ``None`` (including for empty input).

    Example::

        >>> old = Release("0.94.0", compatibility_range="<0.95")
        >>> new = Release("0.95.5", compatibility_range=">=0.95.1")
        >>> resolve_compatible_release([new, old], "0.95.5").version
        '0.95.5'
    """
    for release in releases:
        if satisfies_range(installed_runtime_version, release.compatibility_range):
            return release
    return None


def select_asset(release: Optional[Release], architecture: str) -> Optional[Asset]:
    """Return the asset of *release* built for exactly *architecture*."""
    if release is None:
        return None
    for asset in release.assets:
        if asset.architecture == architecture:
            return asset
    return None
