"""
Module data model for modcatalog.

A :class:`Module` is one catalog entry: an installable add-on with a stable
release track, an opt-in pre-release track and descriptive metadata. Only
``name`` and the two release tracks influence release decisions; the
remaining fields are carried for presentation and search.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from modcatalog.exceptions import CatalogError
from modcatalog.models.release import (
    Release,
    _optional_str,
    _require_str,
    releases_from_list,
)


@dataclass(frozen=True)
class Module:
    """A module published in the catalog.

    Attributes:
        name: Unique identifier, also the key into the installed-modules map.
        releases: Stable releases, most recent first by catalog convention.
        pre_releases: Pre-releases, most recent first by catalog convention.
        channels: Release channels the module is listed in.
        title: Human-readable title.
        description: Short description, possibly containing HTML.
        organization: Publishing organization.
        homepage_url: Project homepage.
        release_source: Where releases are scraped from (``owner/repo``).
    """

    name: str
    releases: Tuple[Release, ...] = field(default_factory=tuple)
    pre_releases: Tuple[Release, ...] = field(default_factory=tuple)
    channels: Tuple[str, ...] = field(default_factory=tuple)
    title: str = ""
    description: str = ""
    organization: str = ""
    homepage_url: Optional[str] = None
    release_source: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "releases", tuple(self.releases))
        object.__setattr__(self, "pre_releases", tuple(self.pre_releases))
        object.__setattr__(self, "channels", tuple(self.channels))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Module":
        """Build a module from its catalog entry.

        ``id`` is accepted as an alias of ``name``.

        Raises:
            CatalogError: The entry is not an object or a field is invalid.
        """
        if not isinstance(data, Mapping):
            raise CatalogError("Module entry must be an object")

        channels = data.get("channels", [])
        if not isinstance(channels, list) or not all(
            isinstance(channel, str) for channel in channels
        ):
            raise CatalogError("Field 'channels' must be a list of strings")

        return cls(
            name=_require_str(data, "name", "id"),
            releases=releases_from_list(data.get("releases"), "releases"),
            pre_releases=releases_from_list(data.get("preReleases"), "preReleases"),
            channels=tuple(channels),
            title=_optional_str(data, "title") or "",
            description=_optional_str(data, "description") or "",
            organization=_optional_str(data, "organization") or "",
            homepage_url=_optional_str(data, "homepageUrl"),
            release_source=_optional_str(data, "releaseSource"),
        )

    @property
    def display_name(self) -> str:
        """Title when present, otherwise the module name."""
        return self.title or self.name

    def in_any_channel(self, channels: Iterable[str]) -> bool:
        return any(channel in self.channels for channel in channels)

    def to_json(self) -> Dict[str, Any]:
        """Return the camelCase catalog representation of this module."""
        entry: Dict[str, Any] = {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "organization": self.organization,
            "channels": list(self.channels),
            "releases": [release.to_json() for release in self.releases],
            "preReleases": [release.to_json() for release in self.pre_releases],
        }
        if self.homepage_url is not None:
            entry["homepageUrl"] = self.homepage_url
        if self.release_source is not None:
            entry["releaseSource"] = self.release_source
        return entry

    def __str__(self) -> str:
        return self.name
