"""
Release data models for modcatalog.

A :class:`Release` is one published version of a module on one track
(stable or pre-release); each release ships one :class:`Asset` per
supported host architecture.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from modcatalog.exceptions import CatalogError


def _require_str(data: Mapping[str, Any], *keys: str) -> str:
    """Return the first non-empty string stored under any of *keys*."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    raise CatalogError(f"Missing required field '{keys[0]}'")


def _optional_str(data: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise CatalogError(f"Field '{key}' must be a string")
        return value
    return None


@dataclass(frozen=True)
class Asset:
    """A downloadable artifact for one architecture.

    Args:
        download_url: Location of the artifact.
        download_count: Number of downloads reported by the release source.
        architecture: Platform tag such as ``Windows_x86-64``.
    """

    download_url: str
    download_count: int
    architecture: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Asset":
        """Build an asset from its camelCase catalog representation."""
        if not isinstance(data, Mapping):
            raise CatalogError("Asset entry must be an object")

        count = data.get("downloadCount", 0)
        if isinstance(count, bool) or not isinstance(count, int):
            raise CatalogError("Field 'downloadCount' must be an integer")

        return cls(
            download_url=_require_str(data, "downloadUrl"),
            download_count=count,
            architecture=_require_str(data, "architecture"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "downloadUrl": self.download_url,
            "downloadCount": self.download_count,
            "architecture": self.architecture,
        }


@dataclass(frozen=True)
class Release:
    """One published version of a module.

    Assets are kept sorted by architecture label regardless of the order
    they were supplied in.

    Args:
        version: Version identifier, usually semantic (``0.95.5``,
            ``1.1.0-beta.1``) but possibly an opaque tag.
        published_at: ISO-8601 publication timestamp.
        compatibility_range: Range of host runtime versions the release
            supports; ``None`` accepts every runtime.
        assets: Downloadable artifacts, one per architecture.
    """

    version: str
    published_at: str = ""
    compatibility_range: Optional[str] = None
    assets: Tuple[Asset, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "assets",
            tuple(sorted(self.assets, key=lambda asset: asset.architecture)),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Release":
        """Build a release from its catalog representation.

        ``jaspVersionRange`` is accepted as an alias of ``compatibilityRange``.

        Raises:
            CatalogError: Required fields are missing or mistyped.
        """
        if not isinstance(data, Mapping):
            raise CatalogError("Release entry must be an object")

        raw_assets = data.get("assets", [])
        if not isinstance(raw_assets, list):
            raise CatalogError("Field 'assets' must be a list")

        return cls(
            version=_require_str(data, "version"),
            published_at=_optional_str(data, "publishedAt") or "",
            compatibility_range=_optional_str(
                data, "compatibilityRange", "jaspVersionRange"
            ),
            assets=tuple(Asset.from_dict(asset) for asset in raw_assets),
        )

    @property
    def architectures(self) -> Tuple[str, ...]:
        """Architectures this release ships an asset for."""
        return tuple(asset.architecture for asset in self.assets)

    def to_json(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "version": self.version,
            "publishedAt": self.published_at,
            "assets": [asset.to_json() for asset in self.assets],
        }
        if self.compatibility_range is not None:
            entry["compatibilityRange"] = self.compatibility_range
        return entry


def releases_from_list(value: Any, field_name: str) -> Tuple[Release, ...]:
    """Parse a list of release objects, keeping catalog order."""
    if value is None:
        return ()
    if not isinstance(value, list):
        raise CatalogError(f"Field '{field_name}' must be a list")
    return tuple(Release.from_dict(item) for item in value)
