"""Unit tests for modcatalog.core.resolver module.

Test Coverage:
- First-match selection in catalog order
- Releases without a compatibility range
- Empty and fully incompatible tracks
- Exact architecture matching for assets
"""

from __future__ import annotations

import pytest

from modcatalog.core.resolver import resolve_compatible_release, select_asset
from modcatalog.models import Asset, Release


def _asset(arch: str) -> Asset:
    return Asset(f"https://example.org/{arch}.zip", 0, arch)


@pytest.mark.unit
class TestResolveCompatibleRelease:
    """Tests for resolve_compatible_release."""

    def test_returns_first_compatible(self) -> None:
        """Test the first compatible release wins even if a later one is newer."""
        releases = [
            Release("0.97.0", compatibility_range=">=0.97.0"),
            Release("0.95.5", compatibility_range=">=0.95.1"),
            Release("0.96.0", compatibility_range=">=0.95.0"),
        ]

        result = resolve_compatible_release(releases, "0.95.5")

        assert result is not None
        assert result.version == "0.95.5"

    def test_release_without_range_is_compatible(self) -> None:
        """Test a missing compatibility range accepts any runtime."""
        result = resolve_compatible_release([Release("1.0.0")], "0.10.0")

        assert result is not None
        assert result.version == "1.0.0"

    def test_no_compatible_release(self) -> None:
        """Test None when no range accepts the runtime."""
        releases = [Release("2.0.0", compatibility_range=">=1.0.0")]

        assert resolve_compatible_release(releases, "0.95.5") is None

    def test_empty_track(self) -> None:
        """Test an empty track resolves to None."""
        assert resolve_compatible_release([], "0.95.5") is None

    def test_accepts_iterators(self) -> None:
        """Test any iterable of releases is accepted."""
        releases = iter([Release("1.0.0", compatibility_range="^0.95.0")])

        result = resolve_compatible_release(releases, "0.95.2")

        assert result is not None


@pytest.mark.unit
class TestSelectAsset:
    """Tests for select_asset."""

    def test_matches_architecture(self) -> None:
        """Test the asset for the requested architecture is returned."""
        release = Release(
            "1.0.0", assets=(_asset("Linux_x86-64"), _asset("Windows_x86-64"))
        )

        asset = select_asset(release, "Windows_x86-64")

        assert asset is not None
        assert asset.architecture == "Windows_x86-64"

    def test_match_is_exact(self) -> None:
        """Test architecture labels are compared exactly."""
        release = Release("1.0.0", assets=(_asset("Windows_x86-64"),))

        assert select_asset(release, "windows_x86-64") is None
        assert select_asset(release, "Windows") is None

    def test_no_release(self) -> None:
        """Test a missing release has no asset."""
        assert select_asset(None, "Windows_x86-64") is None

    def test_release_without_assets(self) -> None:
        """Test a release with no assets has no match."""
        assert select_asset(Release("1.0.0"), "Windows_x86-64") is None
