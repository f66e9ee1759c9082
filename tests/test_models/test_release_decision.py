"""Unit tests for modcatalog.models.decision module.

Test Coverage:
- Enum values
- has_update and target_version
- JSON representation and string form
"""

from __future__ import annotations

import json
import pytest

from modcatalog.models.decision import (
    LatestVersionIs,
    PrimaryAction,
    ReleaseDecision,
    SecondaryAction,
)
from modcatalog.models.release import Asset


@pytest.mark.unit
class TestEnums:
    """Tests for label and action enums."""

    def test_values(self) -> None:
        """Test the wire values of every label and action."""
        assert [e.value for e in LatestVersionIs] == [
            "stable",
            "pre-release",
            "installed",
        ]
        assert [e.value for e in PrimaryAction] == ["install-stable", "update-stable"]
        assert [e.value for e in SecondaryAction] == [
            "install-pre-release",
            "update-pre-release",
            "uninstall",
        ]

    def test_str_enum_compares_to_value(self) -> None:
        """Test enums compare equal to their string values."""
        assert PrimaryAction.UPDATE_STABLE == "update-stable"


@pytest.mark.unit
class TestReleaseDecision:
    """Tests for ReleaseDecision properties."""

    def test_install_is_not_an_update(self) -> None:
        """Test install actions do not count as updates."""
        decision = ReleaseDecision(
            "jaspAnova",
            LatestVersionIs.STABLE,
            latest_stable_release_version="1.0.0",
            primary_action=PrimaryAction.INSTALL_STABLE,
        )

        assert decision.has_update is False
        assert decision.is_installed is False
        assert decision.target_version == "1.0.0"

    def test_update_stable(self) -> None:
        """Test a stable update targets the stable version."""
        decision = ReleaseDecision(
            "jaspAnova",
            LatestVersionIs.STABLE,
            latest_stable_release_version="1.0.0",
            installed_version="0.9.0",
            primary_action=PrimaryAction.UPDATE_STABLE,
        )

        assert decision.has_update is True
        assert decision.is_installed is True
        assert decision.target_version == "1.0.0"

    def test_update_pre_release_targets_pre_release(self) -> None:
        """Test a pre-release update targets the pre-release version."""
        decision = ReleaseDecision(
            "jaspAnova",
            LatestVersionIs.PRE_RELEASE,
            latest_stable_release_version="1.0.0",
            latest_pre_release_version="1.1.0-beta.2",
            installed_version="1.1.0-beta.1",
            secondary_action=SecondaryAction.UPDATE_PRE_RELEASE,
        )

        assert decision.has_update is True
        assert decision.target_version == "1.1.0-beta.2"

    def test_uninstall_has_no_target(self) -> None:
        """Test uninstall does not target a version."""
        decision = ReleaseDecision(
            "jaspAnova",
            LatestVersionIs.INSTALLED,
            latest_stable_release_version="1.0.0",
            installed_version="1.0.0",
            secondary_action=SecondaryAction.UNINSTALL,
        )

        assert decision.has_update is False
        assert decision.target_version is None

    def test_to_json_has_every_key(self) -> None:
        """Test absent fields are emitted as null."""
        decision = ReleaseDecision("jaspAnova", LatestVersionIs.STABLE)

        data = decision.to_json()

        assert data == {
            "module_name": "jaspAnova",
            "latest_stable_release_version": None,
            "latest_pre_release_version": None,
            "asset": None,
            "installed_version": None,
            "latest_version_is": "stable",
            "primary_action": None,
            "secondary_action": None,
        }

    def test_to_json_is_serializable(self) -> None:
        """Test enum and asset values are converted to plain JSON."""
        decision = ReleaseDecision(
            "jaspAnova",
            LatestVersionIs.STABLE,
            latest_stable_release_version="1.0.0",
            asset=Asset("https://example.org/a.zip", 7, "Linux_arm64"),
            primary_action=PrimaryAction.INSTALL_STABLE,
        )

        data = json.loads(json.dumps(decision.to_json()))

        assert data["primary_action"] == "install-stable"
        assert data["asset"]["architecture"] == "Linux_arm64"

    def test_str(self) -> None:
        """Test the human-readable form lists actions."""
        decision = ReleaseDecision(
            "jaspAnova",
            LatestVersionIs.STABLE,
            primary_action=PrimaryAction.INSTALL_STABLE,
            secondary_action=SecondaryAction.INSTALL_PRE_RELEASE,
        )

        assert str(decision) == (
            "jaspAnova (stable) [install-stable, install-pre-release]"
        )
        assert str(ReleaseDecision("jaspBain", LatestVersionIs.INSTALLED)) == (
            "jaspBain (installed)"
        )
