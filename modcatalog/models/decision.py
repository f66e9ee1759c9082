"""
Release decision model for modcatalog.

A :class:`ReleaseDecision` is the complete answer for one module under one
environment snapshot: which version is the latest, which asset to offer
and which primary and secondary actions a presentation layer should show.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

from modcatalog.models.release import Asset


class LatestVersionIs(str, Enum):
    """Which version a module's status label refers to."""

    STABLE = "stable"
    PRE_RELEASE = "pre-release"
    INSTALLED = "installed"


class PrimaryAction(str, Enum):
    INSTALL_STABLE = "install-stable"
    UPDATE_STABLE = "update-stable"


class SecondaryAction(str, Enum):
    INSTALL_PRE_RELEASE = "install-pre-release"
    UPDATE_PRE_RELEASE = "update-pre-release"
    UNINSTALL = "uninstall"


@dataclass(frozen=True)
class ReleaseDecision:
    """Outcome of evaluating one module against one environment snapshot.

    Attributes:
        module_name: Name of the evaluated module.
        latest_stable_release_version: Version of the compatible stable
            release, if any.
        latest_pre_release_version: Version of the compatible pre-release,
            if any.
        asset: Asset to download for install or update actions; the stable
            asset when present, otherwise the pre-release asset.
        installed_version: Installed version of the module, if any.
        latest_version_is: Status label; always set.
        primary_action: Stable-track action, if any.
        secondary_action: Pre-release or uninstall action, if any.
    """

    module_name: str
    latest_version_is: LatestVersionIs
    latest_stable_release_version: Optional[str] = None
    latest_pre_release_version: Optional[str] = None
    asset: Optional[Asset] = None
    installed_version: Optional[str] = None
    primary_action: Optional[PrimaryAction] = None
    secondary_action: Optional[SecondaryAction] = None

    @property
    def is_installed(self) -> bool:
        return self.installed_version is not None

    @property
    def has_update(self) -> bool:
        """True when the installed module can be updated on either track."""
        return (
            self.primary_action is PrimaryAction.UPDATE_STABLE
            or self.secondary_action is SecondaryAction.UPDATE_PRE_RELEASE
        )

    @property
    def target_version(self) -> Optional[str]:
        """Version the primary action (or else the secondary one) installs."""
        if self.primary_action is not None:
            return self.latest_stable_release_version
        if self.secondary_action in (
            SecondaryAction.INSTALL_PRE_RELEASE,
            SecondaryAction.UPDATE_PRE_RELEASE,
        ):
            return self.latest_pre_release_version
        return None

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation.

        Absent fields are emitted as ``null`` so every record has the same
        keys.
        """
        return {
            "module_name": self.module_name,
            "latest_stable_release_version": self.latest_stable_release_version,
            "latest_pre_release_version": self.latest_pre_release_version,
            "asset": self.asset.to_json() if self.asset else None,
            "installed_version": self.installed_version,
            "latest_version_is": self.latest_version_is.value,
            "primary_action": (
                self.primary_action.value if self.primary_action else None
            ),
            "secondary_action": (
                self.secondary_action.value if self.secondary_action else None
            ),
        }

    def __str__(self) -> str:
        actions = [a.value for a in (self.primary_action, self.secondary_action) if a]
        suffix = f" [{', '.join(actions)}]" if actions else ""
        return f"{self.module_name} ({self.latest_version_is.value}){suffix}"
