"""Release-decision engine for modcatalog.

:func:`decide` turns one module and one environment snapshot into a
:class:`~modcatalog.models.decision.ReleaseDecision`. It is a pure
function: it performs no I/O, never raises for well-formed inputs and
returns structurally identical records for identical inputs, so it can be
re-run on every environment change.

The algorithm:

1. **Resolve** the compatible stable release and the compatible
   pre-release independently (first compatible release in catalog order).
2. **Select assets** for the snapshot architecture on each track; the
   stable asset is preferred for presentation.
3. **Label** the latest track. The pre-release track is "latest" only when
   the user opted in, a compatible pre-release exists, and either no
   compatible stable release exists or the pre-release is newer. The label
   becomes ``installed`` when the installed version equals the version of
   that track.
4. **Actions.** The primary action installs or updates the stable release.
   The secondary action installs or updates the pre-release when opted in,
   otherwise offers ``uninstall`` for installed modules the host allows to
   remove.

When neither track has a compatible release the label stays ``stable``.
Version strings that do not parse are compared as plain strings, so an
opaque tag that differs from the installed one counts as newer.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from modcatalog.core.resolver import resolve_compatible_release, select_asset
from modcatalog.models.decision import (
    LatestVersionIs,
    PrimaryAction,
    ReleaseDecision,
    SecondaryAction,
)
from modcatalog.models.environment import EnvironmentSnapshot
from modcatalog.models.module import Module
from modcatalog.utils.logger import get_logger
from modcatalog.utils.version_utils import is_newer, versions_equal

logger = get_logger("decision")


def decide(module: Module, snapshot: EnvironmentSnapshot) -> ReleaseDecision:
    """Compute the release decision for *module* under *snapshot*.

    Args:
        module: Catalog module with its stable and pre-release tracks.
        snapshot: Host environment to evaluate against.

    Returns:
        The decision record; ``latest_version_is`` is always set.

    Example::

        >>> module = Module(
        ...     "jaspAnova",
        ...     releases=[Release("0.95.5", compatibility_range=">=0.95.1",
        ...                       assets=[Asset("https://x", 0, "Windows_x86-64")])],
        ... )
        >>> decide(module, EnvironmentSnapshot("0.95.5")).primary_action.value
        'install-stable'
    """
    runtime = snapshot.installed_runtime_version

    stable = resolve_compatible_release(module.releases, runtime)
    pre = resolve_compatible_release(module.pre_releases, runtime)
    stable_version = stable.version if stable else None
    pre_version = pre.version if pre else None

    stable_asset = select_asset(stable, snapshot.architecture)
    pre_asset = select_asset(pre, snapshot.architecture)

    installed = snapshot.installed_version(module.name)

    pre_is_latest = (
        snapshot.allow_pre_release
        and pre_version is not None
        and (stable_version is None or is_newer(stable_version, pre_version))
    )

    if pre_is_latest:
        latest_version_is = LatestVersionIs.PRE_RELEASE
        latest_version = pre_version
    else:
        latest_version_is = LatestVersionIs.STABLE
        latest_version = stable_version

    if installed is not None and versions_equal(installed, latest_version):
        latest_version_is = LatestVersionIs.INSTALLED

    can_update_to_stable = (
        installed is not None
        and stable_version is not None
        and is_newer(installed, stable_version)
    )
    can_update_to_pre_release = (
        installed is not None
        and pre_version is not None
        and is_newer(installed, pre_version)
    )

    primary_action: Optional[PrimaryAction] = None
    if stable_asset is not None and stable_version is not None:
        if installed is None:
            primary_action = PrimaryAction.INSTALL_STABLE
        elif can_update_to_stable:
            primary_action = PrimaryAction.UPDATE_STABLE

    secondary_action: Optional[SecondaryAction] = None
    if snapshot.allow_pre_release and pre_asset is not None and pre_version is not None:
        if installed is None:
            secondary_action = SecondaryAction.INSTALL_PRE_RELEASE
        elif can_update_to_pre_release:
            secondary_action = SecondaryAction.UPDATE_PRE_RELEASE

    if (
        secondary_action is None
        and installed is not None
        and snapshot.is_uninstallable(module.name)
    ):
        secondary_action = SecondaryAction.UNINSTALL

    decision = ReleaseDecision(
        module_name=module.name,
        latest_stable_release_version=stable_version,
        latest_pre_release_version=pre_version,
        asset=stable_asset if stable_asset is not None else pre_asset,
        installed_version=installed,
        latest_version_is=latest_version_is,
        primary_action=primary_action,
        secondary_action=secondary_action,
    )

    logger.debug(
        "%s: stable=%s pre=%s installed=%s -> %s primary=%s secondary=%s",
        module.name,
        stable_version,
        pre_version,
        installed,
        latest_version_is.value,
        primary_action.value if primary_action else None,
        secondary_action.value if secondary_action else None,
    )

    return decision


def decide_all(
    modules: Iterable[Module],
    snapshot: EnvironmentSnapshot,
) -> List[ReleaseDecision]:
    """Apply :func:`decide` to each module, preserving order."""
    return [decide(module, snapshot) for module in modules]
