"""Environment provider for modcatalog.

The release-decision engine needs an :class:`EnvironmentSnapshot`. Where
that snapshot comes from depends on how the catalog browser runs:

* **Hosted**: inside the host application, which exposes a bridge object
  with ``info()``, ``uninstall(name)`` and an ``environment_changed``
  signal.
* **Standalone**: outside the host (previews, tests, the CLI); the
  snapshot is described by URL query parameters and uninstalling is
  simulated in memory.

:class:`EnvironmentProvider` picks the mode once, at construction, from
whether a bridge was supplied, and offers the same capabilities in both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Protocol

from modcatalog.exceptions import ConfigError, HostBridgeError
from modcatalog.models.environment import EnvironmentSnapshot
from modcatalog.utils.logger import get_logger

logger = get_logger("environment")

EnvironmentCallback = Callable[[EnvironmentSnapshot], None]
Unsubscribe = Callable[[], None]


class HostSignal(Protocol):
    """Change signal exposed by the host bridge."""

    def connect(self, callback: Callable[[Mapping[str, Any]], None]) -> None: ...

    def disconnect(self, callback: Callable[[Mapping[str, Any]], None]) -> None: ...


class HostBridge(Protocol):
    """Object published by the host application.

    ``info()`` returns a mapping with the keys ``version``, ``arch``,
    ``installedModules``, ``uninstallableModules`` and ``developerMode``,
    or ``None`` while the host is not ready.
    """

    environment_changed: HostSignal

    async def info(self) -> Optional[Mapping[str, Any]]: ...

    async def uninstall(self, name: str) -> Any: ...


@dataclass(frozen=True)
class UninstallResult:
    """Outcome of an uninstall request."""

    module_name: str
    success: bool
    message: str = ""


class EnvironmentProvider:
    """Single source of environment snapshots for the engine.

    Args:
        bridge: Host bridge; ``None`` selects standalone mode.
        fallback: Snapshot used in standalone mode and while the host has
            not reported its environment yet.

    Example::

        >>> provider = EnvironmentProvider.from_query_string("v=0.95.5&a=Linux_arm64")
        >>> provider.is_hosted
        False
        >>> snapshot = await provider.fetch_environment()
    """

    def __init__(
        self,
        bridge: Optional[HostBridge] = None,
        *,
        fallback: Optional[EnvironmentSnapshot] = None,
    ) -> None:
        self._bridge = bridge
        self._fallback = fallback or EnvironmentSnapshot()
        self._current: Optional[EnvironmentSnapshot] = None
        self._listeners: List[EnvironmentCallback] = []
        self._bridge_connected = False

    @classmethod
    def from_query_string(
        cls,
        query: str,
        bridge: Optional[HostBridge] = None,
    ) -> "EnvironmentProvider":
        """Create a provider whose fallback snapshot comes from *query*."""
        return cls(bridge, fallback=EnvironmentSnapshot.from_query_string(query))

    @property
    def is_hosted(self) -> bool:
        return self._bridge is not None

    @property
    def current(self) -> EnvironmentSnapshot:
        """Most recent snapshot, or the fallback before the first fetch."""
        return self._current or self._fallback

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    async def fetch_environment(self) -> EnvironmentSnapshot:
        """Return a fresh snapshot of the host environment.

        Raises:
            HostBridgeError: The bridge failed or returned a malformed payload.
        """
        if self._bridge is None:
            self._current = self.current
            return self._current

        try:
            info = await self._bridge.info()
        except Exception as exc:
            raise HostBridgeError(
                "Host bridge failed to report its environment",
                operation="info",
                original_error=exc,
            ) from exc

        if info is None:
            logger.debug("Host reported no environment yet; using fallback")
            return self.current

        self._current = _snapshot_from_info(info)
        return self._current

    async def uninstall(self, name: str) -> UninstallResult:
        """Uninstall module *name*.

        In standalone mode the module is removed from the in-memory
        snapshot and listeners are notified with the new snapshot.

        Raises:
            HostBridgeError: The host bridge failed to uninstall the module.
        """
        if self._bridge is not None:
            try:
                await self._bridge.uninstall(name)
            except Exception as exc:
                raise HostBridgeError(
                    f"Failed to uninstall '{name}'",
                    operation="uninstall",
                    module_name=name,
                    original_error=exc,
                ) from exc
            logger.info("Requested uninstall of %s from host", name)
            return UninstallResult(name, True, "Uninstall requested")

        snapshot = self.current
        if snapshot.installed_version(name) is None:
            return UninstallResult(name, False, f"Module '{name}' is not installed")

        self._current = snapshot.without_module(name)
        logger.info("Simulated uninstall of %s", name)
        self._notify(self._current)
        return UninstallResult(name, True, "Uninstalled")

    def on_environment_changed(self, callback: EnvironmentCallback) -> Unsubscribe:
        """Register *callback* for new snapshots.

        Returns:
            A function that removes the callback again. In hosted mode the
            bridge signal is disconnected once the last callback is removed.
        """
        self._listeners.append(callback)
        if self._bridge is not None and not self._bridge_connected:
            self._bridge.environment_changed.connect(self._on_bridge_changed)
            self._bridge_connected = True

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)
            if (
                not self._listeners
                and self._bridge is not None
                and self._bridge_connected
            ):
                self._bridge.environment_changed.disconnect(self._on_bridge_changed)
                self._bridge_connected = False

        return unsubscribe

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_bridge_changed(self, info: Mapping[str, Any]) -> None:
        self._current = _snapshot_from_info(info)
        logger.debug("Host environment changed")
        self._notify(self._current)

    def _notify(self, snapshot: EnvironmentSnapshot) -> None:
        for listener in list(self._listeners):
            listener(snapshot)


def _snapshot_from_info(info: Mapping[str, Any]) -> EnvironmentSnapshot:
    try:
        return EnvironmentSnapshot.from_info(info)
    except ConfigError as exc:
        raise HostBridgeError(
            f"Host reported an invalid environment: {exc.message}",
            operation="info",
            original_error=exc,
        ) from exc
