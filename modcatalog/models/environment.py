"""
Environment snapshot model for modcatalog.

An :class:`EnvironmentSnapshot` describes the host application at one
moment: its runtime version, architecture, installed modules and the
modules it allows to be uninstalled. Snapshots are immutable; a refresh
produces a new snapshot that fully replaces the previous one.
"""

from __future__ import annotations

import json
from types import MappingProxyType
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Mapping, Optional
from urllib.parse import parse_qs

from modcatalog.exceptions import ConfigError
from modcatalog.constants import DEFAULT_ARCHITECTURE, DEFAULT_RUNTIME_VERSION

# Query-string keys used by non-hosted environments
QUERY_RUNTIME_VERSION = "v"
QUERY_ARCHITECTURE = "a"
QUERY_INSTALLED = "i"
QUERY_UNINSTALLABLE = "u"
QUERY_PRE_RELEASE = "p"

_TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """State of the host application used to evaluate release decisions.

    Attributes:
        installed_runtime_version: Version of the host runtime.
        architecture: Platform tag used to select assets.
        installed_modules: Installed module name to installed version
            (read-only view).
        uninstallable_modules: Names of modules the host allows to uninstall.
        allow_pre_release: Whether the user opted in to pre-releases.
    """

    installed_runtime_version: str = DEFAULT_RUNTIME_VERSION
    architecture: str = DEFAULT_ARCHITECTURE
    installed_modules: Mapping[str, str] = field(default_factory=dict)
    uninstallable_modules: FrozenSet[str] = field(default_factory=frozenset)
    allow_pre_release: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "installed_modules", MappingProxyType(dict(self.installed_modules))
        )
        object.__setattr__(
            self, "uninstallable_modules", frozenset(self.uninstallable_modules)
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.installed_runtime_version,
                self.architecture,
                frozenset(self.installed_modules.items()),
                self.uninstallable_modules,
                self.allow_pre_release,
            )
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def installed_version(self, name: str) -> Optional[str]:
        """Installed version of module *name*, or ``None``."""
        return self.installed_modules.get(name)

    def is_uninstallable(self, name: str) -> bool:
        return name in self.uninstallable_modules

    # ------------------------------------------------------------------
    # Derived snapshots
    # ------------------------------------------------------------------

    def with_pre_release(self, allow: bool) -> "EnvironmentSnapshot":
        """Return a copy with the pre-release opt-in set to *allow*."""
        return replace(self, allow_pre_release=allow)

    def without_module(self, name: str) -> "EnvironmentSnapshot":
        """Return a copy in which module *name* is no longer installed."""
        installed = {k: v for k, v in self.installed_modules.items() if k != name}
        return replace(
            self,
            installed_modules=installed,
            uninstallable_modules=self.uninstallable_modules - {name},
        )

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> "EnvironmentSnapshot":
        """Build a snapshot from a host bridge ``info()`` payload.

        Expected keys are ``version``, ``arch``, ``installedModules``,
        ``uninstallableModules`` and ``developerMode``; missing keys fall
        back to defaults.

        Raises:
            ConfigError: A key holds a value of the wrong type.
        """
        return cls(
            installed_runtime_version=_as_str(
                info.get("version"), "version", DEFAULT_RUNTIME_VERSION
            ),
            architecture=_as_str(info.get("arch"), "arch", DEFAULT_ARCHITECTURE),
            installed_modules=_as_installed(
                info.get("installedModules", {}), "installedModules"
            ),
            uninstallable_modules=_as_names(
                info.get("uninstallableModules", []), "uninstallableModules"
            ),
            allow_pre_release=_as_flag(info.get("developerMode", False)),
        )

    @classmethod
    def from_query_string(cls, query: str) -> "EnvironmentSnapshot":
        """Build a snapshot from URL query parameters.

        Keys: ``v`` runtime version, ``a`` architecture, ``i`` JSON object of
        installed modules, ``u`` JSON array of uninstallable modules and
        ``p`` pre-release opt-in.

        Example:
            >>> snap = EnvironmentSnapshot.from_query_string(
            ...     'v=0.95.5&i={"jaspAnova":"0.95.5"}&p=true'
            ... )
            >>> snap.installed_version("jaspAnova"), snap.allow_pre_release
            ('0.95.5', True)

        Raises:
            ConfigError: ``i`` or ``u`` is not valid JSON of the right shape.
        """
        parsed = parse_qs(query.lstrip("?"), keep_blank_values=True)
        params = {key: values[-1] for key, values in parsed.items()}

        installed: Dict[str, str] = {}
        if params.get(QUERY_INSTALLED):
            installed = _as_installed(
                _load_json(params[QUERY_INSTALLED], QUERY_INSTALLED), QUERY_INSTALLED
            )

        uninstallable: FrozenSet[str] = frozenset()
        if params.get(QUERY_UNINSTALLABLE):
            uninstallable = _as_names(
                _load_json(params[QUERY_UNINSTALLABLE], QUERY_UNINSTALLABLE),
                QUERY_UNINSTALLABLE,
            )

        return cls(
            installed_runtime_version=params.get(QUERY_RUNTIME_VERSION)
            or DEFAULT_RUNTIME_VERSION,
            architecture=params.get(QUERY_ARCHITECTURE) or DEFAULT_ARCHITECTURE,
            installed_modules=installed,
            uninstallable_modules=uninstallable,
            allow_pre_release=_as_flag(params.get(QUERY_PRE_RELEASE)),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "installed_runtime_version": self.installed_runtime_version,
            "architecture": self.architecture,
            "installed_modules": dict(self.installed_modules),
            "uninstallable_modules": sorted(self.uninstallable_modules),
            "allow_pre_release": self.allow_pre_release,
        }


# ----------------------------------------------------------------------
# Validation helpers
# ----------------------------------------------------------------------


def _load_json(raw: str, option: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ConfigError(
            f"Invalid JSON in environment parameter '{option}': {exc}",
            option=option,
        ) from exc


def _as_str(value: Any, option: str, default: str) -> str:
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise ConfigError(f"'{option}' must be a string", option=option)
    return value


def _as_installed(value: Any, option: str) -> Dict[str, str]:
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ConfigError(
            f"'{option}' must map module names to version strings",
            option=option,
        )
    return dict(value)


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def _as_names(value: Any, option: str) -> FrozenSet[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{option}' must be a list of module names", option=option)
    return frozenset(value)
