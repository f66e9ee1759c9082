"""Configuration file loader for modcatalog.

Two file formats are supported:

- ``modcatalog.toml``: settings under a ``[modcatalog]`` table
- ``pyproject.toml``: settings under a ``[tool.modcatalog]`` table

Discovery order:

1. Explicit path from ``--config`` or ``MODCATALOG_CONFIG``
2. ``modcatalog.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.modcatalog]`` table

Precedence: defaults < config file < CLI options.

Example (``modcatalog.toml``)::

    [modcatalog]
    catalog = "https://example.org/index.json"
    architecture = "Linux_arm64"
    runtime_version = "0.95.5"
    allow_pre_release = false
    channels = ["Official", "Community"]
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from modcatalog.exceptions import ConfigError
from modcatalog.utils.logger import get_logger
from modcatalog.constants import (
    DEFAULT_ALLOW_PRE_RELEASE,
    DEFAULT_ARCHITECTURE,
    DEFAULT_CATALOG,
    DEFAULT_CHANNEL,
    DEFAULT_RUNTIME_VERSION,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "modcatalog.toml"
SECTION_NAME = "modcatalog"


@dataclass
class ModCatalogConfig:
    """Validated modcatalog configuration.

    Every field has a default, so an empty section is valid.

    Attributes:
        catalog: Catalog URL or local path.
        architecture: Host architecture used when none is given on the
            command line.
        runtime_version: Host runtime version used when none is given.
        allow_pre_release: Whether to consider pre-releases.
        channels: Channels shown when none are selected.
        source_path: File the configuration was loaded from, if any.
    """

    catalog: str = DEFAULT_CATALOG
    architecture: str = DEFAULT_ARCHITECTURE
    runtime_version: str = DEFAULT_RUNTIME_VERSION
    allow_pre_release: bool = DEFAULT_ALLOW_PRE_RELEASE
    channels: List[str] = field(default_factory=lambda: [DEFAULT_CHANNEL])

    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return user-facing options for debug logging."""
        return {name: getattr(self, name) for name in _OPTIONS}


# Option name -> (expected type, description used in errors)
_OPTIONS: Dict[str, Tuple[Type[Any], str]] = {
    "catalog": (str, "a string"),
    "architecture": (str, "a string"),
    "runtime_version": (str, "a string"),
    "allow_pre_release": (bool, "a boolean"),
    "channels": (list, "a list of strings"),
}


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Return the configuration file to load, or ``None``.

    Args:
        explicit_path: Path from ``--config``/``MODCATALOG_CONFIG``; it must
            exist when given.

    Raises:
        ConfigError: *explicit_path* does not point to a file.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    candidate = cwd / CONFIG_FILE_NAME
    if candidate.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, candidate)
        return candidate

    pyproject = cwd / "pyproject.toml"
    if pyproject.is_file() and _pyproject_has_section(pyproject):
        logger.debug("Found [tool.%s] in %s", SECTION_NAME, pyproject)
        return pyproject

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Whether *path* has a ``[tool.modcatalog]`` table.

    An unreadable or invalid ``pyproject.toml`` is treated as having none.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring %s: %s", path, exc.message)
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and SECTION_NAME in tool


def load_config(config_path: Optional[Path] = None) -> ModCatalogConfig:
    """Discover, parse and validate the configuration.

    Args:
        config_path: Explicit config path; ``None`` auto-discovers.

    Returns:
        The configuration, or defaults when no file is found.

    Raises:
        ConfigError: The file cannot be parsed or holds invalid options.
    """
    resolved = discover_config_file(config_path)
    if resolved is None:
        return ModCatalogConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(SECTION_NAME, {})
    else:
        section = raw.get(SECTION_NAME, {})

    if not isinstance(section, dict):
        raise ConfigError(
            f"[{SECTION_NAME}] must be a table",
            config_path=str(resolved),
        )

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Parse a TOML file.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(section: Dict[str, Any], *, config_path: str) -> ModCatalogConfig:
    """Validate a ``[modcatalog]`` table into a :class:`ModCatalogConfig`.

    Raises:
        ConfigError: Unknown keys, type mismatches or empty values.
    """
    unknown = set(section) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = ModCatalogConfig()

    for name, value in section.items():
        expected, description = _OPTIONS[name]

        if not isinstance(value, expected):
            raise ConfigError(
                f"{name} must be {description}, got {type(value).__name__}",
                config_path=config_path,
                option=name,
            )

        if expected is list:
            if not all(isinstance(item, str) and item for item in value):
                raise ConfigError(
                    f"{name} must be {description}",
                    config_path=config_path,
                    option=name,
                )
            value = list(value)
        elif expected is str and not value.strip():
            raise ConfigError(
                f"{name} must not be empty",
                config_path=config_path,
                option=name,
            )

        setattr(config, name, value)

    return config
