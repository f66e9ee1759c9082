"""
Centralized constants for modcatalog.

This module defines immutable configuration values used across modcatalog,
including network settings, environment defaults, catalog conventions, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "modcatalog/{version}"

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

#: Catalog source used when neither config nor CLI names one.
DEFAULT_CATALOG: Final[str] = "index.json"

#: Channel shown first and selected when no channel is requested.
DEFAULT_CHANNEL: Final[str] = "Official"

#: Architecture labels that catalog assets are published for.
KNOWN_ARCHITECTURES: Final[Sequence[str]] = (
    "Flatpak_x86_64",
    "Linux_arm64",
    "MacOS_arm64",
    "MacOS_x86_64",
    "Windows_arm64",
    "Windows_x86-64",
)

# ---------------------------------------------------------------------------
# Environment defaults (query-string simulation)
# ---------------------------------------------------------------------------

#: Architecture assumed when the environment does not report one.
DEFAULT_ARCHITECTURE: Final[str] = "Windows_x86-64"

#: Host runtime version assumed when the environment does not report one.
DEFAULT_RUNTIME_VERSION: Final[str] = "0.95.1"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of ``429 Too Many Requests`` replies tolerated per request.
MAX_RATE_LIMIT_RETRIES: Final[int] = 5

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Whether the pre-release track is considered by default.
DEFAULT_ALLOW_PRE_RELEASE: Final[bool] = False

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading catalog files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
