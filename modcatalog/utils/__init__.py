"""
Utility helpers for modcatalog.

Console output, logging, filesystem safety, the async HTTP client and the
version comparator. Only symbols listed in ``__all__`` are public.
"""

from __future__ import annotations

from modcatalog.utils.filesystem import safe_read_file, safe_write_file

from modcatalog.utils.logger import (
    configured_level,
    get_logger,
    level_for_verbosity,
    setup_logging,
)

from modcatalog.utils.console import (
    colorize_label,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

from modcatalog.utils.http import HTTPClient

from modcatalog.utils.version_utils import (
    get_update_type,
    is_newer,
    is_pre_release,
    satisfies_range,
    versions_equal,
)

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "colorize_label",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "configured_level",
    "level_for_verbosity",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    # HTTP
    "HTTPClient",
    # Versions
    "is_newer",
    "is_pre_release",
    "satisfies_range",
    "versions_equal",
    "get_update_type",
]
