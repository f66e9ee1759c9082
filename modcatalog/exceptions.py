"""
Custom exception hierarchy for modcatalog.

This module defines structured exception types used across modcatalog.
All exceptions inherit from :class:`ModCatalogError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

The release-decision engine itself never raises; these exceptions belong
to the boundaries around it (catalog loading, configuration, the host
bridge, HTTP and the filesystem).
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class ModCatalogError(Exception):
    """Base exception for all modcatalog errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class NetworkError(ModCatalogError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class CatalogError(ModCatalogError):
    """Raised when a module catalog cannot be loaded or parsed.

    Args:
        message: Error description.
        source: Catalog URL or file path.
        entry: Index of the offending module entry, if known.
    """

    __slots__ = ("source", "entry")

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        entry: Optional[int] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "source", source)
        _add_if(details, "entry", entry)

        super().__init__(message, details)

        self.source = source
        self.entry = entry


class ConfigError(ModCatalogError):
    """Raised when configuration or environment options are invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file involved.
        option: Name of the offending option.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class HostBridgeError(ModCatalogError):
    """Raised when the host application bridge fails.

    Args:
        message: Error description.
        operation: Bridge operation being performed (info/uninstall).
        module_name: Module involved, if any.
        original_error: Original exception raised by the bridge.
    """

    __slots__ = ("operation", "module_name", "original_error")

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        module_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "operation", operation)
        _add_if(details, "module", module_name)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.operation = operation
        self.module_name = module_name
        self.original_error = original_error


class FileOperationError(ModCatalogError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
