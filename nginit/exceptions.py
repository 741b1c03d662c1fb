"""
Custom exception hierarchy for ng-init.

All exceptions inherit from :class:`NgInitError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Registry lookups never raise for data that is simply absent (unknown
package, unreachable registry); those cases are reported as ``None`` or
empty results. :class:`TransportError` is deliberately *not* a
:class:`NetworkError` so that absence handlers do not swallow it.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Sequence


class NgInitError(Exception):
    """Base exception for all ng-init errors.

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


class NetworkError(NgInitError):
    """Raised when an HTTP request cannot produce a usable response.

    Covers timeouts, refused connections, exhausted retries and error
    status codes. Registry callers translate it into an absent result.

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


class RegistryError(NetworkError):
    """Raised for failures related to the npm registry API.

    Args:
        message: Error description.
        package_name: Name of the package involved.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


class PackageNotFoundError(RegistryError):
    """Raised when the registry answers 404 for a package or version."""


class TransportError(NgInitError):
    """Raised when a response body cannot be decoded or the transport is unusable.

    Unlike :class:`NetworkError` this is not interpreted as "data absent";
    it propagates so the caller can abort the current library.

    Args:
        message: Error description.
        url: URL being accessed.
        original_error: Underlying transport exception.
    """

    __slots__ = ("url", "original_error")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.url = url
        self.original_error = original_error


class ConfigError(NgInitError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Name of the offending option, if any.
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


class FileOperationError(NgInitError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/mkdir).
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


class CommandError(NgInitError):
    """Raised when an external command exits unsuccessfully.

    Args:
        message: Error description.
        command: The argument vector that was executed.
        returncode: Process exit status (``-1`` on timeout or spawn failure).
        stderr: Captured standard error, truncated for safety.
    """

    __slots__ = ("command", "returncode", "stderr")

    def __init__(
        self,
        message: str,
        *,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "command", " ".join(command) if command else None)
        _add_if(details, "returncode", returncode)
        if stderr:
            details["stderr"] = _truncate(stderr)

        super().__init__(message, details)

        self.command = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr


class ProfileError(NgInitError):
    """Raised when a wizard profile cannot be found, read or imported.

    Args:
        message: Error description.
        profile_name: Name of the profile involved.
    """

    __slots__ = ("profile_name",)

    def __init__(
        self,
        message: str,
        *,
        profile_name: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "profile", profile_name)

        super().__init__(message, details)

        self.profile_name = profile_name


class WizardAbortedError(NgInitError):
    """Raised when the interactive wizard cannot continue.

    Covers a missing toolchain, an unusable project directory and the user
    declining to continue after a blocking warning.

    Args:
        message: Why the wizard stopped.
        step: Wizard step that stopped it.
    """

    __slots__ = ("step",)

    def __init__(self, message: str, *, step: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "step", step)

        super().__init__(message, details)

        self.step = step
