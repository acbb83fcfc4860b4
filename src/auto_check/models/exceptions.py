"""
Custom exception classes for the auto-check watcher.

Provides specific exception types for the failure classes the watcher
distinguishes: fatal startup problems, a dead event stream, and
recoverable command launch failures.
"""

from typing import Any


class BaseError(Exception):
    """
    Base exception class for all auto-check errors.

    All custom exceptions in the system inherit from this base class
    to enable consistent error handling and logging.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize the error.

        Args:
            message: Human-readable error description
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context information
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation including error code if present."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"context={self.context})"
        )


class ConfigurationError(BaseError):
    """Raised when the startup configuration is unusable."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        expected_type: str | None = None,
        actual_value: Any | None = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if expected_type:
            context["expected_type"] = expected_type
        if actual_value is not None:
            context["actual_value"] = str(actual_value)

        super().__init__(message, error_code="CONFIG_ERROR", context=context)


class IgnoreRulesError(BaseError):
    """Raised when the ignore-rules file exists but cannot be loaded."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if path:
            context["path"] = path

        super().__init__(message, error_code="IGNORE_RULES_ERROR", context=context, cause=underlying_error)


class MonitoringError(BaseError):
    """Raised when the file system watcher cannot be set up."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if path:
            context["path"] = path
        if operation:
            context["operation"] = operation

        super().__init__(message, error_code="MONITORING_ERROR", context=context, cause=underlying_error)


class TransportError(BaseError):
    """Raised when the event stream itself breaks and watching cannot continue."""

    def __init__(self, message: str, underlying_error: Exception | None = None):
        super().__init__(message, error_code="TRANSPORT_ERROR", cause=underlying_error)


class CommandLaunchError(BaseError):
    """Raised when a pipeline command cannot be started at all."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        working_dir: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if command:
            context["command"] = command
        if working_dir:
            context["working_dir"] = working_dir

        super().__init__(message, error_code="COMMAND_LAUNCH_ERROR", context=context, cause=underlying_error)


# Convenience functions for common error scenarios
def raise_config_error(
    message: str,
    config_key: str,
    expected_type: str | None = None,
    actual_value: Any | None = None,
) -> None:
    """Raise a configuration error with context."""
    raise ConfigurationError(
        message=message,
        config_key=config_key,
        expected_type=expected_type,
        actual_value=actual_value,
    )
