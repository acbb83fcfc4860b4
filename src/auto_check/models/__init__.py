"""Data models and error types for the auto-check watcher."""

from auto_check.models.actions import Action, Custom, FilesChanged, Nothing
from auto_check.models.commands import Command, CommandResult, CommandSpec
from auto_check.models.events import (
    Created,
    Error,
    MetadataOnly,
    RawEvent,
    Removed,
    Renamed,
    RescanRequested,
    Written,
)
from auto_check.models.exceptions import (
    BaseError,
    CommandLaunchError,
    ConfigurationError,
    IgnoreRulesError,
    MonitoringError,
    TransportError,
)

__all__ = [
    "Action",
    "Custom",
    "FilesChanged",
    "Nothing",
    "Command",
    "CommandResult",
    "CommandSpec",
    "RawEvent",
    "Created",
    "Written",
    "Removed",
    "Renamed",
    "MetadataOnly",
    "RescanRequested",
    "Error",
    "BaseError",
    "CommandLaunchError",
    "ConfigurationError",
    "IgnoreRulesError",
    "MonitoringError",
    "TransportError",
]
