"""
Abstract interfaces for the collaborators of the change pipeline.

These interfaces define the contracts for the event source, the ignore
matcher and the process launcher, enabling dependency injection for
testing and alternative implementations.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

from auto_check.models import Command, CommandResult, RawEvent


class MatchResult(str, Enum):
    """Outcome of matching a relative path against ignore rules."""

    IGNORED = "ignored"
    WHITELISTED = "whitelisted"
    NO_MATCH = "no_match"


class IEventSource(ABC):
    """Interface for a source of raw file system events."""

    @abstractmethod
    def watch(self, root_path: Path, recursive: bool = True) -> None:
        """
        Start delivering events for a directory tree.

        Args:
            root_path: Directory to watch
            recursive: Whether to include subdirectories

        Raises:
            MonitoringError: If the watch cannot be registered
        """
        pass

    @abstractmethod
    def get(self, timeout: float) -> RawEvent | None:
        """
        Wait for the next raw event.

        Args:
            timeout: Maximum number of seconds to wait

        Returns:
            The next event, or None if the timeout elapsed first

        Raises:
            TransportError: If the event stream died
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering events and release resources."""
        pass


class IIgnoreMatcher(ABC):
    """Interface for answering ignore queries on relative paths."""

    @abstractmethod
    def matched(self, relative_path: Path | str, is_dir: bool = False) -> MatchResult:
        """
        Match a path relative to the base directory against the ignore rules.

        Args:
            relative_path: Path relative to the base directory
            is_dir: Whether the path names a directory

        Returns:
            IGNORED, WHITELISTED or NO_MATCH
        """
        pass


class IProcessLauncher(ABC):
    """Interface for running external commands."""

    @abstractmethod
    def spawn(self, command: Command, working_dir: Path) -> CommandResult:
        """
        Run a command to completion.

        Args:
            command: Command to run
            working_dir: Working directory for the child process

        Returns:
            The command's exit status

        Raises:
            CommandLaunchError: If the command could not be started
        """
        pass
