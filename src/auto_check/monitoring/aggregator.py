"""
Coalescing of file changes into pipeline actions.

The aggregator collects the relative paths changed during a debounce window
and hands them out as a single action on each tick.
"""

import logging
import threading
from pathlib import Path

from auto_check.config.settings import TRACE
from auto_check.core.interfaces import IIgnoreMatcher, MatchResult
from auto_check.models import Action, Custom, FilesChanged, Nothing
from auto_check.monitoring.inhibition import InhibitionFlag

logger = logging.getLogger(__name__)


class ChangeAggregator:
    """
    Owns the state accumulated between two debounce ticks.

    Paths are scoped to the base directory and filtered through the ignore
    matcher. A pending custom reason takes priority over file changes and
    discards them when it fires. Handing out any action sets the shared
    inhibition flag, so changes caused by the triggered commands are dropped
    until the runner clears it again.
    """

    def __init__(
        self,
        base_dir: Path,
        ignore_matcher: IIgnoreMatcher,
        inhibition: InhibitionFlag | None = None,
    ):
        """
        Initialize the aggregator.

        Args:
            base_dir: Absolute base directory; paths are reported relative to it
            ignore_matcher: Matcher deciding which relative paths are ignored
            inhibition: Flag shared with the pipeline runner (a new one if omitted)

        Raises:
            ValueError: If base_dir is not absolute
        """
        if not base_dir.is_absolute():
            raise ValueError(f"base_dir must be absolute: {base_dir}")

        self.base_dir = base_dir
        self.ignore_matcher = ignore_matcher
        self.inhibition = inhibition if inhibition is not None else InhibitionFlag()

        self._lock = threading.Lock()
        self._changed: set[Path] = set()
        self._custom_reason: str | None = None

    def add_custom(self, reason: str) -> None:
        """Request a pipeline run for a reason other than file changes; the latest reason wins."""
        with self._lock:
            if self._custom_reason is not None:
                logger.debug("Replacing pending trigger %r with %r", self._custom_reason, reason)
            self._custom_reason = reason

    def add(self, path: Path, is_dir: bool = False) -> None:
        """
        Record a changed absolute path.

        Args:
            path: Absolute path reported by the event source
            is_dir: Whether the event source reported a directory
        """
        try:
            relative = path.relative_to(self.base_dir)
        except ValueError:
            logger.error("Ignoring unknown path: %s", path)
            return

        if relative == Path("."):
            logger.log(TRACE, "Ignoring change to the base directory itself")
            return

        if self.ignore_matcher.matched(relative, is_dir=is_dir) is MatchResult.IGNORED:
            logger.log(TRACE, "Ignoring path matched by ignore rules: %s", relative)
            return

        if self.inhibition.is_set():
            logger.debug("Ignored change (self-inhibition): %s", relative)
            return

        logger.debug("Detected change: %s", relative)
        with self._lock:
            self._changed.add(relative)

    def take_current_action(self) -> Action:
        """
        Produce the action for the current tick and reset the window.

        Returns:
            Custom if a custom reason is pending, FilesChanged if paths were
            recorded, Nothing otherwise
        """
        with self._lock:
            if self._custom_reason is not None:
                reason, self._custom_reason = self._custom_reason, None
                if self._changed:
                    logger.debug("Dropping %d changes superseded by %r", len(self._changed), reason)
                self._changed = set()
                self.inhibition.set()
                return Custom(reason=reason)

            if self._changed:
                changed, self._changed = self._changed, set()
                self.inhibition.set()
                return FilesChanged(paths=tuple(sorted(p.as_posix() for p in changed)))

        return Nothing()

    @property
    def pending_count(self) -> int:
        """Number of distinct paths waiting for the next tick."""
        with self._lock:
            return len(self._changed)

    @property
    def has_pending_custom(self) -> bool:
        with self._lock:
            return self._custom_reason is not None
