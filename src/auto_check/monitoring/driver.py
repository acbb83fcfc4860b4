"""
Main loop tying the event source, the aggregator and the pipeline runner.

The loop alternates between waiting up to one debounce delay for the next raw
event and, when the wait times out, flushing the aggregated state to the
runner as a single action.
"""

import logging
import threading
from typing import assert_never

from auto_check.core.interfaces import IEventSource
from auto_check.models import (
    Created,
    Error,
    MetadataOnly,
    Nothing,
    RawEvent,
    Removed,
    Renamed,
    RescanRequested,
    TransportError,
    Written,
)
from auto_check.monitoring.aggregator import ChangeAggregator
from auto_check.monitoring.pipeline_runner import PipelineRunner

logger = logging.getLogger(__name__)

INITIAL_RUN_REASON = "initial run"


class DriverLoop:
    """
    Drives the watch loop.

    The wait restarts after every received event, so a tick only happens once
    a full delay passes with no event at all.
    """

    def __init__(
        self,
        source: IEventSource,
        aggregator: ChangeAggregator,
        runner: PipelineRunner,
        delay_seconds: float,
    ):
        self.source = source
        self.aggregator = aggregator
        self.runner = runner
        self.delay_seconds = delay_seconds
        self._stop_event = threading.Event()
        self._stats = {"events": 0, "ticks": 0, "actions": 0}

    def queue_initial_run(self) -> None:
        """Make the first tick run the pipeline even if nothing changed."""
        self.aggregator.add_custom(INITIAL_RUN_REASON)

    def handle_event(self, event: RawEvent) -> None:
        """Feed one raw event into the aggregator."""
        self._stats["events"] += 1
        match event:
            case Created(path=path, is_directory=is_dir) | Removed(path=path, is_directory=is_dir):
                self.aggregator.add(path, is_dir=is_dir)
            case Written(path=path):
                self.aggregator.add(path)
            case Renamed(src=src, dst=dst, is_directory=is_dir):
                self.aggregator.add(src, is_dir=is_dir)
                self.aggregator.add(dst, is_dir=is_dir)
            case MetadataOnly():
                pass
            case RescanRequested():
                logger.warning("Some issue detected, rescanning all watches")
            case Error(cause=cause, path=path):
                logger.error("%s (%s)", cause, path)
            case _:
                assert_never(event)

    def tick(self) -> None:
        """Flush the aggregated state to the runner."""
        self._stats["ticks"] += 1
        action = self.aggregator.take_current_action()
        if not isinstance(action, Nothing):
            self._stats["actions"] += 1
        self.runner.submit(action)

    def run(self) -> None:
        """
        Run the loop until ``stop`` is called.

        Raises:
            TransportError: If the event stream breaks while the loop is running
        """
        logger.info("Watching %s (delay: %.3fs)", self.aggregator.base_dir, self.delay_seconds)
        while not self._stop_event.is_set():
            try:
                event = self.source.get(timeout=self.delay_seconds)
            except TransportError:
                if self._stop_event.is_set():
                    break
                raise

            if event is None:
                self.tick()
            else:
                self.handle_event(event)

    def stop(self) -> None:
        """Signal the loop to exit at the next opportunity."""
        self._stop_event.set()

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()
