"""
Monitoring package for change detection and pipeline triggering.

This package turns a stream of raw file system events into debounced
actions and runs the configured command pipeline for each of them.
"""

from .aggregator import ChangeAggregator
from .driver import INITIAL_RUN_REASON, DriverLoop
from .file_watcher import WatchdogEventSource, translate_event
from .inhibition import InhibitionFlag
from .pipeline_runner import PipelineRunner, SubprocessLauncher

__all__ = [
    "ChangeAggregator",
    "DriverLoop",
    "INITIAL_RUN_REASON",
    "InhibitionFlag",
    "PipelineRunner",
    "SubprocessLauncher",
    "WatchdogEventSource",
    "translate_event",
]
