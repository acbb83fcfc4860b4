"""
Sequential execution of the command pipeline.

Consumes actions from a queue on a worker thread and runs every configured
command in order for each non-empty action, stopping at the first failure.
"""

import logging
import queue
import subprocess
import threading
from pathlib import Path
from typing import Any, assert_never

from auto_check.config.settings import TRACE
from auto_check.core.interfaces import IProcessLauncher
from auto_check.models import (
    Action,
    Command,
    CommandLaunchError,
    CommandResult,
    CommandSpec,
    Custom,
    FilesChanged,
    Nothing,
)
from auto_check.monitoring.inhibition import InhibitionFlag

logger = logging.getLogger(__name__)


class SubprocessLauncher(IProcessLauncher):
    """Runs commands as child processes sharing this process's stdout and stderr."""

    def spawn(self, command: Command, working_dir: Path) -> CommandResult:
        try:
            completed = subprocess.run(command.argv, cwd=working_dir, check=False)
        except OSError as e:
            raise CommandLaunchError(
                f"Could not start {command}: {e}",
                command=str(command),
                working_dir=str(working_dir),
                underlying_error=e,
            ) from e
        return CommandResult(command=command, returncode=completed.returncode)


class PipelineRunner:
    """
    Runs the command pipeline for each action handed over by the driver loop.

    Batches never overlap: actions are taken from the queue one at a time and
    each batch runs its commands strictly in order.
    """

    def __init__(
        self,
        commands: CommandSpec,
        base_dir: Path,
        inhibition: InhibitionFlag,
        launcher: IProcessLauncher | None = None,
    ):
        """
        Initialize the runner.

        Args:
            commands: Commands to run for every triggered batch
            base_dir: Working directory for the commands
            inhibition: Flag shared with the aggregator, cleared after each batch
            launcher: Process launcher (subprocess-based if omitted)
        """
        self.commands = commands
        self.base_dir = base_dir
        self.inhibition = inhibition
        self.launcher = launcher or SubprocessLauncher()

        self._queue: queue.Queue[Action | None] = queue.Queue()
        self._thread: threading.Thread | None = None

        self._stats = {"batches_run": 0, "batches_failed": 0, "commands_run": 0}

    def start(self) -> None:
        """Start the worker thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._worker, name="auto-check-runner", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Ask the worker to exit after the queued actions and wait for it."""
        if self._thread is None:
            return
        self._queue.put(None)
        self._thread.join(timeout=timeout)
        self._thread = None

    def submit(self, action: Action) -> None:
        """Queue an action for the worker thread."""
        self._queue.put(action)

    def _worker(self) -> None:
        while True:
            action = self._queue.get()
            if action is None:
                break
            try:
                self.run_action(action)
            except Exception as e:
                logger.error("Error running pipeline for %s: %s", action, e)

    def run_action(self, action: Action) -> bool | None:
        """
        Run the pipeline for one action.

        Returns:
            None for Nothing, True if every command succeeded, False if the
            batch stopped at a failing command
        """
        match action:
            case Nothing():
                logger.log(TRACE, "Nothing changed")
                return None
            case Custom(reason=reason):
                logger.info("Triggered: %s", reason)
            case FilesChanged(paths=paths):
                logger.info("Detected change: %s", ", ".join(paths))
            case _:
                assert_never(action)

        try:
            succeeded = self._run_batch()
        finally:
            print()
            self.inhibition.clear()

        self._stats["batches_run"] += 1
        if not succeeded:
            self._stats["batches_failed"] += 1
        return succeeded

    def _run_batch(self) -> bool:
        for command in self.commands.commands:
            print()
            logger.info("Running command: %s", command)
            self._stats["commands_run"] += 1
            try:
                result = self.launcher.spawn(command, self.base_dir)
            except CommandLaunchError as e:
                logger.error("Failed to execute %s: %s", command, e)
                return False

            if not result.success:
                logger.error("Failed to execute %s: returned status %s", command, result.returncode)
                return False

            logger.debug("Successfully executed %s", command)

        return True

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def get_stats(self) -> dict[str, Any]:
        """Get batch statistics."""
        return self._stats.copy()
