"""Unit tests for the driver loop."""

import logging
from pathlib import Path
from unittest.mock import Mock, call

import pytest
from auto_check.core import IEventSource, MatchResult
from auto_check.ignore import IgnoreFilter
from auto_check.models import (
    Created,
    Custom,
    Error,
    FilesChanged,
    MetadataOnly,
    Nothing,
    Removed,
    Renamed,
    RescanRequested,
    TransportError,
    Written,
)
from auto_check.monitoring import INITIAL_RUN_REASON, ChangeAggregator, DriverLoop, PipelineRunner

BASE_DIR = Path("/proj")


class TestDriverLoop:
    """Test cases for DriverLoop."""

    @pytest.fixture
    def source(self):
        """Create a mock event source."""
        return Mock(spec=IEventSource)

    @pytest.fixture
    def aggregator(self):
        """Create a mock aggregator."""
        aggregator = Mock(spec=ChangeAggregator)
        aggregator.base_dir = BASE_DIR
        aggregator.take_current_action.return_value = Nothing()
        return aggregator

    @pytest.fixture
    def runner(self):
        """Create a mock pipeline runner."""
        return Mock(spec=PipelineRunner)

    @pytest.fixture
    def driver(self, source, aggregator, runner):
        """Create a DriverLoop instance."""
        return DriverLoop(source, aggregator, runner, delay_seconds=0.5)

    @pytest.mark.parametrize("event_type", [Created, Removed])
    def test_create_and_remove_events(self, driver, aggregator, event_type):
        """Test create and remove events add their path with the directory flag."""
        driver.handle_event(event_type(path=BASE_DIR / "src/a.rs"))
        driver.handle_event(event_type(path=BASE_DIR / "target", is_directory=True))

        assert aggregator.add.call_args_list == [
            call(BASE_DIR / "src/a.rs", is_dir=False),
            call(BASE_DIR / "target", is_dir=True),
        ]

    def test_write_event(self, driver, aggregator):
        """Test write events add their path."""
        driver.handle_event(Written(path=BASE_DIR / "src/a.rs"))

        aggregator.add.assert_called_once_with(BASE_DIR / "src/a.rs")

    def test_rename_adds_source_then_destination(self, driver, aggregator):
        """Test a rename adds both paths in order."""
        driver.handle_event(Renamed(src=BASE_DIR / "old", dst=BASE_DIR / "new", is_directory=True))

        assert aggregator.add.call_args_list == [
            call(BASE_DIR / "old", is_dir=True),
            call(BASE_DIR / "new", is_dir=True),
        ]

    def test_metadata_only_ignored(self, driver, aggregator):
        """Test metadata-only events leave the aggregator untouched."""
        driver.handle_event(MetadataOnly(path=BASE_DIR / "src"))

        aggregator.add.assert_not_called()

    def test_rescan_logs_warning(self, driver, aggregator, caplog):
        """Test that a rescan request is only logged."""
        with caplog.at_level(logging.WARNING, logger="auto_check"):
            driver.handle_event(RescanRequested())

        aggregator.add.assert_not_called()
        assert "rescanning" in caplog.text

    def test_error_logged(self, driver, aggregator, caplog):
        """Test that a source error is logged and the loop state is unchanged."""
        with caplog.at_level(logging.ERROR, logger="auto_check"):
            driver.handle_event(Error(cause="watch limit reached", path=BASE_DIR / "src"))

        aggregator.add.assert_not_called()
        assert "watch limit reached" in caplog.text

    def test_tick_submits_action(self, driver, aggregator, runner):
        """Test a tick hands the current action to the runner."""
        aggregator.take_current_action.return_value = FilesChanged(paths=("src/a.rs",))

        driver.tick()

        runner.submit.assert_called_once_with(FilesChanged(paths=("src/a.rs",)))
        assert driver.get_stats()["actions"] == 1

    def test_tick_submits_nothing_too(self, driver, runner):
        """Test that an idle tick still submits Nothing."""
        driver.tick()

        runner.submit.assert_called_once_with(Nothing())
        assert driver.get_stats() == {"events": 0, "ticks": 1, "actions": 0}

    def test_queue_initial_run(self, driver, aggregator):
        """Test the initial run is queued as a custom trigger."""
        driver.queue_initial_run()

        aggregator.add_custom.assert_called_once_with(INITIAL_RUN_REASON)

    def test_transport_failure_not_logged_by_loop(self, driver, source, caplog):
        """Test that the loop leaves reporting a dead stream to its caller."""
        source.get.side_effect = TransportError("channel closed")

        with caplog.at_level(logging.ERROR, logger="auto_check"), pytest.raises(TransportError):
            driver.run()

        assert caplog.records == []

    def test_run_dispatches_events_and_timeouts(self, driver, source, aggregator, runner):
        """Test the loop routes events to the aggregator and timeouts to ticks."""
        source.get.side_effect = [
            Written(path=BASE_DIR / "a.rs"),
            Written(path=BASE_DIR / "b.rs"),
            None,
            TransportError("channel closed"),
        ]

        with pytest.raises(TransportError):
            driver.run()

        source.get.assert_called_with(timeout=0.5)
        assert aggregator.add.call_count == 2
        aggregator.take_current_action.assert_called_once()
        runner.submit.assert_called_once_with(Nothing())

    def test_stop_ends_loop_quietly(self, driver, source):
        """Test that a closed stream after stop() ends the loop without error."""

        def stop_and_close(timeout):
            driver.stop()
            raise TransportError("Event stream closed")

        source.get.side_effect = stop_and_close

        driver.run()

        source.get.assert_called_once()


class TestEndToEnd:
    """Scenarios wiring a real aggregator and ignore filter to the driver."""

    @pytest.fixture
    def base_dir(self, tmp_path):
        """Create a project directory ignoring target/."""
        base_dir = tmp_path / "proj"
        base_dir.mkdir()
        (base_dir / ".gitignore").write_text("target/\n")
        return base_dir

    @pytest.fixture
    def runner(self):
        """Create a mock pipeline runner."""
        return Mock(spec=PipelineRunner)

    @pytest.fixture
    def driver(self, base_dir, runner):
        """Create a DriverLoop with a real aggregator."""
        aggregator = ChangeAggregator(base_dir, IgnoreFilter(base_dir))
        return DriverLoop(Mock(spec=IEventSource), aggregator, runner, delay_seconds=1.0)

    def test_ignored_build_output(self, driver, base_dir, runner):
        """Test that a write under target/ is filtered out of the action."""
        driver.handle_event(Written(path=base_dir / "src/a.rs"))
        driver.handle_event(Written(path=base_dir / "target/debug/x"))
        driver.tick()

        runner.submit.assert_called_once_with(FilesChanged(paths=("src/a.rs",)))

    def test_initial_run_without_events(self, driver, runner):
        """Test that the first tick after startup is the initial run."""
        driver.queue_initial_run()
        driver.tick()

        runner.submit.assert_called_once_with(Custom(reason="initial run"))

    def test_rename_reports_both_paths_sorted(self, driver, base_dir, runner):
        """Test that a rename surfaces source and destination, sorted."""
        driver.handle_event(Renamed(src=base_dir / "old.rs", dst=base_dir / "new.rs"))
        driver.tick()

        runner.submit.assert_called_once_with(FilesChanged(paths=("new.rs", "old.rs")))

    def test_removed_ignored_directory(self, driver, base_dir, runner):
        """Test that deleting an ignored directory does not trigger a run."""
        driver.handle_event(Removed(path=base_dir / "target", is_directory=True))
        driver.handle_event(Removed(path=base_dir / "target" / "debug", is_directory=True))
        driver.tick()

        runner.submit.assert_called_once_with(Nothing())

    def test_renamed_ignored_directory_inside_ignored_tree(self, driver, base_dir, runner):
        """Test that moving a directory within ignored output does not trigger a run."""
        driver.handle_event(
            Renamed(src=base_dir / "target" / "tmp", dst=base_dir / "target" / "debug", is_directory=True)
        )
        driver.handle_event(Renamed(src=base_dir / "target", dst=base_dir / "out" / "target", is_directory=True))
        driver.tick()

        runner.submit.assert_called_once_with(Nothing())

    def test_rename_out_of_ignored_directory(self, driver, base_dir, runner):
        """Test that only the non-ignored side of a rename is reported."""
        driver.handle_event(Renamed(src=base_dir / "target/tmp.rs", dst=base_dir / "src/tmp.rs"))
        driver.tick()

        runner.submit.assert_called_once_with(FilesChanged(paths=("src/tmp.rs",)))

    def test_changes_during_batch_are_dropped(self, driver, base_dir, runner):
        """Test that writes made while a batch is active do not retrigger it."""
        driver.handle_event(Written(path=base_dir / "src/a.rs"))
        driver.tick()
        driver.handle_event(Created(path=base_dir / "src/generated.rs"))
        driver.tick()

        assert [c.args[0] for c in runner.submit.call_args_list] == [
            FilesChanged(paths=("src/a.rs",)),
            Nothing(),
        ]

        driver.aggregator.inhibition.clear()
        driver.handle_event(Written(path=base_dir / "src/b.rs"))
        driver.tick()

        runner.submit.assert_called_with(FilesChanged(paths=("src/b.rs",)))

    def test_ignore_filter_consulted_with_relative_paths(self, base_dir):
        """Test the aggregator asks the matcher about paths relative to the base directory."""
        matcher = Mock()
        matcher.matched.return_value = MatchResult.NO_MATCH
        aggregator = ChangeAggregator(base_dir, matcher)

        aggregator.add(base_dir / "src" / "a.rs")

        matcher.matched.assert_called_once_with(Path("src/a.rs"), is_dir=False)
