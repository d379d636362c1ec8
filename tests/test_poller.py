"""Tests for the poller module."""

import threading
import time
from collections.abc import Callable

import pytest

from citreastats.models import CounterRecord
from citreastats.poller import Poller
from citreastats.source import FetchError


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll a predicate until it holds or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def make_counter(counter_id: str) -> CounterRecord:
    return CounterRecord(id=counter_id, value="1", title=f"T{counter_id}", description="D")


class Recorder:
    """Collects poller callbacks from any thread."""

    def __init__(self) -> None:
        self.counters: list[list[CounterRecord]] = []
        self.failures: list[FetchError] = []

    def on_counters(self, counters: list[CounterRecord]) -> None:
        self.counters.append(counters)

    def on_failure(self, error: FetchError) -> None:
        self.failures.append(error)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


class TestPoller:
    """Tests for the Poller class."""

    def test_fetches_immediately_on_start(self, recorder: Recorder) -> None:
        """The first fetch does not wait for the interval."""
        poller = Poller(lambda: [make_counter("1")], recorder.on_counters, recorder.on_failure, interval=60)

        try:
            poller.start()
            assert wait_for(lambda: len(recorder.counters) == 1)
        finally:
            poller.stop()

        assert recorder.counters[0][0].id == "1"

    def test_fetches_repeatedly(self, recorder: Recorder) -> None:
        """Fetches repeat on the interval."""
        poller = Poller(lambda: [], recorder.on_counters, recorder.on_failure, interval=0.05)

        try:
            poller.start()
            assert wait_for(lambda: len(recorder.counters) >= 3)
        finally:
            poller.stop()

    def test_keeps_polling_after_failures(self, recorder: Recorder) -> None:
        """Failures do not pause or stop the schedule."""

        def failing_fetch() -> list[CounterRecord]:
            raise FetchError()

        poller = Poller(failing_fetch, recorder.on_counters, recorder.on_failure, interval=0.05)

        try:
            poller.start()
            assert wait_for(lambda: len(recorder.failures) >= 3)
        finally:
            poller.stop()

        assert recorder.counters == []

    def test_stop_halts_fetching(self, recorder: Recorder) -> None:
        """No new fetches happen after stop()."""
        calls: list[float] = []

        def fetch() -> list[CounterRecord]:
            calls.append(time.monotonic())
            return []

        poller = Poller(fetch, recorder.on_counters, recorder.on_failure, interval=0.05)
        poller.start()
        assert wait_for(lambda: len(calls) >= 2)

        poller.stop()
        assert not poller.is_running

        time.sleep(0.1)  # let any thread started just before stop() run
        settled = len(calls)
        time.sleep(0.3)
        assert len(calls) == settled

    def test_result_after_stop_is_dropped(self, recorder: Recorder) -> None:
        """An in-flight fetch finishing after stop() delivers nothing."""
        started = threading.Event()
        gate = threading.Event()

        def slow_fetch() -> list[CounterRecord]:
            started.set()
            gate.wait(timeout=5)
            return [make_counter("late")]

        poller = Poller(slow_fetch, recorder.on_counters, recorder.on_failure, interval=60)
        poller.start()
        assert started.wait(timeout=2)

        poller.stop()
        gate.set()
        time.sleep(0.2)

        assert recorder.counters == []
        assert recorder.failures == []

    def test_overlapping_fetches_last_resolved_wins(self, recorder: Recorder) -> None:
        """A slow fetch does not block the next one; delivery follows resolution order."""
        first_gate = threading.Event()
        second_gate = threading.Event()
        rest_gate = threading.Event()
        calls: list[int] = []
        lock = threading.Lock()

        def fetch() -> list[CounterRecord]:
            with lock:
                calls.append(len(calls) + 1)
                n = len(calls)
            if n == 1:
                first_gate.wait(timeout=5)
                return [make_counter("first")]
            if n == 2:
                second_gate.wait(timeout=5)
                return [make_counter("second")]
            rest_gate.wait(timeout=5)
            return [make_counter("later")]

        poller = Poller(fetch, recorder.on_counters, recorder.on_failure, interval=0.05)

        try:
            poller.start()
            # Two requests in flight at once
            assert wait_for(lambda: len(calls) >= 2)

            second_gate.set()
            assert wait_for(lambda: len(recorder.counters) == 1)
            first_gate.set()
            assert wait_for(lambda: len(recorder.counters) == 2)
        finally:
            poller.stop()
            rest_gate.set()

        assert [batch[0].id for batch in recorder.counters[:2]] == ["second", "first"]

    def test_callback_error_does_not_stop_loop(self) -> None:
        """An exception in a callback is logged and polling continues."""
        calls: list[int] = []

        def fetch() -> list[CounterRecord]:
            calls.append(1)
            return []

        def broken_callback(counters: list[CounterRecord]) -> None:
            raise RuntimeError("boom")

        poller = Poller(fetch, broken_callback, lambda e: None, interval=0.05)

        try:
            poller.start()
            assert wait_for(lambda: len(calls) >= 3)
        finally:
            poller.stop()

    def test_start_twice_is_safe(self, recorder: Recorder) -> None:
        """Calling start() twice keeps a single schedule."""
        poller = Poller(lambda: [], recorder.on_counters, recorder.on_failure, interval=60)

        try:
            poller.start()
            poller.start()
            assert poller.is_running
            assert wait_for(lambda: len(recorder.counters) == 1)
            time.sleep(0.1)
        finally:
            poller.stop()

        assert len(recorder.counters) == 1

    def test_stop_without_start_is_safe(self, recorder: Recorder) -> None:
        """Calling stop() before start() does nothing."""
        poller = Poller(lambda: [], recorder.on_counters, recorder.on_failure)
        poller.stop()
        assert not poller.is_running

    def test_can_restart_after_stop(self, recorder: Recorder) -> None:
        """A stopped poller can be started again."""
        poller = Poller(lambda: [], recorder.on_counters, recorder.on_failure, interval=60)

        poller.start()
        assert wait_for(lambda: len(recorder.counters) == 1)
        poller.stop()

        try:
            poller.start()
            assert wait_for(lambda: len(recorder.counters) == 2)
        finally:
            poller.stop()

    def test_unexpected_fetch_error_reported_as_failure(self, recorder: Recorder) -> None:
        """Any exception from fetch still reaches on_failure."""

        def broken_fetch() -> list[CounterRecord]:
            raise RuntimeError("decoder blew up")

        poller = Poller(broken_fetch, recorder.on_counters, recorder.on_failure, interval=60)

        try:
            poller.start()
            assert wait_for(lambda: len(recorder.failures) == 1)
        finally:
            poller.stop()

        assert isinstance(recorder.failures[0], FetchError)
        assert recorder.counters == []

    def test_result_from_stopped_run_dropped_after_restart(self, recorder: Recorder) -> None:
        """A fetch from before stop() stays dropped once the poller runs again."""
        old_started = threading.Event()
        old_gate = threading.Event()
        calls: list[int] = []
        lock = threading.Lock()

        def fetch() -> list[CounterRecord]:
            with lock:
                calls.append(1)
                n = len(calls)
            if n == 1:
                old_started.set()
                old_gate.wait(timeout=5)
                return [make_counter("old")]
            return [make_counter("new")]

        poller = Poller(fetch, recorder.on_counters, recorder.on_failure, interval=60)

        try:
            poller.start()
            assert old_started.wait(timeout=2)
            poller.stop()

            poller.start()
            assert wait_for(lambda: len(recorder.counters) == 1)

            old_gate.set()
            time.sleep(0.2)
        finally:
            poller.stop()
            old_gate.set()

        assert [batch[0].id for batch in recorder.counters] == ["new"]
