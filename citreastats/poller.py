"""Repeating background fetch of the counters endpoint."""

import logging
from collections.abc import Callable
from itertools import count
from threading import Event, Thread

from .config import DEFAULT_POLL_INTERVAL
from .models import CounterRecord
from .source import FetchError

logger = logging.getLogger(__name__)


class Poller:
    """Invokes a fetch function immediately and then every ``interval`` seconds.

    Each fetch runs in its own daemon thread, so a slow fetch never delays
    the schedule and two fetches may be in flight at once. Whichever resolves
    last delivers last. Nothing is retried, and failures do not change the
    cadence.

    ``stop()`` ends the schedule but does not abort in-flight requests; their
    results are dropped when they arrive, even if the poller was started
    again in the meantime.

    Example:
        poller = Poller(fetch, on_counters=view.show_counters, on_failure=view.show_failure)
        poller.start()
        # ... later ...
        poller.stop()
    """

    def __init__(
        self,
        fetch: Callable[[], list[CounterRecord]],
        on_counters: Callable[[list[CounterRecord]], None],
        on_failure: Callable[[FetchError], None],
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the poller.

        Args:
            fetch: Performs one fetch; raises FetchError on failure.
            on_counters: Called with the counters of each successful fetch.
            on_failure: Called with the error of each failed fetch.
            interval: Seconds between fetches.
        """
        self._fetch = fetch
        self._on_counters = on_counters
        self._on_failure = on_failure
        self._interval = interval
        self._stop_event = Event()
        self._thread: Thread | None = None
        self._sequence = count(1)

    def start(self) -> None:
        """Start the schedule in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            logger.warning("Poller already running")
            return

        # Each run gets its own event so fetches from a stopped run stay stopped
        self._stop_event = Event()
        self._thread = Thread(target=self._run_loop, args=(self._stop_event,), daemon=True, name="counters-poller")
        self._thread.start()
        logger.info("Poller started (interval: %ss)", self._interval)

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the schedule.

        Args:
            timeout: Maximum seconds to wait for the scheduler thread.
        """
        if self._thread is None or not self._thread.is_alive():
            return

        logger.info("Stopping poller...")
        self._stop_event.set()
        self._thread.join(timeout=timeout)

        if self._thread.is_alive():
            logger.warning("Poller thread did not stop within timeout")
        else:
            logger.info("Poller stopped")

    @property
    def is_running(self) -> bool:
        """Check if the schedule is active."""
        return self._thread is not None and self._thread.is_alive()

    def _run_loop(self, stop_event: Event) -> None:
        """Scheduler loop - fires one fetch per tick."""
        while not stop_event.is_set():
            self._dispatch(stop_event)
            # wait() returns early when stop() is called
            stop_event.wait(timeout=self._interval)

        logger.debug("Poller loop exited")

    def _dispatch(self, stop_event: Event) -> None:
        """Start one fetch without waiting for it."""
        seq = next(self._sequence)
        Thread(
            target=self._fetch_once,
            args=(seq, stop_event),
            daemon=True,
            name=f"counters-fetch-{seq}",
        ).start()

    def _fetch_once(self, seq: int, stop_event: Event) -> None:
        """Run one fetch and deliver its outcome unless its run was stopped."""
        try:
            counters = self._fetch()
        except FetchError as e:
            self._deliver(seq, stop_event, self._on_failure, e)
        except Exception:
            logger.exception("Unexpected error in fetch %d", seq)
            self._deliver(seq, stop_event, self._on_failure, FetchError())
        else:
            self._deliver(seq, stop_event, self._on_counters, counters)

    def _deliver(self, seq: int, stop_event: Event, callback: Callable, outcome: object) -> None:
        """Pass a fetch outcome to its callback."""
        if stop_event.is_set():
            logger.debug("Dropping result of fetch %d after stop", seq)
            return

        try:
            callback(outcome)
        except Exception as e:
            logger.error("Poll callback failed for fetch %d: %s", seq, e)
