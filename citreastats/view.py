"""Dashboard view: owns the view state and the poller bound to it."""

import logging
import threading
from collections.abc import Callable
from functools import partial

import requests

from ._dashboard import render_page, render_state
from .config import Config
from .models import CounterRecord, Error, Loaded, Loading, ViewState
from .poller import Poller
from .source import FetchError, fetch_counters

logger = logging.getLogger(__name__)

# Shown for every fetch failure, whatever the cause.
FETCH_ERROR_MESSAGE = "Failed to load data"


class DashboardView:
    """Counters dashboard bound to a polling loop.

    The view starts in ``Loading``. Each fetch outcome replaces the state
    wholesale: success becomes ``Loaded`` with exactly that fetch's
    counters, failure becomes ``Error`` and drops any earlier counters.
    Updates are last-write-wins; there is no ordering between fetches.

    Polling is tied to the view's lifetime: ``mount()`` starts it and
    ``unmount()`` stops it. Outcomes delivered after ``unmount()`` are
    ignored.
    """

    def __init__(
        self,
        config: Config,
        fetch: Callable[[], list[CounterRecord]] | None = None,
    ) -> None:
        """Initialize the view.

        Args:
            config: Application configuration.
            fetch: Performs one fetch; defaults to fetching config.source.url.
        """
        self._config = config
        self._session: requests.Session | None = None
        if fetch is None:
            self._session = requests.Session()
            fetch = partial(fetch_counters, config.source.url, session=self._session)

        self._lock = threading.Lock()
        self._state: ViewState = Loading()
        self._revision = 0
        self._mounted = False
        self._poller = Poller(
            fetch,
            on_counters=self.show_counters,
            on_failure=self.show_failure,
            interval=config.poll.interval,
        )

    @property
    def state(self) -> ViewState:
        """Current view state."""
        with self._lock:
            return self._state

    @property
    def revision(self) -> int:
        """Number of state changes applied since creation."""
        with self._lock:
            return self._revision

    @property
    def is_mounted(self) -> bool:
        """Check if the view is mounted and polling."""
        with self._lock:
            return self._mounted

    def mount(self) -> None:
        """Start polling for this view."""
        with self._lock:
            if self._mounted:
                logger.warning("Dashboard view already mounted")
                return
            self._mounted = True

        self._poller.start()
        logger.info("Dashboard view mounted (source: %s)", self._config.source.url)

    def unmount(self) -> None:
        """Stop polling. In-flight fetches finish but are not observed."""
        with self._lock:
            if not self._mounted:
                return
            self._mounted = False

        self._poller.stop()
        if self._session is not None:
            self._session.close()
        logger.info("Dashboard view unmounted")

    def show_counters(self, counters: list[CounterRecord]) -> None:
        """Replace the state with a freshly fetched counter list."""
        if self._apply(Loaded(tuple(counters))):
            logger.debug("Showing %d counters", len(counters))

    def show_failure(self, error: FetchError) -> None:
        """Replace the state with the fixed fetch error."""
        if self._apply(Error(FETCH_ERROR_MESSAGE)):
            logger.debug("Showing fetch error: %s", error)

    def _apply(self, state: ViewState) -> bool:
        """Swap in a new state unless unmounted.

        Returns:
            True if the state was applied.
        """
        with self._lock:
            if not self._mounted:
                logger.debug("Ignoring %s delivered to unmounted view", type(state).__name__)
                return False
            self._state = state
            self._revision += 1
            return True

    def render(self) -> str:
        """Render the HTML fragment for the current state."""
        return render_state(self.state, self._config.source.help_url, self._config.dashboard.title)

    def render_page(self) -> str:
        """Render the full HTML page for the current state."""
        return render_page(
            self.state,
            self._config.source.help_url,
            self._config.dashboard.title,
            poll_interval=self._config.poll.interval,
        )
