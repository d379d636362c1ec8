"""HTML dashboard for the counters web interface.

The page is rendered on the server from the current view state. The
embedded script re-requests the fragment on the poll interval and
handles the fullscreen toggle.
"""

from ..config import DEFAULT_POLL_INTERVAL
from ..models import ViewState
from ._css import CSS_STYLES
from ._html import build_html
from ._js import JS_CORE
from ._render import LOADING_TEXT, TOGGLE_FULLSCREEN_LABEL, render_card, render_state


def render_page(
    state: ViewState,
    help_url: str,
    title: str,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> str:
    """Render the full dashboard document for a view state."""
    content = render_state(state, help_url, title)
    return build_html(CSS_STYLES, JS_CORE, content, title, poll_interval)


__all__ = [
    "LOADING_TEXT",
    "TOGGLE_FULLSCREEN_LABEL",
    "render_card",
    "render_page",
    "render_state",
]
