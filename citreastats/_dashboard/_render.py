"""Server-side rendering of the view state to HTML.

Every function here is pure: the same state always yields the same markup.
All text coming from the endpoint is escaped before it reaches the page.
"""

from html import escape

from ..models import CounterRecord, Error, Loaded, Loading, ViewState

LOADING_TEXT = "Loading..."
TOGGLE_FULLSCREEN_LABEL = "Toggle Fullscreen"


def render_card(counter: CounterRecord) -> str:
    """Render one counter card.

    The units suffix, when present, directly follows the value.
    """
    units_html = ""
    if counter.units:
        units_html = f' <span class="card-units">{escape(counter.units)}</span>'

    return (
        f'<article class="card" data-counter-id="{escape(counter.id)}">'
        f'<h2 class="card-title">{escape(counter.title)}</h2>'
        f'<p class="card-value">{escape(counter.value)}{units_html}</p>'
        f'<p class="card-description">{escape(counter.description)}</p>'
        "</article>"
    )


def _render_loading() -> str:
    return f'<div class="status-message" role="status">{LOADING_TEXT}</div>'


def _render_error(state: Error, help_url: str) -> str:
    # No retry control: the next scheduled poll is the only recovery path
    return (
        f'<div class="status-message error" role="alert">'
        f"{escape(state.message)}. Check the stats endpoint "
        f'<a href="{escape(help_url)}" target="_blank" rel="noopener noreferrer">here</a>.'
        "</div>"
    )


def _render_loaded(state: Loaded, title: str) -> str:
    cards = "".join(render_card(counter) for counter in state.counters)
    return (
        f'<h1 class="page-title">{escape(title)}</h1>'
        '<div class="toolbar">'
        f'<button type="button" class="fullscreen-button" data-action="toggle-fullscreen">'
        f"{TOGGLE_FULLSCREEN_LABEL}</button>"
        "</div>"
        f'<div class="grid">{cards}</div>'
    )


def render_state(state: ViewState, help_url: str, title: str) -> str:
    """Render the HTML fragment for a view state.

    Args:
        state: Current view state.
        help_url: Target of the static help link shown with errors.
        title: Page heading shown above the counters.

    Returns:
        HTML fragment (no surrounding document).
    """
    if isinstance(state, Loaded):
        return _render_loaded(state, title)
    if isinstance(state, Error):
        return _render_error(state, help_url)
    if isinstance(state, Loading):
        return _render_loading()
    raise TypeError(f"Unknown view state: {state!r}")
