"""HTML template for the dashboard.

This module loads the HTML template from dashboard.html and provides
a function to build the complete page by substituting CSS, JavaScript
and the rendered state.

The template is automatically reloaded when the file changes (hot-reload).
"""

from html import escape
from pathlib import Path
from string import Template

_TEMPLATE_PATH = Path(__file__).parent / "dashboard.html"

# Cache for template and its mtime
_template_cache: Template | None = None
_template_mtime: float = 0.0


def _get_template() -> Template:
    """Get the HTML template, reloading if the file changed.

    Uses file modification time to detect changes, so each page build
    costs one stat() call and a read only when the file changed.

    Returns:
        The current Template instance.
    """
    global _template_cache, _template_mtime

    current_mtime = _TEMPLATE_PATH.stat().st_mtime

    if _template_cache is None or current_mtime != _template_mtime:
        _template_cache = Template(_TEMPLATE_PATH.read_text(encoding="utf-8"))
        _template_mtime = current_mtime

    return _template_cache


def build_html(css: str, js: str, content: str, title: str, poll_interval: float) -> str:
    """Build the complete HTML page from its components.

    Args:
        css: CSS styles string
        js: JavaScript string with a $poll_interval_ms placeholder
        content: Rendered state fragment placed in the page body
        title: Document title (plain text, escaped here)
        poll_interval: Seconds between fragment refreshes in the browser

    Returns:
        Complete HTML page string
    """
    script = Template(js).safe_substitute(poll_interval_ms=int(poll_interval * 1000))
    return _get_template().safe_substitute(
        title=escape(title),
        css=css,
        js=script,
        content=content,
    )
