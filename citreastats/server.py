"""HTTP server exposing the rendered dashboard view."""

import json
import logging
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Dict, Optional

from .config import ServerConfig
from .models import Error, Loaded, Loading, ViewState
from .view import DashboardView

logger = logging.getLogger(__name__)


class ServerError(Exception):
    """Raised when the dashboard server cannot start."""
    pass


def _state_to_dict(state: ViewState) -> Dict[str, Any]:
    """Convert a view state to a JSON-serializable dictionary."""
    if isinstance(state, Loaded):
        return {
            "state": "loaded",
            "counters": [counter.to_dict() for counter in state.counters],
        }
    if isinstance(state, Error):
        return {"state": "error", "message": state.message}
    if isinstance(state, Loading):
        return {"state": "loading"}
    raise TypeError(f"Unknown view state: {state!r}")


class DashboardHandler(BaseHTTPRequestHandler):
    """HTTP request handler for dashboard endpoints."""

    # Class-level reference set by factory
    view: Optional[DashboardView] = None

    def log_message(self, format: str, *args: Any) -> None:
        """Override to use Python logging instead of stderr."""
        logger.debug("HTTP %s - %s", self.address_string(), format % args)

    def _send_body(self, code: int, body: bytes, content_type: str) -> None:
        self.send_response(code)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        # State changes every poll; never serve a cached copy
        self.send_header("Cache-Control", "no-store")
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, code: int, data: Dict[str, Any]) -> None:
        """Send a JSON response with the given status code."""
        body = json.dumps(data, indent=2).encode("utf-8")
        self._send_body(code, body, "application/json")

    def _send_error_json(self, code: int, message: str) -> None:
        """Send a JSON error response."""
        self._send_json(code, {"error": message})

    def _send_html(self, code: int, html: str) -> None:
        """Send an HTML response with the given status code."""
        self._send_body(code, html.encode("utf-8"), "text/html; charset=utf-8")

    def do_GET(self) -> None:
        """Handle GET requests."""
        path = self.path.split("?", 1)[0]

        try:
            if path == "/health":
                self._send_json(200, {"status": "ok"})
            elif self.view is None:
                self._send_error_json(503, "Dashboard not available")
            elif path == "/":
                self._send_html(200, self.view.render_page())
            elif path == "/fragment":
                self._send_html(200, self.view.render())
            elif path == "/api/counters":
                self._send_json(200, _state_to_dict(self.view.state))
            else:
                self._send_error_json(404, "Not found")
        except Exception as e:
            logger.exception("Error handling request: %s", e)
            self._send_error_json(500, "Internal server error")


def _create_handler_class(view: DashboardView) -> type:
    """Create a handler class with the view bound."""

    class BoundDashboardHandler(DashboardHandler):
        pass

    BoundDashboardHandler.view = view
    return BoundDashboardHandler


class DashboardServer:
    """Threaded HTTP server for the counters dashboard."""

    def __init__(self, config: ServerConfig, view: DashboardView) -> None:
        """Initialize the server.

        Args:
            config: Server configuration.
            view: Dashboard view whose state is served.
        """
        self.config = config
        self.view = view
        self._server: Optional[HTTPServer] = None
        self._thread: Optional[threading.Thread] = None
        self._shutdown_event = threading.Event()

    def start(self) -> None:
        """Start the server in a background thread.

        Raises:
            ServerError: If the server fails to start.
        """
        if self._thread is not None and self._thread.is_alive():
            logger.warning("Dashboard server is already running")
            return

        try:
            handler_class = _create_handler_class(self.view)
            self._server = HTTPServer((self.config.host, self.config.port), handler_class)
            self._server.timeout = 1.0  # Allow periodic shutdown checks
        except OSError as e:
            if e.errno in (98, 48):  # EADDRINUSE (Linux=98, macOS=48)
                raise ServerError(
                    f"Port {self.config.port} is already in use. "
                    f"Another process may be using this port, or citreastats is already running."
                )
            elif e.errno == 13:  # EACCES
                raise ServerError(
                    f"Permission denied for port {self.config.port}. "
                    f"Ports below 1024 require root privileges."
                )
            raise ServerError(f"Failed to start dashboard server on port {self.config.port}: {e}")

        self._shutdown_event.clear()
        self._thread = threading.Thread(
            target=self._serve_forever,
            name="dashboard-server",
            daemon=True,
        )
        self._thread.start()

        logger.info("Dashboard server started on port %d", self.port)

    @property
    def port(self) -> int:
        """Port the server listens on."""
        if self._server is not None:
            return self._server.server_address[1]
        return self.config.port

    def _serve_forever(self) -> None:
        """Server loop that checks for shutdown."""
        while not self._shutdown_event.is_set():
            if self._server:
                self._server.handle_request()

    def stop(self) -> None:
        """Stop the server gracefully."""
        if self._thread is None:
            return

        logger.info("Stopping dashboard server...")
        self._shutdown_event.set()

        if self._thread.is_alive():
            self._thread.join(timeout=5.0)

        if self._server:
            self._server.server_close()

        self._server = None
        self._thread = None
        logger.info("Dashboard server stopped")

    @property
    def is_running(self) -> bool:
        """Check if the server is running."""
        return self._thread is not None and self._thread.is_alive()
