"""citreastats - Live dashboard of Citrea testnet explorer counters."""

import argparse
import logging
import signal
import sys
from threading import Event
from typing import Optional

__version__ = "0.1.0"

# Global shutdown event for signal handlers
_shutdown_event: Optional[Event] = None

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def _handle_shutdown(signum: int, frame: object) -> None:
    """Signal handler for graceful shutdown."""
    sig_name = signal.Signals(signum).name
    logger.info("Received %s, initiating shutdown...", sig_name)
    if _shutdown_event is not None:
        _shutdown_event.set()


def _cmd_run(args: argparse.Namespace) -> None:
    """Execute the run command - serve the dashboard."""
    global _shutdown_event

    _setup_logging(args.verbose)

    logger.info("citreastats %s starting...", __version__)

    # Import here so logging is configured first
    from .config import load_config, ConfigError
    from .server import DashboardServer, ServerError
    from .view import DashboardView

    # 1. Load configuration
    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    if args.config:
        logger.info("Configuration loaded from %s", args.config)
    logger.info("Polling %s every %ds", config.source.url, config.poll.interval)

    # 2. Setup shutdown handler
    _shutdown_event = Event()
    signal.signal(signal.SIGTERM, _handle_shutdown)
    signal.signal(signal.SIGINT, _handle_shutdown)

    # 3. Start components
    view = DashboardView(config)
    server = DashboardServer(config.server, view)

    try:
        server.start()
    except ServerError as e:
        logger.error("Failed to start dashboard server: %s", e)
        sys.exit(1)

    try:
        view.mount()

        logger.info("All components started, waiting for shutdown signal...")

        # 4. Wait for shutdown signal
        _shutdown_event.wait()

    except KeyboardInterrupt:
        # Backup handler if signal doesn't work
        logger.info("Keyboard interrupt received")
    finally:
        # 5. Cleanup - stop all components
        logger.info("Shutting down components...")

        view.unmount()
        server.stop()

        logger.info("Shutdown complete")


def _cmd_fetch(args: argparse.Namespace) -> None:
    """Execute the fetch command - fetch the counters once and print them."""
    from .config import load_config, ConfigError
    from .source import FetchError, fetch_counters

    _setup_logging(verbose=False)

    # 1. Load configuration
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    # 2. Fetch once
    try:
        counters = fetch_counters(config.source.url)
    except FetchError:
        print(f"Error: Failed to load data from {config.source.url}")
        sys.exit(1)

    # 3. Display results
    for counter in counters:
        value = f"{counter.value} {counter.units}" if counter.units else counter.value
        print(f"{counter.title}: {value}")
        print(f"  {counter.description}")

    print(f"\n{len(counters)} counter(s)")


def main() -> None:
    """Main entry point for the citreastats package."""
    parser = argparse.ArgumentParser(
        description="citreastats - Live dashboard of Citrea testnet explorer counters"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"citreastats {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # Run subcommand (default behavior)
    run_parser = subparsers.add_parser(
        "run",
        help="Serve the dashboard (default)",
    )
    run_parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (default: built-in settings)",
    )
    run_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    run_parser.set_defaults(func=_cmd_run)

    # Fetch subcommand
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch the counters once and print them",
    )
    fetch_parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (default: built-in settings)",
    )
    fetch_parser.set_defaults(func=_cmd_fetch)

    args = parser.parse_args()

    # Default to 'run' if no command specified
    if args.command is None:
        args.config = None
        args.verbose = False
        args.func = _cmd_run

    args.func(args)
