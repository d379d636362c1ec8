"""Configuration loader with type-safe dataclasses."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


# Public counters endpoint of the Citrea testnet explorer.
DEFAULT_SOURCE_URL = "https://explorer-stats.testnet.citrea.xyz/api/v1/counters"

# Seconds between fetches of the counters endpoint.
DEFAULT_POLL_INTERVAL = 10

DEFAULT_TITLE = "Citrea Testnet Stats"


@dataclass(frozen=True)
class SourceConfig:
    """Where counters are fetched from.

    help_url is the static link shown next to the error message.
    """

    url: str = DEFAULT_SOURCE_URL
    help_url: str = DEFAULT_SOURCE_URL

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigError("Source URL cannot be empty")
        if not self.url.startswith(("http://", "https://")):
            raise ConfigError(f"Source URL must start with http:// or https://, got '{self.url}'")
        if not self.help_url.startswith(("http://", "https://")):
            raise ConfigError(f"Help URL must start with http:// or https://, got '{self.help_url}'")


@dataclass(frozen=True)
class PollConfig:
    """Configuration for the polling loop."""

    interval: int = DEFAULT_POLL_INTERVAL  # seconds between fetches

    def __post_init__(self) -> None:
        if self.interval < 1:
            raise ConfigError(f"Poll interval must be at least 1 second (got {self.interval})")


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the dashboard HTTP server."""

    host: str = ""  # all interfaces
    port: int = 8080

    def __post_init__(self) -> None:
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"Server port must be between 1 and 65535, got {self.port}")


@dataclass(frozen=True)
class DashboardConfig:
    """Configuration for the rendered page."""

    title: str = DEFAULT_TITLE

    def __post_init__(self) -> None:
        if not self.title:
            raise ConfigError("Dashboard title cannot be empty")


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    source: SourceConfig = field(default_factory=SourceConfig)
    poll: PollConfig = field(default_factory=PollConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)


def _section(data: dict, name: str) -> dict:
    """Return a config section as a dict, empty when absent."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a dictionary")
    return section


def _parse_source_config(data: dict) -> SourceConfig:
    """Parse source configuration section."""
    url = str(data.get("url", DEFAULT_SOURCE_URL))
    # The help link follows the source URL unless set explicitly
    return SourceConfig(url=url, help_url=str(data.get("help_url", url)))


def _parse_poll_config(data: dict) -> PollConfig:
    """Parse poll configuration section."""
    try:
        return PollConfig(interval=int(data.get("interval", DEFAULT_POLL_INTERVAL)))
    except (TypeError, ValueError):
        raise ConfigError(f"Poll interval must be an integer, got {data.get('interval')!r}")


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server configuration section."""
    try:
        port = int(data.get("port", 8080))
    except (TypeError, ValueError):
        raise ConfigError(f"Server port must be an integer, got {data.get('port')!r}")

    return ServerConfig(host=str(data.get("host", "")), port=port)


def _parse_dashboard_config(data: dict) -> DashboardConfig:
    """Parse dashboard configuration section."""
    return DashboardConfig(title=str(data.get("title", DEFAULT_TITLE)))


def _apply_env_overrides(config_data: dict) -> dict:
    """Apply environment variable overrides to configuration.

    Supported overrides:
    - CITREASTATS_SOURCE_URL: Override source.url
    - CITREASTATS_POLL_INTERVAL: Override poll.interval
    - CITREASTATS_SERVER_PORT: Override server.port
    """
    for name in ("source", "poll", "server"):
        if config_data.get(name) is None:
            config_data[name] = {}

    source_url = os.environ.get("CITREASTATS_SOURCE_URL")
    if source_url is not None:
        config_data["source"]["url"] = source_url

    poll_interval = os.environ.get("CITREASTATS_POLL_INTERVAL")
    if poll_interval is not None:
        config_data["poll"]["interval"] = poll_interval

    server_port = os.environ.get("CITREASTATS_SERVER_PORT")
    if server_port is not None:
        config_data["server"]["port"] = server_port

    return config_data


def build_config(data: dict) -> Config:
    """Validate a decoded configuration mapping.

    Environment overrides are applied before validation.

    Raises:
        ConfigError: If any section is invalid.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    data = _apply_env_overrides(data)

    return Config(
        source=_parse_source_config(_section(data, "source")),
        poll=_parse_poll_config(_section(data, "poll")),
        server=_parse_server_config(_section(data, "server")),
        dashboard=_parse_dashboard_config(_section(data, "dashboard")),
    )


def load_config(config_path: str | None = None) -> Config:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None to use
            built-in defaults (environment overrides still apply).

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the file cannot be read or configuration is invalid.
    """
    if config_path is None:
        return build_config({})

    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML configuration: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file: {e}")

    # An empty file means "all defaults"
    if data is None:
        data = {}

    return build_config(data)
