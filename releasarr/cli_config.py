"""
CLI configuration handler
"""

import sys
from pathlib import Path

from rich.console import Console

from .config import Config, FileConfigSource, arr_widget_from_values
from .freshrss import FeedFetcher
from .rendering import JinjaRenderer
from .widgets import create_widget

console = Console()


def load_config_from_args(
    config_file: str | None,
    sonarr_url: str | None,
    sonarr_api_key: str | None,
    radarr_url: str | None,
    radarr_api_key: str | None,
    log_level: str,
) -> Config:
    """
    Load configuration from CLI arguments and files

    Args:
        config_file: Path to config file
        sonarr_url: Sonarr URL from CLI
        sonarr_api_key: Sonarr API key from CLI
        radarr_url: Radarr URL from CLI
        radarr_api_key: Radarr API key from CLI
        log_level: Log level

    Returns:
        Config object

    Raises:
        SystemExit if configuration is invalid
    """
    try:
        if config_file:
            cfg = FileConfigSource(Path(config_file)).load()
        elif (sonarr_url and sonarr_api_key) or (radarr_url and radarr_api_key):
            widget = arr_widget_from_values(
                sonarr_url, sonarr_api_key, radarr_url, radarr_api_key
            )
            cfg = Config(widgets=[widget], log_level=log_level)
        else:
            # Try the default file, then environment variables
            default_config = Path("config.yaml")
            cfg = FileConfigSource(
                default_config if default_config.exists() else None
            ).load()
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        console.print("\nExample:")
        console.print(
            "  releasarr --sonarr-url http://localhost:8989 --sonarr-api-key YOUR_KEY list"
        )
        console.print("\nOr create a config.yaml file (see config.example.yaml)")
        sys.exit(1)

    return cfg


def setup_context(config: Config, feed_fetcher: FeedFetcher | None = None) -> dict:
    """
    Setup CLI context with config, renderer and widgets

    Args:
        config: Configuration object
        feed_fetcher: RSS fetcher handed to FreshRSS widgets

    Returns:
        Dictionary with context objects
    """
    renderer = JinjaRenderer()
    return {
        "config": config,
        "renderer": renderer,
        "widgets": [
            create_widget(w, renderer, feed_fetcher=feed_fetcher)
            for w in config.widgets
        ],
    }
