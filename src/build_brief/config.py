"""Configuration loader for the daily brief build."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from cluster_articles.cluster_articles import DEFAULT_SIMILARITY_THRESHOLD, DEFAULT_WINDOW_HOURS
from common.config import ConfigSingleton, find_config_path, load_yaml
from ingest_articles.fetch_articles.fetch_rss_articles import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from ingest_articles.fetch_articles.sources import parse_feeds
from ingest_articles.models import FeedDescriptor
from rank_stories.settings import FeedSettings, apply_preset, settings_from_dict

# Load .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


@dataclass
class FetchConfig:
    use_mock: bool = False
    mock_dir: str = "tests/data/mock-feeds"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class ClusterConfig:
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    window_hours: float = DEFAULT_WINDOW_HOURS

    def __post_init__(self) -> None:
        if not 0 < self.similarity_threshold <= 1:
            raise ValueError(
                f"Invalid similarity_threshold: {self.similarity_threshold}. Must be in (0, 1]"
            )
        if self.window_hours <= 0:
            raise ValueError(f"Invalid window_hours: {self.window_hours}. Must be positive")


@dataclass
class OutputConfig:
    path: str = "output/today.json"


@dataclass
class Config:
    feeds: list[FeedDescriptor] = field(default_factory=list)
    sources_path: str = "configs/sources.yaml"
    fetch: FetchConfig = field(default_factory=FetchConfig)
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    settings: FeedSettings = field(default_factory=FeedSettings)


def _apply_env_overrides(config: Config) -> Config:
    """Environment overrides: USE_MOCK_RSS, RSS_TIMEOUT_MS, MAX_STORIES."""
    if os.environ.get("USE_MOCK_RSS") == "1":
        config.fetch.use_mock = True

    timeout_ms = os.environ.get("RSS_TIMEOUT_MS")
    if timeout_ms:
        config.fetch.timeout_seconds = float(timeout_ms) / 1000

    max_stories = os.environ.get("MAX_STORIES")
    if max_stories:
        config.settings = settings_from_dict(
            {"stories_per_day": int(max_stories)}, config.settings
        )
    return config


def _parse_config(data: dict) -> Config:
    """Parse config dictionary into Config object."""
    fetch_data = data.get("fetch", {})
    fetch = FetchConfig(
        use_mock=fetch_data.get("use_mock", False),
        mock_dir=fetch_data.get("mock_dir", "tests/data/mock-feeds"),
        timeout_seconds=fetch_data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
        user_agent=fetch_data.get("user_agent", DEFAULT_USER_AGENT),
    )

    cluster_data = data.get("cluster", {})
    cluster = ClusterConfig(
        similarity_threshold=cluster_data.get("similarity_threshold", DEFAULT_SIMILARITY_THRESHOLD),
        window_hours=cluster_data.get("window_hours", DEFAULT_WINDOW_HOURS),
    )

    output = OutputConfig(
        path=data.get("output", {}).get("path", "output/today.json"),
    )

    settings = settings_from_dict(data.get("settings"))
    preset = data.get("preset")
    if preset:
        settings = apply_preset(settings, preset)

    return Config(
        feeds=parse_feeds(data.get("feeds")),
        sources_path=data.get("sources_path", "configs/sources.yaml"),
        fetch=fetch,
        cluster=cluster,
        output=output,
        settings=settings,
    )


def load_config(config_name: str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension) or a path.
                    If None, uses CONFIG_ENV env var or "prod".

    Returns:
        Loaded Config object
    """
    config_path = find_config_path(config_name, env_var="CONFIG_ENV")
    logger.debug("Loading config from %s", config_path)
    return _apply_env_overrides(_parse_config(load_yaml(config_path)))


# Global config instance (loaded on first access)
_manager: ConfigSingleton[Config] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
