"""Configuration management for the tennis news pipeline."""

import os
from dataclasses import dataclass

DEFAULT_FEED_URL = "https://www.espn.com/espn/rss/tennis/news"
DEFAULT_OUTPUT_FILE = "static/tennis_news.json"
DEFAULT_JSON_PATH = "/static/tennis_news.json"
DEFAULT_CONTAINER_ID = "news-list"


@dataclass
class UpdaterConfig:
    """Configuration for the feed updater."""

    feed_url: str = DEFAULT_FEED_URL
    output_file: str = DEFAULT_OUTPUT_FILE
    max_articles: int = 10
    display_timezone: str = "UTC"
    timeout: int = 30


@dataclass
class RendererConfig:
    """Configuration for the news renderer."""

    base_url: str = "http://localhost:8000"
    json_path: str = DEFAULT_JSON_PATH
    container_id: str = DEFAULT_CONTAINER_ID
    timeout: int = 30


class Config:
    """Main configuration manager."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.feed_url = os.getenv("TENNIS_FEED_URL", DEFAULT_FEED_URL)
        self.output_file = os.getenv("NEWS_OUTPUT_FILE", DEFAULT_OUTPUT_FILE)
        self.max_articles = self._get_int("MAX_ARTICLES", 10)
        self.display_timezone = os.getenv("DISPLAY_TIMEZONE", "UTC")
        self.timeout = self._get_int("FEED_TIMEOUT", 30)
        self.base_url = os.getenv("NEWS_BASE_URL", "http://localhost:8000")
        self.json_path = os.getenv("NEWS_JSON_PATH", DEFAULT_JSON_PATH)
        self.container_id = os.getenv("NEWS_CONTAINER_ID", DEFAULT_CONTAINER_ID)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    @staticmethod
    def _get_int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {raw!r}")
        if value < 0:
            raise ValueError(f"{name} must not be negative, got {value}")
        return value

    def get_updater_config(self) -> UpdaterConfig:
        """Get feed updater configuration."""
        return UpdaterConfig(
            feed_url=self.feed_url,
            output_file=self.output_file,
            max_articles=self.max_articles,
            display_timezone=self.display_timezone,
            timeout=self.timeout,
        )

    def get_renderer_config(self) -> RendererConfig:
        """Get news renderer configuration."""
        return RendererConfig(
            base_url=self.base_url,
            json_path=self.json_path,
            container_id=self.container_id,
            timeout=self.timeout,
        )
