"""RSS feed fetching module for the tennis news pipeline."""

import feedparser
import requests

from .logging_config import create_execution_logger
from .models import FeedEntry


class FeedFetchError(Exception):
    """Raised when a feed cannot be downloaded or parsed."""


# Bozo conditions that leave the parsed document intact
RECOVERABLE_BOZO_ERRORS = (feedparser.CharacterEncodingOverride,)


class FeedFetcher:
    """Downloads one RSS/Atom feed and turns its entries into FeedEntry objects."""

    def __init__(self, timeout: int = 30, execution_id: str | None = None):
        """Initialize FeedFetcher with configuration.

        Args:
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
        """
        self.timeout = timeout
        self.logger = create_execution_logger("feed_fetcher", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "Tennis-News-Updater/1.0"})

        self.logger.info("FeedFetcher initialized", timeout=timeout)

    def close(self) -> None:
        """Release the HTTP session."""
        self.session.close()

    def __enter__(self) -> "FeedFetcher":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def fetch_feed_items(self, feed_url: str) -> list[FeedEntry]:
        """Fetch and parse a single feed.

        Args:
            feed_url: URL of the RSS/Atom feed

        Returns:
            List of FeedEntry objects in feed order

        Raises:
            FeedFetchError: If the download fails or the feed is malformed
        """
        try:
            self.logger.info("Downloading feed content", feed_url=feed_url)
            response = self.session.get(feed_url, timeout=self.timeout)
            response.raise_for_status()
            self.logger.info(
                "Feed downloaded successfully",
                feed_url=feed_url,
                status_code=response.status_code,
                content_length=len(response.content),
            )
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download feed {feed_url}: {e}",
                feed_url=feed_url,
                error=str(e),
            )
            raise FeedFetchError(f"Failed to download feed {feed_url}: {e}") from e

        try:
            feed = feedparser.parse(response.content)
        except Exception as e:
            raise FeedFetchError(f"Failed to parse feed {feed_url}: {e}") from e

        if feed.bozo:
            reason = getattr(feed, "bozo_exception", "unknown parse error")
            if not feed.entries or not isinstance(reason, RECOVERABLE_BOZO_ERRORS):
                self.logger.error(
                    f"Malformed feed {feed_url}: {reason}",
                    feed_url=feed_url,
                    bozo_exception=str(reason),
                )
                raise FeedFetchError(f"Malformed feed {feed_url}: {reason}")

            self.logger.warning(
                f"Feed parsing warning for {feed_url}: {reason}",
                feed_url=feed_url,
                bozo_exception=str(reason),
            )

        items = [self.to_feed_entry(entry) for entry in feed.entries]
        for item in items:
            self.logger.debug("Mapped feed entry", feed_url=feed_url, item_title=item.title)

        self.logger.info(
            "Successfully parsed feed",
            feed_url=feed_url,
            items_count=len(items),
        )
        return items

    @staticmethod
    def to_feed_entry(raw_entry) -> FeedEntry:
        """Map a feedparser entry onto a FeedEntry.

        feedparser exposes RSS <description> as ``summary`` and Atom <updated>
        as ``updated``; both spellings are accepted here.
        """
        return FeedEntry(
            title=raw_entry.get("title"),
            link=raw_entry.get("link"),
            description=raw_entry.get("summary") or raw_entry.get("description"),
            published=raw_entry.get("published") or raw_entry.get("updated"),
        )
