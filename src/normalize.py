"""Article normalization for the tennis news pipeline."""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from bs4 import BeautifulSoup
from dateutil import parser as date_parser
from dateutil import tz

from .logging_config import create_execution_logger
from .models import LINK_FALLBACK, TITLE_FALLBACK, Article, FeedEntry

# en-US abbreviations, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_iso_timestamp(moment: datetime) -> str:
    """Render a datetime as an ISO-8601 UTC string with millisecond precision."""
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def format_display_date(moment: datetime) -> str:
    """Format as e.g. 'Jan 1, 2024, 3:05 PM'."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    month = MONTH_ABBREVIATIONS[moment.month - 1]
    return f"{month} {moment.day}, {moment.year}, {hour}:{moment.minute:02d} {meridiem}"


class ArticleNormalizer:
    """Turns raw feed entries into bounded, fully-populated Article records."""

    def __init__(
        self,
        display_timezone: str = "UTC",
        now: Callable[[], datetime] = utc_now,
        execution_id: str | None = None,
    ):
        """Initialize the normalizer.

        Args:
            display_timezone: IANA zone name used for pubDate_formatted
            now: Clock used for entries without a usable date
            execution_id: Execution ID for logging context
        """
        self.logger = create_execution_logger("normalizer", execution_id)
        self.now = now
        self.display_tz = tz.gettz(display_timezone)
        if self.display_tz is None:
            self.logger.warning(
                f"Unknown display timezone {display_timezone}, falling back to UTC",
                display_timezone=display_timezone,
            )
            self.display_tz = tz.UTC

    def normalize_items(
        self, items: Iterable[FeedEntry] | None, max_articles: int
    ) -> list[Article]:
        """Normalize the first ``max_articles`` entries, keeping feed order.

        Args:
            items: Raw feed entries (may be None or empty)
            max_articles: Upper bound on the number of records

        Returns:
            List of at most max_articles Article objects
        """
        if not items:
            self.logger.info("No feed entries to normalize")
            return []

        selected = list(items)[: max(max_articles, 0)]
        articles = [self.normalize_item(entry) for entry in selected]

        self.logger.info(
            "Normalized feed entries",
            articles_count=len(articles),
            max_articles=max_articles,
        )
        return articles

    def normalize_item(self, entry: FeedEntry) -> Article:
        """Normalize one raw entry, filling in fallbacks for missing fields."""
        published = (entry.published or "").strip()
        if published:
            formatted = self.format_pub_date(published)
        else:
            moment = self.now()
            published = to_iso_timestamp(moment)
            formatted = format_display_date(self._to_display_zone(moment))

        return Article(
            title=(entry.title or "").strip() or TITLE_FALLBACK,
            link=(entry.link or "").strip() or LINK_FALLBACK,
            description=self.clean_html_content(entry.description),
            published=published,
            pubDate_formatted=formatted,
        )

    def format_pub_date(self, published: str | None) -> str:
        """Render a feed timestamp for display.

        Absent or unparseable values render the current time instead.
        """
        moment = None
        if published:
            try:
                moment = self._to_display_zone(date_parser.parse(published))
            except (ValueError, OverflowError) as e:
                self.logger.warning(
                    f"Unparseable publish date {published!r}: {e}",
                    published=published,
                )

        if moment is None:
            moment = self._to_display_zone(self.now())

        return format_display_date(moment)

    def _to_display_zone(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self.display_tz)
        else:
            moment = moment.astimezone(self.display_tz)
        return moment

    @staticmethod
    def clean_html_content(content: str | None) -> str:
        """Remove HTML tags from content and normalize whitespace.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Clean text content without HTML tags
        """
        if not content:
            return ""

        if "<" in content or ">" in content:
            soup = BeautifulSoup(content, "html.parser")

            for script in soup(["script", "style"]):
                script.decompose()

            content = soup.get_text(separator=" ")
            # Stray brackets left over from malformed markup
            content = content.replace("<", "").replace(">", "")

        return " ".join(content.split())
