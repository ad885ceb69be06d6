"""Data models for the tennis news pipeline."""

from dataclasses import dataclass
from typing import Any

TITLE_FALLBACK = "No Title"
LINK_FALLBACK = "#"


@dataclass
class FeedEntry:
    """Represents a single raw RSS/Atom feed entry, independent of the parser."""

    title: str | None = None
    link: str | None = None
    description: str | None = None
    published: str | None = None


@dataclass
class Article:
    """Represents a normalized, display-ready article record."""

    title: str
    link: str
    description: str
    published: str
    pubDate_formatted: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to the persisted JSON shape, keys in fixed order."""
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "published": self.published,
            "pubDate_formatted": self.pubDate_formatted,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        """Rebuild an article from a parsed JSON object.

        Raises:
            ValueError: If data is not a JSON object
        """
        if not isinstance(data, dict):
            raise ValueError(f"Article record must be an object, got {type(data).__name__}")

        return cls(
            title=data.get("title") or TITLE_FALLBACK,
            link=data.get("link") or LINK_FALLBACK,
            description=data.get("description") or "",
            published=data.get("published") or "",
            pubDate_formatted=data.get("pubDate_formatted") or "",
        )


@dataclass
class UpdateResult:
    """Outcome of one feed updater run."""

    success: bool
    article_count: int
    output_path: str
    error: str | None = None
