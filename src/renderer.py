"""News renderer: loads the JSON artifact over HTTP and renders it as HTML."""

import html
import sys
from urllib.parse import urljoin

import requests

from .config import Config, RendererConfig
from .logging_config import create_execution_logger, setup_structured_logging
from .models import Article

LOADING_HTML = "<p>Loading latest tennis news...</p>"
EMPTY_HTML = "<p>No tennis news available at this time.</p>"
FAILURE_TEMPLATE = (
    "<p>Failed to load tennis news. Please check the logs for errors. "
    "(Error: {message})</p>"
)
HTTP_ERROR_TEMPLATE = (
    "HTTP error! Status: {status}. Make sure the feed updater is running, "
    "the JSON file exists, and your web server is configured to serve the "
    "/static/ directory."
)


class NewsLoadError(Exception):
    """Raised when the article artifact cannot be fetched or decoded."""


class HtmlContainer:
    """In-memory stand-in for the page element the news is rendered into."""

    def __init__(self, element_id: str):
        self.element_id = element_id
        self.content = ""

    def set_content(self, markup: str) -> None:
        self.content = markup


def render_article(article: Article) -> str:
    """Render one article as a display block."""
    return (
        '<div class="news-item">'
        f'<h3><a href="{html.escape(article.link, quote=True)}" target="_blank" '
        f'rel="noopener noreferrer">{html.escape(article.title)}</a></h3>'
        f"<p>{html.escape(article.description)}</p>"
        f"<small>{html.escape(article.pubDate_formatted)}</small>"
        "</div>"
    )


def render_articles(articles: list[Article]) -> str:
    """Render all articles in order; an empty list renders the placeholder."""
    if not articles:
        return EMPTY_HTML
    return "\n".join(render_article(article) for article in articles)


class NewsRenderer:
    """Fetches the article artifact and refreshes a container with it."""

    def __init__(
        self,
        config: RendererConfig,
        container: HtmlContainer | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the renderer.

        Args:
            config: Renderer configuration
            container: Target container, defaults to one for config.container_id
            execution_id: Execution ID for logging context
        """
        self.config = config
        self.container = container or HtmlContainer(config.container_id)
        self.url = urljoin(config.base_url, config.json_path)
        self.logger = create_execution_logger("renderer", execution_id)
        self.session = requests.Session()

    def close(self) -> None:
        """Release the HTTP session."""
        self.session.close()

    def __enter__(self) -> "NewsRenderer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def load_and_render(self) -> bool:
        """
        Replace the container content with the current articles.

        Any failure replaces the content with an error message instead.

        Returns:
            True if the articles (or the empty placeholder) were rendered
        """
        self.container.set_content(LOADING_HTML)

        try:
            articles = self.fetch_articles()
            self.container.set_content(render_articles(articles))
        except Exception as e:
            self.logger.error(
                f"Error loading tennis news: {e}",
                url=self.url,
                error=str(e),
                exc_info=True,
            )
            self.container.set_content(
                FAILURE_TEMPLATE.format(message=html.escape(str(e)))
            )
            return False

        self.logger.info(
            "Rendered tennis news",
            url=self.url,
            container_id=self.container.element_id,
            articles_count=len(articles),
        )
        return True

    def fetch_articles(self) -> list[Article]:
        """GET the artifact and decode it.

        Raises:
            NewsLoadError: On a non-OK status or a body that is not an array
            requests.RequestException: On transport errors
        """
        self.logger.info("Fetching tennis news", url=self.url)
        response = self.session.get(self.url, timeout=self.config.timeout)

        if not response.ok:
            raise NewsLoadError(HTTP_ERROR_TEMPLATE.format(status=response.status_code))

        try:
            data = response.json()
        except ValueError as e:
            raise NewsLoadError(f"Invalid JSON in news file: {e}") from e

        if not isinstance(data, list):
            raise NewsLoadError(
                f"Expected a JSON array of articles, got {type(data).__name__}"
            )

        return [Article.from_dict(record) for record in data]


def main() -> int:
    """Console entry point; prints the rendered container content."""
    try:
        config = Config()
    except ValueError as e:
        setup_structured_logging()
        create_execution_logger("renderer").error(f"Invalid configuration: {e}", error=str(e))
        return 0

    setup_structured_logging(config.log_level)
    with NewsRenderer(config.get_renderer_config()) as renderer:
        renderer.load_and_render()
        print(renderer.container.content)
    return 0


if __name__ == "__main__":
    sys.exit(main())
