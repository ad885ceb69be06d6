"""Unit tests for the news renderer."""

import json
import os
from unittest.mock import Mock, patch

import requests

from src import renderer as renderer_module
from src.config import RendererConfig
from src.models import Article
from src.renderer import (
    EMPTY_HTML,
    LOADING_HTML,
    HtmlContainer,
    NewsRenderer,
    render_article,
    render_articles,
)
from src.storage import ArticleStore

ARTICLE_RECORD = {
    "title": "Djokovic into quarterfinals",
    "link": "https://www.example.com/tennis/djokovic-qf",
    "description": "Five-set win under the lights.",
    "published": "Mon, 01 Jan 2024 15:05:00 GMT",
    "pubDate_formatted": "Jan 1, 2024, 3:05 PM",
}


class RecordingContainer(HtmlContainer):
    """Container that remembers every content change."""

    def __init__(self, element_id: str):
        super().__init__(element_id)
        self.history = []

    def set_content(self, markup: str) -> None:
        self.history.append(markup)
        super().set_content(markup)


def make_response(status_code: int = 200, payload=None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = payload
    return response


class TestNewsRendererUnit:
    """Unit tests for NewsRenderer.load_and_render."""

    def setup_method(self):
        self.config = RendererConfig(base_url="http://localhost:8000")
        self.container = RecordingContainer("news-list")
        self.renderer = NewsRenderer(self.config, container=self.container)
        self.renderer.session.get = Mock()

    def test_fetches_configured_path(self):
        """Test the artifact URL built from the configuration."""
        self.renderer.session.get.return_value = make_response(payload=[])

        self.renderer.load_and_render()

        self.renderer.session.get.assert_called_once_with(
            "http://localhost:8000/static/tennis_news.json", timeout=30
        )

    def test_renders_blocks_in_order(self):
        """Test that each record becomes one display block, in order."""
        second = dict(ARTICLE_RECORD, title="Sabalenka advances")
        self.renderer.session.get.return_value = make_response(payload=[ARTICLE_RECORD, second])

        assert self.renderer.load_and_render() is True

        assert self.container.history[0] == LOADING_HTML
        content = self.container.content
        assert content.count('<div class="news-item">') == 2
        assert content.index("Djokovic into quarterfinals") < content.index("Sabalenka advances")
        assert 'href="https://www.example.com/tennis/djokovic-qf"' in content
        assert 'target="_blank" rel="noopener noreferrer"' in content
        assert "<p>Five-set win under the lights.</p>" in content
        assert "<small>Jan 1, 2024, 3:05 PM</small>" in content

    def test_http_404_shows_failure_with_hint(self):
        """A 404 shows the status code and the configuration hint."""
        self.renderer.session.get.return_value = make_response(status_code=404)

        assert self.renderer.load_and_render() is False

        content = self.container.content
        assert content.startswith("<p>Failed to load tennis news.")
        assert "404" in content
        assert "the JSON file exists" in content
        assert "serve the /static/ directory" in content

    def test_empty_array_shows_placeholder(self):
        """An empty array shows the placeholder and no article blocks."""
        self.renderer.session.get.return_value = make_response(payload=[])

        assert self.renderer.load_and_render() is True

        assert self.container.content == EMPTY_HTML
        assert "news-item" not in self.container.content

    def test_network_error_shows_failure(self):
        """Test that a transport error is surfaced in the container."""
        self.renderer.session.get.side_effect = requests.ConnectionError("connection refused")

        assert self.renderer.load_and_render() is False

        assert "connection refused" in self.container.content

    def test_invalid_json_shows_failure(self):
        """Test that an unparseable body is surfaced in the container."""
        response = make_response()
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        self.renderer.session.get.return_value = response

        assert self.renderer.load_and_render() is False

        assert "Invalid JSON in news file" in self.container.content

    def test_non_array_body_shows_failure(self):
        """Test that a JSON object instead of an array is rejected."""
        self.renderer.session.get.return_value = make_response(payload={"articles": []})

        assert self.renderer.load_and_render() is False

        assert "Expected a JSON array" in self.container.content

    def test_default_container_uses_configured_id(self):
        """Test that the renderer targets the configured container id."""
        renderer = NewsRenderer(RendererConfig(container_id="headlines"))

        assert renderer.container.element_id == "headlines"

    def test_round_trip_from_written_artifact(self, tmp_path):
        """Records written by the store reproduce the same five fields."""
        articles = [Article.from_dict(ARTICLE_RECORD), Article.from_dict(dict(ARTICLE_RECORD, title="Second"))]
        store = ArticleStore(tmp_path / "tennis_news.json")
        store.persist(articles)

        payload = json.loads((tmp_path / "tennis_news.json").read_text(encoding="utf-8"))
        self.renderer.session.get.return_value = make_response(payload=payload)

        assert self.renderer.fetch_articles() == articles
        assert payload[0] == ARTICLE_RECORD


class TestRenderArticlesUnit:
    """Unit tests for the pure rendering helpers."""

    def test_values_are_html_escaped(self):
        """Test that markup in record values cannot inject HTML."""
        article = Article.from_dict(
            dict(
                ARTICLE_RECORD,
                title="<script>alert('x')</script>",
                link='https://example.com/?a=1&b="2"',
            )
        )

        block = render_article(article)

        assert "<script>" not in block
        assert "&lt;script&gt;" in block
        assert 'href="https://example.com/?a=1&amp;b=&quot;2&quot;"' in block

    def test_empty_list_renders_placeholder(self):
        assert render_articles([]) == EMPTY_HTML


class TestRendererMainUnit:
    """Unit tests for the console entry point."""

    def test_main_prints_rendered_content(self, capsys):
        """Test that main renders once, prints the container and closes the session."""
        with (
            patch.dict(os.environ, {"NEWS_CONTAINER_ID": "headlines"}, clear=True),
            patch("src.renderer.setup_structured_logging"),
            patch("src.renderer.NewsRenderer") as mock_renderer_class,
        ):
            renderer = mock_renderer_class.return_value.__enter__.return_value
            renderer.container.content = EMPTY_HTML

            assert renderer_module.main() == 0

        config = mock_renderer_class.call_args.args[0]
        assert config.container_id == "headlines"
        renderer.load_and_render.assert_called_once_with()
        mock_renderer_class.return_value.__exit__.assert_called_once()
        assert EMPTY_HTML in capsys.readouterr().out

    def test_main_survives_invalid_config(self):
        """Test that a bad setting is logged and the process still exits 0."""
        with (
            patch.dict(os.environ, {"FEED_TIMEOUT": "abc"}, clear=True),
            patch("src.renderer.setup_structured_logging"),
            patch("src.renderer.NewsRenderer") as mock_renderer_class,
        ):
            assert renderer_module.main() == 0

        mock_renderer_class.assert_not_called()

    def test_context_manager_closes_session(self):
        """Test that leaving the context releases the HTTP session."""
        renderer = NewsRenderer(RendererConfig())
        renderer.session = Mock()

        with renderer:
            pass

        renderer.session.close.assert_called_once_with()
