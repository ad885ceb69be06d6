"""Feed updater entry point: fetch -> normalize -> persist."""

import sys
from datetime import UTC, datetime
from typing import Protocol

from .config import Config, UpdaterConfig
from .logging_config import create_execution_logger, setup_structured_logging
from .models import FeedEntry, UpdateResult
from .normalize import ArticleNormalizer
from .rss import FeedFetcher, FeedFetchError
from .storage import ArticleStore


class FeedSource(Protocol):
    def fetch_feed_items(self, feed_url: str) -> list[FeedEntry]: ...


def run_update(
    config: UpdaterConfig,
    fetcher: FeedSource | None = None,
    normalizer: ArticleNormalizer | None = None,
    store: ArticleStore | None = None,
    execution_id: str | None = None,
) -> UpdateResult:
    """
    Run one update of the JSON artifact.

    Nothing is raised: a failed fetch leaves the artifact untouched, a failed
    write is reported through the result.

    Args:
        config: Updater configuration
        fetcher: Feed source, defaults to a FeedFetcher
        normalizer: Article normalizer, defaults to one for the configured timezone
        store: Artifact store, defaults to one for the configured output file
        execution_id: Execution ID for logging context

    Returns:
        UpdateResult describing the run
    """
    if not execution_id:
        execution_id = f"update_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("updater", execution_id)
    main_logger.log_execution_start(
        feed_url=config.feed_url, output_path=config.output_file
    )

    owned_fetcher = None
    try:
        if fetcher is None:
            fetcher = owned_fetcher = FeedFetcher(
                timeout=config.timeout, execution_id=execution_id
            )
        normalizer = normalizer or ArticleNormalizer(
            display_timezone=config.display_timezone, execution_id=execution_id
        )
        store = store or ArticleStore(config.output_file, execution_id=execution_id)

        main_logger.log_step("fetch", "started", feed_url=config.feed_url)
        try:
            items = fetcher.fetch_feed_items(config.feed_url)
        except FeedFetchError as e:
            main_logger.log_step("fetch", "failed", feed_url=config.feed_url, error=str(e))
            main_logger.warning("No update performed this run", feed_url=config.feed_url)
            main_logger.log_execution_end(success=False, error=str(e))
            return UpdateResult(
                success=False,
                article_count=0,
                output_path=config.output_file,
                error=str(e),
            )
        main_logger.log_step("fetch", "succeeded", items_count=len(items))

        main_logger.log_step("normalize", "started", max_articles=config.max_articles)
        articles = normalizer.normalize_items(items, config.max_articles)
        main_logger.log_step("normalize", "succeeded", articles_count=len(articles))

        main_logger.log_step("persist", "started", output_path=config.output_file)
        if not store.persist(articles):
            error_msg = f"Failed to write {config.output_file}"
            main_logger.log_step("persist", "failed", output_path=config.output_file)
            main_logger.log_execution_end(success=False, error=error_msg)
            return UpdateResult(
                success=False,
                article_count=0,
                output_path=config.output_file,
                error=error_msg,
            )
        main_logger.log_step("persist", "succeeded", articles_count=len(articles))

        main_logger.log_metrics(
            {"items_found": len(items), "articles_written": len(articles)}
        )
        main_logger.log_execution_end(success=True, articles_count=len(articles))
        return UpdateResult(
            success=True,
            article_count=len(articles),
            output_path=config.output_file,
        )

    except Exception as e:
        error_msg = f"Critical error in feed updater: {e}"
        main_logger.error(error_msg, error=str(e), exc_info=True)
        main_logger.log_execution_end(success=False, error=error_msg)
        return UpdateResult(
            success=False,
            article_count=0,
            output_path=config.output_file,
            error=error_msg,
        )
    finally:
        if owned_fetcher is not None:
            owned_fetcher.close()


def main() -> int:
    """Console entry point; always exits 0 once the outcome is logged."""
    try:
        config = Config()
    except ValueError as e:
        setup_structured_logging()
        create_execution_logger("updater").error(f"Invalid configuration: {e}", error=str(e))
        return 0

    setup_structured_logging(config.log_level)
    run_update(config.get_updater_config())
    return 0


if __name__ == "__main__":
    sys.exit(main())
