"""JSON artifact persistence for the tennis news pipeline."""

import json
import os
import stat
import tempfile
from pathlib import Path

from .logging_config import create_execution_logger
from .models import Article


class ArticleStore:
    """Reads and atomically overwrites the JSON article artifact."""

    def __init__(self, output_path: str | os.PathLike, execution_id: str | None = None):
        """Initialize the store.

        Args:
            output_path: Path of the JSON artifact
            execution_id: Execution ID for logging context
        """
        self.output_path = Path(output_path)
        self.logger = create_execution_logger("article_store", execution_id)

    def persist(self, articles: list[Article]) -> bool:
        """Write all articles as 4-space indented JSON, replacing the file.

        The payload goes to a temporary file in the destination directory which
        is then renamed over the target, so readers never see a partial file.

        Returns:
            True if the artifact was replaced, False otherwise
        """
        directory = self.output_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(
                f"Failed to create output directory {directory}: {e}",
                output_path=str(self.output_path),
                error=str(e),
            )
            return False

        tmp_path = None
        try:
            payload = json.dumps(
                [article.to_dict() for article in articles],
                indent=4,
                ensure_ascii=False,
            )
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.output_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp_file:
                tmp_path = tmp_file.name
                tmp_file.write(payload)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())

            # NamedTemporaryFile is created 0600
            os.chmod(tmp_path, self._artifact_mode())
            self.logger.debug("Replacing artifact", tmp_path=tmp_path)
            os.replace(tmp_path, self.output_path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(
                f"Failed to write articles to {self.output_path}: {e}",
                output_path=str(self.output_path),
                error=str(e),
            )
            return False
        finally:
            if tmp_path is not None:
                self._remove_quietly(tmp_path)

        self.logger.info(
            "Articles written",
            output_path=str(self.output_path),
            articles_count=len(articles),
        )
        return True

    def load(self) -> list[Article]:
        """Read the artifact back into Article records.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the content is not a JSON array of objects
        """
        with open(self.output_path, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array in {self.output_path}")

        return [Article.from_dict(record) for record in data]

    def _artifact_mode(self) -> int:
        """Mode of the existing artifact, or the umask default for a new file."""
        try:
            return stat.S_IMODE(self.output_path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def _remove_quietly(self, path: str) -> None:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(
                f"Failed to remove temporary file {path}: {e}",
                tmp_path=path,
                error=str(e),
            )
