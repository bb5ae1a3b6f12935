"""
JSON document store.

Reads the whole dashboard document and rewrites it in full. Writes go
through a temporary file and an atomic rename so a failed write never
leaves a truncated document behind. There is no locking: the last
writer wins.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from hq.core.exceptions import StoreUnreadableError
from hq.core.store.models import Document, utc_now_iso

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    File-backed store for the dashboard document.

    Example:
        >>> store = DocumentStore(Path("public/data.json"))
        >>> document = store.load()
        >>> store.save(document)
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize the store.

        Args:
            path: Location of the JSON document
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Document:
        """
        Read and validate the document.

        Returns:
            Parsed Document

        Raises:
            StoreUnreadableError: If the file is missing, not JSON, or not
                shaped like a document
        """
        if not self.path.exists():
            raise StoreUnreadableError(self.path, f"Could not load {self.path}: file not found")

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreUnreadableError(self.path, f"Failed to parse {self.path}: {e}") from e
        except OSError as e:
            raise StoreUnreadableError(self.path, f"Failed to read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreUnreadableError(self.path, f"{self.path} must contain a JSON object")

        try:
            return Document.model_validate(data)
        except ValidationError as e:
            raise StoreUnreadableError(self.path, f"Invalid document in {self.path}: {e}") from e

    def save(self, document: Document, touch: bool = True) -> None:
        """
        Write the full document atomically.

        Args:
            document: Document to persist
            touch: Refresh meta.lastUpdated as part of the same write
        """
        if touch:
            document.meta.last_updated = utc_now_iso()
        document.meta.project_count = len(document.projects)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".data_", suffix=".json.tmp"
        )

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document.to_json_dict(), f, indent=2, ensure_ascii=False)
                f.write("\n")

            os.replace(temp_path, self.path)
            logger.debug(f"Saved {len(document.projects)} projects to {self.path}")

        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
