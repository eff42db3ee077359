from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

RULE = "=" * 80

_DOCUMENT_ID = re.compile(r"[A-Za-z0-9_-]+")


class ThumbnailSource(Protocol):
    def get_thumbnail_image(self, document_id) -> Optional[bytes]: ...


class ThumbnailCache:
    """One PNG per document id under ``image_dir``; fetched from the source on miss."""

    def __init__(self, image_dir: str | Path, source: ThumbnailSource):
        self.image_dir = Path(image_dir)
        self.source = source

    def path_for(self, document_id) -> Path:
        if not _DOCUMENT_ID.fullmatch(str(document_id)):
            raise ValueError(f"Invalid document id for thumbnail cache: {document_id!r}")
        return self.image_dir / f"{document_id}.png"

    def ensure(self, document_id) -> Optional[Path]:
        """
        Return the cached file path, fetching it first if needed.
        Returns None when the source has no thumbnail. Raises ValueError for
        ids that are not plain tokens; OSError propagates.
        """
        path = self.path_for(document_id)
        if path.exists():
            logger.debug("Thumbnail already cached: %s", path)
            return path

        logger.info("Thumbnail for document %s not cached, fetching from Paperless", document_id)
        data = self.source.get_thumbnail_image(document_id)
        if not data:
            logger.warning("Thumbnail not found for document %s", document_id)
            return None

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path


class PromptLog:
    """Append-only prompt audit file, deleted once it grows past ``max_bytes``."""

    def __init__(self, path: str | Path, max_bytes: int = 10 * 1024 * 1024):
        self.path = Path(path)
        self.max_bytes = max_bytes

    def _truncate_if_oversized(self) -> None:
        try:
            if self.path.stat().st_size > self.max_bytes:
                self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Error checking prompt log size: %s", e)

    def write(self, prompt: str) -> None:
        self._truncate_if_oversized()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(f"{RULE}{prompt}\n\n{RULE}\n\n")
        except OSError as e:
            logger.warning("Error writing prompt log %s: %s", self.path, e)
