from __future__ import annotations

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)


class PaperlessClient:
    """Thumbnail access to a Paperless-ngx instance."""

    def __init__(
        self,
        api_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Token {token}"

    def get_thumbnail_image(self, document_id) -> Optional[bytes]:
        url = f"{self.api_url}/documents/{document_id}/thumb/"
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Could not fetch thumbnail for document %s: %s", document_id, e)
            return None
        return resp.content or None

    def close(self) -> None:
        self.session.close()
