from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from docmeta.schemas.analysis import AnalysisResponse, DocumentMetadata, TokenMetrics
from docmeta.services.paperless_client import PaperlessClient
from docmeta.services.prompt_builder import PromptConfig, build_prompt
from docmeta.services.prompts import GENERATION_OPTIONS, SYSTEM_INSTRUCTION
from docmeta.services.response_parser import parse_response
from docmeta.services.storage import PromptLog, ThumbnailCache

logger = logging.getLogger(__name__)


class InvalidOllamaResponse(ValueError):
    pass


@dataclass
class OllamaConfig:
    api_url: str
    model: str
    timeout: float = 1200.0
    options: dict[str, Any] = field(default_factory=lambda: dict(GENERATION_OPTIONS))
    lenient_json_repair: bool = False


class OllamaService:
    def __init__(
        self,
        config: OllamaConfig,
        prompt_config: PromptConfig,
        thumbnails: Optional[ThumbnailCache] = None,
        prompt_log: Optional[PromptLog] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.prompt_config = prompt_config
        self.thumbnails = thumbnails
        self.prompt_log = prompt_log
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()
        source = getattr(self.thumbnails, "source", None)
        if hasattr(source, "close"):
            source.close()

    def analyze_document(
        self,
        content: Any,
        existing_tags: Any = None,
        existing_correspondents: Any = None,
        document_id=None,
    ) -> AnalysisResponse:
        try:
            prompt = build_prompt(content, existing_tags, existing_correspondents, self.prompt_config)
            self._cache_thumbnail(document_id)
            if self.prompt_log is not None:
                self.prompt_log.write(prompt)
            return self._analyze(prompt)
        except Exception as e:
            return self._failure(e)

    def analyze_playground(self, content: Any, prompt: str) -> AnalysisResponse:
        try:
            full_prompt = f"{prompt}\n\n{json.dumps(content, ensure_ascii=False, default=str)}"
            return self._analyze(full_prompt)
        except Exception as e:
            return self._failure(e)

    def _cache_thumbnail(self, document_id) -> None:
        if self.thumbnails is None or document_id is None:
            return
        try:
            self.thumbnails.ensure(document_id)
        except (OSError, ValueError) as e:
            logger.warning("Could not cache thumbnail for document %s: %s", document_id, e)

    def _generate(self, prompt: str) -> str:
        resp = self.session.post(
            f"{self.config.api_url.rstrip('/')}/api/generate",
            json={
                "model": self.config.model,
                "prompt": prompt,
                "system": SYSTEM_INSTRUCTION,
                "stream": False,
                "options": self.config.options,
            },
            timeout=self.config.timeout,
        )
        resp.raise_for_status()

        data = resp.json()
        text = data.get("response") if isinstance(data, dict) else None
        if not text or not isinstance(text, str):
            raise InvalidOllamaResponse("Invalid response from Ollama API")
        return text

    def _analyze(self, prompt: str) -> AnalysisResponse:
        raw = self._generate(prompt)
        document = parse_response(raw, lenient=self.config.lenient_json_repair)

        if not document.tags and document.correspondent is None:
            logger.warning(
                "No tags or correspondent found in Ollama response. "
                "Review the prompt or try a stronger model."
            )

        # Ollama does not report token usage
        return AnalysisResponse(document=document, metrics=TokenMetrics(), truncated=False)

    @staticmethod
    def _failure(e: Exception) -> AnalysisResponse:
        logger.exception("Error analyzing document with Ollama")
        return AnalysisResponse(
            document=DocumentMetadata(),
            metrics=None,
            error=f"{type(e).__name__}: {e}",
        )


def build_service(settings) -> OllamaService:
    cfg = OllamaConfig(
        api_url=getattr(settings, "ollama_api_url", "http://localhost:11434"),
        model=getattr(settings, "ollama_model", "llama3.2"),
        timeout=float(getattr(settings, "ollama_timeout", 1200.0)),
        lenient_json_repair=bool(getattr(settings, "lenient_json_repair", False)),
    )
    prompt_cfg = PromptConfig(
        use_existing_data=bool(getattr(settings, "use_existing_data", False)),
        use_predefined_tags=bool(getattr(settings, "use_prompt_tags", False)),
        predefined_tag_list=getattr(settings, "prompt_tags", "") or "",
        generic_system_prompt=getattr(settings, "system_prompt", "") or "",
        predefined_tags_prompt=getattr(settings, "special_prompt_predefined_tags", "") or "",
    )
    paperless = PaperlessClient(
        api_url=getattr(settings, "paperless_api_url", "http://localhost:8000/api"),
        token=getattr(settings, "paperless_api_token", None),
    )
    return OllamaService(
        config=cfg,
        prompt_config=prompt_cfg,
        thumbnails=ThumbnailCache(getattr(settings, "image_dir", "./public/images"), paperless),
        prompt_log=PromptLog(
            getattr(settings, "prompt_log_path", "./logs/prompt.txt"),
            max_bytes=int(getattr(settings, "prompt_log_max_bytes", 10 * 1024 * 1024)),
        ),
    )
