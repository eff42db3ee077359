from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends

from docmeta.core.settings import Settings
from docmeta.schemas.analysis import AnalysisRequest, AnalysisResponse, PlaygroundRequest
from docmeta.services.ollama_client import OllamaService, build_service

router = APIRouter(prefix="/analyze", tags=["analyze"])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# One service per process; its sessions are closed by the app lifespan.
@lru_cache(maxsize=1)
def get_service() -> OllamaService:
    return build_service(get_settings())


@router.post("/document", response_model=AnalysisResponse)
def analyze_document(payload: AnalysisRequest, service: OllamaService = Depends(get_service)):
    return service.analyze_document(
        payload.content,
        payload.existing_tags,
        payload.existing_correspondents,
        payload.document_id,
    )


@router.post("/playground", response_model=AnalysisResponse)
def analyze_playground(payload: PlaygroundRequest, service: OllamaService = Depends(get_service)):
    return service.analyze_playground(payload.content, payload.prompt)
