from pydantic import BaseModel, Field
from typing import Any


class DocumentMetadata(BaseModel):
    tags: list[str] = Field(default_factory=list)
    correspondent: str | None = None
    title: str | None = None
    document_date: str | None = None  # ISO date as returned by the model, not validated
    language: str | None = None


class TokenMetrics(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class AnalysisResponse(BaseModel):
    document: DocumentMetadata = Field(default_factory=DocumentMetadata)
    metrics: TokenMetrics | None = None
    truncated: bool = False
    error: str | None = None


class AnalysisRequest(BaseModel):
    content: Any
    existing_tags: list[Any] = Field(default_factory=list)  # {"name": ...} entries
    existing_correspondents: list[Any] = Field(default_factory=list)  # names or {"name": ...}
    document_id: int | None = None


class PlaygroundRequest(BaseModel):
    content: Any
    prompt: str = Field(min_length=1)
