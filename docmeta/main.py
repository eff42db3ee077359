from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from docmeta.api_routes import router as api_router
from docmeta.routes.analyze import get_service, get_settings

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_service.cache_info().currsize:
        get_service().close()
        get_service.cache_clear()


app = FastAPI(title="Document Metadata Analyzer (Ollama)", lifespan=lifespan)

app.include_router(api_router)


@app.get("/health")
def health():
    return {"status": "ok"}
