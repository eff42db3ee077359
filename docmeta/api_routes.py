from __future__ import annotations
from fastapi import APIRouter
from docmeta.routes.analyze import router as analyze_router

router = APIRouter()
router.include_router(analyze_router)
