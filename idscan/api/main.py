"""
FastAPI Application: identity card extraction service.

Architecture:
  - PaddleOCR for recognition (lazy, worker thread)
  - Regex cascade extractor for field parsing
  - In-memory LRU cache keyed by image fingerprint
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from idscan.api.routes.extract import router as extract_router
from idscan.config.settings import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="idscan",
    description="Identity card field extraction with OCR, rule cascades and result caching.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(extract_router, prefix="/api/v1", tags=["Extraction"])


@app.get("/health")
async def health():
    settings = get_settings()
    return {
        "status": "ok",
        "env": settings.env,
        "cache_enabled": settings.cache_enabled,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("idscan.api.main:app", host=settings.api_host, port=settings.api_port)
