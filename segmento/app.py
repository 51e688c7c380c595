"""FastAPI application exposing segment collections and their media."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from segmento.helpers.logging import configure_logging
from segmento.interfaces.media import router as media_router
from segmento.interfaces.segments import router as segments_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Segmento API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
)

app.include_router(segments_router, prefix="/api")
app.include_router(media_router, prefix="/api")


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
