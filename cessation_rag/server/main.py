"""
HTTP entry point: ``uvicorn cessation_rag.server.main:app``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .api import router
from .dependencies import startup_load

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/rag"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Open the chunk store and wire the engine before the first request
    startup_load()
    logger.info(f"[SERVER] Ready, serving under {API_PREFIX}")
    yield


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "금연 관련 법령·지침 검색 API. `/rag/search` returns ranked, cited "
            "context; `/rag/ask` answers strictly from that context."
        ),
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix=API_PREFIX, tags=["RAG"])

    @app.get("/", tags=["Root"])
    def index():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "endpoints": {
                name: f"{API_PREFIX}/{name}" for name in ("search", "ask", "health", "stats")
            },
        }

    return app


app = create_app()
