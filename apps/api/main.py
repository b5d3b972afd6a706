"""TransView API"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from transview.backend import make_backend_factory
from transview.config import Settings
from routes.health import router as health_router
from routes.languages import router as languages_router
from routes.preview import router as preview_router
from transview.utils.logging_setup import setup_logging

settings = Settings()
setup_logging(settings)
logger = logging.getLogger("transview.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings
    app.state.backend_factory = make_backend_factory(settings)
    app.state.target_language = settings.preview.target_language
    logger.info(
        "API starting (provider=%s, model=%s, target_language=%s)",
        settings.llm.provider,
        settings.llm.model,
        settings.preview.target_language,
    )
    yield


app = FastAPI(
    title="TransView API",
    description="Live translated markdown preview",
    version="0.1.0",
    lifespan=lifespan,
)


app.include_router(health_router)
app.include_router(languages_router)
app.include_router(preview_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
