"""Health check routes (translation backend)."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from transview.backend import BackendFactory
from transview.config import Settings

router = APIRouter(tags=["health"])


class BackendHealthResponse(BaseModel):
    status: str  # "ok" | "unavailable"
    provider: str
    model: str
    backend: str | None = None


@router.get("/health/backend", response_model=BackendHealthResponse)
async def backend_health(request: Request) -> BackendHealthResponse:
    """Report whether a backend can be selected. Never calls the model."""
    settings: Settings | None = getattr(request.app.state, "settings", None)
    factory: BackendFactory | None = getattr(request.app.state, "backend_factory", None)
    if settings is None or factory is None:
        raise HTTPException(status_code=500, detail="settings not initialized")

    provider = str(settings.llm.provider or "").strip() or "unknown"
    model = str(settings.llm.model or "").strip() or "unknown"
    backend = factory()
    if backend is None:
        return BackendHealthResponse(status="unavailable", provider=provider, model=model)
    try:
        return BackendHealthResponse(status="ok", provider=provider, model=model, backend=backend.name)
    finally:
        await backend.close()
