from __future__ import annotations

import sys
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from transview.backend import TranslationBackend
from transview.config import Settings

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))


class UpperCaseBackend(TranslationBackend):
    """Translates by upper-casing, streamed one line at a time."""

    name = "fake:upper"

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def translate(self, text: str, language_code: str) -> AsyncIterator[str]:
        self.calls.append((text, language_code))
        for line in text.upper().splitlines(keepends=True):
            yield line

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        log_dir=str(tmp_path / "logs"),
        llm={"provider": "", "api_key": ""},
        preview={"debounce_ms": 0, "target_language": "ja"},
    )


@pytest.fixture()
def backend() -> UpperCaseBackend:
    return UpperCaseBackend()


@pytest.fixture()
def app(settings: Settings, backend: UpperCaseBackend) -> FastAPI:
    from routes.health import router as health_router
    from routes.languages import router as languages_router
    from routes.preview import router as preview_router

    test_app = FastAPI()
    test_app.state.settings = settings
    test_app.state.backend_factory = lambda: backend
    test_app.include_router(health_router)
    test_app.include_router(languages_router)
    test_app.include_router(preview_router)
    return test_app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
