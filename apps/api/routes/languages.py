"""Supported target languages for the display's language picker."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from transview.languages import LANGUAGE_LABELS, LANGUAGE_NAMES

router = APIRouter(tags=["languages"])


class LanguageOption(BaseModel):
    code: str
    label: str  # native name
    name: str  # English name


class LanguagesResponse(BaseModel):
    current: str
    languages: list[LanguageOption]


@router.get("/languages", response_model=LanguagesResponse)
async def list_languages(request: Request) -> LanguagesResponse:
    state = request.app.state
    current = getattr(state, "target_language", None) or state.settings.preview.target_language
    return LanguagesResponse(
        current=current,
        languages=[
            LanguageOption(code=code, label=LANGUAGE_LABELS[code], name=name)
            for code, name in LANGUAGE_NAMES.items()
        ],
    )
