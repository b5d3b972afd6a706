"""Live preview over a websocket.

One connection is one open document: the client sends editor events
(`sourceChanged`, `editorScroll`) and display events (`ready`,
`changeLanguage`); the server pushes `loading`/`chunk`/`update`/`error`/
`scrollTo` messages. A `changeLanguage` is remembered on the app and becomes
the starting language of later connections that pass no `?language=`.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from transview.config import Settings
from transview.languages import is_supported_language
from transview.models.messages import OutboundMessage
from transview.pipeline.session import PreviewSession

logger = logging.getLogger("transview.api.preview")

router = APIRouter(tags=["preview"])


@router.websocket("/ws/preview")
async def preview_socket(websocket: WebSocket, language: str | None = None) -> None:
    settings: Settings = websocket.app.state.settings
    await websocket.accept()

    async def _send(message: OutboundMessage) -> None:
        if websocket.application_state != WebSocketState.CONNECTED:
            return
        await websocket.send_json(message.to_wire())

    if language is not None and not is_supported_language(language):
        logger.warning("ignoring unsupported language query param: %r", language)
        language = None
    if language is None:
        language = getattr(websocket.app.state, "target_language", None)

    def _remember_language(code: str) -> None:
        # Later connections without `?language=` start in this language.
        websocket.app.state.target_language = code

    session = PreviewSession.from_settings(
        settings,
        display=_send,
        backend_factory=websocket.app.state.backend_factory,
        language_code=language,
        on_language_changed=_remember_language,
    )
    logger.info("preview session opened (language=%s)", session.language_code)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("ignoring non-json message: %r", raw[:200])
                continue
            if not isinstance(data, dict):
                logger.warning("ignoring non-object message")
                continue
            await session.handle_message(data)
    except WebSocketDisconnect:
        logger.info("preview session disconnected")
    finally:
        await session.close()
