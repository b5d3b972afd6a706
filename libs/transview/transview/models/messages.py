"""Message protocol between the pipeline and the display surface.

Both directions are fire-and-forget JSON objects discriminated by `type`, with
camelCase field names on the wire.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from transview.models.rendered import RenderedLine


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class RenderedLinePayload(_WireModel):
    line_index: int
    html: str
    source_line_hint: int

    @classmethod
    def from_line(cls, line: RenderedLine) -> "RenderedLinePayload":
        return cls(line_index=line.line_index, html=line.html, source_line_hint=line.source_line_hint)


def _payload(lines: list[RenderedLine]) -> list[RenderedLinePayload]:
    return [RenderedLinePayload.from_line(line) for line in lines]


# core -> display


class LoadingMessage(_WireModel):
    type: Literal["loading"] = "loading"
    request_id: int


class ChunkMessage(_WireModel):
    """A new fragment plus the re-rendered partial buffer."""

    type: Literal["chunk"] = "chunk"
    request_id: int
    text: str
    lines: list[RenderedLinePayload] = Field(default_factory=list)

    @classmethod
    def build(cls, request_id: int, text: str, lines: list[RenderedLine]) -> "ChunkMessage":
        return cls(request_id=request_id, text=text, lines=_payload(lines))


class UpdateMessage(_WireModel):
    type: Literal["update"] = "update"
    request_id: int
    full_text: str
    language_code: str
    cached: bool = False
    lines: list[RenderedLinePayload] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        request_id: int,
        full_text: str,
        language_code: str,
        lines: list[RenderedLine],
        *,
        cached: bool = False,
    ) -> "UpdateMessage":
        return cls(
            request_id=request_id,
            full_text=full_text,
            language_code=language_code,
            cached=cached,
            lines=_payload(lines),
        )


class ErrorMessage(_WireModel):
    type: Literal["error"] = "error"
    request_id: int | None = None
    message: str
    error_code: str = "UNKNOWN"


class ScrollToMessage(_WireModel):
    type: Literal["scrollTo"] = "scrollTo"
    line_index: int
    source_line: int


OutboundMessage = Annotated[
    Union[LoadingMessage, ChunkMessage, UpdateMessage, ErrorMessage, ScrollToMessage],
    Field(discriminator="type"),
]


# display/editor -> core


class ReadyMessage(_WireModel):
    type: Literal["ready"] = "ready"


class ChangeLanguageMessage(_WireModel):
    type: Literal["changeLanguage"] = "changeLanguage"
    language_code: str = Field(
        validation_alias=AliasChoices("languageCode", "language_code", "language"),
    )


class SourceChangedMessage(_WireModel):
    type: Literal["sourceChanged"] = "sourceChanged"
    text: str


class EditorScrollMessage(_WireModel):
    """First visible source line of the editor."""

    type: Literal["editorScroll"] = "editorScroll"
    line_index: int = Field(ge=0)


InboundMessage = Annotated[
    Union[ReadyMessage, ChangeLanguageMessage, SourceChangedMessage, EditorScrollMessage],
    Field(discriminator="type"),
]

_INBOUND_ADAPTER: TypeAdapter[Any] = TypeAdapter(InboundMessage)


def parse_inbound_message(data: Any) -> ReadyMessage | ChangeLanguageMessage | SourceChangedMessage | EditorScrollMessage:
    """Validate a raw inbound payload.

    Raises:
        pydantic.ValidationError: on unknown `type` or bad fields.
    """
    return _INBOUND_ADAPTER.validate_python(data)
