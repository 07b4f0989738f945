"""Keyboards and callback payloads.

Keyboards are described transport-neutrally here and rendered by the
Telegram adapter. Inline buttons carry a JSON encoded ``ButtonQuery``
tagged by ``type``; the only variant today selects a tunnel profile by
its configuration index.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, ValidationError

from ..common.exceptions import UnparseablePayloadError
from ..config import TunnelProfile
from .responses import BAD_INLINE_DATA_TYPE, BUTTON_HANDLER_MISSED


class NgrokButtonQuery(BaseModel):
    """Selection of a tunnel profile by index.

    The ``type`` tag is required on the wire, so payloads of other or
    unknown kinds never decode as a profile selection.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["Ngrok"]
    cmd_idx: StrictInt = Field(ge=0, description="Index into the configured profiles")

    @classmethod
    def select(cls, cmd_idx: int) -> "NgrokButtonQuery":
        return cls(type="Ngrok", cmd_idx=cmd_idx)


# New callback kinds join this as a discriminated union on ``type``
ButtonQuery = NgrokButtonQuery

_button_query_adapter: TypeAdapter[ButtonQuery] = TypeAdapter(ButtonQuery)


def encode_button_query(query: ButtonQuery) -> str:
    """Serialize callback data for an inline button."""
    return query.model_dump_json()


def parse_button_query(raw: str | None) -> ButtonQuery:
    """Decode callback data received from an inline button.

    Raises:
        UnparseablePayloadError: If data is missing or not a known query
    """
    if raw is None:
        raise UnparseablePayloadError(BUTTON_HANDLER_MISSED)
    try:
        return _button_query_adapter.validate_json(raw)
    except ValidationError as e:
        raise UnparseablePayloadError(BAD_INLINE_DATA_TYPE) from e


class KeyboardKind(str, Enum):
    """Keyboard placement."""

    REPLY = "reply"
    INLINE = "inline"


class KeyboardButton(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    callback_data: str | None = None


class Keyboard(BaseModel):
    """Rows of buttons attached to a response."""

    model_config = ConfigDict(frozen=True)

    kind: KeyboardKind
    rows: list[list[KeyboardButton]]
    resize: bool = False


def make_ngrok_cmd_keyboard(profiles: Sequence[tuple[int, TunnelProfile]]) -> Keyboard:
    """Build an inline menu with one row per profile, in the given order."""
    rows = [
        [
            KeyboardButton(
                text=profile.description,
                callback_data=encode_button_query(NgrokButtonQuery.select(index)),
            )
        ]
        for index, profile in profiles
    ]
    return Keyboard(kind=KeyboardKind.INLINE, rows=rows)


def make_startup_keyboard() -> Keyboard:
    return Keyboard(
        kind=KeyboardKind.REPLY,
        rows=[[KeyboardButton(text="/ngrok"), KeyboardButton(text="/killngrok")]],
        resize=True,
    )
