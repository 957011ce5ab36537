"""Session Schemas - Messages exchanged with the display"""
from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from typing import Annotated, Literal, Union


class LoadingMessage(BaseModel):
    """Posted when a count starts, before pages are loaded"""
    type: Literal["loading"] = "loading"


class CountMessage(BaseModel):
    """Posted when a count completes"""
    type: Literal["count"] = "count"
    pixels: Union[int, float] = Field(..., description="Total leaf pixel area")


class RefreshMessage(BaseModel):
    """Display asks for a fresh count"""
    type: Literal["refresh"] = "refresh"


class CloseMessage(BaseModel):
    """Display asks to end the session"""
    type: Literal["close"] = "close"


OutboundMessage = Union[LoadingMessage, CountMessage]

InboundMessage = Annotated[
    Union[RefreshMessage, CloseMessage],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundMessage)


def parse_ui_message(data: dict) -> Union[RefreshMessage, CloseMessage]:
    """
    Validate a message sent by the display.

    Raises:
        ValueError: If the message type is unknown or the payload is invalid.
    """
    try:
        return _inbound_adapter.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Invalid UI message {data!r}: {e}") from e
