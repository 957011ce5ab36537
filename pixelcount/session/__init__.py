"""Session - Display messages and the refresh/close lifecycle"""
from .messages import (
    CloseMessage,
    CountMessage,
    LoadingMessage,
    RefreshMessage,
    parse_ui_message,
)
from .controller import (
    EventSink,
    ListEventSink,
    PixelCountSession,
    QueueEventSink,
    SessionClosedError,
)

__all__ = [
    "CloseMessage", "CountMessage", "LoadingMessage", "RefreshMessage",
    "parse_ui_message",
    "EventSink", "ListEventSink", "QueueEventSink",
    "PixelCountSession", "SessionClosedError",
]
