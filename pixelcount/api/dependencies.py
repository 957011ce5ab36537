"""
API Dependencies - Session wiring for the display API
"""

from pathlib import Path
from typing import Union

from fastapi import HTTPException, Request

from ..aggregator.pixel_aggregator import PixelAggregator
from ..document.loader import load_document
from ..session.controller import PixelCountSession, QueueEventSink


def create_session(document_path: Union[str, Path], sink: QueueEventSink) -> PixelCountSession:
    """
    Build a session over a document JSON file.

    Raises:
        FileNotFoundError: If the document file does not exist.
        ValueError: If the file is not a valid document.
    """
    document, loader = load_document(document_path)
    return PixelCountSession(PixelAggregator(document, loader), sink)


def get_session(request: Request) -> PixelCountSession:
    """Session stored on the app at startup; 503 if none could be opened."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="No document session available")
    return session


def get_event_sink(request: Request) -> QueueEventSink:
    return request.app.state.event_sink
