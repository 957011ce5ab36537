"""
Session Controller — Connects the Aggregator to a Display

Runs the count once at startup and again on every refresh request,
posting `loading` and `count` messages to the display.

Design decisions:
    - Latest-wins for overlapping commands: a count is posted only if no
      newer command started meanwhile. An older count finishing while a
      newer command is in flight is held, and posted only if every newer
      command fails. Each invoker still gets its own total back.
    - Failures propagate to whoever issued the command; the display
      receives no count for a failed run
    - After close, every command raises SessionClosedError
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Optional, Protocol, Union

from .messages import (
    CloseMessage,
    CountMessage,
    LoadingMessage,
    OutboundMessage,
    RefreshMessage,
    parse_ui_message,
)
from ..aggregator.pixel_aggregator import PixelAggregator
from ..observability.logging import get_logger
from ..observability.metrics import UI_MESSAGES

logger = get_logger(__name__)

Number = Union[int, float]


class SessionClosedError(RuntimeError):
    """Raised when a command reaches a closed session."""


class EventSink(Protocol):
    """Display collaborator receiving outbound UI messages."""

    def post_message(self, message: OutboundMessage) -> None:
        ...


class ListEventSink:
    """Records posted messages in order."""

    def __init__(self) -> None:
        self.messages: list[OutboundMessage] = []

    def post_message(self, message: OutboundMessage) -> None:
        self.messages.append(message)


class QueueEventSink:
    """
    Fans messages out to asyncio queues, one per subscriber.

    A subscriber whose queue is full drops its oldest message.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self._maxsize = maxsize
        self._subscribers: list[asyncio.Queue] = []

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._maxsize)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def post_message(self, message: OutboundMessage) -> None:
        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(message)


class PixelCountSession:
    """
    Drives pixel counts for one display.

    Args:
        aggregator: Aggregator bound to the host document.
        sink: Display receiving loading/count messages.
    """

    def __init__(self, aggregator: PixelAggregator, sink: EventSink) -> None:
        self._aggregator = aggregator
        self._sink = sink
        self._commands = itertools.count(1)
        self._in_flight: set[int] = set()
        self._posted_command = 0
        self._held: Optional[tuple[int, Number]] = None
        self._closed = False
        self.last_posted: Optional[Number] = None

    @property
    def aggregator(self) -> PixelAggregator:
        return self._aggregator

    @property
    def closed(self) -> bool:
        return self._closed

    def _post(self, message: OutboundMessage) -> None:
        UI_MESSAGES.labels(direction="outbound", type=message.type).inc()
        self._sink.post_message(message)

    def _post_count(self, command_id: int, pixels: Number) -> None:
        self._posted_command = command_id
        if self._held is not None and self._held[0] <= command_id:
            self._held = None
        self.last_posted = pixels
        self._post(CountMessage(pixels=pixels))

    def _newer_in_flight(self, command_id: int) -> bool:
        return any(other > command_id for other in self._in_flight)

    async def start(self) -> Number:
        """Initial count when the session opens."""
        return await self.refresh()

    async def refresh(self) -> Number:
        """
        Recompute the total and post it to the display.

        Raises:
            SessionClosedError: If the session was closed.
            PageLoadError: If the document could not be loaded.
        """
        if self._closed:
            raise SessionClosedError("Session is closed")

        command_id = next(self._commands)
        self._in_flight.add(command_id)
        self._post(LoadingMessage())

        try:
            pixels = await self._aggregator.compute_total_pixels()
        except Exception:
            self._in_flight.discard(command_id)
            self._release_held()
            raise

        self._in_flight.discard(command_id)
        if self._closed:
            logger.info("session.count_after_close", command_id=command_id, pixels=pixels)
        elif command_id < self._posted_command:
            logger.info(
                "session.stale_count_dropped",
                command_id=command_id,
                posted_command=self._posted_command,
                pixels=pixels,
            )
        elif self._newer_in_flight(command_id):
            if self._held is None or self._held[0] < command_id:
                self._held = (command_id, pixels)
            logger.info("session.stale_count_held", command_id=command_id, pixels=pixels)
        else:
            self._post_count(command_id, pixels)
        return pixels

    def _release_held(self) -> None:
        """Post a held older count once every newer command has failed."""
        if self._closed or self._held is None:
            return
        command_id, pixels = self._held
        if command_id > self._posted_command and not self._newer_in_flight(command_id):
            logger.info("session.held_count_posted", command_id=command_id, pixels=pixels)
            self._post_count(command_id, pixels)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.info("session.closed", last_posted=self.last_posted)

    async def handle_message(self, data: dict) -> Optional[Number]:
        """
        Dispatch a raw message from the display.

        Returns:
            The new total for refresh, None for close.

        Raises:
            ValueError: If the message is not a known UI message.
        """
        message = parse_ui_message(data)
        UI_MESSAGES.labels(direction="inbound", type=message.type).inc()

        if isinstance(message, RefreshMessage):
            return await self.refresh()
        if isinstance(message, CloseMessage):
            self.close()
        return None
