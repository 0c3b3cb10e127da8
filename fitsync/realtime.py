# -*- coding: utf-8 -*-
"""
Realtime event stream

Relays event bus notifications to WebSocket clients so a UI can re-render
from fresh reads.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect

from .events import Event, EventBus

logger = logging.getLogger(__name__)


class EventRelay:
    """Subscribes to every event kind and queues messages for one consumer.

    Handlers may run on a worker thread (sync endpoints), so messages are
    handed to the consumer's loop with ``call_soon_threadsafe``.
    """

    def __init__(
        self,
        bus: EventBus,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        maxsize: int = 256,
    ) -> None:
        self._bus = bus
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[Dict[str, Any]] = asyncio.Queue(maxsize=maxsize)

    def attach(self) -> None:
        self._bus.subscribe_all(self._on_event)

    def detach(self) -> None:
        self._bus.unsubscribe_all(self._on_event)

    async def get(self) -> Dict[str, Any]:
        return await self._queue.get()

    def _on_event(self, event: Event) -> None:
        self._loop.call_soon_threadsafe(self._enqueue, event.to_message())

    def _enqueue(self, message: Dict[str, Any]) -> None:
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Event stream backlog full, dropping %s", message.get("kind"))


async def _forward(relay: EventRelay, websocket: WebSocket) -> None:
    while True:
        await websocket.send_json(await relay.get())


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    # Client messages are ignored; the stream is one-way.
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def websocket_endpoint(websocket: WebSocket) -> None:
    engine = websocket.app.state.engine
    # Subscribed before the handshake completes.
    relay = EventRelay(engine.bus)
    relay.attach()
    try:
        await websocket.accept()
        logger.info("Event stream connected")
        forward = asyncio.create_task(_forward(relay, websocket))
        watch = asyncio.create_task(_wait_for_disconnect(websocket))
        try:
            done, _ = await asyncio.wait({forward, watch}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            forward.cancel()
            watch.cancel()
        for task in done:
            task.result()
        logger.info("Event stream disconnected")
    except WebSocketDisconnect:
        logger.info("Event stream disconnected")
    finally:
        relay.detach()
