"""
Server-Sent Events (SSE) fan-out of persistence changes.
Clients holding an editing session use these to notice that a design, room
or product they display was saved or deleted elsewhere.

Routers publish from the threadpool, so each frame is handed to the
subscriber's own event loop.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import AsyncGenerator, Dict, Literal

logger = logging.getLogger(__name__)

Entity = Literal["design", "room", "product"]
Action = Literal["saved", "deleted"]


@dataclass(frozen=True)
class ChangeEvent:
    entity: Entity
    action: Action
    id: str

    @property
    def type(self) -> str:
        return f"{self.entity}_{self.action}"

    def to_sse(self) -> str:
        payload = {"entity": self.entity, "id": self.id}
        return f"event: {self.type}\ndata: {json.dumps(payload)}\n\n"


# Connected SSE clients and the loop each one is waiting on
_clients: Dict[asyncio.Queue, asyncio.AbstractEventLoop] = {}


async def subscribe() -> AsyncGenerator[str, None]:
    """Yield one formatted SSE frame per change until the client goes away."""
    queue: asyncio.Queue = asyncio.Queue(maxsize=100)
    _clients[queue] = asyncio.get_running_loop()
    logger.info(f"SSE client connected. Total clients: {len(_clients)}")

    try:
        while True:
            event: ChangeEvent = await queue.get()
            yield event.to_sse()
    except asyncio.CancelledError:
        pass
    finally:
        _clients.pop(queue, None)
        logger.info(f"SSE client disconnected. Total clients: {len(_clients)}")


def _deliver(queue: asyncio.Queue, event: ChangeEvent):
    try:
        queue.put_nowait(event)
    except asyncio.QueueFull:
        logger.warning(f"SSE client queue full, dropping {event.type} {event.id}")


def publish(event: ChangeEvent):
    """Queue the event for every connected client without blocking."""
    for queue, loop in list(_clients.items()):
        if loop.is_closed():
            _clients.pop(queue, None)
            continue
        loop.call_soon_threadsafe(_deliver, queue, event)


def publish_saved(entity: Entity, entity_id: str):
    publish(ChangeEvent(entity, "saved", entity_id))


def publish_deleted(entity: Entity, entity_id: str):
    publish(ChangeEvent(entity, "deleted", entity_id))
