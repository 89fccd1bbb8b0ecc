"""Progress channel between the pipeline coordinator and the presentation layer

The coordinator emits ProgressEvents without waiting; readers consume them
with ``async for``. The queue is unbounded, so a slow reader never blocks a
pipeline run, and events arrive in emission order.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from .schemas import utc_timestamp

logger = logging.getLogger(__name__)


class ProgressStatus(str, Enum):
    STARTING = "starting"
    COMPLETE = "complete"
    ERROR = "error"


class ProgressEvent(BaseModel):
    """One stage transition"""
    stage: str
    status: ProgressStatus
    result: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    timestamp: str = Field(default_factory=utc_timestamp)

    def to_message(self) -> Dict[str, Any]:
        """WebSocket payload"""
        return {"type": "progress", **self.model_dump(mode="json")}


class ProgressChannel:
    """Fire-and-forget event stream for a single pipeline run"""

    def __init__(self):
        self._queue: "asyncio.Queue[Optional[ProgressEvent]]" = asyncio.Queue()
        self._listeners: List[Callable[[ProgressEvent], None]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Callable[[ProgressEvent], None]) -> None:
        """Register a synchronous callback invoked on every emit"""
        self._listeners.append(listener)

    def emit(self, event: ProgressEvent) -> None:
        if self._closed:
            logger.debug(f"Dropping progress event after close: {event.stage} {event.status.value}")
            return

        logger.debug(f"Progress update: {event.stage} - {event.status.value}")
        self._queue.put_nowait(event)

        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                # Listener errors are logged, never raised into the pipeline
                logger.error(f"Progress listener failed: {e}")

    def close(self) -> None:
        """End iteration once queued events are drained; safe to call twice"""
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)

    def __aiter__(self) -> AsyncIterator[ProgressEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ProgressEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event
