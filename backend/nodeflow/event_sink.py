# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Event Sink - live progress channel for one workflow run

Best-effort delivery: unbounded queue, no backpressure, no cancellation.
Once the consumer goes away every send becomes a silent no-op and the run
carries on.

Frames follow the Server-Sent Events wire format:
    data: {"type": "node_start", "nodeId": "1", ...}\\n\\n
    data: [DONE]\\n\\n
    event: error\\ndata: Node execution failed: ...\\n\\n
"""
import asyncio
import json
from typing import AsyncIterator, Optional, Tuple

from nodeflow.core.logging import get_service_logger
from nodeflow.workflow_models import LogData

logger = get_service_logger("event_sink")

DONE_SENTINEL = "[DONE]"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def format_sse(data: str, event: Optional[str] = None) -> str:
    """Encode one SSE message; multi-line data becomes several data: lines"""
    lines = []
    if event:
        lines.append(f"event: {event}")
    for line in data.split("\n"):
        lines.append(f"data: {line}")
    return "\n".join(lines) + "\n\n"


class EventSink:
    """
    Single-run push channel from the engine to an observer.

    Producers call send_json / send_done / send_error; the HTTP layer
    consumes frames() as a streaming body.
    """

    def __init__(self):
        self._queue: asyncio.Queue[Tuple[str, bool]] = asyncio.Queue()
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Consumer has disconnected; further sends are dropped"""
        self._closed = True

    def send_json(self, data: LogData) -> None:
        payload = json.dumps(data.model_dump(mode="json", by_alias=True), ensure_ascii=False)
        self._put(format_sse(payload), terminal=False)

    def send_done(self) -> None:
        self._put(format_sse(DONE_SENTINEL), terminal=True)

    def send_error(self, message: str) -> None:
        self._put(format_sse(message, event="error"), terminal=True)

    def _put(self, frame: str, terminal: bool) -> None:
        if self._closed:
            self.dropped += 1
            logger.debug("Dropped event for disconnected consumer")
            return
        self._queue.put_nowait((frame, terminal))

    async def frames(self) -> AsyncIterator[str]:
        """
        Yield encoded frames until [DONE] or an error frame.

        Closing the iterator early (client disconnect) closes the sink.
        """
        try:
            while True:
                frame, terminal = await self._queue.get()
                yield frame
                if terminal:
                    break
        finally:
            self.close()
