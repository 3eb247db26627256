from fastapi import WebSocket
from starlette.websockets import WebSocketState
from typing import Optional
import asyncio
import contextlib
import logging

logger = logging.getLogger(__name__)

class Channel:
  """
  One accepted WebSocket plus its outbound buffer.

  send() only enqueues; a writer task owned by the channel drains the queue, so a
  slow peer never holds up relaying to the others.
  """

  def __init__(self, channel_id: str, websocket: WebSocket):
    self.id = channel_id
    self.websocket = websocket
    self._outbox: "asyncio.Queue[str]" = asyncio.Queue()
    self._writer: Optional[asyncio.Task] = None

  @property
  def is_open(self) -> bool:
    return (
      self.websocket.client_state == WebSocketState.CONNECTED
      and self.websocket.application_state == WebSocketState.CONNECTED
    )

  def start(self):
    if self._writer is None:
      self._writer = asyncio.create_task(self._drain())

  def send(self, payload: str):
    self._outbox.put_nowait(payload)

  async def _drain(self):
    while True:
      payload = await self._outbox.get()
      try:
        await self.websocket.send_text(payload)
      except Exception as e:
        logger.error("Failed to send to %s: %s", self.id[:8], e)

  async def stop(self):
    if self._writer is None:
      return
    self._writer.cancel()
    with contextlib.suppress(asyncio.CancelledError):
      await self._writer
    self._writer = None
