from fastapi import WebSocket, WebSocketDisconnect, status
from starlette.websockets import WebSocketState
from .channel import Channel
from .generate_unique_id import generate_channel_id
from .signaling_relay import SignalingRelay
from .validate_signaling_message import validate_signaling_message
from .websocket_connection_manager import ConnectionManager
import logging

logger = logging.getLogger(__name__)

class ChannelLifecycle:
  """
  Drives one WebSocket from accept to close: register, validate and relay each
  frame, then unregister and refresh the viewer count.
  """

  def __init__(self, connections: ConnectionManager, relay: SignalingRelay):
    self.connections = connections
    self.relay = relay

  async def run(self, websocket: WebSocket):
    channel_id = generate_channel_id()
    channel = Channel(channel_id, websocket)
    self.connections.register(channel_id, channel)

    try:
      await websocket.accept()
      channel.start()
      logger.info("Client connected: %s", channel_id)

      while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
          break
        self.handle_frame(channel_id, message)
    except WebSocketDisconnect:
      pass
    except Exception as e:
      logger.exception("WebSocket error for %s: %s", channel_id, e)
      if websocket.application_state == WebSocketState.CONNECTED and websocket.client_state == WebSocketState.CONNECTED:
        try:
          await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        except Exception as close_error:
          logger.debug("Could not close %s after error: %s", channel_id, close_error)
    finally:
      # Unregister before awaiting anything so cleanup survives cancellation
      self.close(channel_id)
      await channel.stop()

  def handle_frame(self, channel_id: str, message: dict):
    raw = message.get("text")
    if raw is None:
      logger.warning("Ignoring binary frame from %s", channel_id[:8])
      return

    # A bad frame is dropped, never the connection
    try:
      validated = validate_signaling_message(raw, channel_id)
      if validated is not None:
        self.relay.relay(channel_id, validated)
    except Exception as e:
      logger.exception("Dropping frame from %s: %s", channel_id[:8], e)

  def close(self, channel_id: str):
    # A second close for the same channel finds nothing to remove
    if not self.connections.unregister(channel_id):
      return
    logger.info("Client disconnected: %s", channel_id)
    self.relay.push_viewer_count()
