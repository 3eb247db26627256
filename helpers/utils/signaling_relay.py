from schemas.signaling.signaling_schema import Role, ViewerCountMessage
from .validate_signaling_message import ValidatedMessage
from .websocket_connection_manager import ConnectionManager
import logging

logger = logging.getLogger(__name__)

class SignalingRelay:
  def __init__(self, connections: ConnectionManager, viewer_count_enabled: bool = True):
    self.connections = connections
    self.viewer_count_enabled = viewer_count_enabled

  def relay(self, sender_id: str, validated: ValidatedMessage) -> int:
    """
    Forward an accepted message to every other open channel, then refresh the viewer count.
    Returns how many channels the payload was handed to.
    """
    if validated.role is not None:
      self.connections.classify(sender_id, validated.role)

    logger.info("Relaying %s from %s", validated.message.type, sender_id[:8])

    recipients = 0

    def forward(channel_id, channel):
      nonlocal recipients
      if not channel.is_open:
        return
      try:
        channel.send(validated.raw)
        recipients += 1
      except Exception as e:
        logger.error("Failed to relay %s to %s: %s", validated.message.type, channel_id[:8], e)

    self.connections.for_each_other(sender_id, forward)

    self.push_viewer_count()
    return recipients

  def push_viewer_count(self):
    """
    Send {"type": "viewer-count", "count": N} to every open camera channel.
    """
    if not self.viewer_count_enabled:
      return

    payload = ViewerCountMessage(count=self.connections.viewer_count()).model_dump_json()

    def notify(channel_id, channel):
      if not channel.is_open:
        return
      try:
        channel.send(payload)
      except Exception as e:
        logger.error("Failed to send viewer count to %s: %s", channel_id[:8], e)

    self.connections.for_each_with_role(Role.CAMERA, notify)
