from schemas.signaling.signaling_schema import Role
from typing import Any, Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)

ChannelCallback = Callable[[str, Any], None]

class ConnectionManager:
  def __init__(self):
    # Live channels: {channel_id: channel}
    self.active_connections: Dict[str, Any] = {}
    # Roles, filled in lazily by the first offer/answer: {channel_id: role}
    self.roles: Dict[str, Role] = {}

  def __len__(self) -> int:
    return len(self.active_connections)

  def __contains__(self, channel_id: str) -> bool:
    return channel_id in self.active_connections

  def register(self, channel_id: str, channel: Any):
    if channel_id in self.active_connections:
      raise ValueError(f"Channel {channel_id} is already registered")
    self.active_connections[channel_id] = channel

  def unregister(self, channel_id: str) -> bool:
    """
    Remove a channel and its role. Returns False when the channel was already gone.
    """
    self.roles.pop(channel_id, None)
    return self.active_connections.pop(channel_id, None) is not None

  def classify(self, channel_id: str, role: Role) -> Optional[Role]:
    """
    Assign a role the first time one is seen for a channel and return the role it ends up with.
    """
    if channel_id not in self.active_connections:
      return None

    current = self.roles.setdefault(channel_id, role)
    if current != role:
      logger.debug("Channel %s keeps role %s, ignoring %s", channel_id[:8], current.value, role.value)
    return current

  def role_of(self, channel_id: str) -> Optional[Role]:
    return self.roles.get(channel_id)

  def for_each_other(self, exclude_id: str, fn: ChannelCallback):
    # Iterate over a copy so fn can disconnect channels
    for channel_id, channel in list(self.active_connections.items()):
      if channel_id != exclude_id:
        fn(channel_id, channel)

  def for_each_with_role(self, role: Role, fn: ChannelCallback):
    for channel_id, channel in list(self.active_connections.items()):
      if self.roles.get(channel_id) == role:
        fn(channel_id, channel)

  def viewer_count(self) -> int:
    return sum(1 for channel_id in self.active_connections if self.roles.get(channel_id) == Role.VIEWER)
