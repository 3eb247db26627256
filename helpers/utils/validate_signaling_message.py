from typing import NamedTuple, Optional
from pydantic import ValidationError
from schemas.signaling.signaling_schema import MESSAGE_TYPES, Role, SignalingMessage, UnknownMessage, is_falsy
import json
import logging

logger = logging.getLogger(__name__)

class ValidatedMessage(NamedTuple):
  message: SignalingMessage
  raw: str  # relayed byte-for-byte, never re-serialized
  role: Optional[Role]

def validate_signaling_message(raw: str, channel_id: str) -> Optional[ValidatedMessage]:
  """
  Decode one inbound frame. Returns None for anything that must be dropped.
  """
  short_id = channel_id[:8]

  try:
    data = json.loads(raw)
  except (ValueError, RecursionError) as e:
    logger.error("Error parsing message from %s: %s", channel_id, e)
    return None

  if not isinstance(data, dict) or is_falsy(data.get("type")):
    logger.warning("Invalid message: missing type from %s", short_id)
    return None

  message_type = data["type"]
  model = MESSAGE_TYPES.get(message_type, UnknownMessage) if isinstance(message_type, str) else UnknownMessage

  try:
    message = model.model_validate(data)
  except ValidationError as e:
    reason = e.errors()[0]["msg"] if e.errors() else str(e)
    logger.warning("Invalid %s from %s: %s", message_type, short_id, reason)
    return None

  return ValidatedMessage(message=message, raw=raw, role=model.classifies_as)
