import uuid

def generate_channel_id() -> str:
  return str(uuid.uuid4())
