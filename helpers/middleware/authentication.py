from fastapi import WebSocket, status
from fastapi.responses import JSONResponse
from typing import Optional
import logging
import secrets

logger = logging.getLogger(__name__)

UNAUTHORIZED_ERROR = "Unauthorized - Invalid or missing token"

def is_valid_token(token: Optional[str], access_token: str) -> bool:
  if not token:
    return False
  return secrets.compare_digest(token.encode("utf-8"), access_token.encode("utf-8"))

async def validate_token_for_websockets(websocket: WebSocket, token: Optional[str], access_token: str) -> bool:
  """
  Check the token query parameter before the upgrade is accepted.

  A rejected client gets a 401 with a JSON body when the server supports the
  WebSocket denial response extension, otherwise the handshake is closed with 1008.
  """
  if is_valid_token(token, access_token):
    return True

  source = websocket.headers.get("x-forwarded-for") or "unknown"
  logger.warning("Unauthorized WebSocket connection attempt from %s", source)

  if "websocket.http.response" in websocket.scope.get("extensions", {}):
    response = JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": UNAUTHORIZED_ERROR})
    await websocket.send_denial_response(response)
  else:
    await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=UNAUTHORIZED_ERROR)
  return False
