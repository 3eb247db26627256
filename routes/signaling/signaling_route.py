from fastapi import APIRouter, WebSocket
from typing import Optional
from helpers.middleware.authentication import validate_token_for_websockets

async def signaling_endpoint(websocket: WebSocket, token: Optional[str] = None):
  state = websocket.app.state

  if not await validate_token_for_websockets(websocket, token, state.settings.ACCESS_TOKEN):
    return

  await state.channel_lifecycle.run(websocket)

def create_router(path: str = "/ws") -> APIRouter:
  router = APIRouter()
  router.add_api_websocket_route(path, signaling_endpoint)
  return router
