from fastapi import FastAPI, Response, WebSocket, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from typing import Optional
from core.settings import Settings, load_settings
from helpers.utils.channel_lifecycle import ChannelLifecycle
from helpers.utils.signaling_relay import SignalingRelay
from helpers.utils.websocket_connection_manager import ConnectionManager
from .signaling.signaling_route import create_router as create_signaling_router

class PublicFiles(StaticFiles):
  """Static assets; WebSocket handshakes on non-signaling paths are refused with 1008."""

  async def __call__(self, scope, receive, send):
    if scope["type"] == "websocket":
      await WebSocket(scope, receive, send).close(code=status.WS_1008_POLICY_VIOLATION)
      return
    await super().__call__(scope, receive, send)

def create_app(settings: Optional[Settings] = None) -> FastAPI:
  if settings is None:
    settings = load_settings()

  app = FastAPI()

  app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
  )

  # One registry per app, shared by the relay and every connection
  connections = ConnectionManager()
  relay = SignalingRelay(connections, viewer_count_enabled=settings.VIEWER_COUNT_ENABLED)
  app.state.settings = settings
  app.state.connections = connections
  app.state.relay = relay
  app.state.channel_lifecycle = ChannelLifecycle(connections, relay)

  app.include_router(create_signaling_router(settings.WEBSOCKET_PATH), tags=["signaling"])

  @app.get("/favicon.ico", include_in_schema=False)
  async def favicon():
    return Response(status_code=status.HTTP_204_NO_CONTENT)

  # Static pages only carry client bootstrap code, so they are not token-gated
  app.mount("/", PublicFiles(directory=settings.PUBLIC_DIR, html=True, check_dir=False), name="public")

  return app
