"""pytest configuration and fixtures for the signaling relay tests."""

import pytest
from fastapi.testclient import TestClient

from core.settings import Settings
from helpers.utils.signaling_relay import SignalingRelay
from helpers.utils.websocket_connection_manager import ConnectionManager
from routes.main import create_app


ACCESS_TOKEN = "test-secret-token"


class FakeChannel:
  """Stand-in for helpers.utils.channel.Channel that records what it is sent."""

  def __init__(self, channel_id, is_open=True, broken=False):
    self.id = channel_id
    self.is_open = is_open
    self.broken = broken
    self.sent = []

  def send(self, payload):
    if self.broken:
      raise RuntimeError(f"{self.id} transport is gone")
    self.sent.append(payload)


@pytest.fixture
def make_channel():
  return FakeChannel


@pytest.fixture
def connections():
  return ConnectionManager()


@pytest.fixture
def relay(connections):
  return SignalingRelay(connections, viewer_count_enabled=True)


@pytest.fixture
def public_dir(tmp_path):
  (tmp_path / "index.html").write_text("<h1>camera relay</h1>")
  (tmp_path / "viewer").mkdir()
  (tmp_path / "viewer" / "index.html").write_text("<h1>viewer</h1>")
  return tmp_path


@pytest.fixture
def settings(public_dir):
  return Settings(_env_file=None, ACCESS_TOKEN=ACCESS_TOKEN, PUBLIC_DIR=str(public_dir))


@pytest.fixture
def app(settings):
  return create_app(settings)


@pytest.fixture
def client(app):
  # Entering the client keeps every WebSocket session on one event loop
  with TestClient(app) as test_client:
    yield test_client


@pytest.fixture
def ws_url():
  return f"/ws?token={ACCESS_TOKEN}"
