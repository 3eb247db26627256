import logging
import sys
from typing import List
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
  ACCESS_TOKEN: str = Field(min_length=1)
  HOST: str = "0.0.0.0"
  PORT: int = 8000
  WEBSOCKET_PATH: str = "/ws"
  PUBLIC_DIR: str = "public"
  VIEWER_COUNT_ENABLED: bool = True
  CORS_ORIGINS: List[str] = []
  LOG_LEVEL: str = "INFO"

  class Config:
    env_file = ".env"

def load_settings(**overrides) -> Settings:
  """
  Load settings from the environment, exiting the process if the access token is not configured.
  """
  try:
    return Settings(**overrides)
  except ValidationError as e:
    invalid = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
    if "ACCESS_TOKEN" in invalid:
      logger.error("ACCESS_TOKEN environment variable is required")
      logger.error("Start the server with: ACCESS_TOKEN=your-secret-token python main.py")
    else:
      logger.error("Invalid settings: %s", ", ".join(invalid))
    sys.exit(1)
