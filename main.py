import uvicorn
import logging
from core.settings import load_settings
from routes.main import create_app

# Set up logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

if __name__ == "__main__":
  settings = load_settings()
  logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

  logger.info("Server starting with authentication enabled")
  logger.info(f"Access token is configured (length: {len(settings.ACCESS_TOKEN)} chars)")
  if not settings.VIEWER_COUNT_ENABLED:
    logger.info("Viewer count notifications are disabled")

  app = create_app(settings)
  logger.info(f"Starting server at http://{settings.HOST}:{settings.PORT}")
  uvicorn.run(app, host=settings.HOST, port=settings.PORT)
