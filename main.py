import uvicorn
from league_api import app
from league_api.core.config import settings
from league_api.core.logging import logger
from league_api.data.database import init_db

if __name__ == "__main__":
    # Make sure the schema exists before serving
    init_db()
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION}")

    uvicorn.run(
        "league_api:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.DEBUG
    )
