from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from league_api.core.config import settings
from league_api.core.errors import register_exception_handlers
from league_api.core.logging import logger
from league_api.data.database import init_db
from league_api.api.routes import router as api_router

# FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"]
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v1")

@app.on_event("startup")
async def startup_event():
    logger.info("Application starting...")
    init_db()
