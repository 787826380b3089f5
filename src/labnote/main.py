# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import (
    auth_router,
    entries_router,
    health_router,
    projects_router,
    register_exception_handlers,
    templates_router,
    users_router,
)
from .config import get_settings
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .database import create_tables
from .security.jwt import TokenService

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()

# A weak or placeholder secret stops the process here, before serving anything
token_service = TokenService.from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting LabNote application",
        extra={
            "version": __version__,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )

    # Redis only backs federated login; the rest of the API works without it
    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    if os.getenv("LABNOTE_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to LABNOTE_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    logger.info("Shutting down LabNote application")
    try:
        await redis_client.disconnect()
        logger.info("Redis connection closed")
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")


app = FastAPI(
    title=settings.app_name,
    description="Electronic lab notebook API",
    version=__version__,
    lifespan=lifespan,
)
app.state.token_service = token_service

app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(entries_router, prefix="/api")
app.include_router(projects_router, prefix="/api")
app.include_router(templates_router, prefix="/api")
# operational probes live outside /api
app.include_router(health_router)


@app.get("/")
async def root():
    return {"message": "LabNote API", "version": __version__}


@app.get("/api")
async def api_root():
    return {
        "message": "LabNote API",
        "version": __version__,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json",
        },
        "endpoints": {
            "authentication": "/api/auth",
            "users": "/api/users/me",
            "entries": "/api/entries",
            "projects": "/api/projects",
            "templates": "/api/templates",
            "health": "/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("labnote.main:app", host=settings.host, port=settings.port, reload=settings.reload)
