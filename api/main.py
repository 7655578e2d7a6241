"""
FastAPI application initialization
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from api.routes import health, inscriptions, stats
from api.middleware import RequestContextMiddleware
from core.config import get_settings
from core.database import create_engine, create_session_maker
from core.logging import setup_logging
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the database engine on startup and dispose it on shutdown"""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    logger.info("Starting inscription read API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    app.state.settings = settings
    app.state.engine = create_engine(settings.DATABASE_URL)
    app.state.SessionLocal = create_session_maker(app.state.engine)
    try:
        yield
    finally:
        logger.info("Shutting down inscription read API")
        await app.state.engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Ord Inscription Harvester API",
    description="Read access to harvested inscriptions and harvest runs",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(inscriptions.router)
app.include_router(stats.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Ord Inscription Harvester API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "inscription": "/inscriptions/{inscription_id}",
            "block": "/blocks/{height}/inscriptions",
            "stats": "/stats"
        }
    }
