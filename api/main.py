"""
FastAPI application initialization
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api.routes import health, sources, processors, uploads
from api.middleware import RequestContextMiddleware
from api.errors import register_exception_handlers, ERROR_RESPONSES
from core.config import Settings, settings as default_settings
from core.database import Database
from core.logging import setup_logging
import logging

logger = logging.getLogger(__name__)

API_TITLE = "Source Registry API"
API_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The store is opened (and its schema evolved) when the app starts;
    a migration failure aborts startup.
    """
    settings = settings or default_settings
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {API_TITLE}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        await database.init()
        logger.info(f"Database: {database.safe_url}")
        app.state.database = database

        try:
            yield
        finally:
            logger.info(f"Shutting down {API_TITLE}")
            await database.dispose()

    app = FastAPI(
        title=API_TITLE,
        description="Registry of data sources with on-demand probing",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-API-Latency-ms"]
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    prefix = settings.API_PREFIX.rstrip("/")
    app.include_router(health.router, prefix=prefix, responses=ERROR_RESPONSES)
    app.include_router(sources.router, prefix=prefix, responses=ERROR_RESPONSES)
    app.include_router(processors.router, prefix=prefix, responses=ERROR_RESPONSES)
    app.include_router(uploads.router, prefix=prefix, responses=ERROR_RESPONSES)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": API_TITLE,
            "version": API_VERSION,
            "docs": "/docs",
            "health": f"{prefix}/health",
            "endpoints": {
                "sources": f"{prefix}/sources",
                "processors": f"{prefix}/processors",
                "upload": f"{prefix}/upload"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=default_settings.API_HOST,
        port=default_settings.API_PORT,
        reload=default_settings.ENVIRONMENT == "development"
    )
