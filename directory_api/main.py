"""
FastAPI main application for the AI directory
"""
import logging
import re
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from directory_api import __version__
from directory_api.core.config import settings
from directory_api.core.database import create_tables
from directory_api.core.logging import setup_logging
from directory_api.middleware import RequestLoggingMiddleware
from directory_api.routers import admin, advertisements, reviews, search, submissions

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Starting {settings.app_name} {__version__} ({settings.environment})...")

    sanitized = re.sub(r":\/\/[^:]*:[^@]*@", "://***:***@", settings.database_url)
    logger.info(f"DATABASE_URL: {sanitized}")

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables ensured")

    logger.info("Application started")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Curated directory of AI tools, products and agents",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": __version__,
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.environment == "development" else None,
        "endpoints": {
            "search": "/api/search",
            "submissions": "/api/submissions",
            "reviews": "/api/reviews",
            "advertisements": "/api/advertisements",
            "admin": "/api/admin",
        },
    }


# Include routers
app.include_router(search.router, prefix="/api")
app.include_router(submissions.router, prefix="/api")
app.include_router(reviews.router, prefix="/api")
app.include_router(advertisements.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(advertisements.admin_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "directory_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_config=None,  # Use our custom logging
        access_log=False,  # We handle this in middleware
    )
