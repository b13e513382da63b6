"""
CarIntel FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carintel.api.routes import listings, vin
from carintel.config import settings
from carintel.services.cache import build_cache
from carintel.utils.browser import get_launcher

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    # Startup
    logger.info("Starting CarIntel API...")
    app.state.cache = build_cache(settings)
    app.state.launcher = get_launcher(settings.browser_profile)

    yield

    # Shutdown
    logger.info("Shutting down CarIntel API...")
    if app.state.cache is not None:
        await app.state.cache.close()
        logger.info("Redis connection closed")


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(listings.router)
app.include_router(vin.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "CarIntel API",
        "version": settings.api_version,
        "endpoints": {
            "import_url": "/import/url",
            "import_batch": "/import/batch",
            "import_sources": "/import/sources",
            "vin_analyze": "/vin/analyze",
            "vin_decode": "/vin/decode?vin=...",
            "vin_compare": "/vin/compare",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
