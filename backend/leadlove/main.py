"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from leadlove import __version__
from leadlove.config import settings
from leadlove.database import init_db
from leadlove.routers import enrichment_routes

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    logger.info("Starting LeadLove Enrichment API...")
    await init_db()
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    yield
    logger.info("Shutting down LeadLove Enrichment API")


# Create FastAPI app
app = FastAPI(
    title="LeadLove Enrichment API",
    description="Domain, review and risk enrichment for places-search leads",
    version=__version__,
    lifespan=lifespan,
    redirect_slashes=False
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(enrichment_routes.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "LeadLove Enrichment API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }
