"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from motoshop.config import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
from motoshop.models.database import create_tables, get_db
from motoshop.data.default_categories import ensure_default_categories
from motoshop.api import categories, products


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    create_tables()

    if settings.seed_default_categories:
        db = next(get_db())
        try:
            ensure_default_categories(db)
        finally:
            db.close()

    yield


app = FastAPI(
    title="Motoshop Catalog",
    description="Category hierarchy and product catalog service for the motoshop",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(products.router, prefix="/products", tags=["Products"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Motoshop Catalog",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
