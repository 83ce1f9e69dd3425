"""Main FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.v1 import api_router
from app.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Artwork Admin",
    description="Admin API for managing artworks and their media assets",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: Restrict to the admin frontend origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix="/v1")

# Serve locally stored objects under the same public URLs the local driver hands out
if settings.storage_provider.lower() == "local":
    app.mount(
        settings.storage_public_marker.rstrip("/"),
        StaticFiles(directory=settings.storage_base_path, check_dir=False),
        name="public-objects",
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    from app.database import engine
    from app.storage.factory import get_storage_driver
    from sqlalchemy import text

    # Check database
    db_status = "disconnected"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    # Check object storage
    storage_status = "disconnected"
    try:
        if await get_storage_driver(settings).test_connection():
            storage_status = "connected"
    except Exception as e:
        storage_status = f"error: {str(e)}"

    overall_status = "ok" if db_status == "connected" and storage_status == "connected" else "degraded"

    return {
        "status": overall_status,
        "db": db_status,
        "storage": storage_status,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
