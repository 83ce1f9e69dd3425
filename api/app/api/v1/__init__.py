"""API v1 router."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    artworks,
    auth,
    health,
    storage,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(artworks.router, prefix="/artworks", tags=["artworks"])
api_router.include_router(storage.router, prefix="/storage", tags=["storage"])
