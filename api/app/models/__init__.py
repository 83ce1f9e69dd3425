"""SQLAlchemy models."""

from app.database import Base
from app.models.artwork import Artwork

__all__ = [
    "Base",
    "Artwork",
]
