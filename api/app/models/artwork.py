"""Artwork model."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from app.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Artwork(Base):
    """Artwork record with its three public asset locators."""

    __tablename__ = "artworks"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(500), nullable=False)
    subtitle = Column(String(500), nullable=True)
    slug = Column(String(600), nullable=True)
    order_index = Column(Integer, nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    html_url = Column(Text, nullable=True)
    preview_video_url = Column(Text, nullable=True)
    thumb_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Artwork(id={self.id}, title={self.title!r}, order_index={self.order_index})>"
