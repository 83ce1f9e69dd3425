"""Artwork record store."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.artwork import Artwork

logger = logging.getLogger(__name__)

# Columns callers may write through insert/update
WRITABLE_FIELDS = frozenset(
    {
        "title",
        "subtitle",
        "slug",
        "order_index",
        "is_active",
        "html_url",
        "preview_video_url",
        "thumb_url",
    }
)


class RecordStoreError(Exception):
    """Record store operation failed."""

    pass


class RecordStore(ABC):
    """Create/read/update/delete access to artwork rows."""

    @abstractmethod
    def insert(self, fields: Dict[str, Any]) -> Artwork:
        pass

    @abstractmethod
    def update(self, artwork_id: str, fields: Dict[str, Any]) -> bool:
        """Apply a partial update. Returns False if the row does not exist."""
        pass

    @abstractmethod
    def delete(self, artwork_id: str) -> bool:
        pass

    @abstractmethod
    def list_ordered(self) -> List[Artwork]:
        pass

    @abstractmethod
    def get_by_id(self, artwork_id: str) -> Optional[Artwork]:
        pass

    @abstractmethod
    def existing_ids(self, artwork_ids: List[str]) -> set:
        """Return the subset of ``artwork_ids`` that exist."""
        pass


class SqlRecordStore(RecordStore):
    """SQLAlchemy-backed record store.

    Every write commits on its own; a failed write rolls the session back
    and raises RecordStoreError.

    Example:
        >>> store = SqlRecordStore(db)
        >>> artwork = store.insert({"title": "Sunset Study", "order_index": 3})
        >>> store.update(artwork.id, {"is_active": False})
        True
    """

    def __init__(self, db: Session):
        self.db = db

    def _check_fields(self, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - WRITABLE_FIELDS
        if unknown:
            raise RecordStoreError(f"Unknown artwork fields: {sorted(unknown)}")

    def insert(self, fields: Dict[str, Any]) -> Artwork:
        self._check_fields(fields)
        artwork = Artwork(**fields)
        try:
            self.db.add(artwork)
            self.db.commit()
            self.db.refresh(artwork)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to insert artwork: {e}", exc_info=True)
            raise RecordStoreError(str(e)) from e
        return artwork

    def update(self, artwork_id: str, fields: Dict[str, Any]) -> bool:
        self._check_fields(fields)
        if not fields:
            return self.get_by_id(artwork_id) is not None

        try:
            artwork = self.db.get(Artwork, artwork_id)
            if artwork is None:
                return False
            for name, value in fields.items():
                setattr(artwork, name, value)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update artwork {artwork_id}: {e}", exc_info=True)
            raise RecordStoreError(str(e)) from e
        return True

    def delete(self, artwork_id: str) -> bool:
        try:
            artwork = self.db.get(Artwork, artwork_id)
            if artwork is None:
                return False
            self.db.delete(artwork)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete artwork {artwork_id}: {e}", exc_info=True)
            raise RecordStoreError(str(e)) from e
        return True

    def list_ordered(self) -> List[Artwork]:
        return (
            self.db.query(Artwork)
            .order_by(
                Artwork.order_index.is_(None),
                Artwork.order_index.asc(),
                Artwork.created_at.asc(),
                Artwork.id.asc(),
            )
            .all()
        )

    def get_by_id(self, artwork_id: str) -> Optional[Artwork]:
        return self.db.get(Artwork, artwork_id)

    def existing_ids(self, artwork_ids: List[str]) -> set:
        if not artwork_ids:
            return set()
        rows = self.db.query(Artwork.id).filter(Artwork.id.in_(artwork_ids)).all()
        return {row[0] for row in rows}
