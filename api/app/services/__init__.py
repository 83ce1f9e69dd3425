"""Business logic services."""

from app.services.artwork_service import (
    create_artwork,
    delete_artwork,
    replace_asset,
    update_artwork,
)
from app.services.ordering_service import reorder_artworks
from app.services.record_store import RecordStore, SqlRecordStore
from app.services.working_order import WorkingOrder

__all__ = [
    "create_artwork",
    "update_artwork",
    "replace_asset",
    "delete_artwork",
    "reorder_artworks",
    "RecordStore",
    "SqlRecordStore",
    "WorkingOrder",
]
