"""Artwork business logic service.

Asset files are always uploaded before the row that references them is
written, and a replaced object is only removed after the new reference has
been committed. Removing replaced or deleted objects is best-effort: a
failure there is logged and never undoes the row change.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from app.models.artwork import Artwork
from app.services.asset_paths import (
    SLOTS,
    AssetSlot,
    build_asset_path,
    make_disambiguator,
    path_base,
)
from app.services.record_store import RecordStore, RecordStoreError
from app.storage.base import BaseStorageDriver, StorageError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class ArtworkServiceError(Exception):
    """Base exception for artwork service errors."""
    pass


class ArtworkNotFoundError(ArtworkServiceError):
    """Artwork not found."""
    pass


class ArtworkValidationError(ArtworkServiceError):
    """Submitted fields are invalid. The message is a short error code."""
    pass


class AssetUploadError(ArtworkServiceError):
    """Uploading a new asset to object storage failed."""
    pass


@dataclass
class UploadPayload:
    """A file submitted for one asset slot."""

    filename: Optional[str]
    content_type: Optional[str]
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content or b"")

    @property
    def is_valid(self) -> bool:
        """Empty file inputs mean "keep the current asset"."""
        return self.size > 0


def _valid_files(files: Optional[Dict[str, Optional[UploadPayload]]]) -> Dict[AssetSlot, UploadPayload]:
    selected = {}
    for name, payload in (files or {}).items():
        slot = SLOTS.get(name)
        if slot is None:
            raise ArtworkValidationError(f"unknown_asset_slot:{name}")
        if payload is not None and payload.is_valid:
            selected[slot] = payload
    return selected


def _require_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ArtworkValidationError("missing_title")
    return title


async def upload_asset(
    storage: BaseStorageDriver,
    slot: AssetSlot,
    base: str,
    payload: UploadPayload,
) -> str:
    """Upload one file and return its public locator.

    Args:
        storage: Object storage driver
        slot: Slot the file belongs to (decides folder and fallback extension)
        base: Path stem, ``{slug}-{disambiguator}``
        payload: Non-empty upload

    Returns:
        Public locator of the stored object

    Raises:
        AssetUploadError: If the object store rejects the upload
    """
    path = build_asset_path(slot, base, payload.filename, payload.content_type)
    try:
        await storage.put_object(
            path,
            payload.content,
            content_type=payload.content_type or DEFAULT_CONTENT_TYPE,
            overwrite=True,
        )
    except StorageError as e:
        logger.error(f"Failed to upload {slot.name} asset to {path}: {e}", exc_info=True)
        raise AssetUploadError(f"Failed to upload {slot.name} file: {e}") from e

    logger.info(f"Uploaded {slot.name} asset to {path} ({payload.size} bytes)")
    return storage.get_public_url(path)


async def _upload_all(
    storage: BaseStorageDriver,
    base: str,
    files: Dict[AssetSlot, UploadPayload],
) -> Dict[str, str]:
    """Upload every slot concurrently; returns ``{field: locator}``.

    If any upload fails, the ones that succeeded are removed again and the
    first error is raised.
    """
    if not files:
        return {}

    slots = list(files)
    results = await asyncio.gather(
        *(upload_asset(storage, slot, base, files[slot]) for slot in slots),
        return_exceptions=True,
    )

    uploaded = {}
    errors = []
    for slot, result in zip(slots, results):
        if isinstance(result, BaseException):
            errors.append(result)
        else:
            uploaded[slot.field] = result

    if errors:
        await remove_objects(storage, uploaded.values())
        raise errors[0]

    return uploaded


async def remove_objects(storage: BaseStorageDriver, urls: Iterable[Optional[str]]) -> List[str]:
    """Best-effort removal of the objects behind ``urls``.

    Locators that do not map to a storage path are ignored. Failures are
    logged and swallowed.

    Returns:
        The storage paths a delete was requested for
    """
    paths = []
    for url in urls:
        path = storage.path_from_public_url(url)
        if path and path not in paths:
            paths.append(path)

    if not paths:
        return []

    try:
        failed = await storage.delete_objects(paths)
    except StorageError as e:
        logger.warning(f"Failed to remove objects {paths}: {e}")
        return paths

    if failed:
        logger.warning(f"Objects left behind after cleanup: {failed}")
    return paths


def list_artworks(store: RecordStore) -> List[Artwork]:
    """All artworks in display order."""
    return store.list_ordered()


def get_artwork(store: RecordStore, artwork_id: str) -> Artwork:
    """Get artwork by ID.

    Raises:
        ArtworkNotFoundError: If artwork not found
    """
    artwork = store.get_by_id(artwork_id)
    if artwork is None:
        raise ArtworkNotFoundError(f"Artwork {artwork_id} not found")
    return artwork


async def create_artwork(
    store: RecordStore,
    storage: BaseStorageDriver,
    title: Optional[str],
    subtitle: Optional[str] = None,
    order_index: int = 0,
    files: Optional[Dict[str, Optional[UploadPayload]]] = None,
    now_ms: Optional[int] = None,
) -> Artwork:
    """Create an artwork, uploading any supplied asset files first.

    Args:
        store: Record store
        storage: Object storage driver
        title: Required title
        subtitle: Optional subtitle (blank means none)
        order_index: Initial display position
        files: Mapping of slot name (``html``, ``preview``, ``thumb``) to upload
        now_ms: Clock override for the path disambiguator

    Returns:
        Created Artwork

    Raises:
        ArtworkValidationError: If the title is missing
        AssetUploadError: If an upload fails (nothing is inserted)
        RecordStoreError: If the insert fails (fresh uploads are removed)

    Examples:
        >>> artwork = await create_artwork(
        ...     store, storage, "Sunset Study", order_index=4,
        ...     files={"thumb": UploadPayload("sunset.png", "image/png", data)},
        ... )
        >>> artwork.thumb_url
        'https://.../storage/v1/object/public/artworks/thumbnails/sunset-study-123456.png'
    """
    title = _require_title(title)
    selected = _valid_files(files)
    base = path_base(title, make_disambiguator(now_ms))

    uploaded = await _upload_all(storage, base, selected)

    fields = {
        "title": title,
        "subtitle": (subtitle or "").strip() or None,
        "slug": base,
        "order_index": order_index,
        "is_active": True,
        "html_url": None,
        "preview_video_url": None,
        "thumb_url": None,
    }
    fields.update(uploaded)

    try:
        artwork = store.insert(fields)
    except RecordStoreError:
        await remove_objects(storage, uploaded.values())
        raise

    logger.info(f"Created artwork {artwork.id} ({title!r}) with {len(uploaded)} assets")
    return artwork


async def update_artwork(
    store: RecordStore,
    storage: BaseStorageDriver,
    artwork_id: str,
    title: Optional[str],
    subtitle: Optional[str] = None,
    order_index: Optional[int] = None,
    is_active: Optional[bool] = None,
    files: Optional[Dict[str, Optional[UploadPayload]]] = None,
    now_ms: Optional[int] = None,
) -> Artwork:
    """Edit an artwork's fields and replace any supplied assets.

    A blank subtitle leaves the stored one alone, and slots without a
    non-empty file keep their current locator. New files are uploaded,
    then the row is updated in one write, then the replaced objects are
    removed best-effort.

    Raises:
        ArtworkNotFoundError: If the artwork does not exist
        ArtworkValidationError: If the title is missing
        AssetUploadError: If an upload fails (row untouched)
        RecordStoreError: If the row update fails (fresh uploads are removed)
    """
    artwork = get_artwork(store, artwork_id)
    title = _require_title(title)
    selected = _valid_files(files)

    updates = {"title": title}
    subtitle = (subtitle or "").strip()
    if subtitle:
        updates["subtitle"] = subtitle
    if order_index is not None:
        updates["order_index"] = order_index
    if is_active is not None:
        updates["is_active"] = is_active

    # Paths stay derived from the title at upload time; existing objects are never renamed.
    base = path_base(title, make_disambiguator(now_ms))
    previous = {slot.field: getattr(artwork, slot.field) for slot in selected}

    uploaded = await _upload_all(storage, base, selected)
    updates.update(uploaded)
    # An upload that landed on the slot's current path overwrote the object the row still uses.
    fresh = [url for field, url in uploaded.items() if url != previous[field]]

    try:
        found = store.update(artwork_id, updates)
    except RecordStoreError:
        await remove_objects(storage, fresh)
        raise
    if not found:
        await remove_objects(storage, fresh)
        raise ArtworkNotFoundError(f"Artwork {artwork_id} not found")

    stale = [url for field, url in previous.items() if url and url != uploaded[field]]
    await remove_objects(storage, stale)

    logger.info(f"Updated artwork {artwork_id}; replaced assets: {sorted(uploaded)}")
    return get_artwork(store, artwork_id)


async def replace_asset(
    store: RecordStore,
    storage: BaseStorageDriver,
    artwork_id: str,
    slot_name: str,
    payload: Optional[UploadPayload],
    now_ms: Optional[int] = None,
) -> Optional[str]:
    """Replace a single asset of an artwork.

    Sequence: upload the new object, point the row at it, then remove the
    old object best-effort.

    Args:
        store: Record store
        storage: Object storage driver
        artwork_id: Artwork ID
        slot_name: ``html``, ``preview`` or ``thumb``
        payload: New file; None or empty leaves the slot unchanged
        now_ms: Clock override for the path disambiguator

    Returns:
        The slot's locator after the call (new, or unchanged)

    Raises:
        ArtworkNotFoundError: If the artwork does not exist
        ArtworkValidationError: If the slot name is unknown
        AssetUploadError: If the upload fails
        RecordStoreError: If the row update fails
    """
    slot = SLOTS.get(slot_name)
    if slot is None:
        raise ArtworkValidationError(f"unknown_asset_slot:{slot_name}")

    artwork = get_artwork(store, artwork_id)
    current = getattr(artwork, slot.field)
    if payload is None or not payload.is_valid:
        return current

    base = path_base(artwork.title, make_disambiguator(now_ms))
    new_url = await upload_asset(storage, slot, base, payload)
    fresh = [new_url] if new_url != current else []

    try:
        found = store.update(artwork_id, {slot.field: new_url})
    except RecordStoreError:
        await remove_objects(storage, fresh)
        raise
    if not found:
        await remove_objects(storage, fresh)
        raise ArtworkNotFoundError(f"Artwork {artwork_id} not found")

    if current and current != new_url:
        await remove_objects(storage, [current])

    return new_url


async def delete_artwork(
    store: RecordStore,
    storage: BaseStorageDriver,
    artwork_id: str,
) -> List[str]:
    """Delete an artwork and, best-effort, its stored files.

    Files go first; if the row delete then fails, the row is left with dead
    links and can simply be deleted again.

    Returns:
        Storage paths a delete was requested for

    Raises:
        ArtworkNotFoundError: If the artwork does not exist
        RecordStoreError: If the row delete fails
    """
    artwork = get_artwork(store, artwork_id)
    urls = [getattr(artwork, slot.field) for slot in SLOTS.values()]

    removed = await remove_objects(storage, urls)

    if not store.delete(artwork_id):
        raise ArtworkNotFoundError(f"Artwork {artwork_id} not found")

    logger.info(f"Deleted artwork {artwork_id}; removed objects: {removed}")
    return removed


def toggle_active(store: RecordStore, artwork_id: str) -> bool:
    """Flip ``is_active``. Returns the new value."""
    artwork = get_artwork(store, artwork_id)
    new_value = not (artwork.is_active is True)
    if not store.update(artwork_id, {"is_active": new_value}):
        raise ArtworkNotFoundError(f"Artwork {artwork_id} not found")
    return new_value


def set_order_index(store: RecordStore, artwork_id: str, order_index: int) -> None:
    """Set one artwork's order index directly."""
    if not store.update(artwork_id, {"order_index": order_index}):
        raise ArtworkNotFoundError(f"Artwork {artwork_id} not found")
