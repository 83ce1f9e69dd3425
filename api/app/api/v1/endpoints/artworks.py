"""Artwork endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from app.api.deps import get_record_store, get_storage, require_admin
from app.schemas.artwork import (
    ArtworkListResponse,
    ArtworkResponse,
    AssetReplaceResponse,
    DeleteArtworkResponse,
    OrderIndexUpdate,
    ReorderResponse,
    ToggleActiveResponse,
)
from app.services import artwork_service
from app.services.artwork_service import (
    ArtworkNotFoundError,
    ArtworkServiceError,
    ArtworkValidationError,
    AssetUploadError,
    UploadPayload,
)
from app.services.asset_paths import SLOTS
from app.services.ordering_service import reorder_artworks
from app.services.record_store import RecordStore, RecordStoreError
from app.storage.base import BaseStorageDriver

router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


async def _read_upload(upload: Optional[UploadFile]) -> Optional[UploadPayload]:
    """Turn a multipart file field into an UploadPayload (None if not sent)."""
    if upload is None:
        return None
    content = await upload.read()
    return UploadPayload(
        filename=upload.filename,
        content_type=upload.content_type,
        content=content,
    )


def _form_int(value: Optional[str], default: Optional[int]) -> Optional[int]:
    """Parse an integer form field; a missing or blank value gives ``default``."""
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid_order_index")


def _raise_http(e: Exception) -> None:
    """Map service errors onto HTTP responses."""
    if isinstance(e, ArtworkNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    if isinstance(e, ArtworkValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, AssetUploadError):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    logger.error(f"Artwork operation failed: {e}", exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/", response_model=ArtworkListResponse)
def list_artworks(store: RecordStore = Depends(get_record_store)):
    """List artworks in display order."""
    items = artwork_service.list_artworks(store)
    return ArtworkListResponse(
        items=[ArtworkResponse.model_validate(a) for a in items],
        total=len(items),
    )


@router.post("/reorder", response_model=ReorderResponse)
async def reorder(request: Request, store: RecordStore = Depends(get_record_store)):
    """Persist a new display order.

    Body is a JSON array of artwork IDs, first to last. A malformed body is
    ignored and reported with ``accepted: false``; unknown IDs are skipped.
    """
    raw = await request.body()
    result = reorder_artworks(store, raw)
    return ReorderResponse(
        accepted=result.accepted,
        updated=result.updated,
        skipped=result.skipped,
        failed=result.failed,
    )


@router.get("/{artwork_id}", response_model=ArtworkResponse)
def get_artwork(artwork_id: str, store: RecordStore = Depends(get_record_store)):
    """Get artwork by ID."""
    try:
        return ArtworkResponse.model_validate(artwork_service.get_artwork(store, artwork_id))
    except ArtworkServiceError as e:
        _raise_http(e)


@router.post("/", response_model=ArtworkResponse, status_code=status.HTTP_201_CREATED)
async def create_artwork(
    title: str = Form("", description="Artwork title"),
    subtitle: Optional[str] = Form(None, description="Optional subtitle"),
    order_index: Optional[str] = Form(None, description="Initial display position; blank means 0"),
    html_file: Optional[UploadFile] = File(None, description="HTML document"),
    mp4_file: Optional[UploadFile] = File(None, description="Preview video"),
    thumb_file: Optional[UploadFile] = File(None, description="Thumbnail image"),
    store: RecordStore = Depends(get_record_store),
    storage: BaseStorageDriver = Depends(get_storage),
):
    """Create an artwork.

    - Uploads each non-empty file to storage
    - Inserts the row pointing at the uploaded files
    - New artworks start active
    """
    files = {
        "html": await _read_upload(html_file),
        "preview": await _read_upload(mp4_file),
        "thumb": await _read_upload(thumb_file),
    }
    try:
        artwork = await artwork_service.create_artwork(
            store,
            storage,
            title=title,
            subtitle=subtitle,
            order_index=_form_int(order_index, 0),
            files=files,
        )
    except (ArtworkServiceError, RecordStoreError) as e:
        _raise_http(e)

    return ArtworkResponse.model_validate(artwork)


@router.put("/{artwork_id}", response_model=ArtworkResponse)
async def update_artwork(
    artwork_id: str,
    title: str = Form("", description="Artwork title"),
    subtitle: Optional[str] = Form(None, description="Blank keeps the current subtitle"),
    order_index: Optional[str] = Form(None, description="Display position; blank keeps the current one"),
    is_active: Optional[bool] = Form(None, description="Active flag"),
    html_file: Optional[UploadFile] = File(None, description="Replacement HTML document"),
    mp4_file: Optional[UploadFile] = File(None, description="Replacement preview video"),
    thumb_file: Optional[UploadFile] = File(None, description="Replacement thumbnail"),
    store: RecordStore = Depends(get_record_store),
    storage: BaseStorageDriver = Depends(get_storage),
):
    """Edit an artwork.

    Only the files that are sent are replaced; the other assets keep their
    current locators. Replaced files are removed from storage afterwards.
    """
    files = {
        "html": await _read_upload(html_file),
        "preview": await _read_upload(mp4_file),
        "thumb": await _read_upload(thumb_file),
    }
    try:
        artwork = await artwork_service.update_artwork(
            store,
            storage,
            artwork_id,
            title=title,
            subtitle=subtitle,
            order_index=_form_int(order_index, None),
            is_active=is_active,
            files=files,
        )
    except (ArtworkServiceError, RecordStoreError) as e:
        _raise_http(e)

    return ArtworkResponse.model_validate(artwork)


@router.put("/{artwork_id}/assets/{slot}", response_model=AssetReplaceResponse)
async def replace_asset(
    artwork_id: str,
    slot: str,
    file: UploadFile = File(..., description="Replacement file"),
    store: RecordStore = Depends(get_record_store),
    storage: BaseStorageDriver = Depends(get_storage),
):
    """Replace one asset (``html``, ``preview`` or ``thumb``)."""
    payload = await _read_upload(file)
    try:
        before = artwork_service.get_artwork(store, artwork_id)
        previous = getattr(before, SLOTS[slot].field) if slot in SLOTS else None
        url = await artwork_service.replace_asset(store, storage, artwork_id, slot, payload)
    except (ArtworkServiceError, RecordStoreError) as e:
        _raise_http(e)

    return AssetReplaceResponse(id=artwork_id, slot=slot, url=url, replaced=url != previous)


@router.delete("/{artwork_id}", response_model=DeleteArtworkResponse)
async def delete_artwork(
    artwork_id: str,
    store: RecordStore = Depends(get_record_store),
    storage: BaseStorageDriver = Depends(get_storage),
):
    """Delete an artwork and its stored files."""
    try:
        removed = await artwork_service.delete_artwork(store, storage, artwork_id)
    except (ArtworkServiceError, RecordStoreError) as e:
        _raise_http(e)

    return DeleteArtworkResponse(id=artwork_id, removed_paths=removed)


@router.post("/{artwork_id}/toggle-active", response_model=ToggleActiveResponse)
def toggle_active(artwork_id: str, store: RecordStore = Depends(get_record_store)):
    """Activate or deactivate an artwork."""
    try:
        is_active = artwork_service.toggle_active(store, artwork_id)
    except (ArtworkServiceError, RecordStoreError) as e:
        _raise_http(e)

    return ToggleActiveResponse(id=artwork_id, is_active=is_active)


@router.put("/{artwork_id}/order-index", response_model=ArtworkResponse)
def set_order_index(
    artwork_id: str,
    body: OrderIndexUpdate,
    store: RecordStore = Depends(get_record_store),
):
    """Set one artwork's order index."""
    try:
        artwork_service.set_order_index(store, artwork_id, body.order_index)
        artwork = artwork_service.get_artwork(store, artwork_id)
    except (ArtworkServiceError, RecordStoreError) as e:
        _raise_http(e)

    return ArtworkResponse.model_validate(artwork)
