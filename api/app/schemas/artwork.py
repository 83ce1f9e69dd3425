"""Artwork schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.services.asset_paths import filename_from_url


class ArtworkBase(BaseModel):
    """Base artwork schema."""

    title: str = Field(..., description="Artwork title")
    subtitle: Optional[str] = Field(None, description="Optional subtitle")


class ArtworkResponse(ArtworkBase):
    """Schema for artwork response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: Optional[str] = None
    order_index: Optional[int] = None
    is_active: bool = True
    html_url: Optional[str] = None
    preview_video_url: Optional[str] = None
    thumb_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def html_filename(self) -> Optional[str]:
        return filename_from_url(self.html_url)

    @computed_field
    @property
    def preview_video_filename(self) -> Optional[str]:
        return filename_from_url(self.preview_video_url)

    @computed_field
    @property
    def thumb_filename(self) -> Optional[str]:
        return filename_from_url(self.thumb_url)


class ArtworkListResponse(BaseModel):
    """Artworks in display order."""

    items: List[ArtworkResponse] = Field(..., description="Artworks sorted by order_index")
    total: int = Field(..., description="Number of artworks")


class OrderIndexUpdate(BaseModel):
    """Set one artwork's position directly."""

    order_index: int = Field(..., description="New order index")


class ToggleActiveResponse(BaseModel):
    """Result of flipping the active flag."""

    id: str
    is_active: bool


class ReorderResponse(BaseModel):
    """Outcome of a reorder submission."""

    accepted: bool = Field(..., description="False when the payload was malformed and ignored")
    updated: int = Field(0, description="Rows given a new order_index")
    skipped: List[str] = Field(default_factory=list, description="IDs that no longer exist")
    failed: List[str] = Field(default_factory=list, description="IDs whose update failed")


class AssetReplaceResponse(BaseModel):
    """Locator held by a slot after a replace."""

    id: str
    slot: str
    url: Optional[str] = None
    replaced: bool


class DeleteArtworkResponse(BaseModel):
    """Result of deleting an artwork."""

    id: str
    removed_paths: List[str] = Field(default_factory=list)
