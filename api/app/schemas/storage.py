"""Storage schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class StorageTestResponse(BaseModel):
    """Response for storage connection test."""

    status: str = Field(..., description="Status: ok or error")
    provider: str = Field(..., description="Storage provider")
    bucket: str = Field(..., description="Bucket name")
    message: Optional[str] = Field(None, description="Human-readable result")
