"""Request/response schemas for bike endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from rideback.schemas import CamelModel

MIN_SERIAL_LENGTH = 4


class BikeCreateRequest(CamelModel):
    """Register a bike. Status is always ``registered`` on creation."""

    brand: str = Field(..., min_length=1, max_length=64)
    model: str = Field(..., min_length=1, max_length=64)
    type: str = Field(..., min_length=1, max_length=32)
    year: int
    color: str = Field(..., min_length=1, max_length=32)
    frame_size: str | None = Field(None, max_length=16)
    serial_number: str = Field(..., min_length=MIN_SERIAL_LENGTH, max_length=64)
    additional_info: str | None = None
    image_url: str | None = None


class BikeUpdateRequest(CamelModel):
    """Partial bike edit. ``status`` is not accepted here."""

    brand: str | None = Field(None, min_length=1, max_length=64)
    model: str | None = Field(None, min_length=1, max_length=64)
    type: str | None = Field(None, min_length=1, max_length=32)
    year: int | None = None
    color: str | None = Field(None, min_length=1, max_length=32)
    frame_size: str | None = Field(None, max_length=16)
    serial_number: str | None = Field(None, min_length=MIN_SERIAL_LENGTH, max_length=64)
    additional_info: str | None = None
    image_url: str | None = None


class AttachImagesRequest(CamelModel):
    """Uploaded-image references to associate with a bike."""

    image_urls: list[str] = Field(..., min_length=1)


class BikeResponse(CamelModel):
    id: int
    user_id: int
    brand: str
    model: str
    type: str
    year: int
    color: str
    frame_size: str | None = None
    serial_number: str
    additional_info: str | None = None
    image_url: str | None = None
    image_urls: list[str] = []
    status: str
    created_at: datetime
    updated_at: datetime


class AttachImagesResponse(CamelModel):
    success: bool = True
    bike: BikeResponse
