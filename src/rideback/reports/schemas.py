"""Request/response schemas for theft-report endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import EmailStr, Field

from rideback.bikes.schemas import BikeResponse
from rideback.schemas import CamelModel


class TheftReportCreateRequest(CamelModel):
    """File a theft report against one of the caller's bikes."""

    bike_id: int = Field(..., ge=1)
    theft_date: date
    theft_location: str = Field(..., min_length=1, max_length=512)
    latitude: str | float | None = None
    longitude: str | float | None = None
    theft_details: str | None = None
    police_reported: bool = False
    police_station: str | None = Field(None, max_length=128)
    police_file_number: str | None = Field(None, max_length=64)
    use_profile_contact: bool = True
    contact_name: str | None = Field(None, max_length=128)
    contact_phone: str | None = Field(None, max_length=32)
    contact_email: EmailStr | None = None
    visibility: Literal["public", "private"] = "public"


class ContactResponse(CamelModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None


class TheftReportResponse(CamelModel):
    id: int
    user_id: int
    bike_id: int
    theft_date: date
    theft_location: str
    latitude: str | None = None
    longitude: str | None = None
    theft_details: str | None = None
    police_reported: bool
    police_station: str | None = None
    police_file_number: str | None = None
    use_profile_contact: bool
    contact_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    contact: ContactResponse
    visibility: str
    status: str
    created_at: datetime
    updated_at: datetime
    bike: BikeResponse
