"""Bike router: /api/bikes/* endpoints. All routes require authentication."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.auth.dependencies import CurrentUser, get_current_user
from rideback.bikes.schemas import (
    AttachImagesRequest,
    AttachImagesResponse,
    BikeCreateRequest,
    BikeResponse,
    BikeUpdateRequest,
)
from rideback.bikes.service import (
    attach_images,
    get_owned_bike,
    list_available_bikes,
    list_owned_bikes,
    register_bike,
    update_bike,
)
from rideback.database import get_session

router = APIRouter(prefix="/api/bikes", tags=["Bikes"])


@router.get("", response_model=list[BikeResponse])
async def list_bikes(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[BikeResponse]:
    """List the caller's bikes, newest first."""
    bikes = await list_owned_bikes(db, user)
    return [BikeResponse.model_validate(b) for b in bikes]


@router.get("/available", response_model=list[BikeResponse])
async def list_available(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[BikeResponse]:
    """List the caller's bikes that can be reported stolen."""
    bikes = await list_available_bikes(db, user)
    return [BikeResponse.model_validate(b) for b in bikes]


@router.get("/{bike_id}", response_model=BikeResponse)
async def get_bike(
    bike_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> BikeResponse:
    """Fetch one of the caller's bikes."""
    bike = await get_owned_bike(db, user.id, bike_id)
    return BikeResponse.model_validate(bike)


@router.post("", response_model=BikeResponse, status_code=201)
async def create_bike(
    body: BikeCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> BikeResponse:
    """Register a new bike."""
    bike = await register_bike(db, user, body.model_dump())
    await db.commit()
    return BikeResponse.model_validate(bike)


@router.patch("/{bike_id}", response_model=BikeResponse)
async def edit_bike(
    bike_id: int,
    body: BikeUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> BikeResponse:
    """Edit any subset of a bike's mutable attributes."""
    bike = await update_bike(db, user, bike_id, body.model_dump(exclude_unset=True))
    await db.commit()
    return BikeResponse.model_validate(bike)


@router.post("/{bike_id}/images", response_model=AttachImagesResponse)
async def add_images(
    bike_id: int,
    body: AttachImagesRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> AttachImagesResponse:
    """Attach uploaded-image references to a bike."""
    bike = await attach_images(db, user, bike_id, body.image_urls)
    await db.commit()
    return AttachImagesResponse(bike=BikeResponse.model_validate(bike))
