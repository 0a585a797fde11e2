"""Search router: public GET /api/search."""

from __future__ import annotations

import math
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.config import get_settings
from rideback.database import get_session
from rideback.search.masking import mask_serial_number
from rideback.search.schemas import BikeSearchResult, SearchResponse
from rideback.search.service import SearchFilters, search_bikes

router = APIRouter(prefix="/api/search", tags=["Search"])


@router.get("", response_model=SearchResponse)
async def search(  # noqa: PLR0913
    query: str | None = Query(None, alias="searchQuery"),
    type_: str | None = Query(None, alias="searchType"),
    brand: str | None = Query(None, alias="searchBrand"),
    color: str | None = Query(None, alias="searchColor"),
    city: str | None = Query(None, alias="searchLocationCity"),
    date_range: str | None = Query(None, alias="searchDateRange"),
    status: str | None = Query(None, alias="searchStatus"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    db: AsyncSession = Depends(get_session),
) -> SearchResponse:
    """Search reported bikes. No authentication; serial numbers are masked."""
    settings = get_settings()
    page_size = min(limit or settings.search_default_page_size, settings.search_max_page_size)

    filters = SearchFilters(
        query=query or None,
        type=type_ or None,
        brand=brand or None,
        color=color or None,
        city=city or None,
        date_range=date_range or None,
        status=status or None,
    )
    found = await search_bikes(db, filters, page, page_size)

    results = []
    for row in found.results:
        data = asdict(row)
        data["serial_number"] = mask_serial_number(row.serial_number)
        results.append(BikeSearchResult(**data))

    return SearchResponse(
        results=results,
        total=found.total,
        page=page,
        limit=page_size,
        total_pages=math.ceil(found.total / page_size),
    )
