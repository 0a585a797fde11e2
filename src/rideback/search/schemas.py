"""Response schemas for public search."""

from __future__ import annotations

from datetime import date

from rideback.schemas import CamelModel


class BikeSearchResult(CamelModel):
    """Public projection of a bike and its latest report. Serial is masked."""

    id: int
    brand: str
    model: str
    type: str
    color: str
    year: int
    serial_number: str
    status: str
    image_url: str | None = None
    report_date: date | None = None
    location: str | None = None
    report_id: int | None = None


class SearchResponse(CamelModel):
    results: list[BikeSearchResult]
    total: int
    page: int
    limit: int
    total_pages: int
