"""
Public search over stolen/found bikes.

Each bike is joined to its most recent theft report (if any). Bikes whose
most recent report is ``private`` never appear. The page and the total are
computed from the same predicate in one read transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import aliased

from rideback.db.models import Bike, TheftReport
from rideback.errors import ValidationError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

DEFAULT_STATUSES = ("stolen", "found")

DATE_RANGES: dict[str, timedelta] = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "3months": timedelta(days=90),
    "year": timedelta(days=365),
}


@dataclass(frozen=True)
class SearchFilters:
    """Recognized search options. Empty strings are treated as absent."""

    query: str | None = None
    type: str | None = None
    brand: str | None = None
    color: str | None = None
    city: str | None = None
    date_range: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class BikeSearchRow:
    """Bike joined with its most recent report. Serial number is unmasked."""

    id: int
    brand: str
    model: str
    type: str
    color: str
    year: int
    serial_number: str
    status: str
    image_url: str | None
    report_date: date | None
    location: str | None
    report_id: int | None


@dataclass
class SearchPage:
    results: list[BikeSearchRow] = field(default_factory=list)
    total: int = 0


def _like(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_predicate(
    filters: SearchFilters,
    latest: type[TheftReport],
    today: date | None = None,
) -> list[ColumnElement[bool]]:
    """Translate filters into WHERE clauses over ``Bike`` and the latest-report alias."""
    clauses: list[ColumnElement[bool]] = [
        or_(latest.id.is_(None), latest.visibility != "private"),
    ]

    if filters.query:
        pattern = _like(filters.query)
        clauses.append(
            or_(
                Bike.brand.ilike(pattern, escape="\\"),
                Bike.model.ilike(pattern, escape="\\"),
                Bike.serial_number.ilike(pattern, escape="\\"),
                Bike.color.ilike(pattern, escape="\\"),
            )
        )
    if filters.type:
        clauses.append(Bike.type == filters.type)
    if filters.brand:
        clauses.append(Bike.brand == filters.brand)
    if filters.color:
        clauses.append(Bike.color.ilike(_like(filters.color), escape="\\"))
    if filters.city:
        clauses.append(latest.theft_location.ilike(_like(filters.city), escape="\\"))

    if filters.date_range and filters.date_range != "all":
        window = DATE_RANGES.get(filters.date_range)
        if window is None:
            raise ValidationError.for_field(
                "searchDateRange", f"dateRange must be one of {', '.join(DATE_RANGES)}"
            )
        since = (today or date.today()) - window
        clauses.append(and_(latest.theft_date.is_not(None), latest.theft_date >= since))

    if filters.status and filters.status != "all":
        clauses.append(Bike.status == filters.status)
    else:
        clauses.append(Bike.status.in_(DEFAULT_STATUSES))

    return clauses


def _latest_report_join() -> tuple[type[TheftReport], ColumnElement[bool]]:
    latest = aliased(TheftReport, name="latest_report")
    newest_id = (
        select(TheftReport.id)
        .where(TheftReport.bike_id == Bike.id)
        .order_by(TheftReport.created_at.desc(), TheftReport.id.desc())
        .limit(1)
        .correlate(Bike)
        .scalar_subquery()
    )
    return latest, latest.id == newest_id


async def _begin_snapshot(db: AsyncSession) -> None:
    """Open a REPEATABLE READ transaction on PostgreSQL so page and count agree."""
    if db.in_transaction():
        return
    if db.get_bind().dialect.name == "postgresql":
        await db.connection(execution_options={"isolation_level": "REPEATABLE READ"})


async def search_bikes(
    db: AsyncSession,
    filters: SearchFilters,
    page: int,
    page_size: int,
) -> SearchPage:
    """
    Run one page of a public search plus its total count.

    Args:
        page: 1-indexed. Pages past the end return no results.
        page_size: Rows per page.

    Raises:
        ValidationError: Unknown date range, or page/page_size below 1.
    """
    if page < 1:
        raise ValidationError.for_field("page", "page must be at least 1")
    if page_size < 1:
        raise ValidationError.for_field("limit", "limit must be at least 1")

    latest, onclause = _latest_report_join()
    clauses = build_predicate(filters, latest)

    page_stmt = (
        select(
            Bike.id,
            Bike.brand,
            Bike.model,
            Bike.type,
            Bike.color,
            Bike.year,
            Bike.serial_number,
            Bike.status,
            Bike.image_url,
            latest.theft_date,
            latest.theft_location,
            latest.id,
        )
        .select_from(Bike)
        .outerjoin(latest, onclause)
        .where(*clauses)
        .order_by(latest.created_at.desc().nulls_last(), Bike.id.desc())
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    count_stmt = (
        select(func.count(Bike.id))
        .select_from(Bike)
        .outerjoin(latest, onclause)
        .where(*clauses)
    )

    await _begin_snapshot(db)
    rows = (await db.execute(page_stmt)).all()
    total = (await db.execute(count_stmt)).scalar_one()

    logger.debug("bike_search", total=total, page=page, page_size=page_size)
    return SearchPage(
        results=[
            BikeSearchRow(
                id=r[0],
                brand=r[1],
                model=r[2],
                type=r[3],
                color=r[4],
                year=r[5],
                serial_number=r[6],
                status=r[7],
                image_url=r[8],
                report_date=r[9],
                location=r[10],
                report_id=r[11],
            )
            for r in rows
        ],
        total=total,
    )
