"""Theft-report lifecycle.

Per bike::

    registered --[file report]--> stolen --[resolve]--> found

Filing and resolving each touch a report, its bike and an alert; both run
as one transaction and commit (or roll back) here rather than in the router.
A unique partial index keeps at most one ``active`` report per bike.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from rideback.alerts.service import create_alert
from rideback.auth.service import get_user_by_id
from rideback.bikes.service import get_owned_bike
from rideback.db.models import TheftReport
from rideback.errors import ConflictError, FieldIssue, NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from rideback.auth.dependencies import CurrentUser

logger = structlog.get_logger()

REPORT_STATUSES = ("active", "resolved")
VISIBILITIES = ("public", "private")

_CONTACT_FIELDS = ("contact_name", "contact_phone", "contact_email")


@dataclass(frozen=True)
class Contact:
    """Contact details a reader should use for a report."""

    name: str | None
    phone: str | None
    email: str | None


def _parse_coordinate(field: str, raw: str | float | None, limit: float) -> tuple[str | None, FieldIssue | None]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, None
    text = str(raw).strip()
    try:
        value = float(text)
    except ValueError:
        return None, FieldIssue(field, f"{field} must be a number")
    if value != value or not -limit <= value <= limit:  # NaN check
        return None, FieldIssue(field, f"{field} must be between -{limit:g} and {limit:g}")
    return text, None


def validate_coordinates(
    latitude: str | float | None,
    longitude: str | float | None,
) -> tuple[str | None, str | None]:
    """
    Normalize a latitude/longitude pair.

    Both must be given or both omitted; each must parse as a float within
    [-90, 90] / [-180, 180].

    Raises:
        ValidationError: With one issue per offending field.
    """
    lat, lat_issue = _parse_coordinate("latitude", latitude, 90)
    lon, lon_issue = _parse_coordinate("longitude", longitude, 180)
    issues = [i for i in (lat_issue, lon_issue) if i is not None]
    if not issues and (lat is None) != (lon is None):
        missing = "longitude" if lon is None else "latitude"
        issues.append(FieldIssue(missing, "latitude and longitude must be given together"))
    if issues:
        raise ValidationError("Invalid coordinates", issues)
    return lat, lon


def resolve_contact(report: TheftReport) -> Contact:
    """Contact for a report: the reporter's live profile, or the stored explicit fields."""
    if report.use_profile_contact:
        user = report.reporter
        full_name = " ".join(p for p in (user.first_name, user.last_name) if p)
        return Contact(name=full_name or user.username, phone=user.phone, email=user.email)
    return Contact(name=report.contact_name, phone=report.contact_phone, email=report.contact_email)


async def get_active_report(db: AsyncSession, bike_id: int) -> TheftReport | None:
    """The bike's active report, if any."""
    result = await db.execute(
        select(TheftReport).where(TheftReport.bike_id == bike_id, TheftReport.status == "active")
    )
    return result.scalar_one_or_none()


async def get_owned_report(db: AsyncSession, user_id: int, report_id: int) -> TheftReport:
    """Fetch a report filed by user_id, or raise NotFoundError."""
    result = await db.execute(
        select(TheftReport).where(TheftReport.id == report_id, TheftReport.user_id == user_id)
    )
    report = result.scalar_one_or_none()
    if report is None:
        msg = "Report not found"
        raise NotFoundError(msg)
    return report


async def list_own_reports(db: AsyncSession, user: CurrentUser) -> list[TheftReport]:
    """Reports filed by the caller, newest first, each joined with its bike."""
    result = await db.execute(
        select(TheftReport)
        .where(TheftReport.user_id == user.id)
        .order_by(TheftReport.created_at.desc(), TheftReport.id.desc())
    )
    return list(result.scalars().all())


async def file_report(db: AsyncSession, reporter: CurrentUser, details: dict[str, Any]) -> TheftReport:
    """
    File a theft report and mark the bike stolen, atomically.

    Raises:
        ValidationError: Malformed coordinates or unknown visibility (nothing is written).
        NotFoundError: The bike does not belong to the reporter (nothing is written).
        ConflictError: The bike already has an active report.
    """
    latitude, longitude = validate_coordinates(details.get("latitude"), details.get("longitude"))
    visibility = details.get("visibility") or "public"
    if visibility not in VISIBILITIES:
        raise ValidationError.for_field("visibility", f"visibility must be one of {', '.join(VISIBILITIES)}")

    try:
        bike = await get_owned_bike(db, reporter.id, details["bike_id"])
        if await get_active_report(db, bike.id) is not None:
            msg = "This bike already has an active theft report"
            raise ConflictError(msg)
        reporter_row = await get_user_by_id(db, reporter.id)

        use_profile_contact = bool(details.get("use_profile_contact", True))
        contact = {} if use_profile_contact else {f: details.get(f) for f in _CONTACT_FIELDS}

        report = TheftReport(
            bike=bike,
            reporter=reporter_row,
            theft_date=details["theft_date"],
            theft_location=details["theft_location"],
            latitude=latitude,
            longitude=longitude,
            theft_details=details.get("theft_details"),
            police_reported=bool(details.get("police_reported", False)),
            police_station=details.get("police_station"),
            police_file_number=details.get("police_file_number"),
            use_profile_contact=use_profile_contact,
            visibility=visibility,
            status="active",
            **contact,
        )
        db.add(report)
        bike.status = "stolen"

        try:
            await db.flush()
        except IntegrityError as e:
            msg = "This bike already has an active theft report"
            raise ConflictError(msg) from e

        await create_alert(
            db,
            reporter.id,
            title=f"Theft report filed: {bike.brand} {bike.model}",
            message=f"Your report for {bike.brand} {bike.model} is active and marked {visibility}.",
            type_="update",
            related_entity=("report", report.id),
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("theft_report_filed", report_id=report.id, bike_id=bike.id, user_id=reporter.id)
    return report


async def resolve_report(db: AsyncSession, reporter: CurrentUser, report_id: int) -> TheftReport:
    """
    Close an active report and mark its bike found, atomically.

    Raises:
        NotFoundError: The report was not filed by the caller.
        ConflictError: The report is already resolved.
    """
    try:
        report = await get_owned_report(db, reporter.id, report_id)
        if report.status != "active":
            msg = "This report is already resolved"
            raise ConflictError(msg)

        report.status = "resolved"
        report.bike.status = "found"
        await db.flush()

        await create_alert(
            db,
            reporter.id,
            title=f"Bike found: {report.bike.brand} {report.bike.model}",
            message="Your theft report has been closed and the bike is marked as found.",
            type_="update",
            related_entity=("report", report.id),
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("theft_report_resolved", report_id=report.id, bike_id=report.bike_id, user_id=reporter.id)
    return report
