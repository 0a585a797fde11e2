"""Theft-report router: /api/reports/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.auth.dependencies import CurrentUser, get_current_user
from rideback.bikes.schemas import BikeResponse
from rideback.database import get_session
from rideback.db.models import TheftReport
from rideback.reports.schemas import ContactResponse, TheftReportCreateRequest, TheftReportResponse
from rideback.reports.service import file_report, list_own_reports, resolve_contact, resolve_report

router = APIRouter(prefix="/api/reports", tags=["Reports"])


def _report_response(report: TheftReport) -> TheftReportResponse:
    contact = resolve_contact(report)
    return TheftReportResponse(
        id=report.id,
        user_id=report.user_id,
        bike_id=report.bike_id,
        theft_date=report.theft_date,
        theft_location=report.theft_location,
        latitude=report.latitude,
        longitude=report.longitude,
        theft_details=report.theft_details,
        police_reported=report.police_reported,
        police_station=report.police_station,
        police_file_number=report.police_file_number,
        use_profile_contact=report.use_profile_contact,
        contact_name=report.contact_name,
        contact_phone=report.contact_phone,
        contact_email=report.contact_email,
        contact=ContactResponse(name=contact.name, phone=contact.phone, email=contact.email),
        visibility=report.visibility,
        status=report.status,
        created_at=report.created_at,
        updated_at=report.updated_at,
        bike=BikeResponse.model_validate(report.bike),
    )


@router.get("", response_model=list[TheftReportResponse])
async def list_reports(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[TheftReportResponse]:
    """List the caller's theft reports, newest first."""
    reports = await list_own_reports(db, user)
    return [_report_response(r) for r in reports]


@router.post("", response_model=TheftReportResponse, status_code=201)
async def create_report(
    body: TheftReportCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> TheftReportResponse:
    """File a theft report; the bike becomes ``stolen``."""
    report = await file_report(db, user, body.model_dump())
    return _report_response(report)


@router.post("/{report_id}/resolve", response_model=TheftReportResponse)
async def resolve(
    report_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> TheftReportResponse:
    """Close an active report; the bike becomes ``found``."""
    report = await resolve_report(db, user, report_id)
    return _report_response(report)
