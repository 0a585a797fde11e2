"""Pydantic schemas for alert endpoints."""

from __future__ import annotations

from datetime import datetime

from rideback.schemas import CamelModel


class AlertResponse(CamelModel):
    id: int
    title: str
    message: str
    type: str
    related_entity_type: str | None = None
    related_entity_id: int | None = None
    read: bool
    created_at: datetime


class MarkReadResponse(CamelModel):
    success: bool = True
    alert: AlertResponse


class UnreadCountResponse(CamelModel):
    unread_count: int
