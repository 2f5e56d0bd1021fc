"""Agent-as-admin schemas: sponsor application review and the audit trail."""
from datetime import datetime
from typing import Any
from pydantic import BaseModel
from app.models.sponsor_application import ApplicationStatus


class SponsorApplicationResponse(BaseModel):
    id: int
    email: str
    name: str
    phone: str
    role: str = "sponsor"
    company_name: str
    industry: str
    website: str | None = None
    address: str
    gst_number: str | None = None
    status: ApplicationStatus
    submitted_at: datetime
    reviewed_at: datetime | None = None

    class Config:
        from_attributes = True


class SponsorApplicationsResponse(BaseModel):
    success: bool = True
    applications: list[SponsorApplicationResponse]


class AuditLogEntry(BaseModel):
    id: int
    category: str
    title: str
    message: str
    event_id: int | None = None
    deal_id: int | None = None
    actor_user_id: int | None = None
    actor_email: str | None = None
    meta: dict[str, Any] | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuditLogResponse(BaseModel):
    success: bool = True
    logs: list[AuditLogEntry]
