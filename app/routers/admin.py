"""Agent-only administration: sponsor application queue, account deactivation, audit trail."""
from fastapi import APIRouter, Depends, Query, Request

from app.dependencies import get_store, require_agent
from app.models.sponsor_application import ApplicationStatus
from app.models.user import User
from app.schemas.admin import (
    AuditLogEntry,
    AuditLogResponse,
    SponsorApplicationResponse,
    SponsorApplicationsResponse,
)
from app.schemas.auth import MessageResponse, UserEnvelope, UserResponse
from app.services import accounts
from app.store.base import Store

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/sponsors/pending", response_model=SponsorApplicationsResponse)
def pending_sponsors(store: Store = Depends(get_store), agent: User = Depends(require_agent)):
    applications = store.list_sponsor_applications(status=ApplicationStatus.pending)
    return SponsorApplicationsResponse(
        applications=[SponsorApplicationResponse.model_validate(a) for a in applications]
    )


@router.post("/sponsors/{application_id}/approve", response_model=UserEnvelope)
def approve_sponsor(
    application_id: int,
    request: Request,
    store: Store = Depends(get_store),
    agent: User = Depends(require_agent),
):
    user = accounts.approve_application(store, application_id, agent, request)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/sponsors/{application_id}/reject", response_model=MessageResponse)
def reject_sponsor(
    application_id: int,
    request: Request,
    store: Store = Depends(get_store),
    agent: User = Depends(require_agent),
):
    accounts.reject_application(store, application_id, agent, request)
    return MessageResponse(message="Sponsor application rejected")


@router.post("/users/{user_id}/deactivate", response_model=UserEnvelope)
def deactivate_user(
    user_id: int,
    request: Request,
    store: Store = Depends(get_store),
    agent: User = Depends(require_agent),
):
    user = accounts.deactivate_user(store, user_id, agent, request)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.get("/audit-logs", response_model=AuditLogResponse)
def audit_logs(
    deal_id: int | None = None,
    limit: int = Query(100, ge=1, le=1000),
    store: Store = Depends(get_store),
    agent: User = Depends(require_agent),
):
    logs = store.list_audit_logs(deal_id=deal_id, limit=limit)
    return AuditLogResponse(logs=[AuditLogEntry.model_validate(e) for e in logs])
