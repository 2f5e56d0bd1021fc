"""Account store operations: signup, login, sponsor application review."""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Request

from app.models.sponsor_application import ApplicationStatus, SponsorApplication
from app.models.user import User, UserRole
from app.schemas.auth import SignupRequest
from app.services.audit_log import (
    create_log,
    request_context,
    CATEGORY_ACCOUNT,
    CATEGORY_FAILED_ATTEMPT,
)
from app.services.auth import get_password_hash, verify_password
from app.services.errors import Conflict, Forbidden, NotFound, Unauthenticated
from app.services.notifications import send_sponsor_approved_email, send_sponsor_rejected_email
from app.store.base import Store

_SPONSOR_FIELDS = ("company_name", "industry", "website", "address", "gst_number")
_ORGANIZER_FIELDS = ("club_name", "college_name", "description")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _email_taken_message(existing: User) -> str:
    return f"This email is already registered as {existing.role.value}. Please log in instead."


def create_user(
    store: Store,
    *,
    email: str,
    role: UserRole,
    name: str,
    phone: str,
    password: str | None = None,
    hashed_password: str | None = None,
    **profile,
) -> User:
    """Create an active user. Email is unique among active accounts."""
    email = normalize_email(email)
    existing = store.find_user_by_email(email)
    if existing:
        raise Conflict(_email_taken_message(existing))
    if hashed_password is None:
        hashed_password = get_password_hash(password or "")
    return store.create_user(
        email=email,
        hashed_password=hashed_password,
        role=role,
        name=name,
        phone=phone,
        is_active=True,
        **profile,
    )


def signup(store: Store, data: SignupRequest, request: Request | None = None) -> User | SponsorApplication:
    """Organizers and agents become active users at once; sponsors are queued
    as a pending application for an agent to review."""
    email = normalize_email(data.email)
    existing = store.find_user_by_email(email)
    if existing:
        raise Conflict(_email_taken_message(existing))

    if data.role == UserRole.sponsor:
        if store.list_sponsor_applications(status=ApplicationStatus.pending, email=email):
            raise Conflict("A sponsor application for this email is already awaiting approval.")
        application = store.create_sponsor_application(
            email=email,
            hashed_password=get_password_hash(data.password),
            name=data.name,
            phone=data.phone,
            status=ApplicationStatus.pending,
            submitted_at=datetime.now(timezone.utc),
            **{f: getattr(data, f) for f in _SPONSOR_FIELDS},
        )
        create_log(
            store,
            CATEGORY_ACCOUNT,
            "Sponsor application submitted",
            f"Sponsor application {application.id} submitted for {email} ({application.company_name}).",
            actor_email=email,
            meta={"application_id": application.id},
            **request_context(request),
        )
        return application

    profile = {f: getattr(data, f) for f in _ORGANIZER_FIELDS} if data.role == UserRole.organizer else {}
    user = create_user(
        store,
        email=email,
        role=data.role,
        name=data.name,
        phone=data.phone,
        password=data.password,
        **profile,
    )
    create_log(
        store,
        CATEGORY_ACCOUNT,
        "User signed up",
        f"{user.role.value.capitalize()} account {user.id} created for {email}.",
        actor=user,
        meta={"role": user.role},
        **request_context(request),
    )
    return user


def _check_sponsor_application(store: Store, email: str, password: str) -> None:
    """Explain why a sponsor without an account cannot log in yet."""
    applications = store.list_sponsor_applications(email=email)
    if not applications:
        return
    latest = applications[-1]
    if not verify_password(password, latest.hashed_password):
        return
    if latest.status == ApplicationStatus.pending:
        raise Forbidden("Your sponsor application is pending admin approval.")
    if latest.status == ApplicationStatus.rejected:
        raise Forbidden("Your sponsor application was not approved.")


def authenticate(
    store: Store,
    email: str,
    password: str,
    role: UserRole | None = None,
    request: Request | None = None,
) -> User:
    email = normalize_email(email)
    user = store.find_user_by_email(email, role)
    if user and verify_password(password, user.hashed_password):
        return user
    if user is None and role in (None, UserRole.sponsor):
        _check_sponsor_application(store, email, password)
    create_log(
        store,
        CATEGORY_FAILED_ATTEMPT,
        "Login failed",
        f"Failed login attempt for email: {email}.",
        actor_email=email,
        meta={"reason": "invalid_email_or_password", "role": role},
        **request_context(request),
    )
    raise Unauthenticated("Invalid email or password")


def _pending_application(store: Store, application_id: int) -> SponsorApplication:
    application = store.get_sponsor_application(application_id)
    if not application:
        raise NotFound("Sponsor application not found")
    if application.status != ApplicationStatus.pending:
        raise Conflict(f"Application already {application.status.value}")
    return application


def approve_application(store: Store, application_id: int, agent: User, request: Request | None = None) -> User:
    """Promote a pending application into an active sponsor account."""
    application = _pending_application(store, application_id)
    user = create_user(
        store,
        email=application.email,
        role=UserRole.sponsor,
        name=application.name,
        phone=application.phone,
        hashed_password=application.hashed_password,
        **{f: getattr(application, f) for f in _SPONSOR_FIELDS},
    )
    store.update_sponsor_application(
        application,
        status=ApplicationStatus.approved,
        reviewed_at=datetime.now(timezone.utc),
        reviewed_by=agent.id,
        user_id=user.id,
    )
    create_log(
        store,
        CATEGORY_ACCOUNT,
        "Sponsor approved",
        f"Agent {agent.email} approved sponsor application {application.id}; user {user.id} created.",
        actor=agent,
        meta={"application_id": application.id, "user_id": user.id},
        **request_context(request),
    )
    send_sponsor_approved_email(user.email, user.name)
    return user


def reject_application(
    store: Store, application_id: int, agent: User, request: Request | None = None
) -> SponsorApplication:
    application = _pending_application(store, application_id)
    store.update_sponsor_application(
        application,
        status=ApplicationStatus.rejected,
        reviewed_at=datetime.now(timezone.utc),
        reviewed_by=agent.id,
    )
    create_log(
        store,
        CATEGORY_ACCOUNT,
        "Sponsor rejected",
        f"Agent {agent.email} rejected sponsor application {application.id}.",
        actor=agent,
        meta={"application_id": application.id},
        **request_context(request),
    )
    send_sponsor_rejected_email(application.email, application.name)
    return application


def deactivate_user(store: Store, user_id: int, agent: User, request: Request | None = None) -> User:
    """Accounts are never deleted; deactivation blocks login and token use."""
    if user_id == agent.id:
        raise Conflict("You cannot deactivate your own account")
    user = store.get_user(user_id)
    if not user:
        raise NotFound("User not found")
    if not user.is_active:
        return user
    store.update_user(user, is_active=False)
    create_log(
        store,
        CATEGORY_ACCOUNT,
        "User deactivated",
        f"Agent {agent.email} deactivated {user.role.value} account {user.id} ({user.email}).",
        actor=agent,
        meta={"user_id": user.id},
        **request_context(request),
    )
    return user
