"""Append-only audit log service. Never update or delete - immutable audit trail."""
from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from typing import Any

from fastapi import Request

from app.models.audit_log import AuditLog
from app.models.user import User
from app.store.base import Store

CATEGORY_ACCOUNT = "account"
CATEGORY_CATALOG = "catalog"
CATEGORY_INTEREST = "interest"
CATEGORY_DEAL = "deal"
CATEGORY_FAILED_ATTEMPT = "failed_attempt"

# Column limits (match model)
_CATEGORY_LEN = 32
_TITLE_LEN = 255
_ACTOR_EMAIL_LEN = 255
_IP_LEN = 64
_USER_AGENT_LEN = 500
_MESSAGE_LEN = 100_000  # avoid unbounded Text blobs


def _sanitize_meta_value(v: Any) -> Any:
    """Convert to JSON-serializable value so meta never raises on INSERT."""
    if v is None:
        return None
    if isinstance(v, (str, int, float, bool)):
        return v
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    if isinstance(v, enum.Enum):
        return getattr(v, "value", str(v))
    if isinstance(v, dict):
        return {str(k): _sanitize_meta_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple, set)):
        return [_sanitize_meta_value(x) for x in v]
    return str(v)


def _sanitize_meta(meta: dict[str, Any] | None) -> dict[str, Any] | None:
    if meta is None:
        return None
    return {str(k): _sanitize_meta_value(v) for k, v in meta.items()}


def request_context(request: Request | None) -> dict[str, str | None]:
    """ip_address / user_agent kwargs for create_log."""
    if request is None:
        return {"ip_address": None, "user_agent": None}
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": (request.headers.get("user-agent") or "").strip() or None,
    }


def create_log(
    store: Store,
    category: str,
    title: str,
    message: str,
    *,
    event_id: int | None = None,
    deal_id: int | None = None,
    actor: User | None = None,
    actor_email: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    meta: dict[str, Any] | None = None,
) -> AuditLog:
    """Append one immutable audit log record (UTC timestamp).
    String fields are truncated to column limits; meta is sanitized for JSON."""
    if actor is not None and actor_email is None:
        actor_email = actor.email
    cat = (category or "")[: _CATEGORY_LEN].strip() or CATEGORY_ACCOUNT
    tit = (title or "")[: _TITLE_LEN].strip() or "-"
    msg = (message or "")[: _MESSAGE_LEN].strip() or "-"
    actor_em = (actor_email[: _ACTOR_EMAIL_LEN] if actor_email else None) or None
    ip = (ip_address[: _IP_LEN] if ip_address else None) or None
    ua = (str(user_agent)[: _USER_AGENT_LEN] if user_agent else None) or None

    entry = AuditLog(
        category=cat,
        title=tit,
        message=msg,
        event_id=event_id,
        deal_id=deal_id,
        actor_user_id=actor.id if actor is not None else None,
        actor_email=actor_em,
        ip_address=ip,
        user_agent=ua,
        meta=_sanitize_meta(meta),
        created_at=datetime.now(timezone.utc),
    )
    return store.add_audit_log(entry)
