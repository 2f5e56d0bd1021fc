"""Append-only audit log. No updates or deletes - every record is permanent."""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from app.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    # Scope: plain ids (no FK) so soft-deleted or replaced records never block a log write
    event_id = Column(Integer, nullable=True, index=True)
    deal_id = Column(Integer, nullable=True, index=True)

    # category: account | catalog | interest | deal | failed_attempt
    category = Column(String(32), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    # Optional structured data (e.g. old_status, new_status)
    meta = Column(JSON, nullable=True)

    actor_user_id = Column(Integer, nullable=True)
    actor_email = Column(String(255), nullable=True)

    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)

    # UTC, set by the writer so both storage backends agree
    created_at = Column(DateTime(timezone=True), nullable=False)
