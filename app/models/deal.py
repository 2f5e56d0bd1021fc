"""Deals between one sponsor and one organizer, mediated by at most one agent."""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from app.database import Base
from app.models.user import UserRole
import enum


class DealStatus(str, enum.Enum):
    pending = "pending"
    negotiating = "negotiating"
    approved = "approved"
    signed = "signed"
    completed = "completed"
    cancelled = "cancelled"


# Forward order of the negotiation lifecycle; cancelled sits outside it
DEAL_STATUS_ORDER = (
    DealStatus.pending,
    DealStatus.negotiating,
    DealStatus.approved,
    DealStatus.signed,
    DealStatus.completed,
)
TERMINAL_DEAL_STATUSES = (DealStatus.completed, DealStatus.cancelled)


class Deal(Base):
    __tablename__ = "deals"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    # Cleared when the organizer replaces the event's packages
    package_id = Column(Integer, ForeignKey("packages.id", ondelete="SET NULL"), nullable=True, index=True)
    sponsor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    agent_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    proposed_amount = Column(Integer, nullable=False)
    final_amount = Column(Integer, nullable=True)

    status = Column(SQLEnum(DealStatus), nullable=False, default=DealStatus.pending, index=True)

    proposal_date = Column(DateTime(timezone=True), nullable=False)
    approval_date = Column(DateTime(timezone=True), nullable=True)
    signing_date = Column(DateTime(timezone=True), nullable=True)
    completion_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class DealNegotiation(Base):
    """Append-only negotiation/chat entry. Ordered by id; timestamp is informational."""
    __tablename__ = "deal_negotiations"

    id = Column(Integer, primary_key=True, index=True)
    deal_id = Column(Integer, ForeignKey("deals.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    sender_role = Column(SQLEnum(UserRole), nullable=False)
    message = Column(Text, nullable=False)
    amount = Column(Integer, nullable=True)  # optional counter-offer
    timestamp = Column(DateTime(timezone=True), nullable=False)
