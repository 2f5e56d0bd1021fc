"""Organizer events seeking sponsorship, and sponsors' event-level interest."""
from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, DateTime, Boolean, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.sql import func
from app.database import Base
import enum


class EventStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    sponsored = "sponsored"
    completed = "completed"
    cancelled = "cancelled"


class EventCategory(str, enum.Enum):
    technical = "technical"
    cultural = "cultural"
    sports = "sports"
    academic = "academic"
    social = "social"
    other = "other"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # Copied from the organizer profile when the event is created
    college_name = Column(String(255), nullable=True)
    club_name = Column(String(255), nullable=True)

    event_date = Column(Date, nullable=False, index=True)
    expected_attendees = Column(Integer, nullable=False)
    sponsorship_amount = Column(Integer, nullable=False)
    category = Column(SQLEnum(EventCategory), nullable=False)
    venue = Column(String(255), nullable=False)

    status = Column(SQLEnum(EventStatus), nullable=False, default=EventStatus.draft, index=True)

    # Soft delete: hidden from every listing; deals keep their reference
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class EventInterest(Base):
    """A sponsor flagged interest in an event as a whole."""
    __tablename__ = "event_interests"
    __table_args__ = (UniqueConstraint("event_id", "sponsor_id", name="uq_event_interests_event_sponsor"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    sponsor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
