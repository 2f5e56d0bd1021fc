"""Priced sponsorship tiers within an event."""
from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.sql import func
from app.database import Base
import enum


class PackageStatus(str, enum.Enum):
    available = "available"
    selected = "selected"
    completed = "completed"


class Package(Base):
    __tablename__ = "packages"
    __table_args__ = (UniqueConstraint("event_id", "package_number", name="uq_packages_event_number"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    package_number = Column(Integer, nullable=False)  # 1..N in submission order
    amount = Column(Integer, nullable=False)
    deliverables = Column(Text, nullable=False)

    status = Column(SQLEnum(PackageStatus), nullable=False, default=PackageStatus.available)
    selected_sponsor_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class PackageInterest(Base):
    """A sponsor flagged interest in one specific package."""
    __tablename__ = "package_interests"
    __table_args__ = (UniqueConstraint("package_id", "sponsor_id", name="uq_package_interests_package_sponsor"),)

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False, index=True)
    sponsor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
