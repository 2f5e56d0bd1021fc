"""Sponsor signup awaiting agent review: the User is created only on approval."""
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from app.database import Base


class ApplicationStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class SponsorApplication(Base):
    __tablename__ = "sponsor_applications"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    # Hashed at submission; copied as-is into the User on approval
    hashed_password = Column(String(255), nullable=False)

    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    company_name = Column(String(255), nullable=False)
    industry = Column(String(100), nullable=False)
    website = Column(String(255), nullable=True)
    address = Column(Text, nullable=False)
    gst_number = Column(String(50), nullable=True)

    status = Column(SQLEnum(ApplicationStatus), nullable=False, default=ApplicationStatus.pending)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Integer, nullable=True)  # agent user id
    user_id = Column(Integer, nullable=True)  # set when approved

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
