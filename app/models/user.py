"""Accounts: sponsors, organizers and agents."""
from sqlalchemy import Column, Integer, String, Text, Enum as SQLEnum, DateTime, Boolean
from sqlalchemy.sql import func
from app.database import Base
import enum


class UserRole(str, enum.Enum):
    sponsor = "sponsor"
    organizer = "organizer"
    agent = "agent"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Stored lowercase; unique among active accounts (enforced by the account service)
    email = Column(String(255), index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)

    # Never hard-deleted; deactivated accounts cannot log in or be found by email
    is_active = Column(Boolean, default=True, nullable=False)

    # Sponsor fields
    company_name = Column(String(255), nullable=True)
    industry = Column(String(100), nullable=True)
    website = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    gst_number = Column(String(50), nullable=True)

    # Organizer fields
    club_name = Column(String(255), nullable=True)
    college_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
