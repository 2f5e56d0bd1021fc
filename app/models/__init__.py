"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; the in-memory store keeps the
same classes as plain (session-less) instances.
"""
from app.models.user import User
from app.models.sponsor_application import SponsorApplication
from app.models.event import Event, EventInterest
from app.models.package import Package, PackageInterest
from app.models.deal import Deal, DealNegotiation
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "SponsorApplication",
    "Event",
    "EventInterest",
    "Package",
    "PackageInterest",
    "Deal",
    "DealNegotiation",
    "AuditLog",
]
