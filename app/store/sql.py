"""SQLAlchemy-backed store: one session per request, commit per write."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import STORAGE_SQL
from app.models.audit_log import AuditLog
from app.models.deal import Deal, DealNegotiation, DealStatus
from app.models.event import Event, EventInterest, EventStatus
from app.models.package import Package, PackageInterest, PackageStatus
from app.models.sponsor_application import ApplicationStatus, SponsorApplication
from app.models.user import User, UserRole
from app.store.base import Store


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SqlStore(Store):
    backend = STORAGE_SQL

    def __init__(self, db: Session) -> None:
        self.db = db

    def close(self) -> None:
        self.db.close()

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def _apply(self, obj, changes: dict[str, Any]):
        for key, value in changes.items():
            setattr(obj, key, value)
        return self._save(obj)

    # Users

    def create_user(self, **fields: Any) -> User:
        return self._save(User(**fields))

    def get_user(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_user_by_email(self, email: str, role: UserRole | None = None) -> User | None:
        q = self.db.query(User).filter(
            func.lower(User.email) == (email or "").strip().lower(),
            User.is_active.is_(True),
        )
        if role is not None:
            q = q.filter(User.role == role)
        return q.first()

    def list_users(self, role: UserRole | None = None, active_only: bool = True) -> list[User]:
        q = self.db.query(User)
        if role is not None:
            q = q.filter(User.role == role)
        if active_only:
            q = q.filter(User.is_active.is_(True))
        return q.order_by(User.id).all()

    def update_user(self, user: User, **changes: Any) -> User:
        return self._apply(user, changes)

    # Sponsor applications

    def create_sponsor_application(self, **fields: Any) -> SponsorApplication:
        return self._save(SponsorApplication(**fields))

    def get_sponsor_application(self, application_id: int) -> SponsorApplication | None:
        return self.db.query(SponsorApplication).filter(SponsorApplication.id == application_id).first()

    def list_sponsor_applications(
        self, status: ApplicationStatus | None = None, email: str | None = None
    ) -> list[SponsorApplication]:
        q = self.db.query(SponsorApplication)
        if status is not None:
            q = q.filter(SponsorApplication.status == status)
        if email is not None:
            q = q.filter(func.lower(SponsorApplication.email) == email.strip().lower())
        return q.order_by(SponsorApplication.id).all()

    def update_sponsor_application(self, application: SponsorApplication, **changes: Any) -> SponsorApplication:
        return self._apply(application, changes)

    # Events

    def create_event(self, **fields: Any) -> Event:
        return self._save(Event(**fields))

    def get_event(self, event_id: int) -> Event | None:
        return self.db.query(Event).filter(Event.id == event_id, Event.is_active.is_(True)).first()

    def list_events(self, organizer_id: int | None = None, public_only: bool = False) -> list[Event]:
        q = self.db.query(Event).filter(Event.is_active.is_(True))
        if organizer_id is not None:
            q = q.filter(Event.organizer_id == organizer_id)
        if public_only:
            q = q.filter(Event.status != EventStatus.draft)
        return q.order_by(Event.id.desc()).all()

    def update_event(self, event: Event, **changes: Any) -> Event:
        return self._apply(event, changes)

    def add_event_interest(self, event_id: int, sponsor_id: int) -> bool:
        exists = self.db.query(EventInterest).filter(
            EventInterest.event_id == event_id, EventInterest.sponsor_id == sponsor_id
        ).first()
        if exists:
            return False
        self.db.add(EventInterest(event_id=event_id, sponsor_id=sponsor_id, created_at=_now()))
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent duplicate lost the unique constraint race
            self.db.rollback()
            return False
        return True

    def list_event_interest_sponsor_ids(self, event_id: int) -> list[int]:
        rows = (
            self.db.query(EventInterest.sponsor_id)
            .filter(EventInterest.event_id == event_id)
            .order_by(EventInterest.id)
            .all()
        )
        return [r[0] for r in rows]

    # Packages

    def replace_packages(self, event_id: int, packages: list[dict[str, Any]]) -> list[Package]:
        old_ids = [r[0] for r in self.db.query(Package.id).filter(Package.event_id == event_id).all()]
        if old_ids:
            self.db.query(PackageInterest).filter(PackageInterest.package_id.in_(old_ids)).delete(
                synchronize_session=False
            )
            self.db.query(Deal).filter(Deal.package_id.in_(old_ids)).update(
                {Deal.package_id: None}, synchronize_session=False
            )
            self.db.query(Package).filter(Package.id.in_(old_ids)).delete(synchronize_session=False)
        created = [
            Package(
                event_id=event_id,
                package_number=number,
                amount=item["amount"],
                deliverables=item["deliverables"],
                status=PackageStatus.available,
            )
            for number, item in enumerate(packages, start=1)
        ]
        self.db.add_all(created)
        self.db.commit()
        for p in created:
            self.db.refresh(p)
        return created

    def get_package(self, package_id: int) -> Package | None:
        return self.db.query(Package).filter(Package.id == package_id).first()

    def list_packages(self, event_id: int) -> list[Package]:
        return self.db.query(Package).filter(Package.event_id == event_id).order_by(Package.package_number).all()

    def update_package(self, package: Package, **changes: Any) -> Package:
        return self._apply(package, changes)

    def remove_package_interest(self, package_id: int, sponsor_id: int) -> bool:
        deleted = self.db.query(PackageInterest).filter(
            PackageInterest.package_id == package_id, PackageInterest.sponsor_id == sponsor_id
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0

    def list_package_interest_sponsor_ids(self, package_id: int) -> list[int]:
        rows = (
            self.db.query(PackageInterest.sponsor_id)
            .filter(PackageInterest.package_id == package_id)
            .order_by(PackageInterest.id)
            .all()
        )
        return [r[0] for r in rows]

    # Deals

    def create_deal(self, **fields: Any) -> Deal:
        return self._save(Deal(**fields))

    def open_deal(self, package_id: int, sponsor_id: int, message: dict[str, Any], **fields: Any) -> Deal | None:
        exists = self.db.query(PackageInterest).filter(
            PackageInterest.package_id == package_id, PackageInterest.sponsor_id == sponsor_id
        ).first()
        if exists:
            return None
        deal = Deal(package_id=package_id, sponsor_id=sponsor_id, **fields)
        self.db.add(PackageInterest(package_id=package_id, sponsor_id=sponsor_id, created_at=_now()))
        self.db.add(deal)
        # One commit covers the whole unit
        try:
            self.db.flush()
            self.db.add(DealNegotiation(deal_id=deal.id, timestamp=_now(), **message))
            self.db.commit()
        except IntegrityError:
            # Unique (package_id, sponsor_id) lost a race with a concurrent request
            self.db.rollback()
            return None
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(deal)
        return deal

    def get_deal(self, deal_id: int) -> Deal | None:
        return self.db.query(Deal).filter(Deal.id == deal_id).first()

    def list_deals(
        self,
        *,
        sponsor_id: int | None = None,
        organizer_id: int | None = None,
        agent_id: int | None = None,
        package_id: int | None = None,
        status: DealStatus | None = None,
        unassigned: bool = False,
    ) -> list[Deal]:
        q = self.db.query(Deal)
        if sponsor_id is not None:
            q = q.filter(Deal.sponsor_id == sponsor_id)
        if organizer_id is not None:
            q = q.filter(Deal.organizer_id == organizer_id)
        if agent_id is not None:
            q = q.filter(Deal.agent_id == agent_id)
        if package_id is not None:
            q = q.filter(Deal.package_id == package_id)
        if status is not None:
            q = q.filter(Deal.status == status)
        if unassigned:
            q = q.filter(Deal.agent_id.is_(None))
        return q.order_by(Deal.id.desc()).all()

    def assign_agent(self, deal_id: int, agent_id: int, **changes: Any) -> bool:
        # Conditional UPDATE: the "no agent yet" precondition is evaluated by the database
        values = {Deal.agent_id: agent_id}
        values.update({getattr(Deal, k): v for k, v in changes.items()})
        updated = (
            self.db.query(Deal)
            .filter(Deal.id == deal_id, Deal.agent_id.is_(None), Deal.status == DealStatus.pending)
            .update(values, synchronize_session=False)
        )
        self.db.commit()
        return updated == 1

    def update_deal(self, deal: Deal, **changes: Any) -> Deal:
        return self._apply(deal, changes)

    def add_negotiation(self, deal_id: int, **fields: Any) -> DealNegotiation:
        fields.setdefault("timestamp", _now())
        return self._save(DealNegotiation(deal_id=deal_id, **fields))

    def list_negotiations(self, deal_id: int) -> list[DealNegotiation]:
        return self.db.query(DealNegotiation).filter(DealNegotiation.deal_id == deal_id).order_by(DealNegotiation.id).all()

    # Audit log

    def add_audit_log(self, entry: AuditLog) -> AuditLog:
        return self._save(entry)

    def list_audit_logs(self, deal_id: int | None = None, limit: int = 100) -> list[AuditLog]:
        q = self.db.query(AuditLog)
        if deal_id is not None:
            q = q.filter(AuditLog.deal_id == deal_id)
        return q.order_by(AuditLog.id.desc()).limit(limit).all()
