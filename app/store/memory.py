"""In-memory store for tests and for running without a database.

Holds plain (session-less) instances of the ORM classes. One instance is
shared by every request of the process; a lock makes each write, including the
agent assignment check-and-set, atomic.
"""
from __future__ import annotations

import itertools
import threading
from datetime import datetime, timezone
from typing import Any

from app.config import STORAGE_MEMORY
from app.models.audit_log import AuditLog
from app.models.deal import Deal, DealNegotiation, DealStatus
from app.models.event import Event, EventInterest, EventStatus
from app.models.package import Package, PackageInterest, PackageStatus
from app.models.sponsor_application import ApplicationStatus, SponsorApplication
from app.models.user import User, UserRole
from app.store.base import Store

# Column defaults the database would otherwise fill in on INSERT
_DEFAULTS: dict[type, dict[str, Any]] = {
    User: {"is_active": True},
    SponsorApplication: {"status": ApplicationStatus.pending},
    Event: {"status": EventStatus.draft, "is_active": True},
    Package: {"status": PackageStatus.available},
    Deal: {"status": DealStatus.pending},
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore(Store):
    backend = STORAGE_MEMORY

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ids: dict[type, itertools.count] = {}
        self._rows: dict[type, dict[int, Any]] = {}

    def _table(self, cls: type) -> dict[int, Any]:
        return self._rows.setdefault(cls, {})

    def _insert(self, cls: type, fields: dict[str, Any]):
        with self._lock:
            values = dict(_DEFAULTS.get(cls, {}))
            values.update(fields)
            if hasattr(cls, "created_at") and values.get("created_at") is None:
                values["created_at"] = _now()
            counter = self._ids.setdefault(cls, itertools.count(1))
            obj = cls(id=next(counter), **values)
            self._table(cls)[obj.id] = obj
            return obj

    def _apply(self, obj, changes: dict[str, Any]):
        with self._lock:
            for key, value in changes.items():
                setattr(obj, key, value)
            if hasattr(obj, "updated_at"):
                obj.updated_at = _now()
            return obj

    def _all(self, cls: type) -> list:
        with self._lock:
            return list(self._table(cls).values())

    # Users

    def create_user(self, **fields: Any) -> User:
        return self._insert(User, fields)

    def get_user(self, user_id: int) -> User | None:
        return self._table(User).get(user_id)

    def find_user_by_email(self, email: str, role: UserRole | None = None) -> User | None:
        wanted = (email or "").strip().lower()
        for user in self._all(User):
            if user.email.lower() == wanted and user.is_active and (role is None or user.role == role):
                return user
        return None

    def list_users(self, role: UserRole | None = None, active_only: bool = True) -> list[User]:
        return [
            u for u in self._all(User)
            if (role is None or u.role == role) and (not active_only or u.is_active)
        ]

    def update_user(self, user: User, **changes: Any) -> User:
        return self._apply(user, changes)

    # Sponsor applications

    def create_sponsor_application(self, **fields: Any) -> SponsorApplication:
        return self._insert(SponsorApplication, fields)

    def get_sponsor_application(self, application_id: int) -> SponsorApplication | None:
        return self._table(SponsorApplication).get(application_id)

    def list_sponsor_applications(
        self, status: ApplicationStatus | None = None, email: str | None = None
    ) -> list[SponsorApplication]:
        wanted = email.strip().lower() if email is not None else None
        return [
            a for a in self._all(SponsorApplication)
            if (status is None or a.status == status) and (wanted is None or a.email.lower() == wanted)
        ]

    def update_sponsor_application(self, application: SponsorApplication, **changes: Any) -> SponsorApplication:
        return self._apply(application, changes)

    # Events

    def create_event(self, **fields: Any) -> Event:
        return self._insert(Event, fields)

    def get_event(self, event_id: int) -> Event | None:
        event = self._table(Event).get(event_id)
        return event if event is not None and event.is_active else None

    def list_events(self, organizer_id: int | None = None, public_only: bool = False) -> list[Event]:
        events = [
            e for e in self._all(Event)
            if e.is_active
            and (organizer_id is None or e.organizer_id == organizer_id)
            and (not public_only or e.status != EventStatus.draft)
        ]
        return sorted(events, key=lambda e: e.id, reverse=True)

    def update_event(self, event: Event, **changes: Any) -> Event:
        return self._apply(event, changes)

    def add_event_interest(self, event_id: int, sponsor_id: int) -> bool:
        with self._lock:
            if sponsor_id in self.list_event_interest_sponsor_ids(event_id):
                return False
            self._insert(EventInterest, {"event_id": event_id, "sponsor_id": sponsor_id})
            return True

    def list_event_interest_sponsor_ids(self, event_id: int) -> list[int]:
        return [i.sponsor_id for i in self._all(EventInterest) if i.event_id == event_id]

    # Packages

    def replace_packages(self, event_id: int, packages: list[dict[str, Any]]) -> list[Package]:
        with self._lock:
            table = self._table(Package)
            old_ids = {p.id for p in table.values() if p.event_id == event_id}
            interests = self._table(PackageInterest)
            for interest_id in [i.id for i in interests.values() if i.package_id in old_ids]:
                del interests[interest_id]
            for deal in self._table(Deal).values():
                if deal.package_id in old_ids:
                    deal.package_id = None
            for package_id in old_ids:
                del table[package_id]
            return [
                self._insert(Package, {
                    "event_id": event_id,
                    "package_number": number,
                    "amount": item["amount"],
                    "deliverables": item["deliverables"],
                })
                for number, item in enumerate(packages, start=1)
            ]

    def get_package(self, package_id: int) -> Package | None:
        return self._table(Package).get(package_id)

    def list_packages(self, event_id: int) -> list[Package]:
        return sorted(
            (p for p in self._all(Package) if p.event_id == event_id),
            key=lambda p: p.package_number,
        )

    def update_package(self, package: Package, **changes: Any) -> Package:
        return self._apply(package, changes)

    def remove_package_interest(self, package_id: int, sponsor_id: int) -> bool:
        with self._lock:
            interests = self._table(PackageInterest)
            for interest in list(interests.values()):
                if interest.package_id == package_id and interest.sponsor_id == sponsor_id:
                    del interests[interest.id]
                    return True
            return False

    def list_package_interest_sponsor_ids(self, package_id: int) -> list[int]:
        return [i.sponsor_id for i in self._all(PackageInterest) if i.package_id == package_id]

    # Deals

    def create_deal(self, **fields: Any) -> Deal:
        return self._insert(Deal, fields)

    def open_deal(self, package_id: int, sponsor_id: int, message: dict[str, Any], **fields: Any) -> Deal | None:
        with self._lock:
            if sponsor_id in self.list_package_interest_sponsor_ids(package_id):
                return None
            self._insert(PackageInterest, {"package_id": package_id, "sponsor_id": sponsor_id})
            deal = self.create_deal(package_id=package_id, sponsor_id=sponsor_id, **fields)
            self.add_negotiation(deal.id, **message)
            return deal

    def get_deal(self, deal_id: int) -> Deal | None:
        return self._table(Deal).get(deal_id)

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
        deals = [
            d for d in self._all(Deal)
            if (sponsor_id is None or d.sponsor_id == sponsor_id)
            and (organizer_id is None or d.organizer_id == organizer_id)
            and (agent_id is None or d.agent_id == agent_id)
            and (package_id is None or d.package_id == package_id)
            and (status is None or d.status == status)
            and (not unassigned or d.agent_id is None)
        ]
        return sorted(deals, key=lambda d: d.id, reverse=True)

    def assign_agent(self, deal_id: int, agent_id: int, **changes: Any) -> bool:
        with self._lock:
            deal = self._table(Deal).get(deal_id)
            if deal is None or deal.agent_id is not None or deal.status != DealStatus.pending:
                return False
            self._apply(deal, {"agent_id": agent_id, **changes})
            return True

    def update_deal(self, deal: Deal, **changes: Any) -> Deal:
        return self._apply(deal, changes)

    def add_negotiation(self, deal_id: int, **fields: Any) -> DealNegotiation:
        fields.setdefault("timestamp", _now())
        return self._insert(DealNegotiation, {"deal_id": deal_id, **fields})

    def list_negotiations(self, deal_id: int) -> list[DealNegotiation]:
        return sorted((n for n in self._all(DealNegotiation) if n.deal_id == deal_id), key=lambda n: n.id)

    # Audit log

    def add_audit_log(self, entry: AuditLog) -> AuditLog:
        with self._lock:
            counter = self._ids.setdefault(AuditLog, itertools.count(1))
            entry.id = next(counter)
            if entry.created_at is None:
                entry.created_at = _now()
            self._table(AuditLog)[entry.id] = entry
            return entry

    def list_audit_logs(self, deal_id: int | None = None, limit: int = 100) -> list[AuditLog]:
        logs = [e for e in self._all(AuditLog) if deal_id is None or e.deal_id == deal_id]
        return sorted(logs, key=lambda e: e.id, reverse=True)[:limit]
