"""Storage contract shared by the SQL and in-memory backends.

Records are the ORM classes from app.models in both backends. Every mutating
method is a single write that is visible to other requests once it returns.
"""
from __future__ import annotations

import abc
from typing import Any

from app.models.audit_log import AuditLog
from app.models.deal import Deal, DealNegotiation, DealStatus
from app.models.event import Event
from app.models.package import Package
from app.models.sponsor_application import ApplicationStatus, SponsorApplication
from app.models.user import User, UserRole


class Store(abc.ABC):
    backend: str = ""

    def close(self) -> None:
        """Release per-request resources."""

    # Users

    @abc.abstractmethod
    def create_user(self, **fields: Any) -> User: ...

    @abc.abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abc.abstractmethod
    def find_user_by_email(self, email: str, role: UserRole | None = None) -> User | None:
        """Case-insensitive match among active users only."""

    @abc.abstractmethod
    def list_users(self, role: UserRole | None = None, active_only: bool = True) -> list[User]: ...

    @abc.abstractmethod
    def update_user(self, user: User, **changes: Any) -> User: ...

    # Sponsor applications

    @abc.abstractmethod
    def create_sponsor_application(self, **fields: Any) -> SponsorApplication: ...

    @abc.abstractmethod
    def get_sponsor_application(self, application_id: int) -> SponsorApplication | None: ...

    @abc.abstractmethod
    def list_sponsor_applications(
        self, status: ApplicationStatus | None = None, email: str | None = None
    ) -> list[SponsorApplication]: ...

    @abc.abstractmethod
    def update_sponsor_application(self, application: SponsorApplication, **changes: Any) -> SponsorApplication: ...

    # Events and event-level interest

    @abc.abstractmethod
    def create_event(self, **fields: Any) -> Event: ...

    @abc.abstractmethod
    def get_event(self, event_id: int) -> Event | None:
        """Active (not deleted) events only."""

    @abc.abstractmethod
    def list_events(self, organizer_id: int | None = None, public_only: bool = False) -> list[Event]:
        """Active events, newest first. public_only excludes drafts."""

    @abc.abstractmethod
    def update_event(self, event: Event, **changes: Any) -> Event: ...

    @abc.abstractmethod
    def add_event_interest(self, event_id: int, sponsor_id: int) -> bool:
        """False when the sponsor already expressed interest."""

    @abc.abstractmethod
    def list_event_interest_sponsor_ids(self, event_id: int) -> list[int]: ...

    # Packages and package-level interest

    @abc.abstractmethod
    def replace_packages(self, event_id: int, packages: list[dict[str, Any]]) -> list[Package]:
        """Drop every package (and its interest records) of the event, then insert
        the given ones numbered 1..N. Deals on dropped packages lose their package_id."""

    @abc.abstractmethod
    def get_package(self, package_id: int) -> Package | None: ...

    @abc.abstractmethod
    def list_packages(self, event_id: int) -> list[Package]:
        """Ordered by package_number."""

    @abc.abstractmethod
    def update_package(self, package: Package, **changes: Any) -> Package: ...

    @abc.abstractmethod
    def remove_package_interest(self, package_id: int, sponsor_id: int) -> bool: ...

    @abc.abstractmethod
    def list_package_interest_sponsor_ids(self, package_id: int) -> list[int]: ...

    # Deals

    @abc.abstractmethod
    def create_deal(self, **fields: Any) -> Deal: ...

    @abc.abstractmethod
    def open_deal(self, package_id: int, sponsor_id: int, message: dict[str, Any], **fields: Any) -> Deal | None:
        """Record the sponsor's package interest, the deal and its opening
        message as one unit. Returns None when the interest already exists."""

    @abc.abstractmethod
    def get_deal(self, deal_id: int) -> Deal | None: ...

    @abc.abstractmethod
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
        """Filters combine with AND; newest first."""

    @abc.abstractmethod
    def assign_agent(self, deal_id: int, agent_id: int, **changes: Any) -> bool:
        """Attach the agent only if the deal is still pending with no agent
        (atomic check-and-set). Returns False when another agent got there first."""

    @abc.abstractmethod
    def update_deal(self, deal: Deal, **changes: Any) -> Deal: ...

    @abc.abstractmethod
    def add_negotiation(self, deal_id: int, **fields: Any) -> DealNegotiation: ...

    @abc.abstractmethod
    def list_negotiations(self, deal_id: int) -> list[DealNegotiation]:
        """Insertion order."""

    # Audit log (append-only)

    @abc.abstractmethod
    def add_audit_log(self, entry: AuditLog) -> AuditLog: ...

    @abc.abstractmethod
    def list_audit_logs(self, deal_id: int | None = None, limit: int = 100) -> list[AuditLog]:
        """Newest first."""

    # Stats

    def stats(self) -> dict[str, Any]:
        users = self.list_users(active_only=False)
        deals = self.list_deals()
        return {
            "users": {role.value: sum(1 for u in users if u.role == role) for role in UserRole},
            "events": len(self.list_events()),
            "deals": {status.value: sum(1 for d in deals if d.status == status) for status in DealStatus},
        }
