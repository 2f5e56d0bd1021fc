"""Deal / negotiation engine.

A deal is opened when a sponsor flags interest in a package. It waits in the
agent queue as pending until one agent claims it (first claim wins), then
moves forward through negotiating, approved, signed and completed, or is
cancelled. Every party message is kept in an append-only transcript.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Request

from app.models.deal import Deal, DealNegotiation, DealStatus, DEAL_STATUS_ORDER, TERMINAL_DEAL_STATUSES
from app.models.event import EventStatus
from app.models.package import Package, PackageStatus
from app.models.user import User, UserRole
from app.services.audit_log import create_log, request_context, CATEGORY_DEAL, CATEGORY_INTEREST
from app.services.catalog import get_visible_event, refresh_event_status
from app.services.errors import Conflict, Forbidden, NotFound
from app.services.notifications import send_agent_assigned_email, send_deal_status_email
from app.store.base import Store

log = logging.getLogger("uvicorn.error")

# Status entered -> timestamp column stamped
_STATUS_DATE_FIELDS = {
    DealStatus.approved: "approval_date",
    DealStatus.signed: "signing_date",
    DealStatus.completed: "completion_date",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _format_amount(amount: int | None) -> str:
    return f"₹{amount:,}" if amount is not None else "-"


def agent_intro_message(agent: User, organizer: User | None, sponsor: User | None) -> str:
    organizer_name = (organizer.club_name or organizer.name) if organizer else "the organizer"
    sponsor_name = (sponsor.company_name or sponsor.name) if sponsor else "the sponsor"
    return (
        f"Hello! I'm {agent.name}, your assigned agent for this sponsorship deal. "
        f"I'll help facilitate the negotiation between {organizer_name} and {sponsor_name}. "
        "Let's discuss the terms and find a mutually beneficial agreement."
    )


def is_party(deal: Deal, user: User) -> bool:
    return user.id in (deal.sponsor_id, deal.organizer_id, deal.agent_id)


# Package-level interest


def _interest_package(store: Store, package_id: int, sponsor: User) -> Package:
    package = store.get_package(package_id)
    if not package:
        raise NotFound("Package not found")
    event = get_visible_event(store, package.event_id, sponsor)
    if event.status not in (EventStatus.published, EventStatus.sponsored):
        raise Conflict(f"Event is {event.status.value}")
    return package


def express_package_interest(store: Store, package_id: int, sponsor: User, request: Request | None = None) -> Deal:
    """Record the interest and open a pending, unassigned deal for it."""
    package = _interest_package(store, package_id, sponsor)
    if package.status != PackageStatus.available:
        raise Conflict("Package is no longer available")

    event = store.get_event(package.event_id)
    deal = store.open_deal(
        package.id,
        sponsor.id,
        message={
            "sender_id": sponsor.id,
            "sender_role": UserRole.sponsor,
            "message": f"Interested in Package {package.package_number} for {_format_amount(package.amount)}.",
            "amount": package.amount,
        },
        event_id=event.id,
        organizer_id=event.organizer_id,
        agent_id=None,
        proposed_amount=package.amount,
        status=DealStatus.pending,
        proposal_date=_now(),
    )
    if deal is None:
        raise Conflict("You have already expressed interest in this package")
    create_log(
        store,
        CATEGORY_INTEREST,
        "Package interest",
        f"Sponsor {sponsor.email} is interested in package {package.package_number} of event {event.id}; "
        f"deal {deal.id} opened.",
        event_id=event.id,
        deal_id=deal.id,
        actor=sponsor,
        meta={"package_id": package.id, "amount": package.amount},
        **request_context(request),
    )
    log.info("Deal %s opened for package %s by sponsor %s", deal.id, package.id, sponsor.id)
    return deal


def withdraw_package_interest(store: Store, package_id: int, sponsor: User, request: Request | None = None) -> None:
    """Drop the interest record and cancel the sponsor's still-unclaimed deal."""
    package = store.get_package(package_id)
    if not package:
        raise NotFound("Package not found")
    if sponsor.id not in store.list_package_interest_sponsor_ids(package.id):
        raise NotFound("No interest recorded for this package")
    open_deals = [
        d for d in store.list_deals(sponsor_id=sponsor.id, package_id=package.id)
        if d.status not in TERMINAL_DEAL_STATUSES
    ]
    if any(d.agent_id is not None for d in open_deals):
        raise Conflict("An agent is already negotiating this deal")
    for deal in open_deals:
        store.update_deal(deal, status=DealStatus.cancelled)
    store.remove_package_interest(package.id, sponsor.id)
    create_log(
        store,
        CATEGORY_INTEREST,
        "Package interest withdrawn",
        f"Sponsor {sponsor.email} withdrew interest in package {package.id}.",
        event_id=package.event_id,
        actor=sponsor,
        meta={"package_id": package.id, "cancelled_deals": [d.id for d in open_deals]},
        **request_context(request),
    )


# Lookups


def get_deal_for_party(store: Store, deal_id: int, user: User) -> Deal:
    deal = store.get_deal(deal_id)
    if not deal:
        raise NotFound("Deal not found")
    if not is_party(deal, user):
        raise Forbidden("Not authorized to view this deal")
    return deal


def list_pending_deals(store: Store) -> list[Deal]:
    return store.list_deals(status=DealStatus.pending, unassigned=True)


def list_my_deals(store: Store, user: User) -> list[Deal]:
    if user.role == UserRole.sponsor:
        return store.list_deals(sponsor_id=user.id)
    if user.role == UserRole.organizer:
        return store.list_deals(organizer_id=user.id)
    return store.list_deals(agent_id=user.id)


# Assignment


def assign_agent(store: Store, deal_id: int, agent: User, request: Request | None = None) -> Deal:
    deal = store.get_deal(deal_id)
    if not deal:
        raise NotFound("Deal not found")
    if not store.assign_agent(deal.id, agent.id, status=DealStatus.negotiating):
        deal = store.get_deal(deal_id)
        if deal.status == DealStatus.cancelled:
            raise Conflict("Deal was cancelled")
        raise Conflict("Deal has already been assigned to another agent")

    deal = store.get_deal(deal_id)
    organizer = store.get_user(deal.organizer_id)
    sponsor = store.get_user(deal.sponsor_id)
    store.add_negotiation(
        deal.id,
        sender_id=agent.id,
        sender_role=UserRole.agent,
        message=agent_intro_message(agent, organizer, sponsor),
    )
    create_log(
        store,
        CATEGORY_DEAL,
        "Agent assigned",
        f"Agent {agent.email} took deal {deal.id}; status negotiating.",
        event_id=deal.event_id,
        deal_id=deal.id,
        actor=agent,
        **request_context(request),
    )
    event = store.get_event(deal.event_id)
    event_title = event.title if event else f"event {deal.event_id}"
    for party in (organizer, sponsor):
        if party:
            send_agent_assigned_email(party.email, party.name, event_title, agent.name)
    return deal


# Transcript


def post_message(
    store: Store, deal_id: int, user: User, message: str, amount: int | None = None
) -> DealNegotiation:
    deal = get_deal_for_party(store, deal_id, user)
    return store.add_negotiation(
        deal.id,
        sender_id=user.id,
        sender_role=user.role,
        message=message,
        amount=amount,
    )


def list_messages(store: Store, deal_id: int, user: User) -> list[DealNegotiation]:
    deal = get_deal_for_party(store, deal_id, user)
    return store.list_negotiations(deal.id)


# Status state machine


def check_transition(current: DealStatus, new: DealStatus) -> None:
    """Forward moves (skips allowed) and cancellation from any live state.
    Raises Conflict for regressions and for leaving a terminal state."""
    if current in TERMINAL_DEAL_STATUSES:
        raise Conflict(f"Deal is already {current.value}")
    if new == DealStatus.cancelled:
        return
    if DEAL_STATUS_ORDER.index(new) <= DEAL_STATUS_ORDER.index(current):
        raise Conflict(f"Cannot move deal from {current.value} back to {new.value}")


def _sync_package(store: Store, deal: Deal, new_status: DealStatus) -> None:
    if deal.package_id is None:
        return
    package = store.get_package(deal.package_id)
    if not package:
        return
    if new_status in (DealStatus.approved, DealStatus.signed, DealStatus.completed):
        # One holder per package, whichever forward status the deal jumps to
        if package.selected_sponsor_id not in (None, deal.sponsor_id):
            raise Conflict("Package has already been selected by another sponsor")
        held = PackageStatus.completed if new_status == DealStatus.completed else PackageStatus.selected
        store.update_package(package, status=held, selected_sponsor_id=deal.sponsor_id)
    elif new_status == DealStatus.cancelled:
        if package.selected_sponsor_id == deal.sponsor_id and package.status == PackageStatus.selected:
            store.update_package(package, status=PackageStatus.available, selected_sponsor_id=None)
    else:
        return
    event = store.get_event(package.event_id)
    if event:
        refresh_event_status(store, event)


def update_status(
    store: Store,
    deal_id: int,
    agent: User,
    new_status: DealStatus,
    final_amount: int | None = None,
    request: Request | None = None,
) -> Deal:
    deal = store.get_deal(deal_id)
    if not deal:
        raise NotFound("Deal not found")
    if deal.agent_id != agent.id:
        raise Forbidden("Only the assigned agent can update this deal")

    current = deal.status
    if new_status == current:
        if final_amount is not None and final_amount != deal.final_amount:
            store.update_deal(deal, final_amount=final_amount)
        return deal
    check_transition(current, new_status)
    _sync_package(store, deal, new_status)

    changes: dict = {"status": new_status}
    date_field = _STATUS_DATE_FIELDS.get(new_status)
    if date_field:
        changes[date_field] = _now()
    if final_amount is not None:
        changes["final_amount"] = final_amount
    store.update_deal(deal, **changes)

    create_log(
        store,
        CATEGORY_DEAL,
        "Deal status changed",
        f"Agent {agent.email} moved deal {deal.id} from {current.value} to {new_status.value}.",
        event_id=deal.event_id,
        deal_id=deal.id,
        actor=agent,
        meta={"from": current, "to": new_status, "final_amount": final_amount},
        **request_context(request),
    )
    event = store.get_event(deal.event_id)
    event_title = event.title if event else f"event {deal.event_id}"
    for party_id in (deal.sponsor_id, deal.organizer_id):
        party = store.get_user(party_id)
        if party:
            send_deal_status_email(party.email, party.name, event_title, new_status.value)
    return deal
