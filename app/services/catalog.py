"""Event and package catalog: organizer-owned events, their numbered
sponsorship packages and event-level sponsor interest."""
from __future__ import annotations

from fastapi import Request

from app.models.event import Event, EventStatus
from app.models.package import Package, PackageStatus
from app.models.user import User, UserRole
from app.schemas.events import EventCreate, EventUpdate, PackageInput
from app.services.audit_log import create_log, request_context, CATEGORY_CATALOG, CATEGORY_INTEREST
from app.services.errors import Conflict, Forbidden, NotFound, ValidationFailed
from app.store.base import Store


def _visible_to(event: Event, user: User | None) -> bool:
    if event.status != EventStatus.draft:
        return True
    return user is not None and user.id == event.organizer_id


def get_visible_event(store: Store, event_id: int, user: User | None = None) -> Event:
    """Drafts are only visible to their organizer; everyone else gets NOT_FOUND."""
    event = store.get_event(event_id)
    if not event or not _visible_to(event, user):
        raise NotFound("Event not found")
    return event


def get_owned_event(store: Store, event_id: int, organizer: User) -> Event:
    event = store.get_event(event_id)
    if not event:
        raise NotFound("Event not found")
    if event.organizer_id != organizer.id:
        raise Forbidden("Not authorized to manage this event")
    return event


def create_event(store: Store, organizer: User, data: EventCreate, request: Request | None = None) -> Event:
    event = store.create_event(
        organizer_id=organizer.id,
        title=data.title,
        description=data.description,
        college_name=organizer.college_name,
        club_name=organizer.club_name,
        event_date=data.event_date,
        expected_attendees=data.expected_attendees,
        sponsorship_amount=data.sponsorship_amount,
        category=data.category,
        venue=data.venue,
        status=data.status,
        is_active=True,
    )
    create_log(
        store,
        CATEGORY_CATALOG,
        "Event created",
        f"Organizer {organizer.email} created event {event.id} ({event.title}) as {event.status.value}.",
        event_id=event.id,
        actor=organizer,
        **request_context(request),
    )
    return event


def update_event(
    store: Store, event_id: int, organizer: User, data: EventUpdate, request: Request | None = None
) -> Event:
    event = get_owned_event(store, event_id, organizer)
    changes = data.model_dump(exclude_unset=True)
    nulls = sorted(key for key, value in changes.items() if value is None)
    if nulls:
        raise ValidationFailed(f"{', '.join(nulls)} must not be null")
    new_status = changes.get("status", event.status)
    if new_status != event.status and event.status not in (EventStatus.draft, EventStatus.published):
        raise Conflict(f"Event is {event.status.value}; its status follows its packages")
    if new_status == EventStatus.draft and event.status != EventStatus.draft:
        if any(d.event_id == event.id for d in store.list_deals(organizer_id=organizer.id)):
            raise Conflict("Event already has deals and cannot return to draft")
    if not changes:
        return event
    store.update_event(event, **changes)
    create_log(
        store,
        CATEGORY_CATALOG,
        "Event updated",
        f"Organizer {organizer.email} updated event {event.id}: {', '.join(sorted(changes))}.",
        event_id=event.id,
        actor=organizer,
        meta={"fields": sorted(changes)},
        **request_context(request),
    )
    return event


def delete_event(store: Store, event_id: int, organizer: User, request: Request | None = None) -> None:
    """Soft delete: the event disappears from every listing, deals keep their reference."""
    event = get_owned_event(store, event_id, organizer)
    store.update_event(event, is_active=False)
    create_log(
        store,
        CATEGORY_CATALOG,
        "Event deleted",
        f"Organizer {organizer.email} deleted event {event.id} ({event.title}).",
        event_id=event.id,
        actor=organizer,
        **request_context(request),
    )


def list_public_events(store: Store) -> list[Event]:
    return store.list_events(public_only=True)


def list_organizer_events(store: Store, organizer: User) -> list[Event]:
    return store.list_events(organizer_id=organizer.id)


def replace_packages(
    store: Store, event_id: int, organizer: User, packages: list[PackageInput], request: Request | None = None
) -> list[Package]:
    event = get_owned_event(store, event_id, organizer)
    if not packages:
        raise ValidationFailed("At least one package is required")
    created = store.replace_packages(
        event.id, [{"amount": p.amount, "deliverables": p.deliverables} for p in packages]
    )
    refresh_event_status(store, event)
    create_log(
        store,
        CATEGORY_CATALOG,
        "Packages replaced",
        f"Organizer {organizer.email} set {len(created)} package(s) on event {event.id}.",
        event_id=event.id,
        actor=organizer,
        meta={"amounts": [p.amount for p in created]},
        **request_context(request),
    )
    return created


def list_packages(store: Store, event_id: int, user: User | None = None) -> list[Package]:
    event = get_visible_event(store, event_id, user)
    return store.list_packages(event.id)


def refresh_event_status(store: Store, event: Event) -> Event:
    """An event is sponsored once every package is taken; releasing a package
    reopens a sponsored event as published."""
    packages = store.list_packages(event.id)
    taken = bool(packages) and all(
        p.status in (PackageStatus.selected, PackageStatus.completed) for p in packages
    )
    if taken and event.status == EventStatus.published:
        store.update_event(event, status=EventStatus.sponsored)
    elif not taken and event.status == EventStatus.sponsored:
        store.update_event(event, status=EventStatus.published)
    return event


def express_event_interest(store: Store, event_id: int, sponsor: User, request: Request | None = None) -> Event:
    event = get_visible_event(store, event_id, sponsor)
    if not store.add_event_interest(event.id, sponsor.id):
        raise Conflict("You have already expressed interest in this event")
    create_log(
        store,
        CATEGORY_INTEREST,
        "Event interest",
        f"Sponsor {sponsor.email} is interested in event {event.id} ({event.title}).",
        event_id=event.id,
        actor=sponsor,
        **request_context(request),
    )
    return event


def interested_sponsors(store: Store, sponsor_ids: list[int]) -> list[User]:
    sponsors = []
    for sponsor_id in sponsor_ids:
        user = store.get_user(sponsor_id)
        if user and user.is_active and user.role == UserRole.sponsor:
            sponsors.append(user)
    return sponsors
