"""Events: public catalog, organizer management, event-level interest."""
from fastapi import APIRouter, Depends, Request

from app.dependencies import get_current_user, get_optional_user, get_store, require_organizer, require_sponsor
from app.models.event import Event
from app.models.user import User
from app.schemas.auth import MessageResponse, SponsorListResponse, SponsorSummary
from app.schemas.events import EventCreate, EventEnvelope, EventListResponse, EventResponse, EventUpdate
from app.services import catalog
from app.store.base import Store

router = APIRouter(prefix="/api/events", tags=["events"])


def event_view(store: Store, event: Event) -> EventResponse:
    view = EventResponse.model_validate(event)
    view.interested_sponsor_ids = store.list_event_interest_sponsor_ids(event.id)
    return view


@router.get("", response_model=EventListResponse)
def list_events(store: Store = Depends(get_store)):
    """Published, sponsored and finished events, newest first. Drafts are never listed."""
    return EventListResponse(events=[event_view(store, e) for e in catalog.list_public_events(store)])


@router.get("/organizer", response_model=EventListResponse)
def list_my_events(store: Store = Depends(get_store), organizer: User = Depends(require_organizer)):
    return EventListResponse(events=[event_view(store, e) for e in catalog.list_organizer_events(store, organizer)])


@router.post("", response_model=EventEnvelope, status_code=201)
def create_event(
    data: EventCreate,
    request: Request,
    store: Store = Depends(get_store),
    organizer: User = Depends(require_organizer),
):
    event = catalog.create_event(store, organizer, data, request)
    return EventEnvelope(event=event_view(store, event), message="Event created")


@router.get("/{event_id}", response_model=EventEnvelope)
def get_event(event_id: int, store: Store = Depends(get_store), user: User | None = Depends(get_optional_user)):
    event = catalog.get_visible_event(store, event_id, user)
    return EventEnvelope(event=event_view(store, event))


@router.put("/{event_id}", response_model=EventEnvelope)
def update_event(
    event_id: int,
    data: EventUpdate,
    request: Request,
    store: Store = Depends(get_store),
    organizer: User = Depends(require_organizer),
):
    event = catalog.update_event(store, event_id, organizer, data, request)
    return EventEnvelope(event=event_view(store, event), message="Event updated")


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: int,
    request: Request,
    store: Store = Depends(get_store),
    organizer: User = Depends(require_organizer),
):
    catalog.delete_event(store, event_id, organizer, request)
    return MessageResponse(message="Event deleted")


@router.post("/{event_id}/interest", response_model=MessageResponse)
def express_interest(
    event_id: int,
    request: Request,
    store: Store = Depends(get_store),
    sponsor: User = Depends(require_sponsor),
):
    catalog.express_event_interest(store, event_id, sponsor, request)
    return MessageResponse(message="Interest recorded")


@router.get("/{event_id}/interested-sponsors", response_model=SponsorListResponse)
def interested_sponsors(
    event_id: int,
    store: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    event = catalog.get_owned_event(store, event_id, current_user)
    sponsors = catalog.interested_sponsors(store, store.list_event_interest_sponsor_ids(event.id))
    return SponsorListResponse(sponsors=[SponsorSummary.model_validate(s) for s in sponsors])
