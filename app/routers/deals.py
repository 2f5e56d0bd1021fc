"""Deals: agent queue and assignment, party views, negotiation chat, status updates."""
from fastapi import APIRouter, Depends, Request

from app.dependencies import get_current_user, get_store, require_agent
from app.models.deal import Deal, DealNegotiation
from app.models.user import User
from app.schemas.deals import (
    ChatMessageCreate,
    ChatMessageEnvelope,
    ChatMessageResponse,
    ChatResponse,
    DealEnvelope,
    DealListResponse,
    DealResponse,
    DealStatusUpdate,
    EventBrief,
    PackageBrief,
    PartyBrief,
)
from app.services import deals as deal_service
from app.store.base import Store

router = APIRouter(prefix="/api/deals", tags=["deals"])


def _party(store: Store, user_id: int | None) -> PartyBrief | None:
    if user_id is None:
        return None
    user = store.get_user(user_id)
    if not user:
        return None
    return PartyBrief(
        id=user.id,
        name=user.name,
        email=user.email,
        company_name=user.company_name,
        club_name=user.club_name,
        college_name=user.college_name,
    )


def deal_view(store: Store, deal: Deal) -> DealResponse:
    """Deal plus event, package and party summaries."""
    event = store.get_event(deal.event_id)
    package = store.get_package(deal.package_id) if deal.package_id is not None else None
    return DealResponse(
        id=deal.id,
        event_id=deal.event_id,
        package_id=deal.package_id,
        sponsor_id=deal.sponsor_id,
        organizer_id=deal.organizer_id,
        agent_id=deal.agent_id,
        proposed_amount=deal.proposed_amount,
        final_amount=deal.final_amount,
        status=deal.status,
        proposal_date=deal.proposal_date,
        approval_date=deal.approval_date,
        signing_date=deal.signing_date,
        completion_date=deal.completion_date,
        event=EventBrief(
            id=event.id,
            title=event.title,
            event_date=event.event_date,
            venue=event.venue,
            college_name=event.college_name,
            club_name=event.club_name,
        ) if event else None,
        package=PackageBrief(
            id=package.id,
            package_number=package.package_number,
            amount=package.amount,
            deliverables=package.deliverables,
        ) if package else None,
        sponsor=_party(store, deal.sponsor_id),
        organizer=_party(store, deal.organizer_id),
        agent=_party(store, deal.agent_id),
    )


def _message_view(store: Store, entry: DealNegotiation) -> ChatMessageResponse:
    sender = store.get_user(entry.sender_id)
    return ChatMessageResponse(
        id=entry.id,
        deal_id=entry.deal_id,
        sender_id=entry.sender_id,
        sender_role=entry.sender_role,
        sender_name=sender.name if sender else "Unknown",
        message=entry.message,
        amount=entry.amount,
        timestamp=entry.timestamp,
    )


@router.get("/pending", response_model=DealListResponse)
def pending_deals(store: Store = Depends(get_store), agent: User = Depends(require_agent)):
    """Unclaimed deals waiting for an agent."""
    return DealListResponse(deals=[deal_view(store, d) for d in deal_service.list_pending_deals(store)])


@router.get("/my", response_model=DealListResponse)
def my_deals(store: Store = Depends(get_store), current_user: User = Depends(get_current_user)):
    return DealListResponse(deals=[deal_view(store, d) for d in deal_service.list_my_deals(store, current_user)])


@router.post("/{deal_id}/assign", response_model=DealEnvelope)
def assign_deal(
    deal_id: int,
    request: Request,
    store: Store = Depends(get_store),
    agent: User = Depends(require_agent),
):
    deal = deal_service.assign_agent(store, deal_id, agent, request)
    return DealEnvelope(deal=deal_view(store, deal), message="Deal assigned")


@router.get("/{deal_id}", response_model=DealEnvelope)
def get_deal(deal_id: int, store: Store = Depends(get_store), current_user: User = Depends(get_current_user)):
    deal = deal_service.get_deal_for_party(store, deal_id, current_user)
    return DealEnvelope(deal=deal_view(store, deal))


@router.get("/{deal_id}/chat", response_model=ChatResponse)
def get_chat(deal_id: int, store: Store = Depends(get_store), current_user: User = Depends(get_current_user)):
    entries = deal_service.list_messages(store, deal_id, current_user)
    return ChatResponse(messages=[_message_view(store, e) for e in entries])


@router.post("/{deal_id}/chat", response_model=ChatMessageEnvelope, status_code=201)
def post_chat(
    deal_id: int,
    data: ChatMessageCreate,
    store: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    entry = deal_service.post_message(store, deal_id, current_user, data.message, data.amount)
    return ChatMessageEnvelope(message=_message_view(store, entry))


@router.patch("/{deal_id}/status", response_model=DealEnvelope)
def update_status(
    deal_id: int,
    data: DealStatusUpdate,
    request: Request,
    store: Store = Depends(get_store),
    agent: User = Depends(require_agent),
):
    deal = deal_service.update_status(store, deal_id, agent, data.status, data.final_amount, request)
    return DealEnvelope(deal=deal_view(store, deal), message=f"Deal status is {deal.status.value}")
