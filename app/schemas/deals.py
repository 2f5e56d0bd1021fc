"""Deal, negotiation chat and status schemas."""
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator
from app.models.deal import DealStatus
from app.models.user import UserRole


class EventBrief(BaseModel):
    id: int
    title: str
    event_date: date
    venue: str
    college_name: str | None = None
    club_name: str | None = None


class PackageBrief(BaseModel):
    id: int
    package_number: int
    amount: int
    deliverables: str


class PartyBrief(BaseModel):
    id: int
    name: str
    email: str
    company_name: str | None = None
    club_name: str | None = None
    college_name: str | None = None


class DealResponse(BaseModel):
    id: int
    event_id: int
    package_id: int | None = None
    sponsor_id: int
    organizer_id: int
    agent_id: int | None = None
    proposed_amount: int
    final_amount: int | None = None
    status: DealStatus
    proposal_date: datetime
    approval_date: datetime | None = None
    signing_date: datetime | None = None
    completion_date: datetime | None = None

    event: EventBrief | None = None
    package: PackageBrief | None = None
    sponsor: PartyBrief | None = None
    organizer: PartyBrief | None = None
    agent: PartyBrief | None = None


class DealEnvelope(BaseModel):
    success: bool = True
    deal: DealResponse
    message: str | None = None


class DealListResponse(BaseModel):
    success: bool = True
    deals: list[DealResponse]


class ChatMessageCreate(BaseModel):
    message: str
    amount: int | None = Field(default=None, ge=0)  # optional counter-offer

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Message cannot be empty")
        return v


class ChatMessageResponse(BaseModel):
    id: int
    deal_id: int
    sender_id: int
    sender_role: UserRole
    sender_name: str
    message: str
    amount: int | None = None
    timestamp: datetime


class ChatMessageEnvelope(BaseModel):
    success: bool = True
    message: ChatMessageResponse


class ChatResponse(BaseModel):
    success: bool = True
    messages: list[ChatMessageResponse]


class DealStatusUpdate(BaseModel):
    status: DealStatus
    final_amount: int | None = Field(default=None, ge=0)
