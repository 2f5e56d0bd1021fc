"""Event, package and interest schemas."""
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator
from app.models.event import EventCategory, EventStatus
from app.models.package import PackageStatus
from app.schemas.auth import SponsorSummary


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    event_date: date
    expected_attendees: int = Field(ge=1)
    sponsorship_amount: int = Field(ge=0)
    category: EventCategory
    venue: str = Field(min_length=1, max_length=255)
    status: EventStatus = EventStatus.draft

    @field_validator("title", "description", "venue")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("status")
    @classmethod
    def draft_or_published(cls, v: EventStatus) -> EventStatus:
        if v not in (EventStatus.draft, EventStatus.published):
            raise ValueError("New events are either draft or published")
        return v


class EventUpdate(BaseModel):
    """All optional; only provided fields are updated. Provided fields may not be null."""
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    event_date: date | None = None
    expected_attendees: int | None = Field(default=None, ge=1)
    sponsorship_amount: int | None = Field(default=None, ge=0)
    category: EventCategory | None = None
    venue: str | None = Field(default=None, min_length=1, max_length=255)
    status: EventStatus | None = None

    @field_validator("*")
    @classmethod
    def not_null(cls, v):
        # Runs only for fields the client sent; omitted fields keep their default
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("title", "description", "venue")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("status")
    @classmethod
    def draft_or_published(cls, v: EventStatus | None) -> EventStatus | None:
        # sponsored follows the packages; organizers only publish or unpublish
        if v is not None and v not in (EventStatus.draft, EventStatus.published):
            raise ValueError("Organizers can only set an event to draft or published")
        return v


class EventResponse(BaseModel):
    id: int
    organizer_id: int
    title: str
    description: str
    college_name: str | None = None
    club_name: str | None = None
    event_date: date
    expected_attendees: int
    sponsorship_amount: int
    category: EventCategory
    venue: str
    status: EventStatus
    interested_sponsor_ids: list[int] = []
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class EventEnvelope(BaseModel):
    success: bool = True
    event: EventResponse
    message: str | None = None


class EventListResponse(BaseModel):
    success: bool = True
    events: list[EventResponse]


class PackageInput(BaseModel):
    amount: int = Field(gt=0)
    deliverables: str = Field(min_length=1)

    @field_validator("deliverables")
    @classmethod
    def deliverables_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Deliverables are required")
        return v


class PackagesCreate(BaseModel):
    packages: list[PackageInput] = Field(min_length=1)


class PackageResponse(BaseModel):
    id: int
    event_id: int
    package_number: int
    amount: int
    deliverables: str
    status: PackageStatus
    selected_sponsor_id: int | None = None
    interested_sponsor_ids: list[int] = []

    class Config:
        from_attributes = True


class PackageListResponse(BaseModel):
    success: bool = True
    packages: list[PackageResponse]
    message: str | None = None


class PackageInterestView(BaseModel):
    package: PackageResponse
    sponsors: list[SponsorSummary]


class PackageInterestListResponse(BaseModel):
    success: bool = True
    packages: list[PackageInterestView]
