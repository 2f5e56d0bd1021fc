"""Auth and account schemas."""
import re
from pydantic import BaseModel, EmailStr, Field, model_validator, field_validator
from app.models.user import UserRole

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15
PASSWORD_MIN_LENGTH = 6

# Fields each role must fill in at signup
SPONSOR_REQUIRED_FIELDS = ("company_name", "industry", "address")
ORGANIZER_REQUIRED_FIELDS = ("club_name", "college_name", "description")


def _normalize_phone(value: str | None) -> str:
    if value is None:
        return ""
    return re.sub(r"\D", "", value.strip())


def _validate_phone_digits(phone: str) -> None:
    digits = _normalize_phone(phone)
    if not digits:
        raise ValueError("Phone number is required.")
    if len(digits) < PHONE_MIN_DIGITS:
        raise ValueError(f"Phone number must have at least {PHONE_MIN_DIGITS} digits.")
    if len(digits) > PHONE_MAX_DIGITS:
        raise ValueError(f"Phone number cannot exceed {PHONE_MAX_DIGITS} digits.")


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    name: str = Field(min_length=1)
    phone: str
    role: UserRole

    # Sponsor
    company_name: str | None = None
    industry: str | None = None
    website: str | None = None
    address: str | None = None
    gst_number: str | None = None

    # Organizer
    club_name: str | None = None
    college_name: str | None = None
    description: str | None = None

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str) -> str:
        _validate_phone_digits(v or "")
        return (v or "").strip()

    @field_validator(
        "company_name", "industry", "website", "address", "gst_number",
        "club_name", "college_name", "description",
    )
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def role_fields_present(self):
        self.name = self.name.strip()
        if not self.name:
            raise ValueError("Name is required")
        required = ()
        if self.role == UserRole.sponsor:
            required = SPONSOR_REQUIRED_FIELDS
        elif self.role == UserRole.organizer:
            required = ORGANIZER_REQUIRED_FIELDS
        missing = [f for f in required if not getattr(self, f)]
        if missing:
            raise ValueError(f"Missing required {self.role.value} fields: {', '.join(missing)}")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    role: UserRole | None = None  # Optional; narrows the lookup to one account type


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    phone: str
    role: UserRole
    is_active: bool = True
    company_name: str | None = None
    industry: str | None = None
    website: str | None = None
    address: str | None = None
    gst_number: str | None = None
    club_name: str | None = None
    college_name: str | None = None
    description: str | None = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    success: bool = True
    token: str | None = None
    token_type: str | None = None
    user: UserResponse | None = None
    message: str | None = None
    # True for sponsor signups: no token until an agent approves the application
    pending_approval: bool = False


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class SponsorSummary(BaseModel):
    id: int
    name: str
    company_name: str | None = None
    industry: str | None = None
    website: str | None = None
    phone: str | None = None

    class Config:
        from_attributes = True


class SponsorListResponse(BaseModel):
    success: bool = True
    sponsors: list[SponsorSummary]
