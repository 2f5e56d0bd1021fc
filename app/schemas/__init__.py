from app.schemas.auth import AuthResponse, LoginRequest, SignupRequest, UserResponse
from app.schemas.events import EventCreate, EventUpdate, EventResponse, PackageInput, PackageResponse
from app.schemas.deals import DealResponse, ChatMessageCreate, ChatMessageResponse, DealStatusUpdate
from app.schemas.admin import SponsorApplicationResponse, AuditLogEntry
