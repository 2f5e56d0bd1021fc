"""User lookups visible to any signed-in account."""
from fastapi import APIRouter, Depends

from app.dependencies import get_current_user, get_store
from app.models.user import User, UserRole
from app.schemas.auth import SponsorListResponse, SponsorSummary, UserEnvelope, UserResponse
from app.services.errors import NotFound
from app.store.base import Store

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users/{user_id}", response_model=UserEnvelope)
def get_user(user_id: int, store: Store = Depends(get_store), current_user: User = Depends(get_current_user)):
    user = store.get_user(user_id)
    if not user or not user.is_active:
        raise NotFound("User not found")
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.get("/sponsors", response_model=SponsorListResponse)
def list_sponsors(store: Store = Depends(get_store), current_user: User = Depends(get_current_user)):
    sponsors = store.list_users(role=UserRole.sponsor)
    return SponsorListResponse(sponsors=[SponsorSummary.model_validate(s) for s in sponsors])
