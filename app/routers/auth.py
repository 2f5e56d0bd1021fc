"""Authentication: signup, login, profile."""
from fastapi import APIRouter, Depends, Request

from app.dependencies import get_current_user, get_store
from app.models.user import User
from app.schemas.auth import AuthResponse, LoginRequest, MessageResponse, SignupRequest, UserEnvelope, UserResponse
from app.services import accounts
from app.services.auth import create_access_token
from app.store.base import Store

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_response(user: User, message: str) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.id, user.email, user.role),
        token_type="bearer",
        user=UserResponse.model_validate(user),
        message=message,
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(data: SignupRequest, request: Request, store: Store = Depends(get_store)):
    """Organizers and agents get a token right away. Sponsors get no token until
    an agent approves their application."""
    result = accounts.signup(store, data, request)
    if not isinstance(result, User):
        return AuthResponse(
            message="Sponsor application submitted. You can log in once an agent approves it.",
            pending_approval=True,
        )
    return _token_response(result, "Account created")


@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, request: Request, store: Store = Depends(get_store)):
    user = accounts.authenticate(store, data.email, data.password, data.role, request)
    return _token_response(user, "Login successful")


@router.get("/profile", response_model=UserEnvelope)
def profile(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client drops its copy
    return MessageResponse(message="Logged out")
